"""Calendar-day keys and inclusive date windows.

A date key is a zero-padded ``YYYY-MM-DD`` string for a local calendar day.
Because the format is fixed width, string comparison equals chronological
order, so range membership is a plain ``start <= key <= end``.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterable, TypeVar, Union

DateLike = Union[date, datetime, str]

T = TypeVar("T")

WEEK_DAYS = 7


def format_date_key(value: DateLike) -> str:
    """Canonical key for the local calendar day of *value*.

    Aware datetimes keep their own offset: 23:30 at UTC-5 is still that
    day, not the next UTC day. Strings are re-padded (``2024-3-9`` becomes
    ``2024-03-09``); a string that is not a date key is returned as-is.
    """
    if isinstance(value, str):
        try:
            value = parse_date_key(value)
        except ValueError:
            return value
    if isinstance(value, datetime):
        value = value.date()
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def parse_date_key(key: str) -> date:
    """Rebuild the calendar date of a key. Raises ValueError if malformed."""
    parts = key.split("-")
    if len(parts) != 3:
        raise ValueError(f"Invalid date key: {key!r}")
    try:
        year, month, day = (int(p) for p in parts)
        return date(year, month, day)
    except (ValueError, OverflowError):
        raise ValueError(f"Invalid date key: {key!r}") from None


def in_range(key: str, start: DateLike, end: DateLike) -> bool:
    """Inclusive membership test. An inverted range contains nothing."""
    return format_date_key(start) <= key <= format_date_key(end)


def filter_in_range(items: Iterable[T], start: DateLike, end: DateLike) -> list[T]:
    """Keep records whose ``.date`` key falls in ``[start, end]``."""
    start_key = format_date_key(start)
    end_key = format_date_key(end)
    return [item for item in items if start_key <= item.date <= end_key]


# ── Windows ───────────────────────────────────────────────────


def _day(now: date | datetime) -> date:
    return now.date() if isinstance(now, datetime) else now


def trailing_week(now: date | datetime) -> tuple[date, date]:
    """The 7 calendar days ending on (and including) today."""
    today = _day(now)
    return today - timedelta(days=WEEK_DAYS - 1), today


def month_to_date(now: date | datetime) -> tuple[date, date]:
    today = _day(now)
    return today.replace(day=1), today


def year_to_date(now: date | datetime) -> tuple[date, date]:
    today = _day(now)
    return today.replace(month=1, day=1), today


def week_days(now: date | datetime) -> list[str]:
    """Keys of the trailing week, oldest first."""
    start, _ = trailing_week(now)
    return [format_date_key(start + timedelta(days=offset)) for offset in range(WEEK_DAYS)]


def shift_key(key: str, days: int) -> str:
    return format_date_key(parse_date_key(key) + timedelta(days=days))


# ── Display ───────────────────────────────────────────────────


def format_display_date(value: DateLike) -> str:
    """Locale-formatted date for captions. Unparsable keys are shown as-is."""
    if isinstance(value, str):
        try:
            value = parse_date_key(value)
        except ValueError:
            return value
    return _day(value).strftime("%x")


def format_long_date(key: str) -> str:
    """'Monday, Jan 1' caption for a selected day."""
    d = parse_date_key(key)
    return f"{d.strftime('%A')}, {d.strftime('%b')} {d.day}"
