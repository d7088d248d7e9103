"""Range summaries: totals, activity, top and weakest habit per window."""

from __future__ import annotations

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

from habitpulse.datekey import (
    DateLike,
    filter_in_range,
    format_display_date,
    month_to_date,
    trailing_week,
    year_to_date,
)
from habitpulse.models import Habit, HabitLog, Summary, TopHabit

UNKNOWN_HABIT = "Unknown habit"
NO_FOCUS_FALLBACK = "Add more habits to unlock insights."

WEEKLY_LABEL = "Weekly Pulse"
MONTHLY_LABEL = "Monthly Momentum"
YEARLY_LABEL = "Year-End Spotlight"


# ── Aggregation primitives (shared with insights) ─────────────


def totals_by_habit(logs: list[HabitLog]) -> dict[str, int]:
    """Sum minutes per habit id, keyed in first-encountered order."""
    totals: dict[str, int] = {}
    for log in logs:
        totals[log.habit_id] = totals.get(log.habit_id, 0) + log.minutes
    return totals


def active_day_keys(logs: list[HabitLog]) -> set[str]:
    """Distinct date keys with any positive-minute log."""
    return {log.date for log in logs if log.minutes > 0}


def ranked_totals(totals: dict[str, int], descending: bool = True) -> list[tuple[str, int]]:
    """Totals sorted by minutes; equal totals keep first-encountered order."""
    return sorted(totals.items(), key=lambda item: item[1], reverse=descending)


def habit_name(habits: list[Habit], habit_id: str, default: str = UNKNOWN_HABIT) -> str:
    for habit in habits:
        if habit.id == habit_id:
            return habit.name
    return default


def round_one(value: float) -> float:
    """Round half-up to one decimal place."""
    return float(Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


# ── Summaries ─────────────────────────────────────────────────


def suggest_focus(habits: list[Habit], totals: dict[str, int], top: TopHabit | None) -> str:
    if len(totals) > 1:
        weakest = next(
            (
                name
                for name in (habit_name(habits, hid, "") for hid, _ in ranked_totals(totals, descending=False))
                if name
            ),
            NO_FOCUS_FALLBACK,
        )
        return f'Consider investing more energy into "{weakest}" for a balanced routine.'
    if len(totals) == 1 and top is not None:
        return f'Great consistency! Keep sharpening "{top.name}".'
    return "Log habits consistently to unlock personalized coaching."


def summarize_range(
    habits: list[Habit],
    logs: list[HabitLog],
    label: str,
    start: DateLike,
    end: DateLike,
) -> Summary:
    """Summarize logs whose date key falls in the inclusive range [start, end]."""
    in_window = filter_in_range(logs, start, end)
    totals = totals_by_habit(in_window)
    total_minutes = sum(totals.values())

    top: TopHabit | None = None
    if totals:
        habit_id, minutes = ranked_totals(totals)[0]
        top = TopHabit(name=habit_name(habits, habit_id), minutes=minutes)

    average = round_one(total_minutes / len(totals)) if totals else 0.0

    return Summary(
        label=label,
        date_label=f"{format_display_date(start)} → {format_display_date(end)}",
        total_minutes=total_minutes,
        average_minutes_per_habit=average,
        top_habit=top,
        active_days=len(active_day_keys(in_window)),
        suggested_focus=suggest_focus(habits, totals, top),
    )


def standard_summaries(
    habits: list[Habit],
    logs: list[HabitLog],
    now: date | datetime,
) -> list[Summary]:
    """Weekly, month-to-date and year-to-date summaries ending today."""
    windows = [
        (WEEKLY_LABEL, trailing_week(now)),
        (MONTHLY_LABEL, month_to_date(now)),
        (YEARLY_LABEL, year_to_date(now)),
    ]
    return [summarize_range(habits, logs, label, start, end) for label, (start, end) in windows]
