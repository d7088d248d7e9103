"""Snapshot store: load/save state.json and apply user edits.

The store owns the three collections. Every mutation replaces a whole
collection on the AppState it is given; callers persist with save_state.
Input coming from forms passes through coerce_minutes / clamp_importance
so only non-negative integers ever reach the engine.
"""

from __future__ import annotations

import logging
import math
import uuid
from pathlib import Path
from typing import Any

from habitpulse.datekey import parse_date_key
from habitpulse.fileio import read_document, write_document
from habitpulse.models import AppState, GratitudeEntry, Habit, HabitLog
from habitpulse.prompts import prompt_for_date
from habitpulse.workspace import state_path as _state_path

logger = logging.getLogger(__name__)

MIN_IMPORTANCE = 1
MAX_IMPORTANCE = 5
DEFAULT_IMPORTANCE = 3


# ── Boundary coercion ─────────────────────────────────────────


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        value = value.strip() or "0"
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def coerce_minutes(value: Any) -> int:
    """Free-form minutes -> non-negative int (invalid or negative -> 0)."""
    number = _as_number(value)
    if number is None or number < 0:
        return 0
    return math.floor(number + 0.5)


def clamp_importance(value: Any) -> int:
    """Free-form importance -> int in 1..5 (invalid -> 1)."""
    number = _as_number(value)
    if number is None:
        return MIN_IMPORTANCE
    return max(MIN_IMPORTANCE, min(MAX_IMPORTANCE, math.floor(number + 0.5)))


# ── Validation ────────────────────────────────────────────────


def validate_habit(data: dict[str, Any]) -> list[str]:
    """Validate a habit payload and return list of errors (empty if valid)."""
    errors = []
    if "name" in data and not str(data["name"] or "").strip():
        errors.append("name must not be empty")
    if "importance" in data:
        imp = data["importance"]
        if isinstance(imp, bool) or not isinstance(imp, int) or not MIN_IMPORTANCE <= imp <= MAX_IMPORTANCE:
            errors.append(f"importance must be integer {MIN_IMPORTANCE}-{MAX_IMPORTANCE}")
    target = data.get("targetMinutes")
    if target is not None and (isinstance(target, bool) or not isinstance(target, int) or target < 0):
        errors.append("targetMinutes must be a non-negative integer")
    return errors


def _valid_day(day: str) -> bool:
    try:
        parse_date_key(day)
    except ValueError:
        return False
    return True


# ── Load / save ───────────────────────────────────────────────


def load_state(root: Path | None = None) -> AppState:
    """Load state.json. Missing or corrupt snapshots yield an empty state."""
    path = _state_path(root)
    try:
        data = read_document(path)
    except (OSError, ValueError) as e:
        logger.warning("Unreadable snapshot at %s, starting empty: %s", path, e)
        return AppState()
    return AppState.from_dict(data)


def save_state(state: AppState, root: Path | None = None) -> None:
    """Replace the stored snapshot atomically."""
    write_document(_state_path(root), state.to_dict())


# ── Lookups ───────────────────────────────────────────────────


def find_habit(state: AppState, habit_id: str) -> Habit | None:
    for h in state.habits:
        if h.id == habit_id:
            return h
    return None


def habits_ordered(habits: list[Habit]) -> list[Habit]:
    """Importance descending, then name (case-insensitive)."""
    return sorted(habits, key=lambda h: (-h.importance, h.name.casefold()))


def logs_for_date(state: AppState, day: str) -> list[HabitLog]:
    return [log for log in state.logs if log.date == day]


def gratitude_for_date(state: AppState, day: str) -> GratitudeEntry | None:
    for entry in state.gratitude:
        if entry.date == day:
            return entry
    return None


# ── Mutations ─────────────────────────────────────────────────


def create_habit(
    state: AppState,
    name: str,
    importance: Any = DEFAULT_IMPORTANCE,
    target_minutes: Any = None,
) -> tuple[Habit | None, list[str]]:
    """Add a habit. Returns (habit, errors)."""
    name = (name or "").strip()
    if not name:
        return None, ["name must not be empty"]

    target = None if target_minutes in (None, "") else coerce_minutes(target_minutes)
    habit = Habit(
        id=uuid.uuid4().hex,
        name=name,
        importance=clamp_importance(importance),
        target_minutes=target,
    )
    state.habits = [*state.habits, habit]
    logger.debug("Created habit %s (%s)", habit.id, habit.name)
    return habit, []


def update_habit(state: AppState, habit_id: str, updates: dict[str, Any]) -> tuple[Habit | None, list[str]]:
    """Edit name / importance / targetMinutes in place. Returns (habit, errors)."""
    habit = find_habit(state, habit_id)
    if habit is None:
        return None, [f"Habit not found: {habit_id}"]

    errors = validate_habit(updates)
    if errors:
        return None, errors

    data = habit.to_dict()
    for key in ("name", "importance", "targetMinutes"):
        if key in updates:
            data[key] = updates[key]
    data["id"] = habit.id
    data["name"] = str(data["name"]).strip()
    updated = Habit.from_dict(data)

    state.habits = [updated if h.id == habit_id else h for h in state.habits]
    logger.debug("Updated habit %s", habit_id)
    return updated, []


def delete_habit(state: AppState, habit_id: str) -> bool:
    """Remove a habit. Its logs stay and render as an unknown habit."""
    remaining = [h for h in state.habits if h.id != habit_id]
    if len(remaining) == len(state.habits):
        return False
    state.habits = remaining
    logger.debug("Deleted habit %s", habit_id)
    return True


def upsert_log(state: AppState, habit_id: str, day: str, minutes: Any) -> tuple[HabitLog | None, list[str]]:
    """Set minutes for (habit, day). Zero minutes removes the log.

    Returns (log or None when removed, errors).
    """
    if not _valid_day(day):
        return None, [f"Invalid date: {day}"]
    if find_habit(state, habit_id) is None:
        return None, [f"Habit not found: {habit_id}"]

    value = coerce_minutes(minutes)
    kept = [log for log in state.logs if not (log.habit_id == habit_id and log.date == day)]
    if value <= 0:
        state.logs = kept
        return None, []

    log = HabitLog(habit_id=habit_id, date=day, minutes=value)
    state.logs = [*kept, log]
    logger.debug("Logged %d min for %s on %s", value, habit_id, day)
    return log, []


def upsert_gratitude(state: AppState, day: str, response: str) -> tuple[GratitudeEntry | None, list[str]]:
    """Save the day's reflection against that day's prompt. Blank removes it."""
    if not _valid_day(day):
        return None, [f"Invalid date: {day}"]

    text = (response or "").strip()
    kept = [entry for entry in state.gratitude if entry.date != day]
    if not text:
        state.gratitude = kept
        return None, []

    entry = GratitudeEntry(date=day, prompt_id=prompt_for_date(day).id, response=text)
    state.gratitude = [*kept, entry]
    return entry, []


def toggle_premium(state: AppState) -> bool:
    state.premium = not state.premium
    logger.info("Premium insights %s", "enabled" if state.premium else "disabled")
    return state.premium
