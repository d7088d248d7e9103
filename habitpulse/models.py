"""Typed dataclasses for the HabitPulse data model.

All models use from_dict/to_dict for JSON serialization.
camelCase in JSON is mapped to snake_case in Python.
Unknown keys are ignored; missing keys use defaults.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any


def _as_int(value: Any, default: int = 0) -> int:
    """Whole number from a stored value, rounding halves up (30.5 -> 31)."""
    if isinstance(value, bool) or value is None:
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    return math.floor(number + 0.5)


# ── Entities ──────────────────────────────────────────────────


@dataclass(frozen=True)
class Habit:
    id: str = ""
    name: str = ""
    importance: int = 3  # 1-5, 5 = highest
    target_minutes: int | None = None  # advisory only

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Habit:
        target = d.get("targetMinutes", d.get("target_minutes"))
        return cls(
            id=str(d.get("id", "")),
            name=str(d.get("name", "")),
            importance=_as_int(d.get("importance"), 3),
            target_minutes=None if target is None else _as_int(target),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "importance": self.importance,
        }
        if self.target_minutes is not None:
            d["targetMinutes"] = self.target_minutes
        return d


@dataclass(frozen=True)
class HabitLog:
    habit_id: str = ""
    date: str = ""  # YYYY-MM-DD
    minutes: int = 0

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> HabitLog:
        return cls(
            habit_id=str(d.get("habitId", d.get("habit_id", ""))),
            date=str(d.get("date", "")),
            minutes=_as_int(d.get("minutes")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"habitId": self.habit_id, "date": self.date, "minutes": self.minutes}


@dataclass(frozen=True)
class GratitudeEntry:
    date: str = ""
    prompt_id: str = ""
    response: str = ""

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> GratitudeEntry:
        return cls(
            date=str(d.get("date", "")),
            prompt_id=str(d.get("promptId", d.get("prompt_id", ""))),
            response=str(d.get("response") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"date": self.date, "promptId": self.prompt_id, "response": self.response}


@dataclass(frozen=True)
class Prompt:
    id: str
    text: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "text": self.text}


# ── Store snapshot ────────────────────────────────────────────


def _records(raw: Any, factory) -> list:
    if not isinstance(raw, list):
        return []
    return [factory(item) for item in raw if isinstance(item, dict)]


@dataclass
class AppState:
    habits: list[Habit] = field(default_factory=list)
    logs: list[HabitLog] = field(default_factory=list)
    gratitude: list[GratitudeEntry] = field(default_factory=list)
    premium: bool = False

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> AppState:
        if not d or not isinstance(d, dict):
            return cls()
        premium = d.get("premium")
        return cls(
            habits=_records(d.get("habits"), Habit.from_dict),
            logs=_records(d.get("logs"), HabitLog.from_dict),
            gratitude=_records(d.get("gratitude"), GratitudeEntry.from_dict),
            premium=premium if isinstance(premium, bool) else False,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "habits": [h.to_dict() for h in self.habits],
            "logs": [log.to_dict() for log in self.logs],
            "gratitude": [g.to_dict() for g in self.gratitude],
            "premium": self.premium,
        }


# ── Engine outputs ────────────────────────────────────────────


@dataclass(frozen=True)
class TopHabit:
    name: str
    minutes: int

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "minutes": self.minutes}


@dataclass
class Summary:
    label: str = ""
    date_label: str = ""
    total_minutes: int = 0
    average_minutes_per_habit: float = 0.0
    top_habit: TopHabit | None = None
    active_days: int = 0
    suggested_focus: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "dateLabel": self.date_label,
            "totalMinutes": self.total_minutes,
            "averageMinutesPerHabit": self.average_minutes_per_habit,
            "topHabit": self.top_habit.to_dict() if self.top_habit else None,
            "activeDays": self.active_days,
            "suggestedFocus": self.suggested_focus,
        }


@dataclass
class HistoryDay:
    date: str = ""
    logs: list[HabitLog] = field(default_factory=list)
    gratitude: GratitudeEntry | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "logs": [log.to_dict() for log in self.logs],
            "gratitude": self.gratitude.to_dict() if self.gratitude else None,
        }
