"""Dashboard composition — the single view both front ends render.

Calls each engine the way a presentation layer should: the three standard
summaries, the full history once, the prompt for the selected day, and the
debrief only when premium insights are enabled.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from habitpulse.datekey import format_date_key, format_long_date
from habitpulse.history import build_history
from habitpulse.insights import generate_debrief
from habitpulse.models import AppState
from habitpulse.prompts import prompt_for_date
from habitpulse.store import gratitude_for_date, habits_ordered, logs_for_date
from habitpulse.summary import standard_summaries


def day_entries(state: AppState, day: str) -> list[dict[str, Any]]:
    """Ordered habits with the minutes logged for them on *day*."""
    minutes = {log.habit_id: log.minutes for log in logs_for_date(state, day)}
    return [
        {**habit.to_dict(), "minutes": minutes.get(habit.id, 0)}
        for habit in habits_ordered(state.habits)
    ]


def build_dashboard(
    state: AppState,
    now: date | datetime,
    selected: str | None = None,
) -> dict[str, Any]:
    today = format_date_key(now)
    day = selected or today
    entry = gratitude_for_date(state, day)

    return {
        "today": today,
        "selectedDate": day,
        "selectedDateLabel": format_long_date(day),
        "prompt": prompt_for_date(day).to_dict(),
        "habits": day_entries(state, day),
        "gratitude": entry.response if entry else "",
        "summaries": [s.to_dict() for s in standard_summaries(state.habits, state.logs, now)],
        "history": [d.to_dict() for d in build_history(state.habits, state.logs, state.gratitude)],
        "premium": state.premium,
        "insights": (
            generate_debrief(state.habits, state.logs, state.gratitude, now)
            if state.premium
            else None
        ),
    }
