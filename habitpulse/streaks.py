"""Seven-day consistency score per habit.

Walking the trailing week oldest-first, an active day adds one point and a
missed day costs half a point while the score is positive. The result is
rounded half-up, so it always lands in [0, 7].
"""

from __future__ import annotations

import math
from datetime import date, datetime
from typing import Iterable

from habitpulse.datekey import week_days
from habitpulse.models import Habit, HabitLog

MISSED_DAY_PENALTY = 0.5


def streak_score(active_flags: Iterable[bool]) -> int:
    """Score one habit's week given per-day activity, oldest day first."""
    score = 0.0
    for active in active_flags:
        if active:
            score += 1
        elif score > 0:
            score = max(0.0, score - MISSED_DAY_PENALTY)
    return max(0, math.floor(score + 0.5))


def compute_streaks(
    habits: list[Habit],
    logs: list[HabitLog],
    now: date | datetime,
) -> dict[str, int]:
    """Map each habit id to its streak score for the week ending on *now*."""
    days = week_days(now)
    active = {(log.habit_id, log.date) for log in logs if log.minutes > 0 and log.date in days}
    return {
        habit.id: streak_score((habit.id, day) in active for day in days)
        for habit in habits
    }
