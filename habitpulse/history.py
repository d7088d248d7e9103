"""Chronological timeline of logged days, newest first."""

from __future__ import annotations

from habitpulse.models import GratitudeEntry, Habit, HabitLog, HistoryDay


def build_history(
    habits: list[Habit],
    logs: list[HabitLog],
    gratitude: list[GratitudeEntry],
) -> list[HistoryDay]:
    """Group logs and gratitude by date key.

    Each day's logs are ordered by habit importance, highest first; logs
    for unknown habits sort as importance 0.
    """
    importance = {habit.id: habit.importance for habit in habits}
    by_date: dict[str, HistoryDay] = {}

    for log in logs:
        by_date.setdefault(log.date, HistoryDay(date=log.date)).logs.append(log)
    for entry in gratitude:
        by_date.setdefault(entry.date, HistoryDay(date=entry.date)).gratitude = entry

    days = sorted(by_date.values(), key=lambda day: day.date, reverse=True)
    for day in days:
        day.logs.sort(key=lambda log: importance.get(log.habit_id, 0), reverse=True)
    return days
