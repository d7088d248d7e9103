"""Premium weekly debrief.

Rule-based text built from the trailing 7-day window: the standout habit,
the most important habit with no activity, how many days had any activity,
and how often a gratitude reflection was written.
"""

from __future__ import annotations

from datetime import date, datetime

from habitpulse.datekey import WEEK_DAYS, filter_in_range, trailing_week
from habitpulse.models import GratitudeEntry, Habit, HabitLog
from habitpulse.streaks import compute_streaks
from habitpulse.summary import active_day_keys, habit_name, ranked_totals, totals_by_habit

ONBOARDING_MESSAGE = (
    "Hi trailblazer! Log a handful of habits and gratitude reflections "
    "to unlock a premium performance breakdown."
)
CONSISTENCY_TARGET = 5


def gratitude_tone(count: int) -> str:
    if count >= 5:
        return "Your gratitude practice is anchoring resilience—keep that momentum."
    if count >= 3:
        return "Consider adding one more gratitude note to amplify your energy."
    return "Sprinkle more gratitude check-ins to boost motivation."


def most_important_unmet(habits: list[Habit], totals: dict[str, int]) -> Habit | None:
    """Highest-importance habit with no minutes in the window (ties: list order)."""
    for habit in sorted(habits, key=lambda h: h.importance, reverse=True):
        if totals.get(habit.id, 0) <= 0:
            return habit
    return None


def _standout_sentence(habits: list[Habit], totals: dict[str, int], streaks: dict[str, int]) -> str:
    if not totals:
        return "Log minutes for your most important habits to surface highlights."
    habit_id, minutes = ranked_totals(totals)[0]
    return (
        f'⭐ Standout habit: "{habit_name(habits, habit_id)}" with {minutes} minutes logged '
        f"and a {streaks.get(habit_id, 0)}-day activity streak."
    )


def _opportunity_sentence(unmet: Habit | None) -> str:
    if unmet is None:
        return "All high-importance habits saw activity—excellent alignment!"
    return (
        f'🎯 Opportunity: "{unmet.name}" ranks high in importance but needs fresh reps. '
        "Schedule micro-sessions to restart momentum."
    )


def generate_debrief(
    habits: list[Habit],
    logs: list[HabitLog],
    gratitude: list[GratitudeEntry],
    now: date | datetime,
) -> str:
    """Compose the four-sentence debrief for the week ending on *now*."""
    if not habits or not logs:
        return ONBOARDING_MESSAGE

    start, end = trailing_week(now)
    weekly_logs = filter_in_range(logs, start, end)
    totals = totals_by_habit(weekly_logs)
    streaks = compute_streaks(habits, weekly_logs, now)
    days_logged = len(active_day_keys(weekly_logs))
    gratitude_count = sum(
        1 for entry in filter_in_range(gratitude, start, end) if entry.response.strip()
    )

    return " ".join([
        _standout_sentence(habits, totals, streaks),
        _opportunity_sentence(most_important_unmet(habits, totals)),
        f"🧠 Consistency: You recorded habits on {days_logged} of the last {WEEK_DAYS} days. "
        f"Aim for {CONSISTENCY_TARGET}+ to reinforce identity-level change.",
        f"💬 Gratitude: {gratitude_count} reflections captured this week. {gratitude_tone(gratitude_count)}",
    ])
