"""Shared test fixtures for HabitPulse tests."""

from __future__ import annotations

import json
import os
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest
import yaml

from habitpulse.models import GratitudeEntry, Habit, HabitLog

# Friday evening; the trailing week is 2024-03-09 .. 2024-03-15.
NOW = datetime(2024, 3, 15, 21, 30, tzinfo=ZoneInfo("UTC"))


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def habits() -> list[Habit]:
    return [
        Habit(id="read", name="Read", importance=5, target_minutes=30),
        Habit(id="walk", name="Walk", importance=2),
        Habit(id="meditate", name="Meditate", importance=4, target_minutes=10),
    ]


@pytest.fixture
def logs() -> list[HabitLog]:
    return [
        HabitLog(habit_id="read", date="2024-03-13", minutes=30),
        HabitLog(habit_id="read", date="2024-03-14", minutes=30),
        HabitLog(habit_id="read", date="2024-03-15", minutes=30),
        HabitLog(habit_id="walk", date="2024-03-15", minutes=20),
        HabitLog(habit_id="walk", date="2024-02-28", minutes=45),
        HabitLog(habit_id="meditate", date="2024-01-02", minutes=15),
    ]


@pytest.fixture
def gratitude() -> list[GratitudeEntry]:
    return [
        GratitudeEntry(date="2024-03-14", prompt_id="prompt-3", response="A quiet morning."),
        GratitudeEntry(date="2024-03-15", prompt_id="prompt-4", response="Finished a chapter."),
        GratitudeEntry(date="2024-03-12", prompt_id="prompt-2", response="   "),
    ]


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create a temporary workspace with settings and a seeded snapshot."""
    root = tmp_path / "workspace"
    root.mkdir(parents=True)

    settings = {"timezone": "UTC", "log_level": "DEBUG"}
    (root / "settings.yaml").write_text(
        yaml.dump(settings, default_flow_style=False), encoding="utf-8"
    )

    state = {
        "habits": [
            {"id": "read", "name": "Read", "importance": 5, "targetMinutes": 30},
            {"id": "walk", "name": "Walk", "importance": 2},
        ],
        "logs": [
            {"habitId": "read", "date": "2024-03-14", "minutes": 30},
            {"habitId": "walk", "date": "2024-03-14", "minutes": 15},
            {"habitId": "gone", "date": "2024-03-13", "minutes": 10},
        ],
        "gratitude": [
            {"date": "2024-03-14", "promptId": "prompt-7", "response": "Sunny walk."},
        ],
        "premium": False,
    }
    (root / "state.json").write_text(json.dumps(state, indent=2), encoding="utf-8")

    os.environ["HABITPULSE_ROOT"] = str(root)
    yield root
    if "HABITPULSE_ROOT" in os.environ:
        del os.environ["HABITPULSE_ROOT"]
