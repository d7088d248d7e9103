"""Workspace root, settings, timezone and path helpers for HabitPulse.

This is the only module that reads the wall clock. Engine functions take
``now`` as an argument; callers obtain it from :func:`now_local`.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from habitpulse.fileio import read_document, write_document

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "UTC"
DEFAULT_LOG_LEVEL = "INFO"


@dataclass
class Settings:
    timezone: str = DEFAULT_TIMEZONE
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Settings:
        if not d or not isinstance(d, dict):
            return cls()
        return cls(
            timezone=str(d.get("timezone") or DEFAULT_TIMEZONE),
            log_level=str(d.get("log_level") or DEFAULT_LOG_LEVEL).upper(),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"timezone": self.timezone, "log_level": self.log_level}


def workspace_root() -> Path:
    """Get the workspace root directory (holds state.json and settings.yaml)."""
    return Path(
        os.environ.get("HABITPULSE_ROOT", str(Path.home() / "habitpulse"))
    ).expanduser().resolve()


# ── Path helpers ──────────────────────────────────────────────

def state_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "state.json"


def settings_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "settings.yaml"


# ── Settings ──────────────────────────────────────────────────

def load_settings(root: Path | None = None) -> Settings:
    """Load settings.yaml; a missing, unreadable or unparsable file yields defaults."""
    try:
        data = read_document(settings_path(root))
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.warning("Ignoring unreadable settings file: %s", e)
        return Settings()
    return Settings.from_dict(data)


def init_workspace(root: Path | None = None) -> Path:
    """Create the workspace directory and a default settings.yaml if missing."""
    if root is None:
        root = workspace_root()
    root.mkdir(parents=True, exist_ok=True)
    path = settings_path(root)
    if not path.exists():
        write_document(path, Settings().to_dict())
        logger.info("Initialized workspace at %s", root)
    return root


def configure_logging(level: str | None = None, filename: Path | None = None) -> None:
    """Configure root logging for an entry point.

    HABITPULSE_LOG_LEVEL overrides the configured level. The TUI passes a
    filename so log lines do not draw over the terminal UI.
    """
    level_name = (os.environ.get("HABITPULSE_LOG_LEVEL") or level or DEFAULT_LOG_LEVEL).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        filename=str(filename) if filename else None,
    )


# ── Time ──────────────────────────────────────────────────────

def get_user_timezone(root: Path | None = None) -> ZoneInfo:
    """Get user's timezone from settings.yaml, defaulting to UTC."""
    name = load_settings(root).timezone
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r in settings; using UTC", name)
        return ZoneInfo(DEFAULT_TIMEZONE)


def now_local(root: Path | None = None) -> datetime:
    """Get current datetime in user's timezone."""
    return datetime.now(get_user_timezone(root))


def today_str(root: Path | None = None) -> str:
    """Get today's date key (YYYY-MM-DD) in user's timezone."""
    return now_local(root).date().isoformat()
