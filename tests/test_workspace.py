"""Tests for habitpulse/workspace.py — settings and paths."""

from datetime import datetime

import yaml

from habitpulse.fileio import read_document
from habitpulse.workspace import (
    Settings,
    get_user_timezone,
    init_workspace,
    load_settings,
    now_local,
    settings_path,
    state_path,
    today_str,
    workspace_root,
)


def test_workspace_root_from_env(workspace):
    assert workspace_root() == workspace.resolve()
    assert state_path() == workspace.resolve() / "state.json"


def test_load_settings(workspace):
    settings = load_settings(workspace)
    assert settings == Settings(timezone="UTC", log_level="DEBUG")


def test_missing_settings_use_defaults(tmp_path):
    assert load_settings(tmp_path) == Settings()


def test_unparsable_settings_use_defaults(tmp_path):
    settings_path(tmp_path).write_text("timezone: [unclosed", encoding="utf-8")
    assert load_settings(tmp_path) == Settings()


def test_invalid_timezone_falls_back_to_utc(tmp_path, caplog):
    settings_path(tmp_path).write_text(yaml.dump({"timezone": "Mars/Olympus"}), encoding="utf-8")
    assert get_user_timezone(tmp_path).key == "UTC"
    assert "Unknown timezone" in caplog.text


def test_timezone_drives_today(tmp_path):
    settings_path(tmp_path).write_text(yaml.dump({"timezone": "Asia/Tokyo"}), encoding="utf-8")
    current = now_local(tmp_path)
    assert current.tzinfo.key == "Asia/Tokyo"
    assert today_str(tmp_path) == datetime.now(current.tzinfo).date().isoformat()


def test_init_workspace_writes_default_settings(tmp_path):
    root = init_workspace(tmp_path / "fresh")
    assert read_document(settings_path(root)) == {"timezone": "UTC", "log_level": "INFO"}
    # Existing settings are left alone.
    settings_path(root).write_text(yaml.dump({"timezone": "Europe/Paris"}), encoding="utf-8")
    init_workspace(root)
    assert load_settings(root).timezone == "Europe/Paris"


def test_undecodable_settings_use_defaults(tmp_path, caplog):
    settings_path(tmp_path).write_bytes(b"timezone: \xff\xfe\n")
    assert load_settings(tmp_path) == Settings()
    assert "Ignoring unreadable settings file" in caplog.text


def test_settings_path_that_is_a_directory_uses_defaults(tmp_path):
    settings_path(tmp_path).mkdir()
    assert load_settings(tmp_path) == Settings()
