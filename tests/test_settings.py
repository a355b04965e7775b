"""Tests for yrepeat/settings.py and the workspace clock helpers."""

import pytest
import yaml
from zoneinfo import ZoneInfo

from yrepeat import settings
from yrepeat.fileio import read_json
from yrepeat.workspace import get_user_timezone, parse_iso, workspace_root


def test_workspace_root_from_env(workspace):
    assert workspace_root() == workspace.resolve()


def test_timezone_from_settings(workspace):
    settings.update_settings({"timezone": "Europe/Berlin"}, workspace)
    assert get_user_timezone(workspace) == ZoneInfo("Europe/Berlin")


def test_unknown_timezone_falls_back_to_utc(workspace):
    settings.update_settings({"timezone": "Mars/Olympus"}, workspace)
    assert get_user_timezone(workspace) == ZoneInfo("UTC")


def test_parse_iso_tolerates_garbage():
    assert parse_iso(None) is None
    assert parse_iso("") is None
    assert parse_iso("yesterday") is None
    assert parse_iso("2026-03-01T08:00:00+00:00").hour == 8


def test_weekly_goal(workspace):
    assert settings.get_weekly_goal_minutes(workspace) == 150
    settings.set_weekly_goal_minutes(200, workspace)
    assert settings.get_weekly_goal_minutes(workspace) == 200
    with pytest.raises(ValueError):
        settings.set_weekly_goal_minutes(0, workspace)


def test_weekly_goal_ignores_garbage(workspace):
    (workspace / "settings.yaml").write_text(
        yaml.dump({"exercise": {"weekly_goal_minutes": "lots"}}), encoding="utf-8"
    )
    assert settings.get_weekly_goal_minutes(workspace) == 150


def test_notifications_toggle_keeps_other_settings(workspace):
    assert settings.notifications_enabled(workspace) is False
    settings.set_notifications_enabled(True, workspace)
    assert settings.notifications_enabled(workspace) is True
    assert settings.load_settings(workspace)["timezone"] == "UTC"


def test_read_json_missing_or_non_object(tmp_path):
    assert read_json(tmp_path / "missing.json") == {}
    path = tmp_path / "list.json"
    path.write_text("[1, 2]", encoding="utf-8")
    assert read_json(path) == {}
