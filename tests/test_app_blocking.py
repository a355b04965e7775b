"""Tests for yrepeat/app_blocking.py: the blocking schedule."""

import pytest
from conftest import at

from yrepeat import app_blocking, shared
from yrepeat.models import AppBlockingSchedule


def _window(sh, sm, eh, em):
    return AppBlockingSchedule(start_hour=sh, start_minute=sm, end_hour=eh, end_minute=em)


def test_default_schedule(workspace):
    s = app_blocking.load_schedule(workspace)
    assert s.is_enabled is False
    assert (s.start_hour, s.end_hour) == (21, 6)


def test_overnight_window():
    s = _window(21, 0, 6, 0)
    assert app_blocking.is_within_window(s, at(2026, 3, 1, 21, 0)) is True
    assert app_blocking.is_within_window(s, at(2026, 3, 1, 23, 30)) is True
    assert app_blocking.is_within_window(s, at(2026, 3, 2, 5, 59)) is True
    assert app_blocking.is_within_window(s, at(2026, 3, 2, 6, 0)) is False
    assert app_blocking.is_within_window(s, at(2026, 3, 2, 12, 0)) is False


def test_same_day_window():
    s = _window(9, 30, 17, 0)
    assert app_blocking.is_within_window(s, at(2026, 3, 1, 9, 30)) is True
    assert app_blocking.is_within_window(s, at(2026, 3, 1, 9, 29)) is False
    assert app_blocking.is_within_window(s, at(2026, 3, 1, 17, 0)) is False


def test_empty_window():
    assert app_blocking.is_within_window(_window(8, 0, 8, 0), at(2026, 3, 1, 8, 0)) is False


def test_save_mirrors_to_shared_store(workspace):
    now = at(2026, 3, 1)
    app_blocking.set_selected_apps(["Instagram", "TikTok", "Instagram"], workspace, now=now)
    app_blocking.set_time_range(22, 30, 7, 15, workspace, now=now)

    assert shared.load_selected_apps(workspace) == ["Instagram", "TikTok"]
    assert shared.load_time_range(workspace) == (22, 30, 7, 15)
    s = app_blocking.load_schedule(workspace)
    assert s.id
    assert s.created_at == now.isoformat()


def test_invalid_time_rejected(workspace):
    with pytest.raises(ValueError):
        app_blocking.set_time_range(24, 0, 6, 0, workspace, now=at(2026, 3, 1))
    with pytest.raises(ValueError):
        app_blocking.set_time_range(21, 60, 6, 0, workspace, now=at(2026, 3, 1))


def test_apply_and_remove(workspace):
    app_blocking.apply_schedule(workspace, now=at(2026, 3, 1, 12))
    assert app_blocking.is_blocking_now(workspace, now=at(2026, 3, 1, 22)) is True
    assert app_blocking.is_blocking_now(workspace, now=at(2026, 3, 1, 12)) is False

    removed = app_blocking.remove_schedule(workspace, now=at(2026, 3, 1, 13))
    assert removed.is_enabled is False
    assert removed.updated_at == at(2026, 3, 1, 13).isoformat()
    assert app_blocking.is_blocking_now(workspace, now=at(2026, 3, 1, 22)) is False
