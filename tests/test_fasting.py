"""Tests for yrepeat/fasting.py: the fasting timer."""

import json

import pytest
from conftest import at

from yrepeat import fasting


def test_start_fast_uses_type_hours(workspace):
    fast = fasting.start_fast("18:6", root=workspace, now=at(2026, 3, 1, 20))
    assert fast.goal_hours == 18
    assert fast.is_active is True
    active, history = fasting.load_fasts(workspace, now=at(2026, 3, 1, 21))
    assert active.id == fast.id
    assert history == []


def test_custom_hours(workspace):
    fast = fasting.start_fast("Custom", custom_hours=20, root=workspace, now=at(2026, 3, 1))
    assert fast.goal_hours == 20


@pytest.mark.parametrize("fast_type,custom", [("10:14", None), ("Custom", 0), ("Custom", -5)])
def test_start_rejects_bad_input(workspace, fast_type, custom):
    with pytest.raises(ValueError):
        fasting.start_fast(fast_type, custom_hours=custom, root=workspace, now=at(2026, 3, 1))


def test_only_one_active_fast(workspace):
    first = fasting.start_fast("16:8", root=workspace, now=at(2026, 3, 1, 8))
    second = fasting.start_fast("24:0", root=workspace, now=at(2026, 3, 1, 10))
    active, history = fasting.load_fasts(workspace, now=at(2026, 3, 1, 11))
    assert active.id == second.id
    assert [f.id for f in history] == [first.id]
    assert history[0].end_time == at(2026, 3, 1, 10).isoformat()


def test_stop_without_active_fast_raises(workspace):
    with pytest.raises(ValueError):
        fasting.stop_fast(workspace, now=at(2026, 3, 1))


def test_stop_completed_fast_fires_hook(hook_outputs, workspace):
    fasting.start_fast("16:8", root=workspace, now=at(2026, 3, 1, 20))
    stopped = fasting.stop_fast(workspace, now=at(2026, 3, 2, 13))
    assert stopped.is_completed is True
    payload = json.loads((hook_outputs / "on_fast_complete.json").read_text())
    assert payload["hours"] == 17.0
    assert (hook_outputs / "on_fast_start.json").exists()


def test_stop_early_is_not_completed(hook_outputs, workspace):
    fasting.start_fast("16:8", root=workspace, now=at(2026, 3, 1, 20))
    stopped = fasting.stop_fast(workspace, now=at(2026, 3, 2, 2))
    assert stopped.is_completed is False
    assert not (hook_outputs / "on_fast_complete.json").exists()


def test_expired_fast_is_auto_ended(workspace):
    fast = fasting.start_fast("16:8", root=workspace, now=at(2026, 3, 1, 0))
    active, _ = fasting.load_fasts(workspace, now=at(2026, 3, 1, 23))
    assert active is not None

    later = at(2026, 3, 2, 1)
    active, history = fasting.load_fasts(workspace, now=later)
    assert active is None
    assert history[0].id == fast.id
    assert history[0].end_time == later.isoformat()


def test_delete_fasts(workspace):
    a = fasting.start_fast("16:8", root=workspace, now=at(2026, 3, 1, 8))
    fasting.start_fast("16:8", root=workspace, now=at(2026, 3, 1, 9))
    assert fasting.delete_fast(a.id, workspace) is True
    assert fasting.delete_fast(a.id, workspace) is False
    fasting.delete_all_fasts(workspace)
    assert fasting.load_fasts(workspace, now=at(2026, 3, 1, 10)) == (None, [])


def test_goal_end_time():
    fast = fasting.Fast(start_time=at(2026, 3, 1, 20).isoformat(), goal_hours=16)
    assert fasting.goal_end_time(fast) == at(2026, 3, 2, 12)


def test_fast_stats(workspace):
    assert fasting.fast_stats(workspace, now=at(2026, 3, 1))["total_fasts"] == 0

    fasting.start_fast("16:8", root=workspace, now=at(2026, 3, 1, 0))
    fasting.stop_fast(workspace, now=at(2026, 3, 1, 18))
    fasting.start_fast("16:8", root=workspace, now=at(2026, 3, 2, 0))
    fasting.stop_fast(workspace, now=at(2026, 3, 2, 10))

    stats = fasting.fast_stats(workspace, now=at(2026, 3, 3))
    assert stats["total_fasts"] == 2
    assert stats["completed_fasts"] == 1
    assert stats["longest_hours"] == 18.0
    assert stats["average_hours"] == 14.0
