"""Tests for yrepeat/shared.py: the store shared with extensions."""

from yrepeat import shared
from yrepeat.models import DailyProgressData
from yrepeat.workspace import shared_store_path


def test_empty_store_defaults(workspace):
    assert shared.load_progress(workspace) is None
    assert shared.load_selected_apps(workspace) == []
    assert shared.load_time_range(workspace) == (21, 0, 6, 0)


def test_keys_are_independent(workspace):
    shared.save_progress(DailyProgressData(total_items=2, completed_items=1, total_progress=0.75), workspace)
    shared.save_selected_apps(["Safari"], workspace)
    progress = shared.load_progress(workspace)
    assert progress.items_remaining == 1
    assert progress.progress_percentage == 75
    assert shared.load_selected_apps(workspace) == ["Safari"]


def test_stored_under_flat_keys(workspace):
    import json

    shared.save_time_range(20, 15, 5, 45, workspace)
    data = json.loads(shared_store_path(workspace).read_text(encoding="utf-8"))
    assert data["startTimeHour"] == 20
    assert data["startTimeMinute"] == 15
    assert data["endTimeHour"] == 5
    assert data["endTimeMinute"] == 45
