"""Tests for yrepeat/fileio.py: store reads and atomic writes."""

import logging

from conftest import at

from yrepeat import daily_repeat, habits, migration
from yrepeat.fileio import read_json, read_yaml, write_json_atomic
from yrepeat.workspace import daily_repeat_path, get_user_timezone, habits_path


def test_missing_and_blank_stores_are_empty(tmp_path):
    assert read_json(tmp_path / "nope.json") == {}
    (tmp_path / "blank.json").write_text("  \n", encoding="utf-8")
    assert read_json(tmp_path / "blank.json") == {}


def test_non_object_store_is_empty(tmp_path):
    (tmp_path / "list.json").write_text("[1, 2]", encoding="utf-8")
    assert read_json(tmp_path / "list.json") == {}


def test_garbage_json_is_logged_and_empty(tmp_path, caplog):
    path = tmp_path / "broken.json"
    path.write_text('{"items": [', encoding="utf-8")
    with caplog.at_level(logging.WARNING, logger="yrepeat.fileio"):
        assert read_json(path) == {}
    assert "unreadable JSON store" in caplog.text


def test_undecodable_bytes_are_empty(tmp_path):
    path = tmp_path / "binary.json"
    path.write_bytes(b"\xff\xfe\x00garbage")
    assert read_json(path) == {}


def test_garbage_yaml_is_empty(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("timezone: [unclosed", encoding="utf-8")
    assert read_yaml(path) == {}


def test_managers_survive_corrupt_stores(workspace):
    habits_path(workspace).write_text("not json at all", encoding="utf-8")
    daily_repeat_path(workspace).write_text("{oops", encoding="utf-8")
    (workspace / "defaults.json").write_text("}{", encoding="utf-8")

    assert habits.load_habits(workspace) == []
    assert daily_repeat.load_items(workspace, now=at(2026, 3, 1)) == []
    assert migration.migrate_data_if_needed(workspace) is not None

    habit = habits.add_habit("Read", root=workspace)
    assert [h.id for h in habits.load_habits(workspace)] == [habit.id]


def test_corrupt_settings_fall_back_to_utc(workspace):
    (workspace / "settings.yaml").write_text("timezone: [", encoding="utf-8")
    assert get_user_timezone(workspace).key == "UTC"


def test_write_json_atomic_leaves_no_temp_files(tmp_path):
    path = tmp_path / "data" / "store.json"
    write_json_atomic(path, {"a": 1})
    write_json_atomic(path, {"a": 2})
    assert read_json(path) == {"a": 2}
    assert [p.name for p in path.parent.iterdir()] == ["store.json"]
