"""Tests for yrepeat/calendar_events.py: events, todos and reminder planning."""

import json

import pytest
from conftest import at

from yrepeat import calendar_events


def test_add_event_and_todos(workspace):
    now = at(2026, 3, 1, 8)
    event = calendar_events.add_event("2026-03-05", workspace, now=now)
    first = calendar_events.add_todo(event.id, "Buy milk", workspace, now=at(2026, 3, 1, 9))
    second = calendar_events.add_todo(event.id, "Call mom", workspace, now=at(2026, 3, 1, 10))

    [stored] = calendar_events.events_on("2026-03-05", workspace)
    assert [t.id for t in stored.todos] == [first.id, second.id]
    assert calendar_events.events_on("2026-03-06", workspace) == []


def test_add_event_rejects_bad_date(workspace):
    with pytest.raises(ValueError):
        calendar_events.add_event("05/03/2026", workspace, now=at(2026, 3, 1))


def test_add_todo_to_unknown_event(workspace):
    assert calendar_events.add_todo("missing", "x", workspace, now=at(2026, 3, 1)) is None


def test_update_toggle_delete_todo(workspace):
    now = at(2026, 3, 1)
    event = calendar_events.add_event("2026-03-05", workspace, now=now)
    todo = calendar_events.add_todo(event.id, "Buy milk", workspace, now=now)

    assert calendar_events.update_todo(todo.id, "Buy oat milk", workspace, now=now).title == "Buy oat milk"
    assert calendar_events.toggle_todo_completion(todo.id, workspace, now=now).is_completed is True
    assert calendar_events.toggle_todo_completion(todo.id, workspace, now=now).is_completed is False
    assert calendar_events.delete_todo(todo.id, workspace, now=now) is True
    assert calendar_events.delete_todo(todo.id, workspace, now=now) is False
    assert calendar_events.load_events(workspace)[0].todos == []


def test_delete_event_removes_todos(workspace):
    now = at(2026, 3, 1)
    event = calendar_events.add_event("2026-03-05", workspace, now=now)
    todo = calendar_events.add_todo(event.id, "Buy milk", workspace, now=now)
    assert calendar_events.delete_event(event.id, workspace, now=now) is True
    assert calendar_events.load_events(workspace) == []
    assert calendar_events.toggle_todo_completion(todo.id, workspace, now=now) is None


def test_prefill_runs_once(workspace):
    now = at(2025, 11, 1)
    created = calendar_events.prefill_initial_data_if_needed(workspace, now=now)
    assert created == 52
    events = calendar_events.load_events(workspace)
    assert events[0].date == "2025-11-15"
    assert events[1].date == "2025-11-19"
    assert events[-1].date == "2026-06-07"
    assert events[0].todos[0].title == "Take a medicine"

    assert calendar_events.prefill_initial_data_if_needed(workspace, now=now) == 0
    assert len(calendar_events.load_events(workspace)) == 52


def test_reminders_for_earliest_open_day(workspace):
    now = at(2026, 3, 1, 8)
    done = calendar_events.add_event("2026-03-02", workspace, now=now)
    t = calendar_events.add_todo(done.id, "Done already", workspace, now=now)
    calendar_events.toggle_todo_completion(t.id, workspace, now=now)
    target = calendar_events.add_event("2026-03-03", workspace, now=now)
    calendar_events.add_todo(target.id, "Take a medicine", workspace, now=now)
    later = calendar_events.add_event("2026-03-04", workspace, now=now)
    calendar_events.add_todo(later.id, "Later", workspace, now=now)

    plan = calendar_events.get_reminder_plan(workspace, now=now)
    assert [p["identifier"] for p in plan] == [f"{target.id}_0", f"{target.id}_1", f"{target.id}_2"]
    assert [p["at"] for p in plan] == [
        "2026-03-03T09:00:00+00:00",
        "2026-03-03T14:00:00+00:00",
        "2026-03-03T19:00:00+00:00",
    ]
    assert plan[0]["title"] == "Medication Reminder"
    assert plan[0]["body"] == "Take a medicine"


def test_reminders_skip_past_slots_today(workspace):
    now = at(2026, 3, 3, 10)
    event = calendar_events.add_event("2026-03-03", workspace, now=now)
    calendar_events.add_todo(event.id, "Take a medicine", workspace, now=now)
    plan = calendar_events.get_reminder_plan(workspace, now=now)
    assert [p["identifier"] for p in plan] == [f"{event.id}_1", f"{event.id}_2"]


def test_past_events_get_no_reminders(workspace):
    now = at(2026, 3, 1)
    event = calendar_events.add_event("2026-02-20", workspace, now=now)
    calendar_events.add_todo(event.id, "Old", workspace, now=now)
    assert calendar_events.get_reminder_plan(workspace, now=now) == []


def test_changes_publish_reminder_plan(hook_outputs, workspace):
    now = at(2026, 3, 1, 8)
    event = calendar_events.add_event("2026-03-02", workspace, now=now)
    todo = calendar_events.add_todo(event.id, "Take a medicine", workspace, now=now)
    payload = json.loads((hook_outputs / "on_reminders_changed.json").read_text())
    assert len(payload["reminders"]) == 3

    calendar_events.toggle_todo_completion(todo.id, workspace, now=now)
    payload = json.loads((hook_outputs / "on_reminders_changed.json").read_text())
    assert payload["reminders"] == []
