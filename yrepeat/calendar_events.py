"""Calendar days with todo lists, plus the reminder plan for the next open day.

Only the earliest upcoming day that still has an unchecked todo gets
reminders: three per day at 09:00, 14:00 and 19:00, skipping times that
have already passed. Delivering them is left to whatever listens on the
``on_reminders_changed`` hook.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta
from pathlib import Path
from typing import Any

from yrepeat.fileio import read_json, write_json_atomic
from yrepeat.hooks import fire
from yrepeat.models import CalendarEvent, CalendarTodo, new_id
from yrepeat.workspace import calendar_path, now_local, to_iso, workspace_root

logger = logging.getLogger(__name__)

REMINDER_HOURS = (9, 14, 19)
REMINDER_TITLE = "Medication Reminder"

PREFILL_START = date(2025, 11, 15)
PREFILL_END = date(2026, 6, 7)
PREFILL_STEP_DAYS = 4
PREFILL_TODO = "Take a medicine"


def _read(root: Path | None) -> tuple[dict[str, Any], list[CalendarEvent]]:
    data = read_json(calendar_path(root))
    events = [CalendarEvent.from_dict(e) for e in (data.get("events") or [])]
    events.sort(key=lambda e: e.date)
    return data, events


def _write(data: dict[str, Any], events: list[CalendarEvent], root: Path, now: datetime) -> None:
    data["events"] = [e.to_dict() for e in sorted(events, key=lambda e: e.date)]
    write_json_atomic(calendar_path(root), data)
    fire("on_reminders_changed", {"reminders": reminder_plan(events, now)}, root)


def _parse_day(value: str | date) -> date:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValueError(f"Invalid date {value!r}, expected YYYY-MM-DD") from None


def load_events(root: Path | None = None) -> list[CalendarEvent]:
    """Events ordered by date; todos inside each ordered by creation."""
    return _read(root)[1]


def events_on(day: str | date, root: Path | None = None) -> list[CalendarEvent]:
    key = _parse_day(day).isoformat()
    return [e for e in load_events(root) if e.date == key]


def _find_todo(events: list[CalendarEvent], todo_id: str) -> CalendarTodo | None:
    for event in events:
        for todo in event.todos:
            if todo.id == todo_id:
                return todo
    return None


# ── Events ────────────────────────────────────────────────────


def add_event(day: str | date, root: Path | None = None, now: datetime | None = None) -> CalendarEvent:
    if root is None:
        root = workspace_root()
    if now is None:
        now = now_local(root)
    data, events = _read(root)
    event = CalendarEvent(id=new_id(), date=_parse_day(day).isoformat(), created_at=to_iso(now))
    events.append(event)
    _write(data, events, root, now)
    return event


def delete_event(event_id: str, root: Path | None = None, now: datetime | None = None) -> bool:
    """Delete an event together with its todos."""
    if root is None:
        root = workspace_root()
    if now is None:
        now = now_local(root)
    data, events = _read(root)
    remaining = [e for e in events if e.id != event_id]
    if len(remaining) == len(events):
        return False
    _write(data, remaining, root, now)
    return True


# ── Todos ─────────────────────────────────────────────────────


def add_todo(
    event_id: str,
    title: str,
    root: Path | None = None,
    now: datetime | None = None,
) -> CalendarTodo | None:
    if root is None:
        root = workspace_root()
    if now is None:
        now = now_local(root)
    if not title.strip():
        raise ValueError("Todo title must not be empty.")
    data, events = _read(root)
    event = next((e for e in events if e.id == event_id), None)
    if event is None:
        return None
    todo = CalendarTodo(id=new_id(), title=title.strip(), created_at=to_iso(now))
    event.todos.append(todo)
    _write(data, events, root, now)
    return todo


def update_todo(
    todo_id: str,
    title: str,
    root: Path | None = None,
    now: datetime | None = None,
) -> CalendarTodo | None:
    if root is None:
        root = workspace_root()
    if now is None:
        now = now_local(root)
    data, events = _read(root)
    todo = _find_todo(events, todo_id)
    if todo is None:
        return None
    todo.title = title
    _write(data, events, root, now)
    return todo


def toggle_todo_completion(
    todo_id: str,
    root: Path | None = None,
    now: datetime | None = None,
) -> CalendarTodo | None:
    if root is None:
        root = workspace_root()
    if now is None:
        now = now_local(root)
    data, events = _read(root)
    todo = _find_todo(events, todo_id)
    if todo is None:
        return None
    todo.is_completed = not todo.is_completed
    _write(data, events, root, now)
    return todo


def delete_todo(todo_id: str, root: Path | None = None, now: datetime | None = None) -> bool:
    if root is None:
        root = workspace_root()
    if now is None:
        now = now_local(root)
    data, events = _read(root)
    for event in events:
        kept = [t for t in event.todos if t.id != todo_id]
        if len(kept) != len(event.todos):
            event.todos = kept
            _write(data, events, root, now)
            return True
    return False


# ── Prefill ───────────────────────────────────────────────────


def prefill_initial_data_if_needed(root: Path | None = None, now: datetime | None = None) -> int:
    """Seed the medicine schedule once. Returns the number of events created."""
    if root is None:
        root = workspace_root()
    if now is None:
        now = now_local(root)
    data, events = _read(root)
    if data.get("prefilled"):
        return 0

    created = 0
    day = PREFILL_START
    while day <= PREFILL_END:
        events.append(
            CalendarEvent(
                id=new_id(),
                date=day.isoformat(),
                created_at=to_iso(now),
                todos=[CalendarTodo(id=new_id(), title=PREFILL_TODO, created_at=to_iso(now))],
            )
        )
        created += 1
        day += timedelta(days=PREFILL_STEP_DAYS)

    data["prefilled"] = True
    _write(data, events, root, now)
    logger.info("Prefilled %d calendar events", created)
    return created


# ── Reminders ─────────────────────────────────────────────────


def next_reminder_event(events: list[CalendarEvent], now: datetime) -> CalendarEvent | None:
    """Earliest event dated today or later that still has an open todo."""
    today = now.date().isoformat()
    upcoming = [e for e in events if e.date >= today and e.has_incomplete_todo]
    upcoming.sort(key=lambda e: e.date)
    return upcoming[0] if upcoming else None


def reminder_times(event: CalendarEvent, now: datetime) -> list[datetime]:
    """Reminder slots on the event's day that are still in the future."""
    day = _parse_day(event.date)
    slots = [datetime.combine(day, time(hour), tzinfo=now.tzinfo) for hour in REMINDER_HOURS]
    return [s for s in slots if s > now]


def reminder_plan(events: list[CalendarEvent], now: datetime) -> list[dict[str, Any]]:
    """Notifications to have pending right now; empty cancels everything."""
    event = next_reminder_event(events, now)
    if event is None:
        return []
    todo = next(t for t in event.todos if not t.is_completed)
    return [
        {
            "identifier": f"{event.id}_{REMINDER_HOURS.index(slot.hour)}",
            "eventId": event.id,
            "at": to_iso(slot),
            "title": REMINDER_TITLE,
            "body": todo.title,
        }
        for slot in reminder_times(event, now)
    ]


def get_reminder_plan(root: Path | None = None, now: datetime | None = None) -> list[dict[str, Any]]:
    if now is None:
        now = now_local(root)
    return reminder_plan(load_events(root), now)
