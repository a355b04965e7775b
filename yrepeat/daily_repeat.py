"""Daily repeat goals: numeric targets that reset every calendar day.

The store keeps the day the counters belong to (``todayDate``). Every
load compares it to the current day and zeroes all counters on rollover,
so callers never observe yesterday's progress.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from yrepeat import shared
from yrepeat.fileio import read_json, write_json_atomic
from yrepeat.hooks import fire
from yrepeat.models import (
    DailyProgressData,
    DailyRepeatItem,
    DailyRepeatState,
    DailyRepeatTemplate,
    TaskHistoryItem,
    new_id,
)
from yrepeat.workspace import daily_repeat_path, now_local, to_iso, workspace_root

logger = logging.getLogger(__name__)


TEMPLATES = [
    DailyRepeatTemplate("Drink Water", 8, 1, "drop.fill", "blue"),
    DailyRepeatTemplate("Walk", 15000, 1000, "figure.walk", "green"),
    DailyRepeatTemplate("Read", 30, 5, "book.fill", "purple"),
    DailyRepeatTemplate("Exercise", 30, 5, "dumbbell.fill", "orange"),
    DailyRepeatTemplate("Meditate", 10, 1, "leaf.fill", "mint"),
    DailyRepeatTemplate("Practice Language", 15, 5, "globe", "cyan"),
    DailyRepeatTemplate("Study", 120, 15, "graduationcap.fill", "indigo"),
    DailyRepeatTemplate("Journal", 1, 1, "pencil", "pink"),
    DailyRepeatTemplate("Push-ups", 50, 5, "figure.strengthtraining.traditional", "red"),
    DailyRepeatTemplate("Practice Instrument", 20, 5, "music.note", "yellow"),
]


def find_template(name: str) -> DailyRepeatTemplate | None:
    for t in TEMPLATES:
        if t.name.lower() == name.lower():
            return t
    return None


# ── Persistence ───────────────────────────────────────────────


def _read_state(root: Path | None) -> DailyRepeatState:
    return DailyRepeatState.from_dict(read_json(daily_repeat_path(root)))


def _write_state(state: DailyRepeatState, root: Path | None, now: datetime) -> None:
    write_json_atomic(daily_repeat_path(root), state.to_dict())
    _publish_progress(state.items, root, now)


def _publish_progress(items: list[DailyRepeatItem], root: Path | None, now: datetime) -> None:
    """Push the widget snapshot to the shared store (best-effort)."""
    snapshot = DailyProgressData(
        total_items=len(items),
        completed_items=completed_items_count(items),
        total_progress=total_progress(items),
        last_updated=to_iso(now),
    )
    try:
        shared.save_progress(snapshot, root)
    except OSError:
        logger.warning("Could not publish daily progress snapshot", exc_info=True)


def load_state(root: Path | None = None, now: datetime | None = None) -> DailyRepeatState:
    """Load items and task history, applying the day-rollover reset first."""
    if root is None:
        root = workspace_root()
    if now is None:
        now = now_local(root)
    state = _read_state(root)
    if _rollover(state, now):
        _after_rollover(state, root, now)
    return state


def load_items(root: Path | None = None, now: datetime | None = None) -> list[DailyRepeatItem]:
    """Items in creation order."""
    items = load_state(root, now).items
    items.sort(key=lambda i: i.created_at)
    return items


def find_item(items: list[DailyRepeatItem], item_id: str) -> DailyRepeatItem | None:
    for i in items:
        if i.id == item_id:
            return i
    return None


# ── Day rollover ──────────────────────────────────────────────


def _rollover(state: DailyRepeatState, now: datetime) -> bool:
    today = now.date().isoformat()
    if state.today_date == today:
        return False
    for item in state.items:
        item.current_value = 0
    state.today_date = today
    logger.info("New day %s: reset %d daily item(s)", today, len(state.items))
    return True


def _after_rollover(state: DailyRepeatState, root: Path, now: datetime) -> None:
    _write_state(state, root, now)
    if state.items:
        fire("on_daily_reset", {"day": state.today_date, "items": len(state.items)}, root)


def check_for_new_day(root: Path | None = None, now: datetime | None = None) -> bool:
    """Reset every counter if the stored day is not today. Returns True on reset."""
    if root is None:
        root = workspace_root()
    if now is None:
        now = now_local(root)
    state = _read_state(root)
    if not _rollover(state, now):
        return False
    _after_rollover(state, root, now)
    return True


def reset_all_for_new_day(root: Path | None = None, now: datetime | None = None) -> None:
    """Zero every counter unconditionally and mark today as current."""
    if root is None:
        root = workspace_root()
    if now is None:
        now = now_local(root)
    state = _read_state(root)
    for item in state.items:
        item.current_value = 0
    state.today_date = now.date().isoformat()
    _write_state(state, root, now)


# ── CRUD ──────────────────────────────────────────────────────


def _validate(target_value: int, increment_amount: int) -> None:
    if target_value <= 0:
        raise ValueError("Target value must be positive.")
    if increment_amount <= 0:
        raise ValueError("Increment amount must be positive.")


def add_item(
    name: str,
    target_value: int,
    increment_amount: int = 1,
    icon_name: str = "circle.fill",
    color: str = "blue",
    root: Path | None = None,
    now: datetime | None = None,
) -> DailyRepeatItem:
    if root is None:
        root = workspace_root()
    if now is None:
        now = now_local(root)
    if not name.strip():
        raise ValueError("Item name must not be empty.")
    _validate(target_value, increment_amount)

    state = load_state(root, now)
    item = DailyRepeatItem(
        id=new_id(),
        name=name.strip(),
        target_value=target_value,
        increment_amount=increment_amount,
        icon_name=icon_name,
        color=color,
        created_at=to_iso(now),
    )
    state.items.append(item)
    _write_state(state, root, now)
    return item


def add_from_template(
    name: str,
    root: Path | None = None,
    now: datetime | None = None,
) -> DailyRepeatItem | None:
    template = find_template(name)
    if template is None:
        return None
    return add_item(
        template.name,
        template.target_value,
        template.increment_amount,
        template.icon_name,
        template.color,
        root=root,
        now=now,
    )


def update_item(
    item_id: str,
    name: str,
    target_value: int,
    increment_amount: int,
    icon_name: str,
    color: str,
    root: Path | None = None,
    now: datetime | None = None,
) -> DailyRepeatItem | None:
    """Edit an item's definition; today's progress is kept."""
    if root is None:
        root = workspace_root()
    if now is None:
        now = now_local(root)
    _validate(target_value, increment_amount)
    state = load_state(root, now)
    item = find_item(state.items, item_id)
    if item is None:
        return None
    item.name = name
    item.target_value = target_value
    item.increment_amount = increment_amount
    item.icon_name = icon_name
    item.color = color
    _write_state(state, root, now)
    return item


def delete_item(item_id: str, root: Path | None = None, now: datetime | None = None) -> bool:
    if root is None:
        root = workspace_root()
    if now is None:
        now = now_local(root)
    state = load_state(root, now)
    remaining = [i for i in state.items if i.id != item_id]
    if len(remaining) == len(state.items):
        return False
    state.items = remaining
    _write_state(state, root, now)
    return True


def increment_item(
    item_id: str,
    root: Path | None = None,
    now: datetime | None = None,
) -> DailyRepeatItem | None:
    """Add one step to an item's counter.

    The counter may run past the target. Crossing into completed records
    the item in task history and fires ``on_daily_goal_complete``.
    """
    if root is None:
        root = workspace_root()
    if now is None:
        now = now_local(root)
    state = load_state(root, now)
    item = find_item(state.items, item_id)
    if item is None:
        return None

    was_completed = item.is_completed
    item.current_value += item.increment_amount
    just_completed = item.is_completed and not was_completed
    if item.is_completed:
        item.last_completed = to_iso(now)
    if just_completed:
        _record_history(state, item, now)
    _write_state(state, root, now)

    if just_completed:
        fire("on_daily_goal_complete", {"item": item.to_dict()}, root)
    return item


def reset_item(item_id: str, root: Path | None = None, now: datetime | None = None) -> DailyRepeatItem | None:
    if root is None:
        root = workspace_root()
    if now is None:
        now = now_local(root)
    state = load_state(root, now)
    item = find_item(state.items, item_id)
    if item is None:
        return None
    item.current_value = 0
    _write_state(state, root, now)
    return item


# ── Stats ─────────────────────────────────────────────────────


def completed_items_count(items: list[DailyRepeatItem]) -> int:
    return sum(1 for i in items if i.is_completed)


def total_items_count(items: list[DailyRepeatItem]) -> int:
    return len(items)


def completion_rate(items: list[DailyRepeatItem]) -> float:
    if not items:
        return 0.0
    return completed_items_count(items) / len(items)


def total_progress(items: list[DailyRepeatItem]) -> float:
    """Mean per-item progress, each item capped at 1."""
    if not items:
        return 0.0
    return sum(i.progress for i in items) / len(items)


def get_stats(root: Path | None = None, now: datetime | None = None) -> dict[str, Any]:
    items = load_items(root, now)
    return {
        "completed_items": completed_items_count(items),
        "total_items": total_items_count(items),
        "completion_rate": round(completion_rate(items), 3),
        "total_progress": round(total_progress(items), 3),
    }


# ── Task history ──────────────────────────────────────────────


def _record_history(state: DailyRepeatState, item: DailyRepeatItem, now: datetime) -> None:
    for i, entry in enumerate(state.task_history):
        if entry.name == item.name:
            entry.completion_count += 1
            entry.completed_at = to_iso(now)
            entry.target_value = item.target_value
            entry.icon_name = item.icon_name
            entry.color = item.color
            state.task_history.insert(0, state.task_history.pop(i))
            return
    state.task_history.insert(
        0,
        TaskHistoryItem(
            id=new_id(),
            name=item.name,
            target_value=item.target_value,
            icon_name=item.icon_name,
            color=item.color,
            completed_at=to_iso(now),
        ),
    )


def load_task_history(root: Path | None = None, now: datetime | None = None) -> list[TaskHistoryItem]:
    """Completed tasks, most recently completed first."""
    return load_state(root, now).task_history


def restart_task_from_history(
    history_id: str,
    root: Path | None = None,
    now: datetime | None = None,
) -> DailyRepeatItem | None:
    """Create a fresh daily item from a history entry."""
    entry = next((h for h in load_task_history(root, now) if h.id == history_id), None)
    if entry is None:
        return None
    step = find_template(entry.name)
    return add_item(
        entry.name,
        entry.target_value,
        step.increment_amount if step else 1,
        entry.icon_name,
        entry.color,
        root=root,
        now=now,
    )


def delete_task_history_item(history_id: str, root: Path | None = None, now: datetime | None = None) -> bool:
    if root is None:
        root = workspace_root()
    if now is None:
        now = now_local(root)
    state = load_state(root, now)
    remaining = [h for h in state.task_history if h.id != history_id]
    if len(remaining) == len(state.task_history):
        return False
    state.task_history = remaining
    _write_state(state, root, now)
    return True


def clear_task_history(root: Path | None = None, now: datetime | None = None) -> None:
    if root is None:
        root = workspace_root()
    if now is None:
        now = now_local(root)
    state = load_state(root, now)
    state.task_history = []
    _write_state(state, root, now)


def append_items(
    new_items: list[DailyRepeatItem],
    root: Path | None = None,
    now: datetime | None = None,
) -> int:
    """Add already-built items, skipping ids that exist (used by migration)."""
    if root is None:
        root = workspace_root()
    if now is None:
        now = now_local(root)
    state = load_state(root, now)
    known = {i.id for i in state.items}
    added = [i for i in new_items if i.id not in known]
    state.items.extend(added)
    _write_state(state, root, now)
    return len(added)
