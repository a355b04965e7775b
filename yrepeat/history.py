"""Saved clip-repeat sections, newest first."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from yrepeat.fileio import read_json, write_json_atomic
from yrepeat.models import HistoryItem, new_id
from yrepeat.player import seconds_to_time
from yrepeat.workspace import history_path, now_local, to_iso


def load_history(root: Path | None = None) -> list[HistoryItem]:
    data = read_json(history_path(root))
    return [HistoryItem.from_dict(i) for i in (data.get("items") or [])]


def save_history(items: list[HistoryItem], root: Path | None = None) -> None:
    write_json_atomic(history_path(root), {"items": [i.to_dict() for i in items]})


def save_item(
    video_url: str,
    video_id: str,
    start_time: float,
    end_time: float,
    repeat_count: int,
    video_title: str | None = None,
    root: Path | None = None,
    now: datetime | None = None,
) -> HistoryItem:
    if now is None:
        now = now_local(root)
    item = HistoryItem(
        id=new_id(),
        video_url=video_url,
        video_id=video_id,
        video_title=video_title,
        start_time=start_time,
        end_time=end_time,
        repeat_count=repeat_count,
        saved_at=to_iso(now),
    )
    items = load_history(root)
    items.insert(0, item)
    save_history(items, root)
    return item


def append_items(new_items: list[HistoryItem], root: Path | None = None) -> int:
    """Add already-built items after the existing ones (used by migration)."""
    items = load_history(root)
    known = {i.id for i in items}
    added = [i for i in new_items if i.id not in known]
    save_history(items + added, root)
    return len(added)


def delete_item(item_id: str, root: Path | None = None) -> bool:
    items = load_history(root)
    remaining = [i for i in items if i.id != item_id]
    if len(remaining) == len(items):
        return False
    save_history(remaining, root)
    return True


def clear_all(root: Path | None = None) -> None:
    save_history([], root)


def start_time_formatted(item: HistoryItem) -> str:
    return seconds_to_time(item.start_time)


def end_time_formatted(item: HistoryItem) -> str:
    return seconds_to_time(item.end_time)


def repeat_count_formatted(item: HistoryItem) -> str:
    return item.repeat_count_formatted
