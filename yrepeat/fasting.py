"""Intermittent fasting timer.

At most one fast is active at a time. Starting a new fast closes the
running one, and a fast left running past 1.5x its goal is closed
automatically the next time the store is loaded.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

from yrepeat.fileio import read_json, write_json_atomic
from yrepeat.hooks import fire
from yrepeat.models import FAST_TYPE_HOURS, Fast, new_id
from yrepeat.workspace import fasts_path, now_local, parse_iso, to_iso, workspace_root

logger = logging.getLogger(__name__)

AUTO_END_FACTOR = 1.5


def _read(root: Path | None) -> list[Fast]:
    data = read_json(fasts_path(root))
    return [Fast.from_dict(f) for f in (data.get("fasts") or [])]


def _write(fasts: list[Fast], root: Path | None) -> None:
    write_json_atomic(fasts_path(root), {"fasts": [f.to_dict() for f in fasts]})


def load_fasts(
    root: Path | None = None,
    now: datetime | None = None,
) -> tuple[Fast | None, list[Fast]]:
    """Return (active fast, finished fasts newest first).

    An active fast that ran past 1.5x its goal is ended at load time
    with ``now`` as its end.
    """
    if now is None:
        now = now_local(root)
    fasts = _read(root)

    expired = [
        f for f in fasts
        if f.is_active and f.goal_hours > 0 and f.elapsed_hours(now) > f.goal_hours * AUTO_END_FACTOR
    ]
    for f in expired:
        f.end_time = to_iso(now)
        logger.info("Auto-ended fast %s after %.1fh (goal %dh)", f.id, f.elapsed_hours(now), f.goal_hours)
    if expired:
        _write(fasts, root)

    fasts.sort(key=lambda f: f.created_at, reverse=True)
    active = next((f for f in fasts if f.is_active), None)
    history = [f for f in fasts if not f.is_active]
    return active, history


def get_active_fast(root: Path | None = None, now: datetime | None = None) -> Fast | None:
    return load_fasts(root, now)[0]


def start_fast(
    fast_type: str = "16:8",
    custom_hours: int | None = None,
    root: Path | None = None,
    now: datetime | None = None,
) -> Fast:
    """Start a new fast, ending any fast that is still running."""
    if root is None:
        root = workspace_root()
    if now is None:
        now = now_local(root)
    if fast_type not in FAST_TYPE_HOURS:
        raise ValueError(f"Unknown fast type: {fast_type}")
    if custom_hours is not None and custom_hours <= 0:
        raise ValueError("Custom fasting hours must be positive.")

    load_fasts(root, now)
    fasts = _read(root)
    for f in fasts:
        if f.is_active:
            f.end_time = to_iso(now)

    fast = Fast(
        id=new_id(),
        start_time=to_iso(now),
        goal_hours=custom_hours or FAST_TYPE_HOURS[fast_type],
        fast_type=fast_type,
        created_at=to_iso(now),
    )
    fasts.append(fast)
    _write(fasts, root)
    fire("on_fast_start", {"fast": fast.to_dict()}, root)
    return fast


def stop_fast(root: Path | None = None, now: datetime | None = None) -> Fast:
    """End the active fast. Raises if no fast is running."""
    if root is None:
        root = workspace_root()
    if now is None:
        now = now_local(root)
    active, _ = load_fasts(root, now)
    if active is None:
        raise ValueError("No active fast to stop.")

    fasts = _read(root)
    for f in fasts:
        if f.id == active.id:
            f.end_time = to_iso(now)
            active = f
    _write(fasts, root)

    if active.is_completed:
        fire(
            "on_fast_complete",
            {"fast": active.to_dict(), "hours": round(active.elapsed_hours(now), 2)},
            root,
        )
    return active


def delete_fast(fast_id: str, root: Path | None = None) -> bool:
    fasts = _read(root)
    remaining = [f for f in fasts if f.id != fast_id]
    if len(remaining) == len(fasts):
        return False
    _write(remaining, root)
    return True


def delete_all_fasts(root: Path | None = None) -> None:
    _write([], root)
    logger.info("Deleted all fasts")


def goal_end_time(fast: Fast) -> datetime | None:
    start = parse_iso(fast.start_time)
    if start is None:
        return None
    return start + timedelta(hours=fast.goal_hours)


def fast_stats(root: Path | None = None, now: datetime | None = None) -> dict[str, Any]:
    """Aggregate figures over finished fasts."""
    if now is None:
        now = now_local(root)
    _, history = load_fasts(root, now)
    if not history:
        return {
            "total_fasts": 0,
            "completed_fasts": 0,
            "longest_hours": 0,
            "average_hours": 0,
        }
    durations = [f.elapsed_hours(now) for f in history]
    return {
        "total_fasts": len(history),
        "completed_fasts": sum(1 for f in history if f.is_completed),
        "longest_hours": round(max(durations), 2),
        "average_hours": round(sum(durations) / len(durations), 2),
    }
