"""App-blocking schedule: a daily window during which selected apps are blocked.

Only the schedule is managed here. Every save mirrors the selection and
the time window into the shared store, where the blocking extension
reads them.
"""

from __future__ import annotations

import logging
from datetime import datetime, time
from pathlib import Path

from yrepeat import shared
from yrepeat.fileio import read_json, write_json_atomic
from yrepeat.models import AppBlockingSchedule, new_id
from yrepeat.workspace import app_blocking_path, now_local, to_iso, workspace_root

logger = logging.getLogger(__name__)


def load_schedule(root: Path | None = None) -> AppBlockingSchedule:
    """The single stored schedule, or the 21:00-06:00 default."""
    return AppBlockingSchedule.from_dict(read_json(app_blocking_path(root)))


def save_schedule(
    schedule: AppBlockingSchedule,
    root: Path | None = None,
    now: datetime | None = None,
) -> AppBlockingSchedule:
    if root is None:
        root = workspace_root()
    if now is None:
        now = now_local(root)
    _check_time(schedule.start_hour, schedule.start_minute)
    _check_time(schedule.end_hour, schedule.end_minute)

    if not schedule.id:
        schedule.id = new_id()
    if schedule.created_at is None:
        schedule.created_at = to_iso(now)
    schedule.updated_at = to_iso(now)
    write_json_atomic(app_blocking_path(root), schedule.to_dict())

    try:
        shared.save_selected_apps(schedule.selected_apps, root)
        shared.save_time_range(
            schedule.start_hour,
            schedule.start_minute,
            schedule.end_hour,
            schedule.end_minute,
            root,
        )
    except OSError:
        logger.warning("Could not mirror blocking schedule to shared store", exc_info=True)
    return schedule


def set_time_range(
    start_hour: int,
    start_minute: int,
    end_hour: int,
    end_minute: int,
    root: Path | None = None,
    now: datetime | None = None,
) -> AppBlockingSchedule:
    schedule = load_schedule(root)
    schedule.start_hour, schedule.start_minute = start_hour, start_minute
    schedule.end_hour, schedule.end_minute = end_hour, end_minute
    return save_schedule(schedule, root, now)


def set_selected_apps(
    apps: list[str],
    root: Path | None = None,
    now: datetime | None = None,
) -> AppBlockingSchedule:
    schedule = load_schedule(root)
    schedule.selected_apps = list(dict.fromkeys(apps))
    return save_schedule(schedule, root, now)


def apply_schedule(root: Path | None = None, now: datetime | None = None) -> AppBlockingSchedule:
    schedule = load_schedule(root)
    schedule.is_enabled = True
    logger.info(
        "Blocking %d app(s) %02d:%02d-%02d:%02d",
        len(schedule.selected_apps),
        schedule.start_hour,
        schedule.start_minute,
        schedule.end_hour,
        schedule.end_minute,
    )
    return save_schedule(schedule, root, now)


def remove_schedule(root: Path | None = None, now: datetime | None = None) -> AppBlockingSchedule:
    schedule = load_schedule(root)
    schedule.is_enabled = False
    return save_schedule(schedule, root, now)


def is_within_window(schedule: AppBlockingSchedule, now: datetime) -> bool:
    """True when *now*'s wall-clock time falls inside the window.

    The start is inclusive and the end exclusive. A window whose end is
    before its start runs across midnight. Equal start and end means an
    empty window.
    """
    start = time(schedule.start_hour, schedule.start_minute)
    end = time(schedule.end_hour, schedule.end_minute)
    current = now.time().replace(second=0, microsecond=0, tzinfo=None)
    if start == end:
        return False
    if start < end:
        return start <= current < end
    return current >= start or current < end


def is_blocking_now(root: Path | None = None, now: datetime | None = None) -> bool:
    if now is None:
        now = now_local(root)
    schedule = load_schedule(root)
    return schedule.is_enabled and is_within_window(schedule, now)


def _check_time(hour: int, minute: int) -> None:
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise ValueError(f"Invalid time {hour}:{minute:02d}")
