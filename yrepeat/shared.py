"""Key-value store shared between the app and its extensions.

Holds the widget progress snapshot and the app-blocking hand-off
(selected apps plus the blocking time range). Values are stored under
flat keys in shared/group.json.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from yrepeat.fileio import read_json, write_json_atomic
from yrepeat.models import DailyProgressData
from yrepeat.workspace import shared_store_path

logger = logging.getLogger(__name__)

PROGRESS_KEY = "dailyProgressData"
SELECTED_APPS_KEY = "selectedAppsData"
START_HOUR_KEY = "startTimeHour"
START_MINUTE_KEY = "startTimeMinute"
END_HOUR_KEY = "endTimeHour"
END_MINUTE_KEY = "endTimeMinute"


def _load(root: Path | None) -> dict[str, Any]:
    return read_json(shared_store_path(root))


def _update(values: dict[str, Any], root: Path | None) -> None:
    data = _load(root)
    data.update(values)
    write_json_atomic(shared_store_path(root), data)


def save_progress(progress: DailyProgressData, root: Path | None = None) -> None:
    _update({PROGRESS_KEY: progress.to_dict()}, root)


def load_progress(root: Path | None = None) -> DailyProgressData | None:
    raw = _load(root).get(PROGRESS_KEY)
    if not isinstance(raw, dict):
        return None
    return DailyProgressData.from_dict(raw)


def save_selected_apps(apps: list[str], root: Path | None = None) -> None:
    _update({SELECTED_APPS_KEY: list(apps)}, root)


def load_selected_apps(root: Path | None = None) -> list[str]:
    raw = _load(root).get(SELECTED_APPS_KEY)
    if not isinstance(raw, list):
        return []
    return [str(a) for a in raw]


def save_time_range(
    start_hour: int,
    start_minute: int,
    end_hour: int,
    end_minute: int,
    root: Path | None = None,
) -> None:
    _update(
        {
            START_HOUR_KEY: start_hour,
            START_MINUTE_KEY: start_minute,
            END_HOUR_KEY: end_hour,
            END_MINUTE_KEY: end_minute,
        },
        root,
    )


def load_time_range(root: Path | None = None) -> tuple[int, int, int, int]:
    """(start_hour, start_minute, end_hour, end_minute); 21:00-06:00 when unset."""
    data = _load(root)
    return (
        int(data.get(START_HOUR_KEY, 21)),
        int(data.get(START_MINUTE_KEY, 0)),
        int(data.get(END_HOUR_KEY, 6)),
        int(data.get(END_MINUTE_KEY, 0)),
    )
