"""settings.yaml access for YRepeat.

Layout::

    timezone: Europe/Berlin
    notifications_enabled: false
    exercise:
      weekly_goal_minutes: 150
    theme:
      useSingleColor: true
      singleColor: "#0D0D26"
      gradientStart: "#0D0D26"
      gradientEnd: "#1A264D"
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from yrepeat.fileio import read_yaml, write_yaml_atomic
from yrepeat.workspace import settings_path, workspace_root

logger = logging.getLogger(__name__)

DEFAULT_WEEKLY_GOAL_MINUTES = 150


def load_settings(root: Path | None = None) -> dict[str, Any]:
    if root is None:
        root = workspace_root()
    return read_yaml(settings_path(root))


def save_settings(settings: dict[str, Any], root: Path | None = None) -> None:
    if root is None:
        root = workspace_root()
    write_yaml_atomic(settings_path(root), settings)


def update_settings(updates: dict[str, Any], root: Path | None = None) -> dict[str, Any]:
    """Shallow-merge *updates* into settings.yaml and return the result."""
    settings = load_settings(root)
    settings.update(updates)
    save_settings(settings, root)
    return settings


def get_weekly_goal_minutes(root: Path | None = None) -> int:
    exercise = load_settings(root).get("exercise") or {}
    try:
        goal = int(exercise.get("weekly_goal_minutes", DEFAULT_WEEKLY_GOAL_MINUTES))
    except (TypeError, ValueError):
        logger.warning("Invalid weekly_goal_minutes in settings, using %d", DEFAULT_WEEKLY_GOAL_MINUTES)
        return DEFAULT_WEEKLY_GOAL_MINUTES
    return goal if goal > 0 else DEFAULT_WEEKLY_GOAL_MINUTES


def set_weekly_goal_minutes(minutes: int, root: Path | None = None) -> None:
    if minutes <= 0:
        raise ValueError("Weekly goal must be a positive number of minutes.")
    settings = load_settings(root)
    exercise = settings.get("exercise") or {}
    exercise["weekly_goal_minutes"] = int(minutes)
    settings["exercise"] = exercise
    save_settings(settings, root)


def notifications_enabled(root: Path | None = None) -> bool:
    return bool(load_settings(root).get("notifications_enabled", False))


def set_notifications_enabled(enabled: bool, root: Path | None = None) -> None:
    update_settings({"notifications_enabled": bool(enabled)}, root)
