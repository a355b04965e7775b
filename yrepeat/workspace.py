"""Data root, timezone, clock and store-path helpers for YRepeat."""

from __future__ import annotations

import logging
import os
from datetime import date, datetime
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from yrepeat.fileio import read_yaml

logger = logging.getLogger(__name__)


def workspace_root() -> Path:
    """Get the data root directory (holds settings.yaml, data/ and shared/)."""
    return Path(
        os.environ.get("YREPEAT_ROOT", str(Path.home() / ".yrepeat"))
    ).expanduser().resolve()


def get_user_timezone(root: Path | None = None) -> ZoneInfo:
    """Get the user's timezone from settings.yaml, defaulting to UTC."""
    if root is None:
        root = workspace_root()
    settings = read_yaml(settings_path(root))
    name = settings.get("timezone")
    if name:
        try:
            return ZoneInfo(str(name))
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning("Unknown timezone %r in settings, using UTC", name)
    return ZoneInfo("UTC")


def now_local(root: Path | None = None) -> datetime:
    """Get current datetime in the user's timezone."""
    return datetime.now(get_user_timezone(root))


def today_str(root: Path | None = None) -> str:
    """Get today's date string (YYYY-MM-DD) in the user's timezone."""
    return now_local(root).date().isoformat()


def localize(dt: datetime, root: Path | None = None) -> datetime:
    """Attach the user's timezone to a naive datetime; aware ones pass through."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=get_user_timezone(root))
    return dt


def to_iso(dt: datetime) -> str:
    return dt.isoformat(timespec="seconds")


def parse_iso(value: str | None) -> datetime | None:
    """Parse a stored ISO timestamp; blank or malformed values give None."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except (TypeError, ValueError):
        logger.warning("Malformed timestamp in store: %r", value)
        return None


def local_day(value: str | None, now: datetime) -> date | None:
    """Calendar day of a stored timestamp, seen from *now*'s timezone."""
    dt = parse_iso(value)
    if dt is None:
        return None
    if dt.tzinfo is not None and now.tzinfo is not None:
        dt = dt.astimezone(now.tzinfo)
    return dt.date()


# ── Path helpers ──────────────────────────────────────────────

def _data(root: Path | None, name: str) -> Path:
    if root is None:
        root = workspace_root()
    return root / "data" / name


def settings_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "settings.yaml"


def hooks_config_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "hooks.yaml"


def legacy_defaults_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "defaults.json"


def shared_store_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "shared" / "group.json"


def habits_path(root: Path | None = None) -> Path:
    return _data(root, "habits.json")


def daily_repeat_path(root: Path | None = None) -> Path:
    return _data(root, "daily_repeat.json")


def checkboxes_path(root: Path | None = None) -> Path:
    return _data(root, "checkboxes.json")


def fasts_path(root: Path | None = None) -> Path:
    return _data(root, "fasts.json")


def calendar_path(root: Path | None = None) -> Path:
    return _data(root, "calendar.json")


def weightlifting_path(root: Path | None = None) -> Path:
    return _data(root, "weightlifting.json")


def workouts_path(root: Path | None = None) -> Path:
    return _data(root, "workouts.json")


def history_path(root: Path | None = None) -> Path:
    return _data(root, "history.json")


def app_blocking_path(root: Path | None = None) -> Path:
    return _data(root, "app_blocking.json")
