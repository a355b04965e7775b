"""One-shot migration of the legacy key-value store into the structured stores.

The legacy store (defaults.json) kept whole collections as JSON-encoded
strings under a single key each. On first run the blobs are decoded and
appended to the new stores; each key is removed once its blob has been
copied, and a flag marks the migration done. A blob that fails to decode
stays in place and does not stop the other one from migrating.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from yrepeat import daily_repeat, history
from yrepeat.fileio import read_json, write_json_atomic
from yrepeat.hooks import fire
from yrepeat.models import DailyRepeatItem, HistoryItem
from yrepeat.workspace import legacy_defaults_path, workspace_root

logger = logging.getLogger(__name__)

MIGRATION_FLAG = "data_migrated"
HISTORY_KEY = "yrepeat_history"
DAILY_ITEMS_KEY = "daily_repeat_items"


def _load_defaults(root: Path) -> dict[str, Any]:
    return read_json(legacy_defaults_path(root))


def _save_defaults(defaults: dict[str, Any], root: Path) -> None:
    write_json_atomic(legacy_defaults_path(root), defaults)


def _decode_blob(raw: Any) -> list[dict[str, Any]]:
    """Blobs are JSON text; an already-decoded list is accepted as well."""
    data = json.loads(raw) if isinstance(raw, str) else raw
    if not isinstance(data, list) or not all(isinstance(d, dict) for d in data):
        raise ValueError("expected a JSON array of objects")
    return data


def _migrate_history(defaults: dict[str, Any], root: Path) -> int | None:
    if HISTORY_KEY not in defaults:
        logger.debug("No history data to migrate")
        return None
    try:
        items = [HistoryItem.from_dict(d) for d in _decode_blob(defaults[HISTORY_KEY])]
    except (ValueError, TypeError) as e:
        logger.error("Failed to migrate history data: %s", e)
        return None
    added = history.append_items(items, root)
    del defaults[HISTORY_KEY]
    logger.info("Migrated %d history items", added)
    return added


def _migrate_daily_items(defaults: dict[str, Any], root: Path) -> int | None:
    if DAILY_ITEMS_KEY not in defaults:
        logger.debug("No daily repeat data to migrate")
        return None
    try:
        items = [DailyRepeatItem.from_dict(d) for d in _decode_blob(defaults[DAILY_ITEMS_KEY])]
    except (ValueError, TypeError) as e:
        logger.error("Failed to migrate daily repeat data: %s", e)
        return None
    added = daily_repeat.append_items(items, root)
    del defaults[DAILY_ITEMS_KEY]
    logger.info("Migrated %d daily repeat items", added)
    return added


def migrate_data_if_needed(root: Path | None = None) -> dict[str, int | None] | None:
    """Run the migration once. Returns per-collection counts, or None if already done."""
    if root is None:
        root = workspace_root()
    defaults = _load_defaults(root)
    if defaults.get(MIGRATION_FLAG):
        logger.debug("Data already migrated")
        return None

    logger.info("Starting data migration from legacy store")
    result = {
        "history": _migrate_history(defaults, root),
        "daily_repeat": _migrate_daily_items(defaults, root),
    }
    defaults[MIGRATION_FLAG] = True
    _save_defaults(defaults, root)
    logger.info("Data migration completed")
    fire("on_migration_complete", result, root)
    return result


def reset_migration_flag(root: Path | None = None) -> None:
    """Clear the flag so the migration runs again on next start."""
    if root is None:
        root = workspace_root()
    defaults = _load_defaults(root)
    defaults.pop(MIGRATION_FLAG, None)
    _save_defaults(defaults, root)
    logger.info("Migration flag reset")
