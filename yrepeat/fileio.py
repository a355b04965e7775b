"""Atomic file I/O for the YRepeat stores."""

from __future__ import annotations

import fcntl
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)


def read_text(path: Path) -> str:
    """Read a text file, returning empty string if missing."""
    if not path.exists():
        return ""
    return path.read_text(encoding="utf-8")


def read_json(path: Path) -> dict[str, Any]:
    """Read a JSON object store, returning empty dict if missing or blank.

    An unreadable store, or one whose top level is not an object, is logged
    and treated as empty so the app keeps working on the remaining data.
    """
    try:
        text = read_text(path)
        if not text.strip():
            return {}
        data = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning("Ignoring unreadable JSON store at %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring non-object JSON store at %s", path)
        return {}
    return data


def read_yaml(path: Path) -> dict[str, Any]:
    """Read a YAML file, returning empty dict if missing or empty."""
    try:
        text = read_text(path)
        if not text.strip():
            return {}
        result = yaml.safe_load(text)
    except (yaml.YAMLError, UnicodeDecodeError) as e:
        logger.warning("Ignoring unreadable YAML file at %s: %s", path, e)
        return {}
    return result if isinstance(result, dict) else {}


def _atomic_write(path: Path, content: str, suffix: str) -> None:
    """Temp file + flock + rename, so readers never see a partial store."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=".tmp_", suffix=suffix)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            fcntl.flock(f.fileno(), fcntl.LOCK_EX)
            try:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            finally:
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        os.rename(temp_path, path)
    except Exception:
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        raise


def write_json_atomic(path: Path, data: dict[str, Any]) -> None:
    """Atomic JSON write."""
    _atomic_write(path, json.dumps(data, indent=2, ensure_ascii=False) + "\n", suffix=".json")


def write_yaml_atomic(path: Path, data: dict[str, Any]) -> None:
    """Atomic YAML write."""
    content = yaml.dump(data, default_flow_style=False, allow_unicode=True, sort_keys=False)
    _atomic_write(path, content, suffix=".yaml")
