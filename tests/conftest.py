"""Shared test fixtures for YRepeat tests."""

from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest
import yaml

UTC = ZoneInfo("UTC")


def at(year: int, month: int, day: int, hour: int = 12, minute: int = 0) -> datetime:
    """A fixed, timezone-aware clock reading for tests."""
    return datetime(year, month, day, hour, minute, tzinfo=UTC)


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create a temporary data root with a UTC settings file."""
    root = tmp_path / "yrepeat"
    (root / "data").mkdir(parents=True)

    settings = {
        "timezone": "UTC",
        "notifications_enabled": False,
        "exercise": {"weekly_goal_minutes": 150},
    }
    (root / "settings.yaml").write_text(
        yaml.dump(settings, default_flow_style=False), encoding="utf-8"
    )

    # Set env var
    os.environ["YREPEAT_ROOT"] = str(root)
    yield root
    # Cleanup
    if "YREPEAT_ROOT" in os.environ:
        del os.environ["YREPEAT_ROOT"]


@pytest.fixture
def hook_outputs(workspace: Path) -> Path:
    """Register a hook on every hook point that saves its stdin to <point>.json."""
    from yrepeat.hooks import VALID_HOOK_POINTS

    out = workspace / "hook_out"
    out.mkdir()
    config = {point: [f"cat > hook_out/{point}.json"] for point in sorted(VALID_HOOK_POINTS)}
    (workspace / "hooks.yaml").write_text(yaml.dump(config), encoding="utf-8")
    return out
