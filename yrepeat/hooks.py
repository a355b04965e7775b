"""Plugin/hook system for YRepeat.

Lifecycle hooks run shell commands at key points in the system.
Configured via hooks.yaml in the data root.

Hook points:
- on_habit_completed
- on_daily_goal_complete, on_daily_reset
- on_fast_start, on_fast_complete
- on_reminders_changed
- on_migration_complete
"""

from __future__ import annotations

import json
import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from yrepeat.fileio import read_yaml
from yrepeat.workspace import hooks_config_path, workspace_root

logger = logging.getLogger(__name__)

VALID_HOOK_POINTS = {
    "on_habit_completed",
    "on_daily_goal_complete",
    "on_daily_reset",
    "on_fast_start",
    "on_fast_complete",
    "on_reminders_changed",
    "on_migration_complete",
}

DEFAULT_TIMEOUT = 30
OUTPUT_CAP = 4096


@dataclass
class HookCommand:
    command: str
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def parse(cls, entry: Any) -> HookCommand | None:
        """A hooks.yaml entry is a bare command or ``{command, timeout}``."""
        if isinstance(entry, str):
            return cls(entry) if entry.strip() else None
        if isinstance(entry, dict) and entry.get("command"):
            return cls(str(entry["command"]), entry.get("timeout", DEFAULT_TIMEOUT))
        logger.warning("Skipping malformed hook entry: %r", entry)
        return None


def load_hooks_config(root: Path | None = None) -> dict[str, Any]:
    """Load hooks configuration from hooks.yaml."""
    if root is None:
        root = workspace_root()
    return read_yaml(hooks_config_path(root))


def hooks_for(hook_point: str, root: Path | None = None) -> list[HookCommand]:
    entries = load_hooks_config(root).get(hook_point) or []
    if not isinstance(entries, list):
        logger.warning("hooks.yaml entry for %s is not a list", hook_point)
        return []
    return [h for h in (HookCommand.parse(e) for e in entries) if h is not None]


def _run_one(hook: HookCommand, hook_point: str, payload: str, root: Path) -> dict[str, Any]:
    result: dict[str, Any] = {"command": hook.command, "hook_point": hook_point}
    env = {**os.environ, "YREPEAT_HOOK_POINT": hook_point, "YREPEAT_ROOT": str(root)}
    try:
        proc = subprocess.run(
            hook.command,
            shell=True,
            input=payload,
            capture_output=True,
            text=True,
            timeout=hook.timeout,
            cwd=str(root),
            env=env,
        )
    except subprocess.TimeoutExpired:
        logger.warning("Hook %s timed out after %ss: %s", hook_point, hook.timeout, hook.command)
        result.update(exit_code=-1, error=f"Hook timed out after {hook.timeout}s")
        return result
    except OSError as e:
        logger.error("Hook %s failed to start: %s", hook_point, e)
        result.update(exit_code=-1, error=str(e))
        return result

    if proc.returncode != 0:
        logger.warning("Hook %s exited %d: %s", hook_point, proc.returncode, hook.command)
    result.update(
        exit_code=proc.returncode,
        stdout=proc.stdout[:OUTPUT_CAP],
        stderr=proc.stderr[:OUTPUT_CAP],
    )
    return result


def run_hooks(
    hook_point: str,
    context: dict[str, Any],
    root: Path | None = None,
) -> list[dict[str, Any]]:
    """Run every command registered for *hook_point*, in order.

    The context arrives on stdin as JSON; ``YREPEAT_HOOK_POINT`` and
    ``YREPEAT_ROOT`` are set in the command's environment. One result dict
    per command, carrying the exit code and capped output (or an error).
    """
    if hook_point not in VALID_HOOK_POINTS:
        logger.warning("Ignoring unknown hook point %r", hook_point)
        return []
    if root is None:
        root = workspace_root()

    payload = json.dumps(context, ensure_ascii=False)
    return [_run_one(h, hook_point, payload, root) for h in hooks_for(hook_point, root)]


def fire(hook_point: str, context: dict[str, Any], root: Path | None = None) -> None:
    """Best-effort hook dispatch for managers; never raises."""
    try:
        run_hooks(hook_point, context, root)
    except Exception:
        logger.exception("Hook dispatch for %s failed", hook_point)
