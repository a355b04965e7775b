"""Tests for yrepeat/hooks.py: hook system."""

import json

import yaml

from yrepeat.hooks import HookCommand, fire, hooks_for, load_hooks_config, run_hooks


def _configure(workspace, config):
    (workspace / "hooks.yaml").write_text(yaml.dump(config), encoding="utf-8")


def test_run_hooks_no_config(workspace):
    """No hooks.yaml -> no hooks run."""
    assert load_hooks_config(workspace) == {}
    assert run_hooks("on_daily_reset", {"day": "2026-03-01"}, workspace) == []


def test_run_hooks_with_echo(workspace):
    """Hook receives the context as JSON on stdin."""
    _configure(workspace, {"on_daily_reset": ["cat"]})

    results = run_hooks("on_daily_reset", {"day": "2026-03-01"}, workspace)
    assert len(results) == 1
    assert results[0]["exit_code"] == 0
    assert json.loads(results[0]["stdout"])["day"] == "2026-03-01"


def test_run_hooks_invalid_hook_point(workspace):
    _configure(workspace, {"post_finalize": ["cat"]})
    assert run_hooks("post_finalize", {}, workspace) == []


def test_run_hooks_timeout(workspace):
    _configure(workspace, {"on_fast_start": [{"command": "sleep 10", "timeout": 1}]})

    results = run_hooks("on_fast_start", {}, workspace)
    assert len(results) == 1
    assert results[0]["exit_code"] == -1
    assert "timed out" in results[0].get("error", "").lower()


def test_failing_hook_reports_exit_code(workspace):
    _configure(workspace, {"on_fast_start": ["echo boom >&2; exit 3", "true"]})

    results = run_hooks("on_fast_start", {}, workspace)
    assert [r["exit_code"] for r in results] == [3, 0]
    assert results[0]["stderr"].strip() == "boom"


def test_output_is_capped(workspace):
    _configure(workspace, {"on_fast_start": ["head -c 10000 /dev/zero | tr '\\0' x"]})
    results = run_hooks("on_fast_start", {}, workspace)
    assert len(results[0]["stdout"]) == 4096


def test_fire_never_raises(workspace):
    (workspace / "hooks.yaml").write_text("on_fast_start: [unclosed", encoding="utf-8")
    fire("on_fast_start", {}, workspace)


def test_hook_environment_names_point_and_root(workspace):
    _configure(workspace, {"on_daily_reset": ['echo "$YREPEAT_HOOK_POINT $YREPEAT_ROOT"']})
    results = run_hooks("on_daily_reset", {}, workspace)
    assert results[0]["stdout"].strip() == f"on_daily_reset {workspace}"


def test_malformed_entries_are_skipped(workspace):
    _configure(workspace, {"on_fast_start": ["", 42, {"timeout": 5}, {"command": "true", "timeout": 5}]})
    assert hooks_for("on_fast_start", workspace) == [HookCommand("true", 5)]
    _configure(workspace, {"on_fast_start": "true"})
    assert hooks_for("on_fast_start", workspace) == []
