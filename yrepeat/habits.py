"""Habit tracking: CRUD and streak rules."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from yrepeat.fileio import read_json, write_json_atomic
from yrepeat.hooks import fire
from yrepeat.models import Habit, new_id
from yrepeat.quotes import milestone_message
from yrepeat.workspace import habits_path, now_local, to_iso, workspace_root

logger = logging.getLogger(__name__)


def _sort_key(h: Habit) -> tuple[bool, str]:
    # good habits first, oldest first within each group
    return (not h.is_good_habit, h.created_at)


def load_habits(root: Path | None = None) -> list[Habit]:
    """Load habits, good habits first then by creation time."""
    data = read_json(habits_path(root))
    habits = [Habit.from_dict(h) for h in (data.get("habits") or [])]
    habits.sort(key=_sort_key)
    return habits


def save_habits(habits: list[Habit], root: Path | None = None) -> None:
    write_json_atomic(habits_path(root), {"habits": [h.to_dict() for h in habits]})


def find_habit(habits: list[Habit], habit_id: str) -> Habit | None:
    for h in habits:
        if h.id == habit_id:
            return h
    return None


def add_habit(
    name: str,
    is_good_habit: bool = True,
    icon_name: str = "star.fill",
    color: str = "blue",
    root: Path | None = None,
    now: datetime | None = None,
) -> Habit:
    if not name.strip():
        raise ValueError("Habit name must not be empty.")
    if now is None:
        now = now_local(root)
    habits = load_habits(root)
    habit = Habit(
        id=new_id(),
        name=name.strip(),
        is_good_habit=is_good_habit,
        created_at=to_iso(now),
        icon_name=icon_name,
        color=color,
    )
    habits.append(habit)
    save_habits(habits, root)
    return habit


def update_habit(
    habit_id: str,
    name: str,
    icon_name: str,
    color: str,
    root: Path | None = None,
) -> Habit | None:
    """Rename/restyle a habit. Streaks are left untouched."""
    habits = load_habits(root)
    habit = find_habit(habits, habit_id)
    if habit is None:
        return None
    habit.name = name
    habit.icon_name = icon_name
    habit.color = color
    save_habits(habits, root)
    return habit


def delete_habit(habit_id: str, root: Path | None = None) -> bool:
    habits = load_habits(root)
    remaining = [h for h in habits if h.id != habit_id]
    if len(remaining) == len(habits):
        return False
    save_habits(remaining, root)
    return True


def mark_habit_completed(
    habit_id: str,
    root: Path | None = None,
    now: datetime | None = None,
) -> Habit | None:
    """Mark a habit done for today and extend or restart its streak.

    Completing twice on the same day is a no-op. A completion the day
    after the previous one extends the streak; any longer gap starts
    a new streak at 1.
    """
    if root is None:
        root = workspace_root()
    if now is None:
        now = now_local(root)

    habits = load_habits(root)
    habit = find_habit(habits, habit_id)
    if habit is None:
        return None

    days = habit.days_since_last_completion(now)
    if days == 0:
        return habit
    if days == 1:
        habit.current_streak += 1
    else:
        habit.current_streak = 1
    habit.longest_streak = max(habit.longest_streak, habit.current_streak)
    habit.last_completed_date = to_iso(now)
    save_habits(habits, root)

    fire(
        "on_habit_completed",
        {
            "habit": habit.to_dict(),
            "milestone": milestone_message(habit.current_streak),
        },
        root,
    )
    return habit


def reset_habit_progress(habit_id: str, root: Path | None = None) -> Habit | None:
    """Zero the current streak and forget the last completion."""
    habits = load_habits(root)
    habit = find_habit(habits, habit_id)
    if habit is None:
        return None
    habit.current_streak = 0
    habit.last_completed_date = None
    save_habits(habits, root)
    return habit


def check_daily_streaks(root: Path | None = None, now: datetime | None = None) -> int:
    """Break streaks for habits not completed yesterday or today.

    Returns the number of streaks broken. Writes only when something changed.
    """
    if now is None:
        now = now_local(root)
    habits = load_habits(root)
    broken = 0
    for habit in habits:
        days = habit.days_since_last_completion(now)
        if days is not None and days > 1 and habit.current_streak > 0:
            habit.current_streak = 0
            broken += 1
    if broken:
        save_habits(habits, root)
        logger.info("Broke %d habit streak(s)", broken)
    return broken
