"""Weekly cardio tracking against a minutes goal.

Workouts are logged into a local feed (data/workouts.json). Weeks are ISO
weeks starting Monday 00:00 in the user's timezone. Workouts whose source
is the app itself are ignored so its own exported sessions are not
counted twice.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, time, timedelta
from pathlib import Path
from typing import Any

from yrepeat.fileio import read_json, write_json_atomic
from yrepeat.models import Workout, new_id
from yrepeat.quotes import random_workout_message
from yrepeat.settings import get_weekly_goal_minutes, notifications_enabled
from yrepeat.workspace import localize, now_local, parse_iso, to_iso, workouts_path, workspace_root

logger = logging.getLogger(__name__)

APP_SOURCE = "YRepeat"
CARDIO_TYPES = {"elliptical", "other", "mixed_cardio"}
STRENGTH_TYPES = {"traditional_strength_training", "functional_strength_training"}
VALID_ACTIVITY_TYPES = CARDIO_TYPES | STRENGTH_TYPES | {"running", "walking", "cycling", "swimming"}

BEHIND_PACE_RATIO = 0.8
LATE_WEEK_DAYS = 3
LATE_WEEK_MIN_MINUTES = 10


@dataclass(frozen=True)
class WeeklyReminder:
    weekday: int  # ISO weekday, Monday = 1
    hour: int
    minute: int
    title: str
    body: str | None  # None = pick a random workout message


WEEKLY_REMINDERS = [
    WeeklyReminder(2, 18, 0, "Time to Move! 💪", None),
    WeeklyReminder(4, 18, 0, "Time to Move! 💪", None),
    WeeklyReminder(6, 18, 0, "Time to Move! 💪", None),
    WeeklyReminder(7, 16, 0, "Week Ending Soon! ⏰", "Last chance to hit your weekly goal! Let's finish strong! 🏆"),
]


# ── Feed ──────────────────────────────────────────────────────


def _read(root: Path | None) -> dict[str, Any]:
    return read_json(workouts_path(root))


def _write(data: dict[str, Any], root: Path | None) -> None:
    write_json_atomic(workouts_path(root), data)


def load_workouts(root: Path | None = None) -> list[Workout]:
    """All logged workouts, newest first."""
    workouts = [Workout.from_dict(w) for w in (_read(root).get("workouts") or [])]
    workouts.sort(key=lambda w: w.start_date, reverse=True)
    return workouts


def log_workout(
    activity_type: str,
    start: datetime,
    duration_minutes: float,
    source: str = "manual",
    root: Path | None = None,
) -> Workout:
    if activity_type not in VALID_ACTIVITY_TYPES:
        raise ValueError(f"Unknown activity type: {activity_type}")
    if duration_minutes <= 0:
        raise ValueError("Workout duration must be positive.")
    data = _read(root)
    workout = Workout(
        id=new_id(),
        activity_type=activity_type,
        start_date=to_iso(localize(start, root)),
        duration_minutes=float(duration_minutes),
        source=source,
    )
    data.setdefault("workouts", []).append(workout.to_dict())
    _write(data, root)
    return workout


def delete_workout(workout_id: str, root: Path | None = None) -> bool:
    data = _read(root)
    workouts = data.get("workouts") or []
    remaining = [w for w in workouts if w.get("id") != workout_id]
    if len(remaining) == len(workouts):
        return False
    data["workouts"] = remaining
    _write(data, root)
    return True


# ── Week math ─────────────────────────────────────────────────


def start_of_week(now: datetime) -> datetime:
    """Monday 00:00 of *now*'s ISO week, in *now*'s timezone."""
    monday = now.date() - timedelta(days=now.isoweekday() - 1)
    return datetime.combine(monday, time(0), tzinfo=now.tzinfo)


def week_range_label(now: datetime) -> str:
    start = start_of_week(now)
    end = start + timedelta(days=6)
    return f"{start:%b} {start.day} - {end:%b} {end.day}"


def _counts_as_cardio(w: Workout, since: datetime) -> bool:
    if w.activity_type not in CARDIO_TYPES or APP_SOURCE in w.source:
        return False
    started = parse_iso(w.start_date)
    if started is None:
        return False
    if started.tzinfo is None:
        started = started.replace(tzinfo=since.tzinfo)
    return started >= since


def cardio_workouts_this_week(workouts: list[Workout], now: datetime) -> list[Workout]:
    since = start_of_week(now)
    return [w for w in workouts if _counts_as_cardio(w, since)]


def cardio_minutes_this_week(workouts: list[Workout], now: datetime) -> float:
    return sum(w.duration_minutes for w in cardio_workouts_this_week(workouts, now))


def check_new_week(root: Path | None = None, now: datetime | None = None) -> bool:
    """True the first time a new ISO week is seen; the very first run only records."""
    if now is None:
        now = now_local(root)
    year, week, _ = now.isocalendar()
    data = _read(root)
    last_week = data.get("lastTrackedWeek")
    last_year = data.get("lastTrackedYear")
    if last_week == week and last_year == year:
        return False
    data["lastTrackedWeek"] = week
    data["lastTrackedYear"] = year
    _write(data, root)
    if last_week is None:
        return False
    logger.info("New exercise week %d/%d", week, year)
    return True


def needs_motivation(
    minutes: float,
    goal_minutes: float,
    week_start: datetime,
    now: datetime,
) -> bool:
    """Behind linear pace by more than 20%, or barely started by mid-week."""
    days_in = (now - week_start).days
    expected = days_in / 7.0 * goal_minutes
    ratio = minutes / max(1.0, expected)
    return ratio < BEHIND_PACE_RATIO or (days_in >= LATE_WEEK_DAYS and minutes < LATE_WEEK_MIN_MINUTES)


def weekly_summary(root: Path | None = None, now: datetime | None = None) -> dict[str, Any]:
    """Everything the exercise screen shows for the current week."""
    if root is None:
        root = workspace_root()
    if now is None:
        now = now_local(root)

    is_new_week = check_new_week(root, now)
    goal = get_weekly_goal_minutes(root)
    counted = cardio_workouts_this_week(load_workouts(root), now)
    minutes = sum(w.duration_minutes for w in counted)
    motivate = needs_motivation(minutes, goal, start_of_week(now), now)
    latest = max((w.start_date for w in counted), default=None)

    return {
        "week": week_range_label(now),
        "is_new_week": is_new_week,
        "minutes": round(minutes, 1),
        "goal_minutes": goal,
        "progress": round(min(1.0, minutes / goal), 3),
        "workouts": len(counted),
        "last_workout": latest,
        "needs_motivation": motivate,
        "message": random_workout_message() if motivate else None,
    }


# ── Reminders ─────────────────────────────────────────────────


def upcoming_weekly_reminders(root: Path | None = None, now: datetime | None = None) -> list[dict[str, Any]]:
    """Next firing of each weekly reminder; empty when notifications are off."""
    if now is None:
        now = now_local(root)
    if not notifications_enabled(root):
        return []
    week_start = start_of_week(now)
    plan = []
    for r in WEEKLY_REMINDERS:
        at = week_start + timedelta(days=r.weekday - 1, hours=r.hour, minutes=r.minute)
        if at <= now:
            at += timedelta(days=7)
        plan.append(
            {
                "identifier": f"workout-reminder-{r.weekday}",
                "at": to_iso(at),
                "title": r.title,
                "body": r.body or random_workout_message(),
            }
        )
    plan.sort(key=lambda p: p["at"])
    return plan
