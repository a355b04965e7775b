"""Strength sessions grouped by ISO week, with the body parts worked."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from yrepeat.exercise import APP_SOURCE, STRENGTH_TYPES, load_workouts, start_of_week
from yrepeat.fileio import read_json, write_json_atomic
from yrepeat.models import WeightliftingSession, new_id
from yrepeat.workspace import localize, now_local, parse_iso, to_iso, weightlifting_path, workspace_root

logger = logging.getLogger(__name__)

AVAILABLE_BODY_PARTS = ["Chest", "Back", "Shoulders", "Arms", "Legs", "Core", "Full Body"]


def _read(root: Path | None) -> list[WeightliftingSession]:
    data = read_json(weightlifting_path(root))
    return [WeightliftingSession.from_dict(s) for s in (data.get("sessions") or [])]


def _write(sessions: list[WeightliftingSession], root: Path | None) -> None:
    write_json_atomic(weightlifting_path(root), {"sessions": [s.to_dict() for s in sessions]})


def load_sessions(root: Path | None = None) -> list[WeightliftingSession]:
    sessions = _read(root)
    sessions.sort(key=lambda s: s.session_date, reverse=True)
    return sessions


def record_session(
    session_date: datetime,
    duration_minutes: float,
    body_parts: list[str] | tuple[str, ...] = (),
    root: Path | None = None,
    now: datetime | None = None,
) -> WeightliftingSession:
    """Store a session, or return the existing one with the same start time."""
    if now is None:
        now = now_local(root)
    if duration_minutes < 0:
        raise ValueError("Session duration must not be negative.")
    _check_body_parts(body_parts)

    session_date = localize(session_date, root)
    sessions = _read(root)
    key = to_iso(session_date)
    for s in sessions:
        if s.session_date == key:
            return s

    year, week, _ = session_date.isocalendar()
    session = WeightliftingSession(
        id=new_id(),
        session_date=key,
        duration_minutes=float(duration_minutes),
        body_parts_worked=list(body_parts),
        week_number=week,
        year=year,
        created_at=to_iso(now),
    )
    sessions.append(session)
    _write(sessions, root)
    return session


def sync_from_workouts(root: Path | None = None, now: datetime | None = None) -> int:
    """Import this week's strength workouts from the workout feed.

    Returns how many new sessions were created.
    """
    if root is None:
        root = workspace_root()
    if now is None:
        now = now_local(root)
    since = start_of_week(now)
    known = {s.session_date for s in _read(root)}
    created = 0
    for w in load_workouts(root):
        if w.activity_type not in STRENGTH_TYPES or APP_SOURCE in w.source:
            continue
        started = parse_iso(w.start_date)
        if started is None:
            continue
        started = localize(started, root)
        if started < since or to_iso(started) in known:
            continue
        record_session(started, w.duration_minutes, root=root, now=now)
        known.add(to_iso(started))
        created += 1
    if created:
        logger.info("Imported %d strength session(s)", created)
    return created


def load_sessions_for_current_week(
    root: Path | None = None,
    now: datetime | None = None,
) -> dict[str, Any]:
    """This ISO week's sessions (newest first) and their total minutes."""
    if now is None:
        now = now_local(root)
    year, week, _ = now.isocalendar()
    sessions = [s for s in load_sessions(root) if s.week_number == week and s.year == year]
    return {
        "week_number": week,
        "year": year,
        "sessions": sessions,
        "total_minutes_this_week": round(sum(s.duration_minutes for s in sessions), 1),
    }


def update_body_parts(
    session_id: str,
    body_parts: list[str],
    root: Path | None = None,
) -> WeightliftingSession | None:
    _check_body_parts(body_parts)
    sessions = _read(root)
    for s in sessions:
        if s.id == session_id:
            s.body_parts_worked = list(body_parts)
            _write(sessions, root)
            return s
    return None


def body_parts_label(session: WeightliftingSession) -> str:
    return ", ".join(session.body_parts_worked)


def _check_body_parts(parts: list[str] | tuple[str, ...]) -> None:
    unknown = [p for p in parts if p not in AVAILABLE_BODY_PARTS]
    if unknown:
        raise ValueError(f"Unknown body part(s): {', '.join(unknown)}")
