from __future__ import annotations

import logging
import os
import secrets
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any

from fastapi import Body, Depends, FastAPI, HTTPException, status
from fastapi.responses import HTMLResponse
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from yrepeat import (
    app_blocking,
    calendar_events,
    checkbox,
    daily_repeat,
    exercise,
    fasting,
    habits,
    history,
    migration,
    player,
    quotes,
    settings,
    shared,
    theme,
    weightlifting,
)
from yrepeat import (
    workspace_root as _workspace_root,
    localize,
    now_local,
    parse_iso,
)

logger = logging.getLogger("yrepeat.ui")


# ── HTML helpers ──────────────────────────────────────────────

def _escape(s: str) -> str:
    return (
        s.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def _bar(progress: float) -> str:
    pct = int(max(0.0, min(1.0, progress)) * 100)
    return f'<div class="bar"><div style="width:{pct}%"></div></div>'


# ── App & auth ────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(
        level=os.environ.get("YREPEAT_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    root = _workspace_root()
    migration.migrate_data_if_needed(root)
    calendar_events.prefill_initial_data_if_needed(root)
    habits.check_daily_streaks(root)
    logger.info("Serving data root %s", root)
    yield


app = FastAPI(title="YRepeat", version="0.1.0", lifespan=lifespan)

security = HTTPBasic(auto_error=False)


def get_current_user(credentials: HTTPBasicCredentials | None = Depends(security)) -> str:
    expected_username = os.environ.get("YREPEAT_USERNAME", "")
    expected_password = os.environ.get("YREPEAT_PASSWORD", "")

    if not expected_username or not expected_password:
        return "guest"

    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Basic"},
        )

    correct_username = secrets.compare_digest(credentials.username.encode("utf-8"), expected_username.encode("utf-8"))
    correct_password = secrets.compare_digest(credentials.password.encode("utf-8"), expected_password.encode("utf-8"))

    if not (correct_username and correct_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )

    return credentials.username


# ── Payload helpers ───────────────────────────────────────────

def _require(payload: dict[str, Any], key: str) -> Any:
    value = payload.get(key)
    if value is None or value == "":
        raise HTTPException(status_code=400, detail=f"Missing {key}")
    return value


def _int(payload: dict[str, Any], key: str, default: int | None = None) -> int:
    value = payload.get(key, default)
    if value is None:
        raise HTTPException(status_code=400, detail=f"Missing {key}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise HTTPException(status_code=400, detail=f"{key} must be an integer")


def _float(payload: dict[str, Any], key: str, default: float | None = None) -> float:
    value = payload.get(key, default)
    if value is None:
        raise HTTPException(status_code=400, detail=f"Missing {key}")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise HTTPException(status_code=400, detail=f"{key} must be a number")


def _bool(payload: dict[str, Any], key: str, default: bool | None = None) -> bool:
    value = payload.get(key, default)
    if not isinstance(value, bool):
        raise HTTPException(status_code=400, detail=f"{key} must be true or false")
    return value


def _datetime(payload: dict[str, Any], key: str) -> datetime:
    dt = parse_iso(str(_require(payload, key)))
    if dt is None:
        raise HTTPException(status_code=400, detail=f"Invalid datetime for {key}")
    if dt.tzinfo is None:
        dt = localize(dt)
    return dt


def _not_found(kind: str, item_id: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"{kind} not found: {item_id}")


# ── Dashboard ─────────────────────────────────────────────────

@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"ok": "true"}


@app.get("/", response_class=HTMLResponse)
def index(username: str = Depends(get_current_user)) -> HTMLResponse:
    root = _workspace_root()
    now = now_local(root)

    habit_rows = []
    for h in habits.load_habits(root):
        kind = "good" if h.is_good_habit else "bad"
        habit_rows.append(
            f'<li class="{kind}">{_escape(h.name)} <span class="muted">'
            f'\U0001f525 {h.current_streak} (best {h.longest_streak}) · {h.streak_status(now)}</span></li>'
        )

    items = daily_repeat.load_items(root, now)
    daily_rows = [
        f"<li>{_escape(i.name)} <span class=\"muted\">{i.progress_text}</span>{_bar(i.progress)}</li>"
        for i in items
    ]

    active, past = fasting.load_fasts(root, now)
    if active:
        phase = active.current_phase(now)
        fast_html = (
            f"<div>{_escape(active.fast_type)} · {active.elapsed_hours(now):.1f}h of {active.goal_hours}h</div>"
            f"{_bar(active.progress(now))}"
            f'<div class="muted">{_escape(phase.name)}: {_escape(phase.description)}</div>'
        )
    else:
        fast_html = f'<div class="muted">No active fast. {len(past)} in history.</div>'

    week = exercise.weekly_summary(root, now)
    colors = theme.background_colors(theme.load_theme(root))
    background = f"linear-gradient({', '.join(colors)})" if len(colors) > 1 else colors[0]

    html = f"""<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>YRepeat</title>
  <style>
    body {{ background: {background}; color: #eee; font-family: system-ui, sans-serif; min-height: 100vh; margin: 0; }}
    .container {{ max-width: 900px; margin: 0 auto; padding: 24px; }}
    .card {{ background: rgba(255,255,255,0.06); border-radius: 12px; padding: 16px; margin-bottom: 16px; }}
    .muted {{ color: #aab; font-size: 13px; }}
    .bar {{ background: rgba(255,255,255,0.1); height: 6px; border-radius: 3px; margin: 4px 0 10px; }}
    .bar div {{ background: #6cf; height: 6px; border-radius: 3px; }}
    li.bad {{ color: #f99; }}
  </style>
</head>
<body>
  <div class="container">
    <h1>YRepeat</h1>
    <section class="card">
      <h2>Habits</h2>
      <ul>{''.join(habit_rows) or '<li class="muted">No habits yet.</li>'}</ul>
    </section>
    <section class="card">
      <h2>Daily goals</h2>
      <div class="muted">{daily_repeat.completed_items_count(items)} / {len(items)} completed</div>
      <ul>{''.join(daily_rows) or '<li class="muted">No daily goals yet.</li>'}</ul>
    </section>
    <section class="card">
      <h2>Fasting</h2>
      {fast_html}
    </section>
    <section class="card">
      <h2>Exercise ({_escape(week["week"])})</h2>
      <div>{week["minutes"]} / {week["goal_minutes"]} min</div>
      {_bar(week["progress"])}
      {f'<div class="muted">{_escape(week["message"])}</div>' if week["message"] else ''}
    </section>
  </div>
</body>
</html>"""
    return HTMLResponse(html)


# ── Settings ──────────────────────────────────────────────────

@app.get("/api/settings")
def api_get_settings(username: str = Depends(get_current_user)) -> dict[str, Any]:
    return settings.load_settings()


@app.put("/api/settings")
def api_update_settings(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Update timezone, notification and exercise goal settings."""
    root = _workspace_root()
    try:
        if "weekly_goal_minutes" in payload:
            settings.set_weekly_goal_minutes(_int(payload, "weekly_goal_minutes"), root)
        if "notifications_enabled" in payload:
            settings.set_notifications_enabled(_bool(payload, "notifications_enabled"), root)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if "timezone" in payload:
        settings.update_settings({"timezone": str(payload["timezone"])}, root)
    return {"ok": True, "settings": settings.load_settings(root)}


# ── Habits ────────────────────────────────────────────────────

@app.get("/api/habits")
def api_list_habits(username: str = Depends(get_current_user)) -> dict[str, Any]:
    root = _workspace_root()
    now = now_local(root)
    return {
        "habits": [
            {**h.to_dict(), "streakStatus": h.streak_status(now), "isActiveToday": h.is_active_today(now)}
            for h in habits.load_habits(root)
        ]
    }


@app.post("/api/habits")
def api_create_habit(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    try:
        habit = habits.add_habit(
            str(_require(payload, "name")),
            is_good_habit=_bool(payload, "is_good_habit", True),
            icon_name=str(payload.get("icon_name", "star.fill")),
            color=str(payload.get("color", "blue")),
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"ok": True, "habit": habit.to_dict()}


@app.put("/api/habits/{habit_id}")
def api_update_habit(habit_id: str, payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    habit = habits.update_habit(
        habit_id,
        str(_require(payload, "name")),
        str(payload.get("icon_name", "star.fill")),
        str(payload.get("color", "blue")),
    )
    if habit is None:
        raise _not_found("Habit", habit_id)
    return {"ok": True, "habit": habit.to_dict()}


@app.delete("/api/habits/{habit_id}")
def api_delete_habit(habit_id: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    if not habits.delete_habit(habit_id):
        raise _not_found("Habit", habit_id)
    return {"ok": True, "habit_id": habit_id}


@app.post("/api/habits/{habit_id}/complete")
def api_complete_habit(habit_id: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    habit = habits.mark_habit_completed(habit_id)
    if habit is None:
        raise _not_found("Habit", habit_id)
    quote = quotes.random_quote(habit.is_good_habit)
    return {
        "ok": True,
        "habit": habit.to_dict(),
        "quote": quote.to_dict(),
        "milestone": quotes.milestone_message(habit.current_streak),
    }


@app.post("/api/habits/{habit_id}/reset")
def api_reset_habit(habit_id: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    habit = habits.reset_habit_progress(habit_id)
    if habit is None:
        raise _not_found("Habit", habit_id)
    return {"ok": True, "habit": habit.to_dict()}


@app.post("/api/habits/check_streaks")
def api_check_streaks(username: str = Depends(get_current_user)) -> dict[str, Any]:
    return {"ok": True, "broken": habits.check_daily_streaks()}


# ── Daily repeat ──────────────────────────────────────────────

@app.get("/api/daily")
def api_list_daily(username: str = Depends(get_current_user)) -> dict[str, Any]:
    root = _workspace_root()
    now = now_local(root)
    items = daily_repeat.load_items(root, now)
    return {
        "items": [
            {**i.to_dict(), "isCompleted": i.is_completed, "progress": i.progress}
            for i in items
        ],
        "stats": daily_repeat.get_stats(root, now),
        "templates": [
            {"name": t.name, "targetValue": t.target_value, "incrementAmount": t.increment_amount,
             "iconName": t.icon_name, "color": t.color}
            for t in daily_repeat.TEMPLATES
        ],
    }


@app.post("/api/daily")
def api_create_daily(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    try:
        item = daily_repeat.add_item(
            str(_require(payload, "name")),
            _int(payload, "target_value"),
            _int(payload, "increment_amount", 1),
            str(payload.get("icon_name", "circle.fill")),
            str(payload.get("color", "blue")),
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"ok": True, "item": item.to_dict()}


@app.post("/api/daily/template")
def api_create_daily_from_template(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    name = str(_require(payload, "name"))
    item = daily_repeat.add_from_template(name)
    if item is None:
        raise _not_found("Template", name)
    return {"ok": True, "item": item.to_dict()}


@app.put("/api/daily/{item_id}")
def api_update_daily(item_id: str, payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    try:
        item = daily_repeat.update_item(
            item_id,
            str(_require(payload, "name")),
            _int(payload, "target_value"),
            _int(payload, "increment_amount", 1),
            str(payload.get("icon_name", "circle.fill")),
            str(payload.get("color", "blue")),
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if item is None:
        raise _not_found("Item", item_id)
    return {"ok": True, "item": item.to_dict()}


@app.delete("/api/daily/{item_id}")
def api_delete_daily(item_id: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    if not daily_repeat.delete_item(item_id):
        raise _not_found("Item", item_id)
    return {"ok": True, "item_id": item_id}


@app.post("/api/daily/{item_id}/increment")
def api_increment_daily(item_id: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    item = daily_repeat.increment_item(item_id)
    if item is None:
        raise _not_found("Item", item_id)
    return {"ok": True, "item": item.to_dict(), "isCompleted": item.is_completed}


@app.post("/api/daily/{item_id}/reset")
def api_reset_daily(item_id: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    item = daily_repeat.reset_item(item_id)
    if item is None:
        raise _not_found("Item", item_id)
    return {"ok": True, "item": item.to_dict()}


@app.post("/api/daily_reset")
def api_reset_all_daily(username: str = Depends(get_current_user)) -> dict[str, Any]:
    daily_repeat.reset_all_for_new_day()
    return {"ok": True}


@app.get("/api/daily_history")
def api_daily_history(username: str = Depends(get_current_user)) -> dict[str, Any]:
    return {"history": [h.to_dict() for h in daily_repeat.load_task_history()]}


@app.post("/api/daily_history/{history_id}/restart")
def api_restart_from_history(history_id: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    item = daily_repeat.restart_task_from_history(history_id)
    if item is None:
        raise _not_found("History entry", history_id)
    return {"ok": True, "item": item.to_dict()}


@app.delete("/api/daily_history/{history_id}")
def api_delete_history_entry(history_id: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    if not daily_repeat.delete_task_history_item(history_id):
        raise _not_found("History entry", history_id)
    return {"ok": True, "history_id": history_id}


@app.delete("/api/daily_history")
def api_clear_daily_history(username: str = Depends(get_current_user)) -> dict[str, Any]:
    daily_repeat.clear_task_history()
    return {"ok": True}


@app.get("/api/widget")
def api_widget(username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Widget snapshot as last published to the shared store."""
    snapshot = shared.load_progress()
    if snapshot is None:
        return {"progress": None}
    return {
        "progress": {
            **snapshot.to_dict(),
            "progressPercentage": snapshot.progress_percentage,
            "itemsRemaining": snapshot.items_remaining,
        }
    }


# ── Checkbox grid ─────────────────────────────────────────────

@app.get("/api/checkbox")
def api_checkbox(username: str = Depends(get_current_user)) -> dict[str, Any]:
    root = _workspace_root()
    boxes = checkbox.load_boxes(root)
    return {
        "config": checkbox.load_config(root).to_dict(),
        "sections": [[b.to_dict() for b in section] for section in checkbox.load_sections(root)],
        "total": checkbox.total_boxes(boxes),
        "checked": checkbox.checked_boxes(boxes),
        "progress": checkbox.progress(boxes),
    }


@app.post("/api/checkbox/start")
def api_checkbox_start(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    try:
        boxes = checkbox.start_with_configuration(_int(payload, "sections"), _int(payload, "boxes_per_section"))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"ok": True, "total": len(boxes)}


@app.post("/api/checkbox/{box_id}/toggle")
def api_checkbox_toggle(box_id: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    box = checkbox.toggle_box(box_id)
    if box is None:
        raise _not_found("Box", box_id)
    return {"ok": True, "box": box.to_dict()}


@app.delete("/api/checkbox")
def api_checkbox_delete_all(username: str = Depends(get_current_user)) -> dict[str, Any]:
    checkbox.delete_all()
    return {"ok": True}


# ── Fasting ───────────────────────────────────────────────────

def _fast_view(f: fasting.Fast, now: datetime) -> dict[str, Any]:
    end = fasting.goal_end_time(f)
    return {
        **f.to_dict(),
        "isActive": f.is_active,
        "isCompleted": f.is_completed,
        "elapsedHours": round(f.elapsed_hours(now), 2),
        "remainingHours": round(f.remaining_hours(now), 2),
        "progress": round(f.progress(now), 3),
        "phase": f.current_phase(now).to_dict(),
        "phaseProgress": round(f.phase_progress(now), 3),
        "goalEndTime": end.isoformat(timespec="seconds") if end else None,
    }


@app.get("/api/fasts")
def api_fasts(username: str = Depends(get_current_user)) -> dict[str, Any]:
    root = _workspace_root()
    now = now_local(root)
    active, past = fasting.load_fasts(root, now)
    return {
        "active": _fast_view(active, now) if active else None,
        "history": [_fast_view(f, now) for f in past],
        "stats": fasting.fast_stats(root, now),
        "types": fasting.FAST_TYPE_HOURS,
    }


@app.post("/api/fasts/start")
def api_fast_start(payload: dict[str, Any] = Body(default={}), username: str = Depends(get_current_user)) -> dict[str, Any]:
    custom = payload.get("custom_hours")
    try:
        fast = fasting.start_fast(
            str(payload.get("fast_type", "16:8")),
            custom_hours=_int(payload, "custom_hours") if custom is not None else None,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"ok": True, "fast": fast.to_dict()}


@app.post("/api/fasts/stop")
def api_fast_stop(username: str = Depends(get_current_user)) -> dict[str, Any]:
    try:
        fast = fasting.stop_fast()
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {"ok": True, "fast": fast.to_dict(), "isCompleted": fast.is_completed}


@app.delete("/api/fasts/{fast_id}")
def api_fast_delete(fast_id: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    if not fasting.delete_fast(fast_id):
        raise _not_found("Fast", fast_id)
    return {"ok": True, "fast_id": fast_id}


@app.delete("/api/fasts")
def api_fast_delete_all(username: str = Depends(get_current_user)) -> dict[str, Any]:
    fasting.delete_all_fasts()
    return {"ok": True}


# ── Calendar ──────────────────────────────────────────────────

@app.get("/api/calendar")
def api_calendar(username: str = Depends(get_current_user)) -> dict[str, Any]:
    return {"events": [e.to_dict() for e in calendar_events.load_events()]}


@app.get("/api/calendar/reminders")
def api_calendar_reminders(username: str = Depends(get_current_user)) -> dict[str, Any]:
    return {"reminders": calendar_events.get_reminder_plan()}


@app.post("/api/calendar/events")
def api_add_event(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    try:
        event = calendar_events.add_event(str(_require(payload, "date")))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"ok": True, "event": event.to_dict()}


@app.delete("/api/calendar/events/{event_id}")
def api_delete_event(event_id: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    if not calendar_events.delete_event(event_id):
        raise _not_found("Event", event_id)
    return {"ok": True, "event_id": event_id}


@app.post("/api/calendar/events/{event_id}/todos")
def api_add_todo(event_id: str, payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    try:
        todo = calendar_events.add_todo(event_id, str(_require(payload, "title")))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if todo is None:
        raise _not_found("Event", event_id)
    return {"ok": True, "todo": todo.to_dict()}


@app.put("/api/calendar/todos/{todo_id}")
def api_update_todo(todo_id: str, payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    todo = calendar_events.update_todo(todo_id, str(_require(payload, "title")))
    if todo is None:
        raise _not_found("Todo", todo_id)
    return {"ok": True, "todo": todo.to_dict()}


@app.post("/api/calendar/todos/{todo_id}/toggle")
def api_toggle_todo(todo_id: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    todo = calendar_events.toggle_todo_completion(todo_id)
    if todo is None:
        raise _not_found("Todo", todo_id)
    return {"ok": True, "todo": todo.to_dict()}


@app.delete("/api/calendar/todos/{todo_id}")
def api_delete_todo(todo_id: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    if not calendar_events.delete_todo(todo_id):
        raise _not_found("Todo", todo_id)
    return {"ok": True, "todo_id": todo_id}


# ── Exercise & weightlifting ──────────────────────────────────

@app.get("/api/exercise")
def api_exercise(username: str = Depends(get_current_user)) -> dict[str, Any]:
    return exercise.weekly_summary()


@app.get("/api/exercise/reminders")
def api_exercise_reminders(username: str = Depends(get_current_user)) -> dict[str, Any]:
    return {"reminders": exercise.upcoming_weekly_reminders()}


@app.post("/api/exercise/workouts")
def api_log_workout(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    try:
        workout = exercise.log_workout(
            str(_require(payload, "activity_type")),
            _datetime(payload, "start"),
            _float(payload, "duration_minutes"),
            source=str(payload.get("source", "manual")),
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"ok": True, "workout": workout.to_dict()}


@app.delete("/api/exercise/workouts/{workout_id}")
def api_delete_workout(workout_id: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    if not exercise.delete_workout(workout_id):
        raise _not_found("Workout", workout_id)
    return {"ok": True, "workout_id": workout_id}


@app.get("/api/weightlifting")
def api_weightlifting(username: str = Depends(get_current_user)) -> dict[str, Any]:
    week = weightlifting.load_sessions_for_current_week()
    return {
        **week,
        "sessions": [
            {**s.to_dict(), "bodyPartsLabel": weightlifting.body_parts_label(s)}
            for s in week["sessions"]
        ],
        "available_body_parts": weightlifting.AVAILABLE_BODY_PARTS,
    }


@app.post("/api/weightlifting/sessions")
def api_record_session(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    parts = payload.get("body_parts") or []
    if not isinstance(parts, list):
        raise HTTPException(status_code=400, detail="body_parts must be a list")
    try:
        session = weightlifting.record_session(
            _datetime(payload, "session_date"),
            _float(payload, "duration_minutes"),
            [str(p) for p in parts],
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"ok": True, "session": session.to_dict()}


@app.put("/api/weightlifting/sessions/{session_id}/body_parts")
def api_update_body_parts(session_id: str, payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    parts = payload.get("body_parts")
    if not isinstance(parts, list):
        raise HTTPException(status_code=400, detail="body_parts must be a list")
    try:
        session = weightlifting.update_body_parts(session_id, [str(p) for p in parts])
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if session is None:
        raise _not_found("Session", session_id)
    return {"ok": True, "session": session.to_dict()}


@app.post("/api/weightlifting/sync")
def api_sync_weightlifting(username: str = Depends(get_current_user)) -> dict[str, Any]:
    return {"ok": True, "created": weightlifting.sync_from_workouts()}


# ── Clip history & player ─────────────────────────────────────

@app.get("/api/history")
def api_history(username: str = Depends(get_current_user)) -> dict[str, Any]:
    return {
        "items": [
            {
                **i.to_dict(),
                "startTimeFormatted": history.start_time_formatted(i),
                "endTimeFormatted": history.end_time_formatted(i),
                "repeatCountFormatted": history.repeat_count_formatted(i),
            }
            for i in history.load_history()
        ]
    }


@app.post("/api/history")
def api_save_history(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Validate a repeat section and save it to history."""
    url = str(_require(payload, "video_url"))
    video_id = player.extract_video_id(url)
    if video_id is None:
        raise HTTPException(status_code=400, detail="Invalid YouTube URL")
    start = player.time_to_seconds(str(payload.get("start", "0")))
    end = player.time_to_seconds(str(payload.get("end", "0")))
    repeat_count = _int(payload, "repeat_count", 0)
    try:
        player.RepeatLoop(start, end, repeat_count)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    title = payload.get("video_title")
    item = history.save_item(url, video_id, start, end, repeat_count, str(title) if title else None)
    return {"ok": True, "item": item.to_dict()}


@app.delete("/api/history/{item_id}")
def api_delete_history(item_id: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    if not history.delete_item(item_id):
        raise _not_found("History item", item_id)
    return {"ok": True, "item_id": item_id}


@app.delete("/api/history")
def api_clear_history(username: str = Depends(get_current_user)) -> dict[str, Any]:
    history.clear_all()
    return {"ok": True}


# ── Theme ─────────────────────────────────────────────────────

@app.get("/api/theme")
def api_theme(username: str = Depends(get_current_user)) -> dict[str, Any]:
    current = theme.load_theme()
    return {**current.to_dict(), "backgroundColors": theme.background_colors(current)}


@app.put("/api/theme")
def api_update_theme(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    root = _workspace_root()
    try:
        if "single_color" in payload:
            theme.set_single_color(str(payload["single_color"]), root)
        if "gradient_start" in payload or "gradient_end" in payload:
            theme.set_gradient_colors(
                str(_require(payload, "gradient_start")),
                str(_require(payload, "gradient_end")),
                root,
            )
        if "use_single_color" in payload:
            theme.set_use_single_color(_bool(payload, "use_single_color"), root)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    current = theme.load_theme(root)
    return {"ok": True, **current.to_dict(), "backgroundColors": theme.background_colors(current)}


# ── App blocking ──────────────────────────────────────────────

@app.get("/api/app_blocking")
def api_app_blocking(username: str = Depends(get_current_user)) -> dict[str, Any]:
    schedule = app_blocking.load_schedule()
    return {**schedule.to_dict(), "isBlockingNow": app_blocking.is_blocking_now()}


@app.put("/api/app_blocking")
def api_update_app_blocking(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    root = _workspace_root()
    try:
        if any(k in payload for k in ("start_hour", "start_minute", "end_hour", "end_minute")):
            current = app_blocking.load_schedule(root)
            app_blocking.set_time_range(
                _int(payload, "start_hour", current.start_hour),
                _int(payload, "start_minute", current.start_minute),
                _int(payload, "end_hour", current.end_hour),
                _int(payload, "end_minute", current.end_minute),
                root,
            )
        if "selected_apps" in payload:
            apps = payload["selected_apps"]
            if not isinstance(apps, list):
                raise HTTPException(status_code=400, detail="selected_apps must be a list")
            app_blocking.set_selected_apps([str(a) for a in apps], root)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"ok": True, "schedule": app_blocking.load_schedule(root).to_dict()}


@app.post("/api/app_blocking/apply")
def api_apply_blocking(username: str = Depends(get_current_user)) -> dict[str, Any]:
    return {"ok": True, "schedule": app_blocking.apply_schedule().to_dict()}


@app.post("/api/app_blocking/remove")
def api_remove_blocking(username: str = Depends(get_current_user)) -> dict[str, Any]:
    return {"ok": True, "schedule": app_blocking.remove_schedule().to_dict()}


# ── Migration ─────────────────────────────────────────────────

@app.post("/api/migrate")
def api_migrate(username: str = Depends(get_current_user)) -> dict[str, Any]:
    result = migration.migrate_data_if_needed()
    return {"ok": True, "migrated": result is not None, "result": result}


@app.post("/api/migrate/reset")
def api_migrate_reset(username: str = Depends(get_current_user)) -> dict[str, Any]:
    migration.reset_migration_flag()
    return {"ok": True}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host=os.environ.get("YREPEAT_HOST", "127.0.0.1"),
        port=int(os.environ.get("YREPEAT_PORT", "8000")),
    )
