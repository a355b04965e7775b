"""Tests for ui/app.py: the HTTP API."""

import pytest
from fastapi.testclient import TestClient

from ui.app import app


@pytest.fixture
def client(workspace, monkeypatch):
    monkeypatch.delenv("YREPEAT_USERNAME", raising=False)
    monkeypatch.delenv("YREPEAT_PASSWORD", raising=False)
    return TestClient(app)


def test_healthz(client):
    assert client.get("/healthz").json() == {"ok": "true"}


def test_dashboard_renders(client):
    client.post("/api/habits", json={"name": "Read <books>"})
    resp = client.get("/")
    assert resp.status_code == 200
    assert "Read &lt;books&gt;" in resp.text
    assert "linear-gradient(#0D0D26, #1A264D)" in resp.text


def test_basic_auth_when_configured(client, monkeypatch):
    monkeypatch.setenv("YREPEAT_USERNAME", "me")
    monkeypatch.setenv("YREPEAT_PASSWORD", "secret")
    assert client.get("/api/habits").status_code == 401
    assert client.get("/api/habits", auth=("me", "wrong")).status_code == 401
    assert client.get("/api/habits", auth=("me", "secret")).status_code == 200


def test_startup_runs_migration_and_prefill(workspace, monkeypatch):
    monkeypatch.delenv("YREPEAT_USERNAME", raising=False)
    monkeypatch.delenv("YREPEAT_PASSWORD", raising=False)
    with TestClient(app) as c:
        events = c.get("/api/calendar").json()["events"]
    assert len(events) == 52
    assert (workspace / "defaults.json").exists()


def test_habit_flow(client):
    habit = client.post("/api/habits", json={"name": "Read"}).json()["habit"]
    done = client.post(f"/api/habits/{habit['id']}/complete").json()
    assert done["habit"]["currentStreak"] == 1
    assert done["milestone"].startswith("First day down!")
    assert done["quote"]["text"]

    listed = client.get("/api/habits").json()["habits"]
    assert listed[0]["streakStatus"] == "active"
    assert listed[0]["isActiveToday"] is True

    assert client.post("/api/habits", json={"name": ""}).status_code == 400
    assert client.post("/api/habits/missing/complete").status_code == 404
    assert client.delete(f"/api/habits/{habit['id']}").json()["ok"] is True


def test_daily_flow_updates_widget(client):
    item = client.post("/api/daily", json={"name": "Water", "target_value": 2}).json()["item"]
    client.post(f"/api/daily/{item['id']}/increment")
    resp = client.post(f"/api/daily/{item['id']}/increment").json()
    assert resp["isCompleted"] is True

    daily = client.get("/api/daily").json()
    assert daily["stats"]["completed_items"] == 1
    assert len(daily["templates"]) == 10

    widget = client.get("/api/widget").json()["progress"]
    assert widget["progressPercentage"] == 100
    assert widget["itemsRemaining"] == 0

    history = client.get("/api/daily_history").json()["history"]
    assert history[0]["name"] == "Water"
    restarted = client.post(f"/api/daily_history/{history[0]['id']}/restart").json()
    assert restarted["item"]["currentValue"] == 0


def test_daily_validation(client):
    assert client.post("/api/daily", json={"name": "Water", "target_value": 0}).status_code == 400
    assert client.post("/api/daily", json={"name": "Water", "target_value": "x"}).status_code == 400
    assert client.post("/api/daily/template", json={"name": "Nope"}).status_code == 404


def test_checkbox_flow(client):
    assert client.get("/api/checkbox").json()["sections"] == []
    assert client.post("/api/checkbox/start", json={"sections": 2, "boxes_per_section": 3}).json()["total"] == 6
    grid = client.get("/api/checkbox").json()
    box_id = grid["sections"][0][0]["id"]
    client.post(f"/api/checkbox/{box_id}/toggle")
    assert client.get("/api/checkbox").json()["checked"] == 1
    assert client.post("/api/checkbox/start", json={"sections": 0, "boxes_per_section": 3}).status_code == 400


def test_fasting_flow(client):
    assert client.post("/api/fasts/stop").status_code == 409
    started = client.post("/api/fasts/start", json={"fast_type": "18:6"}).json()["fast"]
    assert started["goalHours"] == 18

    fasts = client.get("/api/fasts").json()
    assert fasts["active"]["phase"]["name"] == "Fed State"
    assert fasts["types"]["72:0"] == 72

    stopped = client.post("/api/fasts/stop").json()
    assert stopped["isCompleted"] is False
    assert client.get("/api/fasts").json()["active"] is None
    assert client.post("/api/fasts/start", json={"fast_type": "bogus"}).status_code == 400


def test_calendar_flow(client):
    event = client.post("/api/calendar/events", json={"date": "2099-01-01"}).json()["event"]
    todo = client.post(f"/api/calendar/events/{event['id']}/todos", json={"title": "Pills"}).json()["todo"]
    reminders = client.get("/api/calendar/reminders").json()["reminders"]
    assert [r["identifier"] for r in reminders] == [f"{event['id']}_{i}" for i in range(3)]

    client.post(f"/api/calendar/todos/{todo['id']}/toggle")
    assert client.get("/api/calendar/reminders").json()["reminders"] == []
    assert client.post("/api/calendar/events", json={"date": "tomorrow"}).status_code == 400
    assert client.delete("/api/calendar/todos/missing").status_code == 404


def test_exercise_and_weightlifting(client):
    resp = client.post(
        "/api/exercise/workouts",
        json={"activity_type": "traditional_strength_training", "start": "2099-01-01T18:00:00", "duration_minutes": 40},
    )
    assert resp.status_code == 200
    assert client.post(
        "/api/exercise/workouts",
        json={"activity_type": "elliptical", "start": "not a date", "duration_minutes": 40},
    ).status_code == 400

    summary = client.get("/api/exercise").json()
    assert summary["goal_minutes"] == 150

    session = client.post(
        "/api/weightlifting/sessions",
        json={"session_date": "2099-01-01T18:00:00", "duration_minutes": 40, "body_parts": ["Legs"]},
    ).json()["session"]
    updated = client.put(
        f"/api/weightlifting/sessions/{session['id']}/body_parts", json={"body_parts": ["Tail"]}
    )
    assert updated.status_code == 400
    assert "Chest" in client.get("/api/weightlifting").json()["available_body_parts"]


def test_clip_history(client):
    saved = client.post(
        "/api/history",
        json={"video_url": "https://youtu.be/dQw4w9WgXcQ", "start": "1:05", "end": "1:30", "repeat_count": 3},
    ).json()["item"]
    assert saved["startTime"] == 65
    items = client.get("/api/history").json()["items"]
    assert items[0]["repeatCountFormatted"] == "3x"

    bad_url = client.post("/api/history", json={"video_url": "https://example.com", "end": "10"})
    assert bad_url.status_code == 400
    bad_range = client.post("/api/history", json={"video_url": "dQw4w9WgXcQ", "start": "20", "end": "10"})
    assert bad_range.status_code == 400


def test_theme_and_blocking(client):
    resp = client.put("/api/theme", json={"single_color": "#646464", "use_single_color": True}).json()
    assert resp["backgroundColors"] == ["#505050", "#646464", "#6E6E6E"]
    assert client.put("/api/theme", json={"single_color": "red"}).status_code == 400

    schedule = client.put(
        "/api/app_blocking", json={"start_hour": 22, "selected_apps": ["Instagram"]}
    ).json()
    assert schedule["ok"] is True
    assert client.post("/api/app_blocking/apply").json()["schedule"]["isEnabled"] is True
    assert client.put("/api/app_blocking", json={"start_hour": 30}).status_code == 400


def test_settings_endpoint(client):
    resp = client.put("/api/settings", json={"weekly_goal_minutes": 200, "notifications_enabled": True})
    assert resp.json()["settings"]["exercise"]["weekly_goal_minutes"] == 200
    assert client.put("/api/settings", json={"weekly_goal_minutes": -1}).status_code == 400
    assert len(client.get("/api/exercise/reminders").json()["reminders"]) == 4


def test_boolean_fields_reject_strings(client):
    assert client.put("/api/settings", json={"notifications_enabled": "false"}).status_code == 400
    assert client.get("/api/settings").json()["notifications_enabled"] is False
    assert client.post("/api/habits", json={"name": "Read", "is_good_habit": "no"}).status_code == 400
    assert client.put("/api/theme", json={"use_single_color": 1}).status_code == 400
    assert client.put("/api/settings", json={"notifications_enabled": False}).status_code == 200
