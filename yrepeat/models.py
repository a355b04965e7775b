"""Typed dataclasses for the YRepeat data model.

All models use from_dict/to_dict for JSON/YAML serialization.
camelCase in JSON is mapped to snake_case in Python.
Unknown keys are ignored; missing keys use defaults.
Timestamps are ISO-8601 strings; derived values that depend on the clock
take an explicit ``now``.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from yrepeat.workspace import local_day, parse_iso


def new_id() -> str:
    return str(uuid.uuid4())


# ── Habits ────────────────────────────────────────────────────


@dataclass
class Habit:
    id: str = ""
    name: str = ""
    is_good_habit: bool = True
    current_streak: int = 0
    longest_streak: int = 0
    last_completed_date: str | None = None
    created_at: str = ""
    icon_name: str = "star.fill"
    color: str = "blue"

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Habit:
        return cls(
            id=str(d.get("id", "")),
            name=str(d.get("name", "")),
            is_good_habit=bool(d.get("isGoodHabit", True)),
            current_streak=int(d.get("currentStreak", 0) or 0),
            longest_streak=int(d.get("longestStreak", 0) or 0),
            last_completed_date=d.get("lastCompletedDate"),
            created_at=str(d.get("createdAt", "")),
            icon_name=str(d.get("iconName", "star.fill")),
            color=str(d.get("color", "blue")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "isGoodHabit": self.is_good_habit,
            "currentStreak": self.current_streak,
            "longestStreak": self.longest_streak,
            "lastCompletedDate": self.last_completed_date,
            "createdAt": self.created_at,
            "iconName": self.icon_name,
            "color": self.color,
        }

    def days_since_last_completion(self, now: datetime) -> int | None:
        """Whole calendar days since the last completion, None if never."""
        last = local_day(self.last_completed_date, now)
        if last is None:
            return None
        return (now.date() - last).days

    def is_active_today(self, now: datetime) -> bool:
        return self.days_since_last_completion(now) == 0

    def streak_status(self, now: datetime) -> str:
        """active (done today), pending (done yesterday) or inactive."""
        days = self.days_since_last_completion(now)
        if days == 0:
            return "active"
        if days == 1:
            return "pending"
        return "inactive"


# ── Daily repeats ─────────────────────────────────────────────


@dataclass
class DailyRepeatItem:
    id: str = ""
    name: str = ""
    target_value: int = 1
    current_value: int = 0
    increment_amount: int = 1
    icon_name: str = "circle.fill"
    color: str = "blue"
    created_at: str = ""
    last_completed: str | None = None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> DailyRepeatItem:
        return cls(
            id=str(d.get("id", "")),
            name=str(d.get("name", "")),
            target_value=int(d.get("targetValue", 1)),
            current_value=int(d.get("currentValue", 0) or 0),
            increment_amount=int(d.get("incrementAmount", 1)),
            icon_name=str(d.get("iconName", "circle.fill")),
            color=str(d.get("color", "blue")),
            created_at=str(d.get("createdAt", "")),
            last_completed=d.get("lastCompleted"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "targetValue": self.target_value,
            "currentValue": self.current_value,
            "incrementAmount": self.increment_amount,
            "iconName": self.icon_name,
            "color": self.color,
            "createdAt": self.created_at,
            "lastCompleted": self.last_completed,
        }

    @property
    def is_completed(self) -> bool:
        return self.current_value >= self.target_value

    @property
    def progress(self) -> float:
        if self.target_value <= 0:
            return 0.0
        return min(self.current_value / self.target_value, 1.0)

    @property
    def progress_text(self) -> str:
        return f"{self.current_value} / {self.target_value}"

    @property
    def completion_percentage(self) -> int:
        return int(self.progress * 100)


@dataclass(frozen=True)
class DailyRepeatTemplate:
    name: str
    target_value: int
    increment_amount: int
    icon_name: str
    color: str


@dataclass
class TaskHistoryItem:
    """A daily repeat item that reached its target."""

    id: str = ""
    name: str = ""
    target_value: int = 0
    icon_name: str = "circle.fill"
    color: str = "blue"
    completed_at: str = ""
    completion_count: int = 1

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> TaskHistoryItem:
        return cls(
            id=str(d.get("id", "")),
            name=str(d.get("name", "")),
            target_value=int(d.get("targetValue", 0)),
            icon_name=str(d.get("iconName", "circle.fill")),
            color=str(d.get("color", "blue")),
            completed_at=str(d.get("completedAt", "")),
            completion_count=int(d.get("completionCount", 1)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "targetValue": self.target_value,
            "iconName": self.icon_name,
            "color": self.color,
            "completedAt": self.completed_at,
            "completionCount": self.completion_count,
        }

    @property
    def display_text(self) -> str:
        if self.completion_count > 1:
            return f"Completed {self.completion_count} times"
        return "Completed"


@dataclass
class DailyRepeatState:
    today_date: str = ""
    items: list[DailyRepeatItem] = field(default_factory=list)
    task_history: list[TaskHistoryItem] = field(default_factory=list)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> DailyRepeatState:
        if not d or not isinstance(d, dict):
            return cls()
        return cls(
            today_date=str(d.get("todayDate", "")),
            items=[DailyRepeatItem.from_dict(i) for i in (d.get("items") or [])],
            task_history=[TaskHistoryItem.from_dict(h) for h in (d.get("taskHistory") or [])],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "todayDate": self.today_date,
            "items": [i.to_dict() for i in self.items],
            "taskHistory": [h.to_dict() for h in self.task_history],
        }


@dataclass
class DailyProgressData:
    """Widget snapshot of today's daily-repeat progress."""

    total_items: int = 0
    completed_items: int = 0
    total_progress: float = 0.0
    last_updated: str = ""

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> DailyProgressData:
        return cls(
            total_items=int(d.get("totalItems", 0)),
            completed_items=int(d.get("completedItems", 0)),
            total_progress=float(d.get("totalProgress", 0.0)),
            last_updated=str(d.get("lastUpdated", "")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalItems": self.total_items,
            "completedItems": self.completed_items,
            "totalProgress": self.total_progress,
            "lastUpdated": self.last_updated,
        }

    @property
    def progress_percentage(self) -> int:
        return int(self.total_progress * 100)

    @property
    def items_remaining(self) -> int:
        return self.total_items - self.completed_items


# ── Check grid ────────────────────────────────────────────────


@dataclass
class CheckBox:
    id: str = ""
    section_number: int = 0
    box_number: int = 0
    is_checked: bool = False

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> CheckBox:
        return cls(
            id=str(d.get("id", "")),
            section_number=int(d.get("sectionNumber", 0)),
            box_number=int(d.get("boxNumber", 0)),
            is_checked=bool(d.get("isChecked", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "sectionNumber": self.section_number,
            "boxNumber": self.box_number,
            "isChecked": self.is_checked,
        }


@dataclass
class CheckBoxConfig:
    number_of_sections: int = 0
    boxes_per_section: int = 0
    has_started: bool = False

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> CheckBoxConfig:
        if not d or not isinstance(d, dict):
            return cls()
        return cls(
            number_of_sections=int(d.get("numberOfSections", 0)),
            boxes_per_section=int(d.get("boxesPerSection", 0)),
            has_started=bool(d.get("hasStarted", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "numberOfSections": self.number_of_sections,
            "boxesPerSection": self.boxes_per_section,
            "hasStarted": self.has_started,
        }


# ── Fasting ───────────────────────────────────────────────────


FAST_TYPE_HOURS = {
    "Custom": 16,
    "16:8": 16,
    "18:6": 18,
    "24:0": 24,
    "36:0": 36,
    "48:0": 48,
    "72:0": 72,
}


@dataclass(frozen=True)
class FastingPhase:
    name: str
    hours_start: float
    hours_end: float | None
    icon: str
    color: str
    description: str
    motivational_message: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "hoursStart": self.hours_start,
            "hoursEnd": self.hours_end,
            "icon": self.icon,
            "color": self.color,
            "description": self.description,
            "motivationalMessage": self.motivational_message,
        }


FASTING_PHASES = [
    FastingPhase("Fed State", 0, 4, "fork.knife", "gray",
                 "Body is using glucose from recent meals", "Just getting started!"),
    FastingPhase("Early Fasting", 4, 12, "hourglass", "blue",
                 "Glycogen stores are being broken down", "You're doing great! Keep going!"),
    FastingPhase("Ketosis Begins", 12, 18, "flame.fill", "orange",
                 "Ketone production starts - fat burning begins!", "Fat burning mode activated! 🔥"),
    FastingPhase("Full Ketosis", 18, 24, "flame", "red",
                 "Full ketosis achieved - maximum fat burning!", "You're in the zone! Maximum benefits!"),
    FastingPhase("Autophagy Begins", 24, 48, "sparkles", "purple",
                 "Cellular repair and recycling activated", "Your cells are repairing themselves! ✨"),
    FastingPhase("Deep Autophagy", 48, 72, "star.fill", "pink",
                 "Enhanced cellular repair and regeneration", "Deep healing in progress! 🌟"),
    FastingPhase("Growth Hormone Peak", 72, None, "crown.fill", "yellow",
                 "Peak growth hormone - stem cell regeneration", "Peak performance! You're amazing! 👑"),
]


def phase_for_hours(hours: float) -> FastingPhase:
    """Phase reached after *hours* of fasting; each upper bound is inclusive."""
    for phase in FASTING_PHASES:
        if phase.hours_end is not None and hours <= phase.hours_end:
            return phase
    return FASTING_PHASES[-1]


@dataclass
class Fast:
    id: str = ""
    start_time: str = ""
    end_time: str | None = None
    goal_hours: int = 16
    fast_type: str = "16:8"
    created_at: str = ""

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Fast:
        return cls(
            id=str(d.get("id", "")),
            start_time=str(d.get("startTime", "")),
            end_time=d.get("endTime"),
            goal_hours=int(d.get("goalHours", 16)),
            fast_type=str(d.get("fastType", "16:8")),
            created_at=str(d.get("createdAt", "")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "goalHours": self.goal_hours,
            "fastType": self.fast_type,
            "createdAt": self.created_at,
        }

    @property
    def is_active(self) -> bool:
        return self.end_time is None

    def elapsed_hours(self, now: datetime) -> float:
        start = parse_iso(self.start_time)
        if start is None:
            return 0.0
        end = parse_iso(self.end_time) or now
        return max(0.0, (end - start).total_seconds() / 3600.0)

    def remaining_hours(self, now: datetime) -> float:
        if not self.is_active:
            return 0.0
        return max(0.0, self.goal_hours - self.elapsed_hours(now))

    def progress(self, now: datetime) -> float:
        if self.goal_hours <= 0:
            return 1.0
        return min(1.0, self.elapsed_hours(now) / self.goal_hours)

    @property
    def is_completed(self) -> bool:
        start = parse_iso(self.start_time)
        end = parse_iso(self.end_time)
        if start is None or end is None:
            return False
        return (end - start).total_seconds() / 3600.0 >= self.goal_hours

    def current_phase(self, now: datetime) -> FastingPhase:
        return phase_for_hours(self.elapsed_hours(now))

    def phase_progress(self, now: datetime) -> float:
        """Progress through the current phase; 0 once the fast has ended."""
        if not self.is_active:
            return 0.0
        hours = self.elapsed_hours(now)
        phase = phase_for_hours(hours)
        if phase.hours_end is None:
            return min(1.0, (hours - phase.hours_start) / 24.0)
        span = phase.hours_end - phase.hours_start
        return min(1.0, max(0.0, (hours - phase.hours_start) / span))


# ── Calendar ──────────────────────────────────────────────────


@dataclass
class CalendarTodo:
    id: str = ""
    title: str = ""
    is_completed: bool = False
    created_at: str = ""

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> CalendarTodo:
        return cls(
            id=str(d.get("id", "")),
            title=str(d.get("title", "")),
            is_completed=bool(d.get("isCompleted", False)),
            created_at=str(d.get("createdAt", "")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "isCompleted": self.is_completed,
            "createdAt": self.created_at,
        }


@dataclass
class CalendarEvent:
    id: str = ""
    date: str = ""  # ISO date
    created_at: str = ""
    todos: list[CalendarTodo] = field(default_factory=list)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> CalendarEvent:
        todos = [CalendarTodo.from_dict(t) for t in (d.get("todos") or [])]
        todos.sort(key=lambda t: t.created_at)
        return cls(
            id=str(d.get("id", "")),
            date=str(d.get("date", "")),
            created_at=str(d.get("createdAt", "")),
            todos=todos,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "date": self.date,
            "createdAt": self.created_at,
            "todos": [t.to_dict() for t in self.todos],
        }

    @property
    def has_incomplete_todo(self) -> bool:
        return any(not t.is_completed for t in self.todos)


# ── Exercise ──────────────────────────────────────────────────


@dataclass
class WeightliftingSession:
    id: str = ""
    session_date: str = ""
    duration_minutes: float = 0.0
    body_parts_worked: list[str] = field(default_factory=list)
    week_number: int = 0
    year: int = 0
    created_at: str = ""

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> WeightliftingSession:
        parts = d.get("bodyPartsWorked") or []
        if isinstance(parts, str):
            parts = [p.strip() for p in parts.split(",") if p.strip()]
        return cls(
            id=str(d.get("id", "")),
            session_date=str(d.get("sessionDate", "")),
            duration_minutes=float(d.get("durationMinutes", 0.0)),
            body_parts_worked=[str(p) for p in parts],
            week_number=int(d.get("weekNumber", 0)),
            year=int(d.get("year", 0)),
            created_at=str(d.get("createdAt", "")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "sessionDate": self.session_date,
            "durationMinutes": self.duration_minutes,
            "bodyPartsWorked": self.body_parts_worked,
            "weekNumber": self.week_number,
            "year": self.year,
            "createdAt": self.created_at,
        }


@dataclass
class Workout:
    id: str = ""
    activity_type: str = "other"
    start_date: str = ""
    duration_minutes: float = 0.0
    source: str = "manual"

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Workout:
        return cls(
            id=str(d.get("id", "")),
            activity_type=str(d.get("activityType", "other")),
            start_date=str(d.get("startDate", "")),
            duration_minutes=float(d.get("durationMinutes", 0.0)),
            source=str(d.get("source", "manual")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "activityType": self.activity_type,
            "startDate": self.start_date,
            "durationMinutes": self.duration_minutes,
            "source": self.source,
        }


# ── Clip history ──────────────────────────────────────────────


@dataclass
class HistoryItem:
    id: str = ""
    video_url: str = ""
    video_id: str = ""
    video_title: str | None = None
    start_time: float = 0.0
    end_time: float = 0.0
    repeat_count: int = 0  # 0 = infinite
    saved_at: str = ""

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> HistoryItem:
        return cls(
            id=str(d.get("id", "")),
            video_url=str(d.get("videoURL", "")),
            video_id=str(d.get("videoId", "")),
            video_title=d.get("videoTitle"),
            start_time=float(d.get("startTime", 0.0)),
            end_time=float(d.get("endTime", 0.0)),
            repeat_count=int(d.get("repeatCount", 0)),
            saved_at=str(d.get("savedAt", "")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "videoURL": self.video_url,
            "videoId": self.video_id,
            "videoTitle": self.video_title,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "repeatCount": self.repeat_count,
            "savedAt": self.saved_at,
        }

    @property
    def repeat_count_formatted(self) -> str:
        return "∞" if self.repeat_count == 0 else f"{self.repeat_count}x"


# ── App blocking ──────────────────────────────────────────────


@dataclass
class AppBlockingSchedule:
    id: str = ""
    is_enabled: bool = False
    start_hour: int = 21
    start_minute: int = 0
    end_hour: int = 6
    end_minute: int = 0
    selected_apps: list[str] = field(default_factory=list)
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> AppBlockingSchedule:
        if not d or not isinstance(d, dict):
            return cls()
        return cls(
            id=str(d.get("id", "")),
            is_enabled=bool(d.get("isEnabled", False)),
            start_hour=int(d.get("startHour", 21)),
            start_minute=int(d.get("startMinute", 0)),
            end_hour=int(d.get("endHour", 6)),
            end_minute=int(d.get("endMinute", 0)),
            selected_apps=[str(a) for a in (d.get("selectedApps") or [])],
            created_at=d.get("createdAt"),
            updated_at=d.get("updatedAt"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "isEnabled": self.is_enabled,
            "startHour": self.start_hour,
            "startMinute": self.start_minute,
            "endHour": self.end_hour,
            "endMinute": self.end_minute,
            "selectedApps": self.selected_apps,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
