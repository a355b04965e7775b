#!/usr/bin/env python3
"""YRepeat TUI: habits, daily goals and the fasting timer in the terminal."""

from __future__ import annotations

import logging
import os
import sys

from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.reactive import reactive
from textual.widgets import DataTable, Footer, Header, Label, Static

from yrepeat import (
    calendar_events,
    daily_repeat,
    exercise,
    fasting,
    habits,
    history,
    migration,
    weightlifting,
)
from yrepeat import now_local, workspace_root
from yrepeat.quotes import milestone_message, random_quote

logger = logging.getLogger("yrepeat.cli")


def _bar(progress: float, width: int = 20) -> str:
    filled = int(max(0.0, min(1.0, progress)) * width)
    return "█" * filled + "░" * (width - filled)


def _hours(h: float) -> str:
    whole = int(h)
    return f"{whole}h {int((h - whole) * 60):02d}m"


CSS = """
Screen {
    layout: vertical;
}

#main-layout {
    height: 1fr;
}

#left-pane {
    width: 1fr;
    min-width: 30;
    border-right: tall $primary-background-darken-2;
    padding: 0 1;
}

#right-pane {
    width: 1fr;
    min-width: 30;
    padding: 0 1;
}

.section-title {
    text-style: bold;
    color: $text;
    margin: 1 0 0 0;
    padding: 0 1;
}

#habits-table {
    height: 1fr;
}

#daily-table {
    height: auto;
    max-height: 60%;
}

#quote {
    height: auto;
    padding: 0 1;
    color: $text-muted;
    margin: 1 0 0 0;
}

#fast-info {
    height: auto;
    padding: 1 2;
    border: tall $primary-background-darken-2;
}

#exercise-screen, #calendar-screen, #clips-screen {
    padding: 1 2;
}

#exercise-info {
    height: auto;
    padding: 1 2;
    margin: 0 0 1 0;
    border: tall $primary-background-darken-2;
}

#workouts-table, #sessions-table, #calendar-table, #clips-table {
    height: 1fr;
}
"""


# ── Screens ────────────────────────────────────────────────────


class ExerciseScreen(Vertical):
    """This week's cardio progress and strength sessions."""

    def compose(self) -> ComposeResult:
        yield Label("Exercise", classes="section-title")
        yield Static(id="exercise-info")
        yield DataTable(id="workouts-table")
        yield Label("Strength sessions", classes="section-title")
        yield DataTable(id="sessions-table")

    def on_mount(self) -> None:
        root = workspace_root()
        now = now_local(root)
        summary = exercise.weekly_summary(root, now)

        lines = [
            f"Week {summary['week']}",
            f"{_bar(summary['progress'])}  {summary['minutes']:.0f} / {summary['goal_minutes']} min",
            f"Workouts: {summary['workouts']}",
        ]
        if summary["message"]:
            lines.append(f"\n{summary['message']}")
        self.query_one("#exercise-info", Static).update("\n".join(lines))

        table: DataTable = self.query_one("#workouts-table", DataTable)
        table.add_columns("Date", "Activity", "Minutes", "Source")
        for w in exercise.cardio_workouts_this_week(exercise.load_workouts(root), now):
            table.add_row(w.start_date[:16].replace("T", " "), w.activity_type, f"{w.duration_minutes:.0f}", w.source)

        week = weightlifting.load_sessions_for_current_week(root, now)
        sessions: DataTable = self.query_one("#sessions-table", DataTable)
        sessions.add_columns("Date", "Minutes", "Body parts")
        for s in week["sessions"]:
            sessions.add_row(
                s.session_date[:10],
                f"{s.duration_minutes:.0f}",
                weightlifting.body_parts_label(s) or "-",
            )


class CalendarScreen(Vertical):
    """Upcoming calendar days and their todos."""

    def compose(self) -> ComposeResult:
        yield Label("Calendar", classes="section-title")
        yield Static(id="reminder-info")
        yield DataTable(id="calendar-table")

    def on_mount(self) -> None:
        root = workspace_root()
        now = now_local(root)
        events = calendar_events.load_events(root)

        plan = calendar_events.reminder_plan(events, now)
        info = self.query_one("#reminder-info", Static)
        if plan:
            info.update("Next reminders: " + ", ".join(p["at"][:16].replace("T", " ") for p in plan))
        else:
            info.update("No pending reminders")

        table: DataTable = self.query_one("#calendar-table", DataTable)
        table.add_columns("Date", "Todo", "Done")
        today = now.date().isoformat()
        for event in events:
            if event.date < today:
                continue
            for todo in event.todos:
                table.add_row(event.date, todo.title, "✓" if todo.is_completed else "")


class ClipsScreen(Vertical):
    """Saved clip-repeat sections."""

    def compose(self) -> ComposeResult:
        yield Label("Saved clips", classes="section-title")
        yield DataTable(id="clips-table")

    def on_mount(self) -> None:
        table: DataTable = self.query_one("#clips-table", DataTable)
        table.add_columns("Title", "Start", "End", "Repeat", "Saved")
        for item in history.load_history():
            table.add_row(
                item.video_title or item.video_id,
                history.start_time_formatted(item),
                history.end_time_formatted(item),
                history.repeat_count_formatted(item),
                item.saved_at[:10],
            )


# ── Main app ───────────────────────────────────────────────────


class YRepeatApp(App):
    """YRepeat: habit and timer tracker."""

    TITLE = "YRepeat"
    CSS = CSS
    AUTO_FOCUS = "#habits-table"

    BINDINGS = [
        Binding("d", "show_dashboard", "Dashboard"),
        Binding("x", "show_exercise", "Exercise"),
        Binding("k", "show_calendar", "Calendar"),
        Binding("y", "show_clips", "Clips"),
        Binding("c", "complete_habit", "Complete"),
        Binding("i", "increment_daily", "Increment"),
        Binding("f", "toggle_fast", "Fast"),
        Binding("r", "refresh", "Refresh"),
        Binding("q", "quit", "Quit"),
    ]

    current_view: reactive[str] = reactive("dashboard")

    def check_action(self, action: str, parameters: tuple[object, ...]) -> bool | None:
        """Hide dashboard-only actions while an overlay is shown."""
        if action in ("complete_habit", "increment_daily", "toggle_fast"):
            return True if self.current_view == "dashboard" else None
        return True

    def watch_current_view(self, view: str) -> None:
        self.refresh_bindings()

    def compose(self) -> ComposeResult:
        yield Header()
        yield Horizontal(
            Vertical(
                Label("Habits", classes="section-title"),
                DataTable(id="habits-table", cursor_type="row"),
                Static(id="quote"),
                id="left-pane",
            ),
            VerticalScroll(
                Label("Daily goals", classes="section-title"),
                DataTable(id="daily-table", cursor_type="row"),
                Label("Fasting", classes="section-title"),
                Static(id="fast-info"),
                id="right-pane",
            ),
            id="main-layout",
        )
        yield Footer()

    def on_mount(self) -> None:
        self.query_one("#habits-table", DataTable).add_columns("", "Habit", "Streak", "Best", "Status")
        self.query_one("#daily-table", DataTable).add_columns("Goal", "Progress", "", "%")
        self._load_data()
        self.set_interval(60, self._refresh_fast)

    def _load_data(self) -> None:
        root = workspace_root()
        now = now_local(root)

        table = self.query_one("#habits-table", DataTable)
        table.clear()
        for h in habits.load_habits(root):
            table.add_row(
                "✓" if h.is_good_habit else "✗",
                h.name,
                f"🔥 {h.current_streak}",
                str(h.longest_streak),
                h.streak_status(now),
                key=h.id,
            )

        daily = self.query_one("#daily-table", DataTable)
        daily.clear()
        items = daily_repeat.load_items(root, now)
        for item in items:
            daily.add_row(
                item.name,
                item.progress_text,
                _bar(item.progress, 12),
                f"{item.completion_percentage}%",
                key=item.id,
            )

        done = daily_repeat.completed_items_count(items)
        self.sub_title = f"{now.date().isoformat()}  {done}/{len(items)} goals"
        self._refresh_fast()

    def _refresh_fast(self) -> None:
        root = workspace_root()
        now = now_local(root)
        info = self.query_one("#fast-info", Static)
        active = fasting.get_active_fast(root, now)
        if active is None:
            stats = fasting.fast_stats(root, now)
            info.update(
                f"Not fasting\nFinished fasts: {stats['total_fasts']} "
                f"(completed {stats['completed_fasts']})"
            )
            return
        phase = active.current_phase(now)
        info.update(
            "\n".join(
                [
                    f"{active.fast_type}  {_bar(active.progress(now))}",
                    f"Elapsed {_hours(active.elapsed_hours(now))}, "
                    f"remaining {_hours(active.remaining_hours(now))}",
                    f"{phase.name}: {phase.motivational_message}",
                ]
            )
        )

    def _selected_key(self, selector: str) -> str | None:
        table = self.query_one(selector, DataTable)
        if table.row_count == 0:
            return None
        row_key = table.coordinate_to_cell_key(table.cursor_coordinate).row_key
        return row_key.value

    # ── Actions ────────────────────────────────────────────────

    @on(DataTable.RowHighlighted, "#habits-table")
    def _on_habit_highlighted(self, event: DataTable.RowHighlighted) -> None:
        habit = habits.find_habit(habits.load_habits(), event.row_key.value or "")
        if habit is None:
            return
        quote = random_quote(habit.is_good_habit)
        text = f"“{quote.text}”"
        if quote.author:
            text += f"  - {quote.author}"
        self.query_one("#quote", Static).update(text)

    def action_complete_habit(self) -> None:
        habit_id = self._selected_key("#habits-table")
        if habit_id:
            self._do_complete_habit(habit_id)

    @work(thread=True)
    def _do_complete_habit(self, habit_id: str) -> None:
        try:
            habit = habits.mark_habit_completed(habit_id)
        except (OSError, ValueError) as e:
            self.call_from_thread(self.notify, f"Error: {e}", title="Error", severity="error")
            return
        if habit is None:
            return
        milestone = milestone_message(habit.current_streak)
        self.call_from_thread(
            self.notify,
            milestone or f"{habit.name}: {habit.current_streak} day streak",
            title="Habit completed",
        )
        self.call_from_thread(self._load_data)

    def action_increment_daily(self) -> None:
        item_id = self._selected_key("#daily-table")
        if item_id:
            self._do_increment(item_id)

    @work(thread=True)
    def _do_increment(self, item_id: str) -> None:
        try:
            item = daily_repeat.increment_item(item_id)
        except (OSError, ValueError) as e:
            self.call_from_thread(self.notify, f"Error: {e}", title="Error", severity="error")
            return
        if item is not None and item.is_completed:
            self.call_from_thread(self.notify, f"{item.name} done for today!", title="Goal reached")
        self.call_from_thread(self._load_data)

    @work(thread=True)
    def action_toggle_fast(self) -> None:
        """Stop the running fast, or start a 16:8 fast when none is active."""
        try:
            if fasting.get_active_fast() is None:
                fast = fasting.start_fast("16:8")
                message = f"Started {fast.fast_type} fast, goal {fast.goal_hours}h"
            else:
                fast = fasting.stop_fast()
                message = f"Fast ended after {_hours(fast.elapsed_hours(now_local()))}"
        except (OSError, ValueError) as e:
            self.call_from_thread(self.notify, f"Error: {e}", title="Error", severity="error")
            return
        self.call_from_thread(self.notify, message, title="Fasting")
        self.call_from_thread(self._load_data)

    async def action_refresh(self) -> None:
        if self.current_view == "dashboard":
            self._load_data()
        else:
            await self._switch_to(self.current_view)

    # ── Screen switching via overlay ───────────────────────────

    async def action_show_exercise(self) -> None:
        await self._toggle_view("exercise")

    async def action_show_calendar(self) -> None:
        await self._toggle_view("calendar")

    async def action_show_clips(self) -> None:
        await self._toggle_view("clips")

    async def action_show_dashboard(self) -> None:
        await self._switch_to("dashboard")

    async def _toggle_view(self, view: str) -> None:
        if self.current_view == view:
            await self._switch_to("dashboard")
        else:
            await self._switch_to(view)

    async def _switch_to(self, view: str) -> None:
        main = self.query_one("#main-layout", Horizontal)
        await self.query(".overlay-screen").remove()

        dashboard = view == "dashboard"
        self.query_one("#left-pane").display = dashboard
        self.query_one("#right-pane").display = dashboard

        if view == "exercise":
            await main.mount(ExerciseScreen(id="exercise-screen", classes="overlay-screen"))
        elif view == "calendar":
            await main.mount(CalendarScreen(id="calendar-screen", classes="overlay-screen"))
        elif view == "clips":
            await main.mount(ClipsScreen(id="clips-screen", classes="overlay-screen"))
        else:
            self._load_data()

        self.current_view = view


# ── Entry point ────────────────────────────────────────────────


def main() -> None:
    logging.basicConfig(
        level=os.environ.get("YREPEAT_LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        filename=os.environ.get("YREPEAT_LOG_FILE"),
    )
    root = workspace_root()
    try:
        root.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        print(f"Cannot use data root {root}: {e}")
        print("Set YREPEAT_ROOT to a writable directory.")
        sys.exit(1)

    logger.info("Starting TUI on data root %s", root)
    migration.migrate_data_if_needed(root)
    calendar_events.prefill_initial_data_if_needed(root)
    habits.check_daily_streaks(root)

    app = YRepeatApp()
    app.run()


if __name__ == "__main__":
    main()
