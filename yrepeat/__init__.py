"""YRepeat core library: local stores and the managers over them.

Public API re-exports for convenient imports:
    from yrepeat import workspace_root, today_str, Habit, ...

Feature managers are used as modules:
    from yrepeat import habits, daily_repeat, fasting
"""

# Workspace & paths
from yrepeat.workspace import (
    workspace_root,
    get_user_timezone,
    today_str,
    now_local,
    to_iso,
    parse_iso,
    localize,
    settings_path,
    hooks_config_path,
    legacy_defaults_path,
    shared_store_path,
)

# File I/O
from yrepeat.fileio import (
    read_text,
    read_json,
    read_yaml,
    write_json_atomic,
    write_yaml_atomic,
)

# Models
from yrepeat.models import (
    Habit,
    DailyRepeatItem,
    DailyRepeatTemplate,
    DailyRepeatState,
    TaskHistoryItem,
    DailyProgressData,
    CheckBox,
    CheckBoxConfig,
    FAST_TYPE_HOURS,
    FASTING_PHASES,
    FastingPhase,
    Fast,
    phase_for_hours,
    CalendarTodo,
    CalendarEvent,
    WeightliftingSession,
    Workout,
    HistoryItem,
    AppBlockingSchedule,
)

# Feature managers
from yrepeat import (
    app_blocking,
    calendar_events,
    checkbox,
    daily_repeat,
    exercise,
    fasting,
    habits,
    history,
    hooks,
    migration,
    player,
    quotes,
    settings,
    shared,
    theme,
    weightlifting,
)

__version__ = "0.1.0"
