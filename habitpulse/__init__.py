"""HabitPulse core library — habit analytics engine and snapshot store.

Public API re-exports for convenient imports:
    from habitpulse import load_state, summarize_range, generate_debrief, ...
"""

# Workspace & settings
from habitpulse.workspace import (
    Settings,
    workspace_root,
    load_settings,
    init_workspace,
    configure_logging,
    get_user_timezone,
    now_local,
    today_str,
    state_path,
    settings_path,
)

# Date keys
from habitpulse.datekey import (
    format_date_key,
    parse_date_key,
    in_range,
    filter_in_range,
    trailing_week,
    month_to_date,
    year_to_date,
    week_days,
    shift_key,
    format_display_date,
    format_long_date,
)

# Engines
from habitpulse.summary import (
    totals_by_habit,
    summarize_range,
    standard_summaries,
)
from habitpulse.streaks import compute_streaks, streak_score
from habitpulse.prompts import GRATITUDE_PROMPTS, prompt_index, prompt_for_date, find_prompt
from habitpulse.insights import ONBOARDING_MESSAGE, generate_debrief
from habitpulse.history import build_history
from habitpulse.dashboard import build_dashboard

# Store
from habitpulse.store import (
    coerce_minutes,
    clamp_importance,
    validate_habit,
    load_state,
    save_state,
    find_habit,
    habits_ordered,
    logs_for_date,
    gratitude_for_date,
    create_habit,
    update_habit,
    delete_habit,
    upsert_log,
    upsert_gratitude,
    toggle_premium,
)

# Models
from habitpulse.models import (
    Habit,
    HabitLog,
    GratitudeEntry,
    Prompt,
    AppState,
    TopHabit,
    Summary,
    HistoryDay,
)
