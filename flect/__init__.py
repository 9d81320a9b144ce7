"""Flect core library — journal & habit query engines and stores.

Public API re-exports for convenient imports:
    from flect import filter_entries, compute_streaks, parse_mood, ...
"""

# Workspace & paths
from flect.workspace import (
    workspace_root,
    configure_logging,
    log_path,
    get_user_timezone,
    now_local,
    today_local,
    profile_path,
    journal_path,
    habits_path,
    load_profile,
    save_profile,
    validate_profile,
)

# File I/O
from flect.fileio import (
    read_text,
    read_json,
    read_yaml,
    write_json_atomic,
    write_yaml_atomic,
)

# Entry search
from flect.entries import (
    filter_entries,
    entry_matches,
    sort_newest_first,
    recent_entries,
    todays_entry,
)

# Habit stats
from flect.streaks import (
    compute_streaks,
    habit_stats,
    period_index,
    completion_days,
    is_completed_on,
    next_due_date,
    is_overdue,
)

# Moods
from flect.moods import (
    glyph_for,
    label_for,
    parse_mood,
    all_moods,
)

# Extracted tasks
from flect.tasks import (
    group_tasks,
    priority_rank,
    sort_by_priority,
    all_tasks,
    pending_tasks,
    completed_tasks,
    count_pending,
    count_completed,
)

# Journal store
from flect.journal import (
    validate_entry,
    load_journal,
    save_journal,
    list_entries,
    find_entry,
    add_entry,
    delete_entry,
)

# Habit store
from flect.habits import (
    validate_habit,
    load_habits,
    save_habits,
    find_habit,
    create_habit,
    update_habit,
    delete_habit,
    archive_habit,
    complete_habit,
    active_habits,
    archived_habits,
    habits_for_today,
    overdue_habits,
    get_habits_with_stats,
)

# Analytics
from flect.analytics import compute_habit_analytics

# Models
from flect.models import (
    Mood,
    TaskPriority,
    HabitFrequency,
    HabitTimeOfDay,
    HabitSource,
    HabitCategory,
    TaskItem,
    JournalEntry,
    JournalFile,
    HabitCompletion,
    Habit,
    HabitsFile,
    HabitStats,
    TaskGroups,
    HabitAnalytics,
    Profile,
)
