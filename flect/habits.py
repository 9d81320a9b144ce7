"""Habit CRUD, validation, completion and list filters for Flect.

The store is the only place completion history grows, and it enforces
at most one completion per habit per calendar day.
"""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Any

from flect.fileio import read_yaml, write_yaml_atomic
from flect.models import (
    Habit,
    HabitCategory,
    HabitCompletion,
    HabitFrequency,
    HabitSource,
    HabitsFile,
    HabitTimeOfDay,
    to_date,
)
from flect.streaks import habit_stats, is_completed_on, is_overdue, next_due_date
from flect.workspace import habits_path as _habits_path

logger = logging.getLogger(__name__)


# ── Validation ────────────────────────────────────────────────


VALID_CATEGORIES = {c.value for c in HabitCategory}
VALID_FREQUENCIES = {f.value for f in HabitFrequency}
VALID_TIMES = {t.value for t in HabitTimeOfDay}
VALID_SOURCES = {s.value for s in HabitSource}


def validate_habit(habit: dict[str, Any]) -> list[str]:
    """Validate habit schema and return list of errors (empty if valid)."""
    errors = []
    if "id" not in habit:
        errors.append("Missing required field: id")
    if not str(habit.get("title", "")).strip():
        errors.append("Missing required field: title")
    checks = [
        ("category", VALID_CATEGORIES),
        ("frequency", VALID_FREQUENCIES),
        ("timeOfDay", VALID_TIMES),
        ("source", VALID_SOURCES),
    ]
    for key, allowed in checks:
        if key in habit and str(habit[key]).lower() not in allowed:
            errors.append(f"Invalid {key}: {habit[key]}")
    if "isArchived" in habit and not isinstance(habit["isArchived"], bool):
        errors.append("isArchived must be a boolean")
    if habit.get("createdAt"):
        try:
            to_date(habit["createdAt"])
        except ValueError:
            errors.append(f"Invalid createdAt: {habit['createdAt']}")
    errors.extend(_validate_history(habit.get("completionHistory")))
    return errors


def _validate_history(history: Any) -> list[str]:
    """At most one completion per calendar day, each with a valid date."""
    if history is None:
        return []
    if not isinstance(history, list):
        return ["completionHistory must be a list"]
    errors = []
    seen: set[date] = set()
    for i, item in enumerate(history):
        try:
            day = to_date(item.get("date") if isinstance(item, dict) else None)
        except ValueError:
            errors.append(f"completionHistory[{i}] has an invalid date")
            continue
        if day in seen:
            errors.append(f"completionHistory has more than one completion on {day.isoformat()}")
        seen.add(day)
    return errors


# ── CRUD ──────────────────────────────────────────────────────


def load_habits(root: Path | None = None) -> HabitsFile:
    """Load habits/habits.yaml into a HabitsFile model."""
    return HabitsFile.from_dict(read_yaml(_habits_path(root)))


def save_habits(habits_file: HabitsFile, root: Path | None = None) -> None:
    """Save HabitsFile back to habits/habits.yaml atomically."""
    write_yaml_atomic(_habits_path(root), habits_file.to_dict())


def find_habit(habits_file: HabitsFile, habit_id: str) -> Habit | None:
    for h in habits_file.habits:
        if h.id == habit_id:
            return h
    return None


def create_habit(
    habits_file: HabitsFile, habit_data: dict[str, Any], today: date | None = None
) -> tuple[Habit, list[str]]:
    """Create and add a new habit. Returns (habit, errors)."""
    errors = validate_habit(habit_data)
    if errors:
        return Habit(), errors

    habit_id = str(habit_data["id"])
    if find_habit(habits_file, habit_id):
        return Habit(), [f"Habit ID already exists: {habit_id}"]

    try:
        habit = Habit.from_dict(habit_data)
    except ValueError as e:
        return Habit(), [str(e)]
    if habit.created_at is None:
        habit.created_at = today or date.today()
    habits_file.habits.append(habit)
    logger.info("Created habit %s (%s, %s)", habit.id, habit.frequency.value, habit.source.value)
    return habit, []


def update_habit(
    habits_file: HabitsFile, habit_id: str, updates: dict[str, Any]
) -> tuple[Habit | None, list[str]]:
    """Update habit metadata by ID. Completion history cannot be edited here."""
    habit = find_habit(habits_file, habit_id)
    if not habit:
        return None, [f"Habit not found: {habit_id}"]

    if "completionHistory" in updates:
        return None, ["completionHistory is changed only by completing the habit"]

    habit_dict = habit.to_dict()
    habit_dict.update(updates)
    habit_dict["id"] = habit_id

    errors = validate_habit(habit_dict)
    if errors:
        return None, errors

    try:
        updated = Habit.from_dict(habit_dict)
    except ValueError as e:
        return None, [str(e)]
    for i, h in enumerate(habits_file.habits):
        if h.id == habit_id:
            habits_file.habits[i] = updated
            break
    return updated, []


def delete_habit(habits_file: HabitsFile, habit_id: str) -> bool:
    """Hard-delete a habit and its history."""
    for i, h in enumerate(habits_file.habits):
        if h.id == habit_id:
            habits_file.habits.pop(i)
            logger.info("Deleted habit %s", habit_id)
            return True
    return False


def archive_habit(habits_file: HabitsFile, habit_id: str) -> bool:
    """Soft-delete: the habit keeps its history but leaves active views."""
    habit = find_habit(habits_file, habit_id)
    if not habit:
        return False
    habit.is_archived = True
    logger.info("Archived habit %s", habit_id)
    return True


def complete_habit(
    habits_file: HabitsFile,
    habit_id: str,
    day: date,
    note: str | None = None,
) -> tuple[Habit | None, list[str]]:
    """Record a completion of *habit_id* for calendar *day*.

    A second completion for the same day is rejected with an
    "already completed" error rather than being double-counted.
    """
    habit = find_habit(habits_file, habit_id)
    if not habit:
        return None, [f"Habit not found: {habit_id}"]

    day = to_date(day)
    if is_completed_on(habit.completion_history, day):
        logger.warning("Rejected duplicate completion of %s for %s", habit_id, day.isoformat())
        return None, [f"Habit already completed on {day.isoformat()}"]

    habit.completion_history.append(HabitCompletion(date=day, note=note or None))
    logger.info("Completed habit %s for %s", habit_id, day.isoformat())
    return habit, []


# ── Filters ───────────────────────────────────────────────────


def active_habits(habits_file: HabitsFile) -> list[Habit]:
    return [h for h in habits_file.habits if not h.is_archived]


def archived_habits(habits_file: HabitsFile) -> list[Habit]:
    return [h for h in habits_file.habits if h.is_archived]


def habits_by_category(habits_file: HabitsFile, category: HabitCategory) -> list[Habit]:
    return [h for h in active_habits(habits_file) if h.category == category]


def habits_by_time_of_day(habits_file: HabitsFile, time_of_day: HabitTimeOfDay) -> list[Habit]:
    return [h for h in active_habits(habits_file) if h.time_of_day == time_of_day]


def habits_by_frequency(habits_file: HabitsFile, frequency: HabitFrequency) -> list[Habit]:
    return [h for h in active_habits(habits_file) if h.frequency == frequency]


def habits_for_goal(habits_file: HabitsFile, goal_id: str) -> list[Habit]:
    return [h for h in active_habits(habits_file) if h.goal_id == goal_id]


def habits_for_today(habits_file: HabitsFile, today: date) -> list[Habit]:
    """Active habits not yet completed today."""
    return [h for h in active_habits(habits_file) if not is_completed_on(h.completion_history, today)]


def overdue_habits(habits_file: HabitsFile, today: date) -> list[Habit]:
    return [h for h in active_habits(habits_file) if is_overdue(h.completion_history, h.frequency, today)]


def habit_with_stats(habit: Habit, today: date) -> dict[str, Any]:
    """Habit dict plus derived fields: streaks, completion rate, today/overdue flags."""
    d = habit.to_dict()
    d["categoryEmoji"] = habit.category.emoji
    d["categoryLabel"] = habit.category.label
    d.update(habit_stats(habit, today).to_dict())
    due = next_due_date(habit.completion_history, habit.frequency)
    d["isCompletedToday"] = is_completed_on(habit.completion_history, today)
    d["isOverdue"] = is_overdue(habit.completion_history, habit.frequency, today)
    d["nextDueDate"] = (due or today).isoformat()
    # history is displayed newest first
    d["completionHistory"] = sorted(d["completionHistory"], key=lambda c: c["date"], reverse=True)
    return d


def get_habits_with_stats(
    habits_file: HabitsFile, today: date, include_archived: bool = False
) -> list[dict[str, Any]]:
    habits = habits_file.habits if include_archived else active_habits(habits_file)
    return [habit_with_stats(h, today) for h in habits]
