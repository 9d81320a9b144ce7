"""Tests for flect/habits.py — CRUD, completion, filters."""

from datetime import date

from flect.habits import (
    active_habits,
    archive_habit,
    archived_habits,
    complete_habit,
    create_habit,
    delete_habit,
    find_habit,
    get_habits_with_stats,
    habit_with_stats,
    habits_by_category,
    habits_by_frequency,
    habits_by_time_of_day,
    habits_for_goal,
    habits_for_today,
    load_habits,
    overdue_habits,
    save_habits,
    update_habit,
    validate_habit,
)
from flect.models import (
    Habit,
    HabitCategory,
    HabitCompletion,
    HabitFrequency,
    HabitsFile,
    HabitTimeOfDay,
)

TODAY = date(2026, 1, 10)


def test_validate_habit_valid():
    assert validate_habit({"id": "h1", "title": "Walk", "frequency": "daily"}) == []


def test_validate_habit_missing_fields():
    errors = validate_habit({})
    assert any("id" in e for e in errors)
    assert any("title" in e for e in errors)


def test_validate_habit_invalid_enums():
    errors = validate_habit({"id": "h1", "title": "X", "frequency": "hourly", "category": "fun"})
    assert any("frequency" in e for e in errors)
    assert any("category" in e for e in errors)


def test_validate_habit_archived_must_be_bool():
    assert validate_habit({"id": "h1", "title": "X", "isArchived": "yes"})


def test_load_habits(workspace):
    hf = load_habits(workspace)
    assert [h.id for h in hf.habits] == ["h-read", "h-gym", "h-old"]
    assert find_habit(hf, "h-read").completion_history[1].note == "fiction"


def test_create_habit_sets_created_at():
    hf = HabitsFile()
    habit, errors = create_habit(hf, {"id": "new", "title": "Meditate", "category": "mindfulness"}, TODAY)
    assert errors == []
    assert habit.created_at == TODAY
    assert habit.category == HabitCategory.MINDFULNESS
    assert len(hf.habits) == 1


def test_create_habit_duplicate():
    hf = HabitsFile(habits=[Habit(id="x", title="X")])
    _, errors = create_habit(hf, {"id": "x", "title": "Y"}, TODAY)
    assert any("already exists" in e for e in errors)


def test_update_habit():
    hf = HabitsFile(habits=[Habit(id="x", title="X")])
    updated, errors = update_habit(hf, "x", {"title": "Renamed", "frequency": "weekly"})
    assert errors == []
    assert updated.title == "Renamed"
    assert find_habit(hf, "x").frequency == HabitFrequency.WEEKLY


def test_update_habit_rejects_history_edit():
    hf = HabitsFile(habits=[Habit(id="x", title="X")])
    _, errors = update_habit(hf, "x", {"completionHistory": [{"date": "2026-01-01"}]})
    assert errors
    assert find_habit(hf, "x").completion_history == []


def test_update_habit_not_found():
    _, errors = update_habit(HabitsFile(), "missing", {"title": "Y"})
    assert any("not found" in e for e in errors)


def test_update_habit_invalid():
    hf = HabitsFile(habits=[Habit(id="x", title="X")])
    _, errors = update_habit(hf, "x", {"timeOfDay": "midnight"})
    assert any("timeOfDay" in e for e in errors)


def test_delete_and_archive():
    hf = HabitsFile(habits=[Habit(id="a", title="A"), Habit(id="b", title="B")])
    assert archive_habit(hf, "a")
    assert [h.id for h in active_habits(hf)] == ["b"]
    assert [h.id for h in archived_habits(hf)] == ["a"]
    assert delete_habit(hf, "b")
    assert not delete_habit(hf, "b")
    assert not archive_habit(hf, "b")


def test_complete_habit():
    hf = HabitsFile(habits=[Habit(id="a", title="A")])
    habit, errors = complete_habit(hf, "a", TODAY, "felt good")
    assert errors == []
    assert habit.completion_history == [HabitCompletion(date=TODAY, note="felt good")]


def test_complete_habit_twice_same_day_rejected():
    hf = HabitsFile(habits=[Habit(id="a", title="A")])
    complete_habit(hf, "a", TODAY)
    habit, errors = complete_habit(hf, "a", TODAY)
    assert habit is None
    assert any("already completed" in e for e in errors)
    assert len(find_habit(hf, "a").completion_history) == 1


def test_complete_habit_not_found():
    _, errors = complete_habit(HabitsFile(), "missing", TODAY)
    assert any("not found" in e for e in errors)


def test_filters(workspace):
    hf = load_habits(workspace)
    assert [h.id for h in habits_by_category(hf, HabitCategory.HEALTH)] == ["h-gym"]
    assert [h.id for h in habits_by_time_of_day(hf, HabitTimeOfDay.MORNING)] == ["h-read"]
    assert [h.id for h in habits_by_frequency(hf, HabitFrequency.DAILY)] == ["h-read"]
    assert habits_by_category(hf, HabitCategory.PERSONAL) == []  # archived excluded
    assert [h.id for h in habits_for_today(hf, TODAY)] == ["h-gym"]
    assert [h.id for h in overdue_habits(hf, TODAY)] == ["h-gym"]


def test_habits_for_goal():
    hf = HabitsFile(habits=[Habit(id="a", title="A", goal_id="g1"), Habit(id="b", title="B")])
    assert [h.id for h in habits_for_goal(hf, "g1")] == ["a"]


def test_habit_with_stats(workspace):
    hf = load_habits(workspace)
    d = habit_with_stats(find_habit(hf, "h-read"), TODAY)
    assert d["currentStreak"] == 3
    assert d["longestStreak"] == 3
    assert d["completionRate"] == 0.3
    assert d["isCompletedToday"] is True
    assert d["isOverdue"] is False
    assert d["nextDueDate"] == "2026-01-11"
    assert [c["date"] for c in d["completionHistory"]] == ["2026-01-10", "2026-01-09", "2026-01-08"]


def test_get_habits_with_stats(workspace):
    hf = load_habits(workspace)
    assert [d["id"] for d in get_habits_with_stats(hf, TODAY)] == ["h-read", "h-gym"]
    assert len(get_habits_with_stats(hf, TODAY, include_archived=True)) == 3


def test_save_and_reload(workspace):
    hf = load_habits(workspace)
    complete_habit(hf, "h-gym", TODAY)
    save_habits(hf, workspace)
    again = find_habit(load_habits(workspace), "h-gym")
    assert [c.date for c in again.completion_history] == [date(2026, 1, 2), TODAY]


def test_validate_habit_bad_dates():
    assert any("createdAt" in e for e in validate_habit({"id": "h1", "title": "X", "createdAt": "not-a-date"}))
    errors = validate_habit({"id": "h1", "title": "X", "completionHistory": [{"note": "no date"}]})
    assert any("completionHistory[0]" in e for e in errors)
    assert validate_habit({"id": "h1", "title": "X", "completionHistory": "2026-01-05"})


def test_create_habit_bad_created_at():
    hf = HabitsFile()
    _, errors = create_habit(hf, {"id": "h1", "title": "X", "createdAt": "not-a-date"}, TODAY)
    assert errors
    assert hf.habits == []


def test_create_habit_rejects_duplicate_history_days():
    hf = HabitsFile()
    data = {
        "id": "h1",
        "title": "X",
        "completionHistory": [{"date": "2026-01-05"}, {"date": "2026-01-05T18:00:00"}],
    }
    _, errors = create_habit(hf, data, TODAY)
    assert any("more than one completion" in e for e in errors)
    assert hf.habits == []


def test_create_habit_with_valid_history():
    hf = HabitsFile()
    data = {"id": "h1", "title": "X", "completionHistory": [{"date": "2026-01-04"}, {"date": "2026-01-05"}]}
    habit, errors = create_habit(hf, data, TODAY)
    assert errors == []
    assert len(habit.completion_history) == 2


def test_update_habit_bad_created_at():
    hf = HabitsFile(habits=[Habit(id="x", title="X", created_at=TODAY)])
    updated, errors = update_habit(hf, "x", {"createdAt": "garbage"})
    assert updated is None
    assert any("createdAt" in e for e in errors)
    assert find_habit(hf, "x").created_at == TODAY


def test_habit_with_stats_category_display(workspace):
    d = habit_with_stats(find_habit(load_habits(workspace), "h-gym"), TODAY)
    assert d["categoryLabel"] == "Health"
    assert d["categoryEmoji"] == HabitCategory.HEALTH.emoji


def test_load_habits_skips_bad_record(workspace):
    path = workspace / "habits" / "habits.yaml"
    path.write_text(
        path.read_text(encoding="utf-8") + "- id: h-broken\n  title: Broken\n  createdAt: someday\n",
        encoding="utf-8",
    )
    assert [h.id for h in load_habits(workspace).habits] == ["h-read", "h-gym", "h-old"]
