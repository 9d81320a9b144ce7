from __future__ import annotations

import logging
import os
import secrets
from datetime import date
from typing import Any

from fastapi import Body, Depends, FastAPI, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from flect import (
    Mood,
    Profile,
    add_entry,
    all_moods,
    archive_habit,
    complete_habit,
    compute_habit_analytics,
    configure_logging,
    count_completed,
    count_pending,
    create_habit,
    delete_entry,
    delete_habit,
    filter_entries,
    find_entry,
    find_habit,
    get_habits_with_stats,
    glyph_for,
    group_tasks,
    habit_stats,
    habits_for_today,
    label_for,
    load_habits,
    load_journal,
    load_profile,
    parse_mood,
    save_habits,
    save_journal,
    save_profile,
    sort_by_priority,
    today_local,
    update_habit,
    validate_profile,
    workspace_root as _workspace_root,
)
from flect.habits import habit_with_stats
from flect.models import JournalEntry, new_id, to_date

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Flect API", version="0.1.0")


# ── Helpers ───────────────────────────────────────────────────

def _entry_payload(entry: JournalEntry) -> dict[str, Any]:
    d = entry.to_dict()
    d["moodGlyph"] = glyph_for(entry.mood)
    d["moodLabel"] = label_for(entry.mood)
    return d


def _parse_mood_param(mood: str | None) -> Mood | None:
    if not mood:
        return None
    parsed = parse_mood(mood)
    if parsed is None:
        raise HTTPException(status_code=400, detail=f"Unknown mood: {mood}")
    return parsed


def _parse_day(raw: Any, default: date) -> date:
    if not raw:
        return default
    try:
        return to_date(raw)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid date: {raw}")


# ── Auth ──────────────────────────────────────────────────────

security = HTTPBasic(auto_error=False)


def get_current_user(credentials: HTTPBasicCredentials | None = Depends(security)) -> str:
    expected_username = os.environ.get("FLECT_USERNAME", "")
    expected_password = os.environ.get("FLECT_PASSWORD", "")

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


@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"ok": "true"}


# ── Moods ─────────────────────────────────────────────────────

@app.get("/api/moods")
def api_moods(username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Closed mood set with glyphs and labels, for filter chips and pickers."""
    return {"moods": [{"mood": m.value, "glyph": g, "label": lbl} for m, g, lbl in all_moods()]}


# ── Journal entries ───────────────────────────────────────────

@app.get("/api/entries")
def api_list_entries(
    q: str = "",
    mood: str | None = None,
    username: str = Depends(get_current_user),
) -> dict[str, Any]:
    """Entries filtered by search text and mood, newest first."""
    journal = load_journal(_workspace_root())
    entries = filter_entries(journal.entries, q, _parse_mood_param(mood))
    return {"count": len(entries), "entries": [_entry_payload(e) for e in entries]}


@app.post("/api/entries")
def api_create_entry(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Store a finished entry produced by the brain-dump processing service."""
    root = _workspace_root()
    journal = load_journal(root)
    entry, errors = add_entry(journal, payload)
    if errors:
        raise HTTPException(status_code=400, detail="; ".join(errors))
    save_journal(journal, root)
    return {"ok": True, "entry": _entry_payload(entry)}


@app.get("/api/entries/{entry_id}")
def api_get_entry(entry_id: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    entry = find_entry(load_journal(_workspace_root()), entry_id)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"Entry not found: {entry_id}")
    return _entry_payload(entry)


@app.get("/api/entries/{entry_id}/tasks")
def api_entry_tasks(
    entry_id: str,
    sort: str = "original",
    username: str = Depends(get_current_user),
) -> dict[str, Any]:
    """An entry's extracted tasks grouped into pending/completed."""
    entry = find_entry(load_journal(_workspace_root()), entry_id)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"Entry not found: {entry_id}")
    tasks = list(entry.extracted_tasks)
    if sort == "priority":
        tasks = sort_by_priority(tasks)
    return group_tasks(tasks).to_dict()


@app.delete("/api/entries/{entry_id}")
def api_delete_entry(entry_id: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    root = _workspace_root()
    journal = load_journal(root)
    if not delete_entry(journal, entry_id):
        raise HTTPException(status_code=404, detail=f"Entry not found: {entry_id}")
    save_journal(journal, root)
    return {"ok": True, "entry_id": entry_id}


@app.get("/api/tasks/summary")
def api_task_summary(username: str = Depends(get_current_user)) -> dict[str, int]:
    """Pending/completed task counts across every entry."""
    entries = load_journal(_workspace_root()).entries
    return {"pending": count_pending(entries), "completed": count_completed(entries)}


# ── Habits ────────────────────────────────────────────────────

@app.get("/api/habits")
def api_list_habits(archived: bool = False, username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Active habits (or archived ones) with derived streak fields."""
    root = _workspace_root()
    habits_file = load_habits(root)
    today = today_local(root)
    if archived:
        rows = [habit_with_stats(h, today) for h in habits_file.habits if h.is_archived]
    else:
        rows = get_habits_with_stats(habits_file, today)
    return {"count": len(rows), "habits": rows}


@app.get("/api/habits/today")
def api_habits_today(username: str = Depends(get_current_user)) -> dict[str, Any]:
    root = _workspace_root()
    today = today_local(root)
    pending = habits_for_today(load_habits(root), today)
    return {"day": today.isoformat(), "habits": [habit_with_stats(h, today) for h in pending]}


@app.get("/api/habits/analytics")
def api_habit_analytics(username: str = Depends(get_current_user)) -> dict[str, Any]:
    root = _workspace_root()
    return compute_habit_analytics(load_habits(root).habits, today_local(root)).to_dict()


@app.post("/api/habits")
def api_create_habit(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    root = _workspace_root()
    habits_file = load_habits(root)
    payload.setdefault("id", new_id())
    habit, errors = create_habit(habits_file, payload, today_local(root))
    if errors:
        raise HTTPException(status_code=400, detail="; ".join(errors))
    save_habits(habits_file, root)
    return {"ok": True, "habit": habit.to_dict()}


@app.put("/api/habits/{habit_id}")
def api_update_habit(habit_id: str, payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    root = _workspace_root()
    habits_file = load_habits(root)
    if find_habit(habits_file, habit_id) is None:
        raise HTTPException(status_code=404, detail=f"Habit not found: {habit_id}")
    updated, errors = update_habit(habits_file, habit_id, payload)
    if errors:
        raise HTTPException(status_code=400, detail="; ".join(errors))
    save_habits(habits_file, root)
    return {"ok": True, "habit": updated.to_dict() if updated else None}


@app.post("/api/habits/{habit_id}/complete")
def api_complete_habit(
    habit_id: str,
    payload: dict[str, Any] = Body(default={}),
    username: str = Depends(get_current_user),
) -> dict[str, Any]:
    """Complete a habit for a day (default today). 409 if that day is already done."""
    root = _workspace_root()
    today = today_local(root)
    day = _parse_day(payload.get("date"), today)
    habits_file = load_habits(root)
    if find_habit(habits_file, habit_id) is None:
        raise HTTPException(status_code=404, detail=f"Habit not found: {habit_id}")
    habit, errors = complete_habit(habits_file, habit_id, day, payload.get("note"))
    if errors or habit is None:
        raise HTTPException(status_code=409, detail="; ".join(errors))
    save_habits(habits_file, root)
    return {"ok": True, "habit": habit_with_stats(habit, today)}


@app.post("/api/habits/{habit_id}/archive")
def api_archive_habit(habit_id: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    root = _workspace_root()
    habits_file = load_habits(root)
    if not archive_habit(habits_file, habit_id):
        raise HTTPException(status_code=404, detail=f"Habit not found: {habit_id}")
    save_habits(habits_file, root)
    return {"ok": True, "habit_id": habit_id}


@app.delete("/api/habits/{habit_id}")
def api_delete_habit(habit_id: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    root = _workspace_root()
    habits_file = load_habits(root)
    if not delete_habit(habits_file, habit_id):
        raise HTTPException(status_code=404, detail=f"Habit not found: {habit_id}")
    save_habits(habits_file, root)
    return {"ok": True, "habit_id": habit_id}


@app.get("/api/habits/{habit_id}/stats")
def api_habit_stats(habit_id: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    root = _workspace_root()
    habit = find_habit(load_habits(root), habit_id)
    if habit is None:
        raise HTTPException(status_code=404, detail=f"Habit not found: {habit_id}")
    return habit_stats(habit, today_local(root)).to_dict()


# ── Profile ───────────────────────────────────────────────────

@app.get("/api/profile")
def api_get_profile(username: str = Depends(get_current_user)) -> dict[str, Any]:
    return load_profile(_workspace_root()).to_dict()


@app.put("/api/profile")
def api_update_profile(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    root = _workspace_root()
    errors = validate_profile(payload)
    if errors:
        raise HTTPException(status_code=400, detail="; ".join(errors))
    merged = load_profile(root).to_dict()
    merged.update({k: v for k, v in payload.items() if k in merged})
    profile = Profile.from_dict(merged)
    save_profile(profile, root)
    logger.info("Profile updated by %s", username)
    return {"ok": True, "profile": profile.to_dict()}
