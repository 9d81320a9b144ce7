"""Journal entry store: load/save, validation and append-only CRUD."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from flect.fileio import read_json, write_json_atomic
from flect.models import JournalEntry, JournalFile, TaskPriority
from flect.workspace import journal_path as _journal_path

logger = logging.getLogger(__name__)


# ── Validation ────────────────────────────────────────────────


VALID_PRIORITIES = {p.value for p in TaskPriority}


def validate_entry(entry: dict[str, Any]) -> list[str]:
    """Validate an incoming entry payload and return list of errors (empty if valid)."""
    errors = []
    if "date" not in entry:
        errors.append("Missing required field: date")
    mood = entry.get("mood")
    # unknown moods are tolerated (stored as absent); only the type is checked
    if mood is not None and not isinstance(mood, str):
        errors.append("mood must be a string")
    tasks = entry.get("extractedTasks", [])
    if not isinstance(tasks, list):
        errors.append("extractedTasks must be a list")
    else:
        for i, task in enumerate(tasks):
            if not isinstance(task, dict) or not str(task.get("title", "")).strip():
                errors.append(f"extractedTasks[{i}] is missing a title")
            elif "priority" in task and str(task["priority"]).lower() not in VALID_PRIORITIES:
                errors.append(f"extractedTasks[{i}] has invalid priority: {task['priority']}")
    for key in ("reflection", "progressNotes", "originalBrainDump"):
        if key in entry and not isinstance(entry[key], str):
            errors.append(f"{key} must be a string")
    return errors


# ── Load / save ───────────────────────────────────────────────


def load_journal(root: Path | None = None) -> JournalFile:
    """Load journal/entries.json into a JournalFile model."""
    return JournalFile.from_dict(read_json(_journal_path(root)))


def save_journal(journal_file: JournalFile, root: Path | None = None) -> None:
    """Save JournalFile back to journal/entries.json atomically."""
    write_json_atomic(_journal_path(root), journal_file.to_dict())


# ── CRUD ──────────────────────────────────────────────────────


def list_entries(journal_file: JournalFile) -> list[JournalEntry]:
    return list(journal_file.entries)


def find_entry(journal_file: JournalFile, entry_id: str) -> JournalEntry | None:
    for e in journal_file.entries:
        if e.id == entry_id:
            return e
    return None


def add_entry(journal_file: JournalFile, entry_data: dict[str, Any]) -> tuple[JournalEntry, list[str]]:
    """Create an entry from a processed brain dump and insert it newest-first.

    Returns (entry, errors).
    """
    errors = validate_entry(entry_data)
    if errors:
        return JournalEntry(), errors

    try:
        entry = JournalEntry.from_dict(entry_data)
    except ValueError as e:
        return JournalEntry(), [str(e)]

    if find_entry(journal_file, entry.id):
        return JournalEntry(), [f"Entry ID already exists: {entry.id}"]

    journal_file.entries.insert(0, entry)
    logger.info("Added journal entry %s (%d tasks)", entry.id, len(entry.extracted_tasks))
    return entry, []


def delete_entry(journal_file: JournalFile, entry_id: str) -> bool:
    """Remove an entry by ID. Returns False if it does not exist."""
    for i, e in enumerate(journal_file.entries):
        if e.id == entry_id:
            journal_file.entries.pop(i)
            logger.info("Deleted journal entry %s", entry_id)
            return True
    return False
