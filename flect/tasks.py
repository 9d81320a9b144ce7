"""Extracted-task grouping, priority ordering and app-wide task counts."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from flect.models import JournalEntry, TaskGroups, TaskItem, TaskPriority

PRIORITY_RANK: dict[TaskPriority, int] = {
    TaskPriority.HIGH: 3,
    TaskPriority.MEDIUM: 2,
    TaskPriority.LOW: 1,
}


def priority_rank(priority: TaskPriority | str | None) -> int:
    """Rank for sorting: high > medium > low; anything else ranks 0."""
    if isinstance(priority, str) and not isinstance(priority, TaskPriority):
        try:
            priority = TaskPriority(priority.strip().lower())
        except ValueError:
            return 0
    return PRIORITY_RANK.get(priority, 0)


def sort_by_priority(tasks: Iterable[TaskItem]) -> list[TaskItem]:
    """Highest priority first; equal priorities keep their original order."""
    return sorted(tasks, key=lambda t: priority_rank(t.priority), reverse=True)


def group_tasks(tasks: Sequence[TaskItem]) -> TaskGroups:
    """Partition tasks into pending and completed, preserving relative order."""
    pending = tuple(t for t in tasks if not t.is_completed)
    completed = tuple(t for t in tasks if t.is_completed)
    return TaskGroups(pending=pending, completed=completed)


# ── Aggregates across entries ─────────────────────────────────


def all_tasks(entries: Iterable[JournalEntry]) -> list[TaskItem]:
    return [task for entry in entries for task in entry.extracted_tasks]


def pending_tasks(entries: Iterable[JournalEntry]) -> list[TaskItem]:
    return [t for t in all_tasks(entries) if not t.is_completed]


def completed_tasks(entries: Iterable[JournalEntry]) -> list[TaskItem]:
    return [t for t in all_tasks(entries) if t.is_completed]


def count_pending(entries: Iterable[JournalEntry]) -> int:
    return sum(1 for entry in entries for t in entry.extracted_tasks if not t.is_completed)


def count_completed(entries: Iterable[JournalEntry]) -> int:
    return sum(1 for entry in entries for t in entry.extracted_tasks if t.is_completed)
