"""Journal entry search, mood filtering and ordering for the entries list."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date, datetime, timezone

from flect.models import JournalEntry, Mood


def entry_matches(entry: JournalEntry, needle: str) -> bool:
    """True if *needle* (already casefolded) occurs in any searchable field."""
    fields = [entry.reflection, entry.progress_notes, entry.original_brain_dump]
    fields.extend(task.title for task in entry.extracted_tasks)
    return any(needle in (text or "").casefold() for text in fields)


def _sort_key(entry: JournalEntry) -> datetime:
    # aware and naive timestamps are not comparable; aware ones are compared in UTC
    if entry.date.tzinfo is not None:
        return entry.date.astimezone(timezone.utc).replace(tzinfo=None)
    return entry.date


def sort_newest_first(entries: Iterable[JournalEntry]) -> list[JournalEntry]:
    # sorted() is stable with reverse=True, so same-date entries keep input order
    return sorted(entries, key=_sort_key, reverse=True)


def filter_entries(
    entries: Sequence[JournalEntry],
    search_text: str = "",
    mood_filter: Mood | None = None,
) -> list[JournalEntry]:
    """Filter entries by search text and mood, newest first.

    Search is a case-insensitive substring match against reflection,
    progress notes, the original brain dump and every extracted task title
    (OR across fields). The mood filter, when set, is ANDed with the search;
    entries without a mood never match a mood filter.
    """
    needle = (search_text or "").strip().casefold()
    result = []
    for entry in entries:
        if needle and not entry_matches(entry, needle):
            continue
        if mood_filter is not None and entry.mood != mood_filter:
            continue
        result.append(entry)
    return sort_newest_first(result)


def recent_entries(entries: Sequence[JournalEntry], n: int = 5) -> list[JournalEntry]:
    return sort_newest_first(entries)[: max(0, n)]


def todays_entry(entries: Sequence[JournalEntry], today: date) -> JournalEntry | None:
    """Most recent entry written on *today*, or None."""
    for entry in sort_newest_first(entries):
        if entry.date.date() == today:
            return entry
    return None
