"""Tests for flect/entries.py — search, mood filter and ordering."""

from datetime import date, datetime, timezone

from flect.entries import filter_entries, recent_entries, todays_entry
from flect.models import JournalEntry, Mood, TaskItem


def _entries():
    return [
        JournalEntry(id="a", date=datetime(2026, 1, 3, 20, 0), mood=Mood.SAD, reflection="Rough day"),
        JournalEntry(
            id="b",
            date=datetime(2026, 1, 5, 9, 0),
            mood=Mood.HAPPY,
            reflection="Great day",
            extracted_tasks=(TaskItem(title="Book dentist appointment"),),
        ),
        JournalEntry(id="c", date=datetime(2026, 1, 4, 8, 0), progress_notes="Shipped the API"),
        JournalEntry(id="d", date=datetime(2026, 1, 2, 7, 0), original_brain_dump="Too many MEETINGS"),
    ]


def _ids(entries):
    return [e.id for e in entries]


def test_empty_filter_returns_all_newest_first():
    assert _ids(filter_entries(_entries(), "", None)) == ["b", "c", "a", "d"]


def test_whitespace_search_is_treated_as_empty():
    assert _ids(filter_entries(_entries(), "   ", None)) == ["b", "c", "a", "d"]


def test_scenario_day_search_and_mood():
    entries = [
        JournalEntry(id="jan5", date=datetime(2026, 1, 5), mood=Mood.HAPPY, reflection="great day"),
        JournalEntry(id="jan3", date=datetime(2026, 1, 3), mood=Mood.SAD, reflection="rough day"),
    ]
    assert _ids(filter_entries(entries, "day", None)) == ["jan5", "jan3"]
    assert _ids(filter_entries(entries, "day", Mood.SAD)) == ["jan3"]


def test_search_matches_each_field_case_insensitively():
    entries = _entries()
    assert _ids(filter_entries(entries, "DENTIST")) == ["b"]  # task title
    assert _ids(filter_entries(entries, "shipped")) == ["c"]  # progress notes
    assert _ids(filter_entries(entries, "meetings")) == ["d"]  # brain dump
    assert _ids(filter_entries(entries, "rough")) == ["a"]  # reflection


def test_every_result_contains_search_text():
    entries = _entries()
    for needle in ["day", "a", "the", "ING"]:
        for e in filter_entries(entries, needle):
            haystack = [e.reflection, e.progress_notes, e.original_brain_dump]
            haystack += [t.title for t in e.extracted_tasks]
            assert any(needle.lower() in h.lower() for h in haystack)


def test_mood_filter_never_matches_absent_mood():
    entries = _entries()
    assert _ids(filter_entries(entries, "", Mood.HAPPY)) == ["b"]
    assert filter_entries(entries, "", Mood.NEUTRAL) == []


def test_filter_is_idempotent():
    entries = _entries()
    once = filter_entries(entries, "day", Mood.HAPPY)
    assert filter_entries(once, "day", Mood.HAPPY) == once
    once = filter_entries(entries, "", None)
    assert filter_entries(once, "", None) == once


def test_same_date_keeps_input_order():
    ts = datetime(2026, 1, 1, 12, 0)
    entries = [JournalEntry(id=str(i), date=ts) for i in range(5)]
    assert _ids(filter_entries(entries)) == ["0", "1", "2", "3", "4"]


def test_empty_input():
    assert filter_entries([], "anything", Mood.CALM) == []


def test_mixed_naive_and_aware_dates_do_not_fail():
    entries = [
        JournalEntry(id="naive", date=datetime(2026, 1, 1, 10, 0)),
        JournalEntry(id="aware", date=datetime(2026, 1, 2, 10, 0, tzinfo=timezone.utc)),
    ]
    assert _ids(filter_entries(entries)) == ["aware", "naive"]


def test_recent_entries():
    assert _ids(recent_entries(_entries(), 2)) == ["b", "c"]
    assert recent_entries(_entries(), 0) == []


def test_todays_entry():
    entries = _entries()
    assert todays_entry(entries, date(2026, 1, 4)).id == "c"
    assert todays_entry(entries, date(2026, 2, 1)) is None
