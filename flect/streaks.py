"""Habit streak, longest-streak and completion-rate derivation.

Completions are normalized to unique calendar days and then to unique
*periods* for the habit's frequency:

    daily     one period per calendar day
    weekly    one period per Monday-based calendar week
    weekdays  one period per business day; a weekend completion counts
              for the Friday before it
    monthly   one period per calendar month

A streak is a run of adjacent periods. It stays alive while the latest
completed period is the current one or the one just before it, so a
habit that has not been done yet today (this week, ...) does not lose its
streak until the period is over. Missing one whole period resets it.
"""

from __future__ import annotations

import calendar
from collections.abc import Iterable
from datetime import date, timedelta

from flect.models import Habit, HabitCompletion, HabitFrequency, HabitStats, to_date


def period_index(day: date, frequency: HabitFrequency) -> int:
    """Map a calendar day to a monotonically increasing period number."""
    ordinal = day.toordinal()
    # date(1, 1, 1) is a Monday, so (ordinal - 1) // 7 counts Monday-based weeks
    week = (ordinal - 1) // 7
    if frequency == HabitFrequency.WEEKLY:
        return week
    if frequency == HabitFrequency.WEEKDAYS:
        return week * 5 + min(day.weekday(), 4)
    if frequency == HabitFrequency.MONTHLY:
        return day.year * 12 + day.month - 1
    return ordinal


def completion_days(history: Iterable[HabitCompletion]) -> list[date]:
    """Unique completion days, oldest first."""
    return sorted({to_date(c.date) for c in history})


def is_completed_on(history: Iterable[HabitCompletion], day: date) -> bool:
    return any(to_date(c.date) == day for c in history)


def compute_streaks(
    history: Iterable[HabitCompletion],
    frequency: HabitFrequency,
    today: date,
    created_at: date | None = None,
) -> HabitStats:
    """Compute current streak, longest streak and completion rate as of *today*.

    Same-day duplicates count once and completions dated after *today* are
    ignored. The completion rate is completed periods over expected periods
    from the earlier of *created_at* and the first completion through today,
    clamped to [0, 1].
    """
    today_period = period_index(today, frequency)
    periods = sorted({
        p for p in (period_index(d, frequency) for d in completion_days(history))
        if p <= today_period
    })
    if not periods:
        return HabitStats()

    longest = run = 1
    for prev, cur in zip(periods, periods[1:]):
        run = run + 1 if cur == prev + 1 else 1
        longest = max(longest, run)

    current = 0
    if today_period - periods[-1] <= 1:
        current = 1
        for i in range(len(periods) - 1, 0, -1):
            if periods[i] - periods[i - 1] != 1:
                break
            current += 1

    start = periods[0]
    if created_at is not None:
        start = min(start, period_index(created_at, frequency))
    expected = today_period - start + 1
    rate = min(1.0, len(periods) / expected)

    return HabitStats(current_streak=current, longest_streak=longest, completion_rate=rate)


def habit_stats(habit: Habit, today: date) -> HabitStats:
    return compute_streaks(habit.completion_history, habit.frequency, today, habit.created_at)


# ── Due dates ─────────────────────────────────────────────────


def _add_month(day: date) -> date:
    year, month = (day.year + 1, 1) if day.month == 12 else (day.year, day.month + 1)
    last = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last))


def next_due_date(history: Iterable[HabitCompletion], frequency: HabitFrequency) -> date | None:
    """Day the habit is next due after its latest completion; None if never completed."""
    days = completion_days(history)
    if not days:
        return None
    last = days[-1]
    if frequency == HabitFrequency.WEEKLY:
        return last + timedelta(days=7)
    if frequency == HabitFrequency.MONTHLY:
        return _add_month(last)
    nxt = last + timedelta(days=1)
    if frequency == HabitFrequency.WEEKDAYS:
        while nxt.weekday() >= 5:
            nxt += timedelta(days=1)
    return nxt


def is_overdue(history: Iterable[HabitCompletion], frequency: HabitFrequency, today: date) -> bool:
    """A never-completed habit is due today, not overdue."""
    due = next_due_date(history, frequency)
    return due is not None and due < today
