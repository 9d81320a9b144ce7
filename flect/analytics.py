"""Habit analytics: totals, streak aggregates and per-dimension breakdowns.

Only active (non-archived) habits are counted. Every member of each
dimension enum gets a breakdown row, zero-filled when it has no habits.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from datetime import date
from enum import Enum

from flect.models import (
    BreakdownRow,
    Habit,
    HabitAnalytics,
    HabitCategory,
    HabitFrequency,
    HabitStats,
    HabitTimeOfDay,
)
from flect.streaks import habit_stats, is_completed_on, is_overdue


def _breakdown(
    members: Iterable[Enum],
    habits: Sequence[Habit],
    stats: dict[str, HabitStats],
    key: Callable[[Habit], Enum],
) -> list[BreakdownRow]:
    rows = []
    for member in members:
        group = [h for h in habits if key(h) == member]
        rate = 0.0
        if group:
            rate = sum(stats[h.id].completion_rate for h in group) / len(group)
        rows.append(BreakdownRow(key=member.value, total_habits=len(group), completion_rate=rate))
    return rows


def compute_habit_analytics(habits: Sequence[Habit], today: date) -> HabitAnalytics:
    """Compute the analytics summary for *habits* as of *today*."""
    active = [h for h in habits if not h.is_archived]
    summary = HabitAnalytics(total_habits=len(active))

    stats = {h.id: habit_stats(h, today) for h in active}

    summary.completed_today = sum(1 for h in active if is_completed_on(h.completion_history, today))
    summary.overdue_habits = sum(1 for h in active if is_overdue(h.completion_history, h.frequency, today))

    if active:
        summary.average_streak = sum(s.current_streak for s in stats.values()) / len(active)
        summary.longest_streak = max(s.longest_streak for s in stats.values())

    summary.category_breakdown = _breakdown(HabitCategory, active, stats, lambda h: h.category)
    summary.time_of_day_breakdown = _breakdown(HabitTimeOfDay, active, stats, lambda h: h.time_of_day)
    summary.frequency_breakdown = _breakdown(HabitFrequency, active, stats, lambda h: h.frequency)
    return summary
