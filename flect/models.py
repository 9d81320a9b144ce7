"""Typed dataclasses and enums for the Flect data model.

All records use from_dict/to_dict for JSON/YAML serialization.
camelCase in JSON/YAML is mapped to snake_case in Python.
Unknown keys are ignored; missing keys use defaults; unknown enum
strings fall back to the field default (mood falls back to None).
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


# ── Enumerations ──────────────────────────────────────────────


class Mood(str, Enum):
    NEUTRAL = "neutral"
    FOCUSED = "focused"
    RELAXED = "relaxed"
    STRESSED = "stressed"
    ANXIOUS = "anxious"
    EXCITED = "excited"
    HAPPY = "happy"
    SAD = "sad"
    ANGRY = "angry"
    CALM = "calm"
    MOTIVATED = "motivated"
    TIRED = "tired"
    GRATEFUL = "grateful"


class TaskPriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class HabitFrequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    WEEKDAYS = "weekdays"
    MONTHLY = "monthly"


class HabitTimeOfDay(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    ANYTIME = "anytime"


class HabitSource(str, Enum):
    MANUAL = "manual"
    AI_SUGGESTED = "ai_suggested"
    GOAL_DERIVED = "goal_derived"
    PATTERN_BASED = "pattern_based"


class HabitCategory(str, Enum):
    WORK = "work"
    HEALTH = "health"
    LEARNING = "learning"
    RELATIONSHIPS = "relationships"
    FINANCE = "finance"
    MINDFULNESS = "mindfulness"
    PERSONAL = "personal"

    @property
    def emoji(self) -> str:
        return CATEGORY_EMOJI[self]

    @property
    def label(self) -> str:
        return self.value.capitalize()


CATEGORY_EMOJI: dict[HabitCategory, str] = {
    HabitCategory.WORK: "\U0001f4bc",
    HabitCategory.HEALTH: "\U0001f3c3",
    HabitCategory.LEARNING: "\U0001f4da",
    HabitCategory.RELATIONSHIPS: "❤️",
    HabitCategory.FINANCE: "\U0001f4b0",
    HabitCategory.MINDFULNESS: "\U0001f9d8",
    HabitCategory.PERSONAL: "\U0001f464",
}


def enum_value(cls: type[E], raw: Any, default: E) -> E:
    """Coerce *raw* into member of *cls* by value (case-insensitive), else *default*."""
    if isinstance(raw, cls):
        return raw
    if isinstance(raw, str):
        key = raw.strip().lower()
        for member in cls:
            if member.value == key:
                return member
    return default


# ── Date coercion ─────────────────────────────────────────────


def to_date(raw: Any) -> date:
    """Coerce a date, datetime or ISO string to a calendar day."""
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    if isinstance(raw, str):
        text = raw.strip()
        if "T" in text or " " in text:
            return datetime.fromisoformat(text).date()
        return date.fromisoformat(text)
    raise ValueError(f"Invalid date: {raw!r}")


def to_datetime(raw: Any) -> datetime:
    """Coerce a datetime, date or ISO string to a datetime."""
    if isinstance(raw, datetime):
        return raw
    if isinstance(raw, date):
        return datetime(raw.year, raw.month, raw.day)
    if isinstance(raw, str):
        return datetime.fromisoformat(raw.strip())
    raise ValueError(f"Invalid datetime: {raw!r}")


def new_id() -> str:
    return str(uuid.uuid4())


def _decode_records(cls: Any, items: Any, kind: str) -> list[Any]:
    """Decode stored records one by one, skipping any that fail to decode."""
    records = []
    for i, item in enumerate(items or []):
        if not isinstance(item, dict):
            continue
        try:
            records.append(cls.from_dict(item))
        except ValueError as e:
            logger.warning("Skipping %s #%d (id=%s): %s", kind, i, item.get("id"), e)
    return records


# ── Journal ───────────────────────────────────────────────────


@dataclass(frozen=True)
class TaskItem:
    id: str = field(default_factory=new_id)
    title: str = ""
    is_completed: bool = False
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: date | None = None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> TaskItem:
        due = d.get("dueDate", d.get("due_date"))
        return cls(
            id=str(d.get("id") or new_id()),
            title=str(d.get("title", "")),
            is_completed=bool(d.get("isCompleted", d.get("is_completed", False))),
            priority=enum_value(TaskPriority, d.get("priority"), TaskPriority.MEDIUM),
            due_date=to_date(due) if due else None,
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "isCompleted": self.is_completed,
            "priority": self.priority.value,
        }
        if self.due_date:
            d["dueDate"] = self.due_date.isoformat()
        return d


@dataclass(frozen=True)
class JournalEntry:
    """An AI-processed brain dump. Never mutated after creation."""

    id: str = field(default_factory=new_id)
    date: datetime = field(default_factory=datetime.now)
    mood: Mood | None = None
    reflection: str = ""
    progress_notes: str = ""
    extracted_tasks: tuple[TaskItem, ...] = ()
    original_brain_dump: str = ""

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> JournalEntry:
        from flect.moods import parse_mood

        raw_date = d.get("date")
        tasks = d.get("extractedTasks", d.get("extracted_tasks")) or []
        return cls(
            id=str(d.get("id") or new_id()),
            date=to_datetime(raw_date) if raw_date else datetime.now(),
            mood=parse_mood(d.get("mood")),
            reflection=str(d.get("reflection", "") or ""),
            progress_notes=str(d.get("progressNotes", d.get("progress_notes", "")) or ""),
            extracted_tasks=tuple(TaskItem.from_dict(t) for t in tasks if isinstance(t, dict)),
            original_brain_dump=str(d.get("originalBrainDump", d.get("original_brain_dump", "")) or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "date": self.date.isoformat(timespec="seconds"),
            "mood": self.mood.value if self.mood else None,
            "reflection": self.reflection,
            "progressNotes": self.progress_notes,
            "extractedTasks": [t.to_dict() for t in self.extracted_tasks],
            "originalBrainDump": self.original_brain_dump,
        }


@dataclass
class JournalFile:
    entries: list[JournalEntry] = field(default_factory=list)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> JournalFile:
        if not d or not isinstance(d, dict):
            return cls()
        return cls(entries=_decode_records(JournalEntry, d.get("entries"), "journal entry"))

    def to_dict(self) -> dict[str, Any]:
        return {"entries": [e.to_dict() for e in self.entries]}


# ── Habits ────────────────────────────────────────────────────


@dataclass(frozen=True)
class HabitCompletion:
    """A habit is completed for a calendar day, not an instant."""

    date: date
    note: str | None = None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> HabitCompletion:
        note = d.get("note")
        return cls(date=to_date(d.get("date")), note=str(note) if note else None)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"date": self.date.isoformat()}
        if self.note:
            d["note"] = self.note
        return d


@dataclass
class Habit:
    id: str = field(default_factory=new_id)
    title: str = ""
    description: str = ""
    category: HabitCategory = HabitCategory.PERSONAL
    frequency: HabitFrequency = HabitFrequency.DAILY
    time_of_day: HabitTimeOfDay = HabitTimeOfDay.ANYTIME
    source: HabitSource = HabitSource.MANUAL
    goal_id: str | None = None
    created_at: date | None = None
    completion_history: list[HabitCompletion] = field(default_factory=list)
    is_archived: bool = False

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Habit:
        created = d.get("createdAt", d.get("created_at"))
        history = d.get("completionHistory", d.get("completion_history")) or []
        goal_id = d.get("goalId", d.get("goal_id"))
        return cls(
            id=str(d.get("id") or new_id()),
            title=str(d.get("title", "")),
            description=str(d.get("description", "") or ""),
            category=enum_value(HabitCategory, d.get("category"), HabitCategory.PERSONAL),
            frequency=enum_value(HabitFrequency, d.get("frequency"), HabitFrequency.DAILY),
            time_of_day=enum_value(
                HabitTimeOfDay, d.get("timeOfDay", d.get("time_of_day")), HabitTimeOfDay.ANYTIME
            ),
            source=enum_value(HabitSource, d.get("source"), HabitSource.MANUAL),
            goal_id=str(goal_id) if goal_id else None,
            created_at=to_date(created) if created else None,
            completion_history=[HabitCompletion.from_dict(c) for c in history if isinstance(c, dict)],
            is_archived=bool(d.get("isArchived", d.get("is_archived", False))),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "category": self.category.value,
            "frequency": self.frequency.value,
            "timeOfDay": self.time_of_day.value,
            "source": self.source.value,
        }
        if self.goal_id:
            d["goalId"] = self.goal_id
        if self.created_at:
            d["createdAt"] = self.created_at.isoformat()
        d["completionHistory"] = [c.to_dict() for c in self.completion_history]
        d["isArchived"] = self.is_archived
        return d


@dataclass
class HabitsFile:
    habits: list[Habit] = field(default_factory=list)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> HabitsFile:
        if not d or not isinstance(d, dict):
            return cls()
        return cls(habits=_decode_records(Habit, d.get("habits"), "habit"))

    def to_dict(self) -> dict[str, Any]:
        return {"habits": [h.to_dict() for h in self.habits]}


# ── Derived values ────────────────────────────────────────────


@dataclass(frozen=True)
class HabitStats:
    current_streak: int = 0
    longest_streak: int = 0
    completion_rate: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "currentStreak": self.current_streak,
            "longestStreak": self.longest_streak,
            "completionRate": round(self.completion_rate, 3),
        }


@dataclass(frozen=True)
class TaskGroups:
    pending: tuple[TaskItem, ...] = ()
    completed: tuple[TaskItem, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "pending": [t.to_dict() for t in self.pending],
            "completed": [t.to_dict() for t in self.completed],
        }


@dataclass
class BreakdownRow:
    key: str = ""
    total_habits: int = 0
    completion_rate: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "totalHabits": self.total_habits,
            "completionRate": round(self.completion_rate, 3),
        }


@dataclass
class HabitAnalytics:
    total_habits: int = 0
    completed_today: int = 0
    overdue_habits: int = 0
    average_streak: float = 0.0
    longest_streak: int = 0
    category_breakdown: list[BreakdownRow] = field(default_factory=list)
    time_of_day_breakdown: list[BreakdownRow] = field(default_factory=list)
    frequency_breakdown: list[BreakdownRow] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalHabits": self.total_habits,
            "completedToday": self.completed_today,
            "overdueHabits": self.overdue_habits,
            "averageStreak": round(self.average_streak, 2),
            "longestStreak": self.longest_streak,
            "categoryBreakdown": [r.to_dict() for r in self.category_breakdown],
            "timeOfDayBreakdown": [r.to_dict() for r in self.time_of_day_breakdown],
            "frequencyBreakdown": [r.to_dict() for r in self.frequency_breakdown],
        }


# ── Profile ───────────────────────────────────────────────────


@dataclass
class Profile:
    display_name: str = ""
    timezone: str = "UTC"
    reminder_time: str = "20:00"
    notifications_enabled: bool = True

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Profile:
        if not d or not isinstance(d, dict):
            return cls()
        return cls(
            display_name=str(d.get("display_name", "") or ""),
            timezone=str(d.get("timezone", "UTC") or "UTC"),
            reminder_time=str(d.get("reminder_time", "20:00") or "20:00"),
            notifications_enabled=bool(d.get("notifications_enabled", True)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "display_name": self.display_name,
            "timezone": self.timezone,
            "reminder_time": self.reminder_time,
            "notifications_enabled": self.notifications_enabled,
        }
