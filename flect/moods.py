"""Mood lexicon: display glyphs/labels and tolerant parsing for moods.

The table is exhaustive over ``Mood``; lookups for a missing or
unrecognized mood fall back to the unknown glyph/label and never raise.
"""

from __future__ import annotations

from typing import Any

from flect.models import Mood

UNKNOWN_GLYPH = "❔"
UNKNOWN_LABEL = "Unknown"

MOOD_TABLE: dict[Mood, tuple[str, str]] = {
    Mood.NEUTRAL: ("\U0001f610", "Neutral"),
    Mood.FOCUSED: ("\U0001f3af", "Focused"),
    Mood.RELAXED: ("\U0001f60c", "Relaxed"),
    Mood.STRESSED: ("\U0001f630", "Stressed"),
    Mood.ANXIOUS: ("\U0001f61f", "Anxious"),
    Mood.EXCITED: ("\U0001f680", "Excited"),
    Mood.HAPPY: ("\U0001f60a", "Happy"),
    Mood.SAD: ("\U0001f622", "Sad"),
    Mood.ANGRY: ("\U0001f620", "Angry"),
    Mood.CALM: ("\U0001f9d8", "Calm"),
    Mood.MOTIVATED: ("\U0001f4aa", "Motivated"),
    Mood.TIRED: ("\U0001f634", "Tired"),
    Mood.GRATEFUL: ("\U0001f64f", "Grateful"),
}

# Older entries stored the glyph itself as the mood value.
_BY_GLYPH: dict[str, Mood] = {glyph: mood for mood, (glyph, _label) in MOOD_TABLE.items()}


def glyph_for(mood: Mood | None) -> str:
    if mood is None:
        return UNKNOWN_GLYPH
    return MOOD_TABLE.get(mood, (UNKNOWN_GLYPH, UNKNOWN_LABEL))[0]


def label_for(mood: Mood | None) -> str:
    if mood is None:
        return UNKNOWN_LABEL
    return MOOD_TABLE.get(mood, (UNKNOWN_GLYPH, UNKNOWN_LABEL))[1]


def parse_mood(raw: Any) -> Mood | None:
    """Parse free-text input into a Mood, or None if it is not in the closed set.

    Accepts the mood identifier or its label (case-insensitive) or its glyph.
    """
    if isinstance(raw, Mood):
        return raw
    if not isinstance(raw, str):
        return None
    text = raw.strip()
    if not text:
        return None
    if text in _BY_GLYPH:
        return _BY_GLYPH[text]
    key = text.casefold()
    for mood, (_glyph, label) in MOOD_TABLE.items():
        if key == mood.value or key == label.casefold():
            return mood
    return None


def display(mood: Mood | None) -> str:
    """Glyph and label joined for list rows and filter chips."""
    return f"{glyph_for(mood)} {label_for(mood)}"


def all_moods() -> list[tuple[Mood, str, str]]:
    """Rows of (mood, glyph, label) in declaration order, for pickers."""
    return [(mood, *MOOD_TABLE[mood]) for mood in Mood]
