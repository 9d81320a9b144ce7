"""Shared test fixtures for Flect tests."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest
import yaml


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create a temporary workspace with profile, journal and habits."""
    root = tmp_path / "workspace"
    (root / "journal").mkdir(parents=True)
    (root / "habits").mkdir(parents=True)

    # Profile
    profile = {
        "display_name": "Sam",
        "timezone": "UTC",
        "reminder_time": "20:00",
        "notifications_enabled": True,
    }
    (root / "profile.yaml").write_text(
        yaml.dump(profile, default_flow_style=False), encoding="utf-8"
    )

    # Journal
    journal = {
        "entries": [
            {
                "id": "entry-jan5",
                "date": "2026-01-05T09:00:00",
                "mood": "happy",
                "reflection": "Great day at the park.",
                "progressNotes": "Finished the quarterly review draft.",
                "extractedTasks": [
                    {"id": "task-goals", "title": "Review quarterly goals", "isCompleted": False, "priority": "high"},
                    {"id": "task-mom", "title": "Call mom", "isCompleted": True, "priority": "medium"},
                ],
                "originalBrainDump": "Need to review quarterly goals and call mom.",
            },
            {
                "id": "entry-jan3",
                "date": "2026-01-03T21:15:00",
                "mood": "sad",
                "reflection": "Rough day.",
                "progressNotes": "",
                "extractedTasks": [
                    {"id": "task-weekend", "title": "Plan weekend activities", "isCompleted": False, "priority": "low"},
                ],
                "originalBrainDump": "Feeling low, should plan the weekend.",
            },
            {
                "id": "entry-jan4",
                "date": "2026-01-04T08:00:00",
                "mood": None,
                "reflection": "Quiet morning.",
                "progressNotes": "",
                "extractedTasks": [],
                "originalBrainDump": "Coffee and reading.",
            },
        ]
    }
    (root / "journal" / "entries.json").write_text(
        json.dumps(journal, indent=2), encoding="utf-8"
    )

    # Habits
    habits = {
        "habits": [
            {
                "id": "h-read",
                "title": "Read 20 pages",
                "description": "Evening reading",
                "category": "learning",
                "frequency": "daily",
                "timeOfDay": "morning",
                "source": "manual",
                "createdAt": "2026-01-01",
                "completionHistory": [
                    {"date": "2026-01-08"},
                    {"date": "2026-01-09", "note": "fiction"},
                    {"date": "2026-01-10"},
                ],
                "isArchived": False,
            },
            {
                "id": "h-gym",
                "title": "Gym session",
                "description": "",
                "category": "health",
                "frequency": "weekly",
                "timeOfDay": "evening",
                "source": "ai_suggested",
                "createdAt": "2026-01-01",
                "completionHistory": [{"date": "2026-01-02"}],
                "isArchived": False,
            },
            {
                "id": "h-old",
                "title": "Old habit",
                "category": "personal",
                "frequency": "daily",
                "createdAt": "2025-12-01",
                "completionHistory": [{"date": "2026-01-01"}],
                "isArchived": True,
            },
        ]
    }
    (root / "habits" / "habits.yaml").write_text(
        yaml.dump(habits, default_flow_style=False, sort_keys=False), encoding="utf-8"
    )

    # Set env var
    os.environ["FLECT_ROOT"] = str(root)
    yield root
    # Cleanup
    if "FLECT_ROOT" in os.environ:
        del os.environ["FLECT_ROOT"]
