"""Workspace root, timezone, logging and path helpers for Flect."""

from __future__ import annotations

import logging
import os
import re
from datetime import date, datetime
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from flect.fileio import read_yaml, write_yaml_atomic
from flect.models import Profile

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def workspace_root() -> Path:
    """Get the workspace root directory (contains profile.yaml, journal/, habits/)."""
    return Path(
        os.environ.get("FLECT_ROOT", str(Path.home() / "flect"))
    ).expanduser().resolve()


def configure_logging(level: str | None = None, log_file: Path | None = None) -> None:
    """Configure root logging for a surface (API or TUI) from FLECT_LOG_LEVEL.

    With *log_file*, records go to that file instead of stderr.
    """
    name = (level or os.environ.get("FLECT_LOG_LEVEL", "INFO")).upper()
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers: list[logging.Handler] = [logging.FileHandler(log_file, encoding="utf-8")]
    else:
        handlers = [logging.StreamHandler()]
    logging.basicConfig(level=getattr(logging, name, logging.INFO), format=LOG_FORMAT, handlers=handlers)


def log_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "flect.log"


def get_user_timezone(root: Path | None = None) -> ZoneInfo:
    """Get user's timezone from profile.yaml, defaulting to UTC."""
    if root is None:
        root = workspace_root()
    tz_name = load_profile(root).timezone
    if tz_name:
        try:
            return ZoneInfo(tz_name)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning("Unknown timezone %r in profile, using UTC", tz_name)
    return ZoneInfo("UTC")


def now_local(root: Path | None = None) -> datetime:
    """Get current datetime in user's timezone."""
    return datetime.now(get_user_timezone(root))


def today_local(root: Path | None = None) -> date:
    """Get today's calendar date in user's timezone."""
    return now_local(root).date()


# ── Path helpers ──────────────────────────────────────────────

def profile_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "profile.yaml"


def journal_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "journal" / "entries.json"


def habits_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "habits" / "habits.yaml"


# ── Profile settings ──────────────────────────────────────────

def load_profile(root: Path | None = None) -> Profile:
    return Profile.from_dict(read_yaml(profile_path(root)))


def save_profile(profile: Profile, root: Path | None = None) -> None:
    write_yaml_atomic(profile_path(root), profile.to_dict())


def validate_profile(data: dict[str, Any]) -> list[str]:
    """Validate profile settings and return list of errors (empty if valid)."""
    errors = []
    tz_name = data.get("timezone")
    if tz_name is not None:
        try:
            ZoneInfo(str(tz_name))
        except (ZoneInfoNotFoundError, ValueError):
            errors.append(f"Unknown timezone: {tz_name}")
    reminder = data.get("reminder_time")
    if reminder is not None and not re.fullmatch(r"([01]\d|2[0-3]):[0-5]\d", str(reminder)):
        errors.append("reminder_time must be HH:MM")
    if "notifications_enabled" in data and not isinstance(data["notifications_enabled"], bool):
        errors.append("notifications_enabled must be a boolean")
    return errors
