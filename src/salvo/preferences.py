"""The one piece of state that survives a restart: whether instructions were shown."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)


class Preferences(BaseModel):
    instructions_seen: bool = False


def load_preferences(path: Path) -> Preferences:
    """Read preferences from ``path``; missing or unreadable files yield defaults."""
    if not path.exists():
        return Preferences()
    try:
        return Preferences.model_validate(json.loads(path.read_text(encoding="utf-8")))
    except (OSError, json.JSONDecodeError, ValidationError) as exc:
        logger.warning("preferences_unreadable", extra={"path": str(path), "error": str(exc)})
        return Preferences()


def save_preferences(preferences: Preferences, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(preferences.model_dump(), indent=2), encoding="utf-8")


def set_instructions_seen(path: Path, seen: bool) -> Preferences:
    preferences = load_preferences(path).model_copy(update={"instructions_seen": seen})
    save_preferences(preferences, path)
    return preferences
