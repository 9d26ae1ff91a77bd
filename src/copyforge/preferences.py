"""Independently keyed local preferences (theme, counters, flags)."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel

logger = logging.getLogger(__name__)

PREFERENCES_FILENAME = ".copyforge-preferences.json"

Theme = Literal["light", "dark"]


class Preferences(BaseModel):
    """Known preference keys and their defaults."""

    theme: Theme = "light"
    generation_count: int = 0
    newsletter_subscribed: bool = False


class PreferencesStore:
    """JSON-backed key/value store, saved after every write."""

    def __init__(self, storage_dir: Path) -> None:
        self._path = storage_dir / PREFERENCES_FILENAME
        self._data = self._load()

    def _load(self) -> Preferences:
        if not self._path.exists():
            return Preferences()
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
            return Preferences.model_validate(raw)
        except (json.JSONDecodeError, ValueError):
            logger.warning("Corrupt preferences at %s, using defaults", self._path)
            return Preferences()

    def _save(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(self._data.model_dump_json(indent=2), encoding="utf-8")

    def get(self, key: str) -> Any:
        """Raises KeyError for unknown keys."""
        if key not in Preferences.model_fields:
            raise KeyError(key)
        return getattr(self._data, key)

    def set(self, key: str, value: Any) -> None:
        """Validate and persist a single key.

        Raises KeyError for unknown keys and ``pydantic.ValidationError``
        for values of the wrong type.
        """
        if key not in Preferences.model_fields:
            raise KeyError(key)
        self._data = Preferences.model_validate({**self._data.model_dump(), key: value})
        self._save()

    def increment_generation_count(self) -> int:
        count = self._data.generation_count + 1
        self.set("generation_count", count)
        return count
