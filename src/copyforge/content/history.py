"""JSON-backed generation history.

Persists every HistoryRecord in a single JSON file, loaded on init
and saved after every write operation.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from pathlib import Path

from pydantic import BaseModel, Field

from copyforge.content.models import GenerationParameters, HistoryRecord

logger = logging.getLogger(__name__)

HISTORY_FILENAME = ".copyforge-history.json"

# Alias to avoid shadowing by HistoryStore.list method
_list = list


class _HistoryData(BaseModel):
    """Internal wrapper for JSON serialization."""

    records: list[HistoryRecord] = Field(default_factory=list)


class HistoryStore:
    """Append-only history of generations, with in-place content updates.

    Args:
        storage_dir: Directory holding the history file.
        collapse_window_seconds: When positive, a new record whose params
            equal the previous record's and which arrives within this many
            seconds replaces that record instead of being appended.
    """

    def __init__(self, storage_dir: Path, collapse_window_seconds: float = 0) -> None:
        self._path = storage_dir / HISTORY_FILENAME
        self._collapse_window = collapse_window_seconds
        self._data = self._load()

    # ── Private helpers ──────────────────────────────────────────

    def _load(self) -> _HistoryData:
        if not self._path.exists():
            return _HistoryData()
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
            return _HistoryData.model_validate(raw)
        except (json.JSONDecodeError, ValueError, KeyError):
            logger.warning("Corrupt history file at %s, starting fresh", self._path)
            return _HistoryData()

    def _save(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(
            self._data.model_dump_json(indent=2),
            encoding="utf-8",
        )

    def _find(self, record_id: str) -> HistoryRecord | None:
        for record in self._data.records:
            if record.id == record_id:
                return record
        return None

    def _should_collapse(self, record: HistoryRecord) -> bool:
        if self._collapse_window <= 0 or not self._data.records:
            return False
        last = self._data.records[-1]
        age = (record.created_at - last.created_at).total_seconds()
        return last.params == record.params and age < self._collapse_window

    # ── Write operations ─────────────────────────────────────────

    def add(self, params: GenerationParameters, content: str) -> HistoryRecord:
        """Record a finished generation and return the new record."""
        record = HistoryRecord(
            params=params,
            generated_content=content,
            created_at=datetime.now(tz=UTC),
        )
        if self._should_collapse(record):
            logger.debug("Collapsing duplicate history record %s", self._data.records[-1].id)
            self._data.records[-1] = record
        else:
            self._data.records.append(record)
        self._save()
        logger.info("Saved history record %s", record.id)
        return record

    def update_content(self, record_id: str, content: str) -> HistoryRecord:
        """Replace the generated content of an existing record.

        Raises KeyError if the id does not exist.
        """
        record = self._find(record_id)
        if record is None:
            raise KeyError(record_id)
        record.generated_content = content
        self._save()
        return record

    def clear(self) -> int:
        """Delete every record. Returns the number removed."""
        count = len(self._data.records)
        self._data.records = []
        self._save()
        return count

    # ── Read operations ──────────────────────────────────────────

    def get(self, record_id: str) -> HistoryRecord | None:
        """Return a record by id, or None if not found."""
        return self._find(record_id)

    def resolve(self, prefix: str) -> HistoryRecord:
        """Return the single record whose id starts with ``prefix``.

        Raises KeyError if none or more than one record matches.
        """
        matches = [r for r in self._data.records if r.id.startswith(prefix)]
        if len(matches) != 1:
            raise KeyError(prefix)
        return matches[0]

    def list(self) -> _list[HistoryRecord]:
        """Return records in creation order."""
        return _list(self._data.records)

    def __len__(self) -> int:
        return len(self._data.records)
