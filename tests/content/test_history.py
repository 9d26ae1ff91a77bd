"""Tests for HistoryStore: JSON-backed generation history."""

import json
from datetime import timedelta
from pathlib import Path

import pytest

from copyforge.content.history import HISTORY_FILENAME, HistoryStore
from copyforge.content.models import GenerationParameters


def _params(**kwargs: object) -> GenerationParameters:
    data: dict[str, object] = {"product_name": "Aurora Necklace", "content_type": "Ad Copy"}
    data.update(kwargs)
    return GenerationParameters.model_validate(data)


class TestAdd:
    def test_appends_record(self, tmp_path: Path):
        store = HistoryStore(tmp_path)
        record = store.add(_params(), "### A\n\nbody")
        assert store.get(record.id) == record
        assert len(store) == 1

    def test_always_appends_by_default(self, tmp_path: Path):
        store = HistoryStore(tmp_path)
        store.add(_params(), "first")
        store.add(_params(), "second")
        assert [r.generated_content for r in store.list()] == ["first", "second"]

    def test_persists_to_disk(self, tmp_path: Path):
        store = HistoryStore(tmp_path)
        store.add(_params(), "content")

        data = json.loads((tmp_path / HISTORY_FILENAME).read_text(encoding="utf-8"))
        assert len(data["records"]) == 1
        assert data["records"][0]["params"]["product_name"] == "Aurora Necklace"

    def test_reloads_from_disk(self, tmp_path: Path):
        record = HistoryStore(tmp_path).add(_params(), "content")
        reloaded = HistoryStore(tmp_path)
        assert reloaded.get(record.id) == record


class TestCollapse:
    def test_collapses_matching_params_within_window(self, tmp_path: Path):
        store = HistoryStore(tmp_path, collapse_window_seconds=5)
        store.add(_params(), "first")
        second = store.add(_params(), "second")
        assert store.list() == [second]

    def test_keeps_different_params(self, tmp_path: Path):
        store = HistoryStore(tmp_path, collapse_window_seconds=5)
        store.add(_params(), "first")
        store.add(_params(tone="Casual"), "second")
        assert len(store) == 2

    def test_keeps_records_outside_window(self, tmp_path: Path):
        store = HistoryStore(tmp_path, collapse_window_seconds=5)
        first = store.add(_params(), "first")
        first.created_at -= timedelta(seconds=10)
        store.add(_params(), "second")
        assert len(store) == 2


class TestUpdateAndClear:
    def test_update_content_in_place(self, tmp_path: Path):
        store = HistoryStore(tmp_path)
        record = store.add(_params(), "old")
        store.update_content(record.id, "new")

        reloaded = HistoryStore(tmp_path).get(record.id)
        assert reloaded is not None
        assert reloaded.generated_content == "new"
        assert reloaded.created_at == record.created_at

    def test_update_missing_raises(self, tmp_path: Path):
        with pytest.raises(KeyError):
            HistoryStore(tmp_path).update_content("missing", "x")

    def test_clear(self, tmp_path: Path):
        store = HistoryStore(tmp_path)
        store.add(_params(), "a")
        store.add(_params(), "b")
        assert store.clear() == 2
        assert HistoryStore(tmp_path).list() == []


class TestResolve:
    def test_by_prefix(self, tmp_path: Path):
        store = HistoryStore(tmp_path)
        record = store.add(_params(), "a")
        assert store.resolve(record.id[:8]) == record

    def test_unknown_prefix(self, tmp_path: Path):
        store = HistoryStore(tmp_path)
        store.add(_params(), "a")
        with pytest.raises(KeyError):
            store.resolve("zzzz")

    def test_ambiguous_prefix(self, tmp_path: Path):
        store = HistoryStore(tmp_path)
        store.add(_params(), "a")
        store.add(_params(), "b")
        with pytest.raises(KeyError):
            store.resolve("")


class TestCorruptFile:
    def test_starts_fresh(self, tmp_path: Path):
        (tmp_path / HISTORY_FILENAME).write_text("{not json", encoding="utf-8")
        store = HistoryStore(tmp_path)
        assert store.list() == []

    def test_invalid_schema_starts_fresh(self, tmp_path: Path):
        (tmp_path / HISTORY_FILENAME).write_text('{"records": [{"id": 1}]}', encoding="utf-8")
        assert HistoryStore(tmp_path).list() == []
