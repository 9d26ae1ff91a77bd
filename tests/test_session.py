"""Tests for ContentSession and DebouncedEditor."""

import time
from unittest.mock import MagicMock

import pytest

from copyforge.content.models import GenerationParameters
from copyforge.session import ContentSession, DebouncedEditor, RegenerationInProgressError
from copyforge.synthesizer import EmptyResponseError, SynthesisError

RAW = "### A\n\none\n\n### B\n\ntwo\n\n### C\n\nthree"


def _params() -> GenerationParameters:
    return GenerationParameters(product_name="Aurora Necklace", content_type="Ad Copy")


def _session(raw: str = RAW, on_change=None) -> ContentSession:
    return ContentSession(_params(), raw, on_change=on_change)


class TestContentSession:
    def test_chunks_follow_raw_text(self):
        session = _session()
        assert [c.title for c in session.chunks] == ["A", "B", "C"]

    def test_get_chunk_unknown(self):
        with pytest.raises(KeyError):
            _session().get_chunk("chunk-7")

    def test_update_chunk(self):
        session = _session()
        raw = session.update_chunk("chunk-1", "TWO")
        assert raw == "### A\n\none\n\n### B\n\nTWO\n\n### C\n\nthree"
        assert session.raw_text == raw
        assert session.get_chunk("chunk-1").body == "TWO"

    def test_update_unknown_chunk_leaves_text(self):
        session = _session()
        with pytest.raises(KeyError):
            session.update_chunk("chunk-9", "x")
        assert session.raw_text == RAW

    def test_delete_chunk_renumbers(self):
        session = _session()
        session.delete_chunk("chunk-0")
        assert [(c.id, c.title) for c in session.chunks] == [("chunk-0", "B"), ("chunk-1", "C")]

    def test_delete_last_chunk_empties_text(self):
        session = _session("### Only\n\nbody")
        assert session.delete_chunk("chunk-0") == ""
        assert session.chunks == []

    def test_on_change_receives_new_raw_text(self):
        on_change = MagicMock()
        session = _session(on_change=on_change)
        session.update_chunk("chunk-2", "3")
        on_change.assert_called_once_with(session.raw_text)


class TestRegenerateChunk:
    def test_replaces_only_target_body(self):
        synthesizer = MagicMock()
        synthesizer.regenerate_chunk.return_value = "fresh"
        session = _session()

        session.regenerate_chunk("chunk-1", synthesizer)

        assert [(c.title, c.body) for c in session.chunks] == [
            ("A", "one"),
            ("B", "fresh"),
            ("C", "three"),
        ]
        params, chunk = synthesizer.regenerate_chunk.call_args.args
        assert params == session.params
        assert chunk.title == "B"
        assert not session.is_regenerating("chunk-1")

    @pytest.mark.parametrize(
        "error",
        [SynthesisError("Failed to regenerate content: 500"), EmptyResponseError("empty")],
    )
    def test_failure_leaves_chunk_unchanged(self, error: Exception):
        synthesizer = MagicMock()
        synthesizer.regenerate_chunk.side_effect = error
        session = _session()

        with pytest.raises(SynthesisError):
            session.regenerate_chunk("chunk-1", synthesizer)

        assert session.raw_text == RAW
        assert not session.is_regenerating("chunk-1")

    def test_concurrent_regeneration_of_same_chunk_rejected(self):
        session = _session()
        synthesizer = MagicMock()

        def _reenter(params, chunk):
            assert session.is_regenerating("chunk-0")
            with pytest.raises(RegenerationInProgressError):
                session.regenerate_chunk("chunk-0", synthesizer)
            return "done"

        synthesizer.regenerate_chunk.side_effect = _reenter
        session.regenerate_chunk("chunk-0", synthesizer)
        assert session.get_chunk("chunk-0").body == "done"

    def test_other_chunks_may_regenerate_concurrently(self):
        session = _session()
        synthesizer = MagicMock()

        def _nested(params, chunk):
            if chunk.id == "chunk-0":
                session.regenerate_chunk("chunk-2", synthesizer)
            return f"new {chunk.title}"

        synthesizer.regenerate_chunk.side_effect = _nested
        session.regenerate_chunk("chunk-0", synthesizer)
        assert [c.body for c in session.chunks] == ["new A", "two", "new C"]

    def test_result_discarded_when_chunk_vanishes(self):
        session = _session("### A\n\none")
        synthesizer = MagicMock()

        def _delete_meanwhile(params, chunk):
            session.delete_chunk("chunk-0")
            return "late"

        synthesizer.regenerate_chunk.side_effect = _delete_meanwhile
        assert session.regenerate_chunk("chunk-0", synthesizer) == ""
        assert session.chunks == []

    def test_earlier_delete_does_not_misplace_result(self):
        session = _session()
        synthesizer = MagicMock()

        def _delete_first(params, chunk):
            session.delete_chunk("chunk-0")
            return "new B"

        synthesizer.regenerate_chunk.side_effect = _delete_first
        session.regenerate_chunk("chunk-1", synthesizer)

        assert [(c.title, c.body) for c in session.chunks] == [("B", "new B"), ("C", "three")]

    def test_result_discarded_when_chunk_edited_meanwhile(self):
        session = _session()
        synthesizer = MagicMock()

        def _edit_target(params, chunk):
            session.update_chunk("chunk-1", "hand edited")
            return "late"

        synthesizer.regenerate_chunk.side_effect = _edit_target
        session.regenerate_chunk("chunk-1", synthesizer)

        assert session.get_chunk("chunk-1").body == "hand edited"

    def test_unknown_chunk(self):
        with pytest.raises(KeyError):
            _session().regenerate_chunk("chunk-5", MagicMock())


class TestDebouncedEditor:
    def test_commits_after_quiet_period(self):
        session = _session()
        editor = DebouncedEditor(session, delay=0.05)
        editor.edit("chunk-0", "ONE")
        assert session.get_chunk("chunk-0").body == "one"

        deadline = time.monotonic() + 2
        while session.get_chunk("chunk-0").body != "ONE" and time.monotonic() < deadline:
            time.sleep(0.01)
        assert session.get_chunk("chunk-0").body == "ONE"
        assert editor.pending == {}

    def test_only_last_edit_is_committed(self):
        on_change = MagicMock()
        session = _session(on_change=on_change)
        editor = DebouncedEditor(session, delay=10)
        for body in ("o", "on", "onE"):
            editor.edit("chunk-0", body)
        assert editor.pending == {"chunk-0": "onE"}

        editor.flush()

        on_change.assert_called_once()
        assert session.get_chunk("chunk-0").body == "onE"

    def test_unchanged_body_is_not_committed(self):
        on_change = MagicMock()
        editor = DebouncedEditor(_session(on_change=on_change), delay=10)
        editor.edit("chunk-1", "two")
        editor.flush()
        on_change.assert_not_called()

    def test_cancel_drops_pending(self):
        session = _session()
        editor = DebouncedEditor(session, delay=10)
        editor.edit("chunk-0", "changed")
        editor.cancel()
        editor.flush()
        assert session.raw_text == RAW
        assert editor.pending == {}

    def test_edit_for_deleted_chunk_is_dropped(self):
        session = _session("### A\n\none")
        editor = DebouncedEditor(session, delay=10)
        editor.edit("chunk-0", "changed")
        session.delete_chunk("chunk-0")
        editor.flush()
        assert session.raw_text == ""
