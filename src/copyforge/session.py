"""Stateful editing session around one generation result.

``ContentSession`` owns the canonical raw markdown.  The chunk list is
recomputed from it on every read, and each mutation goes through the
chunk list and ``reassemble_chunks`` before replacing the raw text.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from copyforge.content.chunks import (
    parse_chunks,
    reassemble_chunks,
    remove_chunk,
    replace_chunk_body,
)
from copyforge.content.models import ContentChunk, GenerationParameters
from copyforge.synthesizer import CopySynthesizer

logger = logging.getLogger(__name__)


class RegenerationInProgressError(Exception):
    """Raised when a chunk is already being regenerated."""


def _locate(
    chunks: list[ContentChunk], chunk_id: str, target: ContentChunk
) -> ContentChunk | None:
    """Find ``target`` in a re-parsed chunk list.

    Ids are positional and shift when earlier chunks are deleted, so a
    chunk only counts as the target if its title and body are unchanged.
    The id's current position is preferred when several chunks match.
    """
    same = [c for c in chunks if c.title == target.title and c.body == target.body]
    for chunk in same:
        if chunk.id == chunk_id:
            return chunk
    return same[0] if same else None


class ContentSession:
    """Editable view over a generation's raw markdown.

    Args:
        params: Parameters the content was generated with.
        raw_text: The canonical raw markdown.
        on_change: Called with the new raw text after every committed
            mutation.
    """

    def __init__(
        self,
        params: GenerationParameters,
        raw_text: str,
        on_change: Callable[[str], None] | None = None,
    ) -> None:
        self.params = params
        self._raw_text = raw_text
        self._on_change = on_change
        self._lock = threading.Lock()
        self._regenerating: set[str] = set()

    @property
    def raw_text(self) -> str:
        return self._raw_text

    @property
    def chunks(self) -> list[ContentChunk]:
        return parse_chunks(self._raw_text)

    def get_chunk(self, chunk_id: str) -> ContentChunk:
        """Raises KeyError if the chunk does not exist."""
        for chunk in self.chunks:
            if chunk.id == chunk_id:
                return chunk
        raise KeyError(chunk_id)

    def is_regenerating(self, chunk_id: str) -> bool:
        return chunk_id in self._regenerating

    def _commit(self, chunks: list[ContentChunk]) -> str:
        self._raw_text = reassemble_chunks(chunks)
        if self._on_change is not None:
            self._on_change(self._raw_text)
        return self._raw_text

    def update_chunk(self, chunk_id: str, body: str) -> str:
        """Replace a chunk's body and return the new raw text."""
        with self._lock:
            return self._commit(replace_chunk_body(self.chunks, chunk_id, body))

    def delete_chunk(self, chunk_id: str) -> str:
        """Remove a chunk and return the new raw text."""
        with self._lock:
            return self._commit(remove_chunk(self.chunks, chunk_id))

    def regenerate_chunk(self, chunk_id: str, synthesizer: CopySynthesizer) -> str:
        """Regenerate one chunk's body via the model.

        The result is applied to the chunk list as it exists when the
        call completes, to the chunk whose title and body still match the
        one that was sent.  If that chunk was deleted or edited in the
        meantime the result is discarded.

        Returns:
            The raw text after the update.

        Raises:
            KeyError: If the chunk does not exist.
            RegenerationInProgressError: If the chunk is already being
                regenerated.
            SynthesisError: If the call fails. The chunk is left unchanged.
        """
        with self._lock:
            target = self.get_chunk(chunk_id)
            if chunk_id in self._regenerating:
                raise RegenerationInProgressError(chunk_id)
            self._regenerating.add(chunk_id)

        try:
            new_body = synthesizer.regenerate_chunk(self.params, target)
        finally:
            with self._lock:
                self._regenerating.discard(chunk_id)

        with self._lock:
            current = self.chunks
            match = _locate(current, chunk_id, target)
            if match is None:
                logger.warning("Chunk %s vanished during regeneration, discarding result", chunk_id)
                return self._raw_text
            return self._commit(replace_chunk_body(current, match.id, new_body))


class DebouncedEditor:
    """Commits chunk edits to a session only after a quiet period.

    Each call to ``edit`` restarts the timer for that chunk.  When the
    timer fires, the edit is committed unless the body is unchanged.
    """

    def __init__(self, session: ContentSession, delay: float = 0.5) -> None:
        self._session = session
        self._delay = delay
        self._lock = threading.Lock()
        self._pending: dict[str, str] = {}
        self._timers: dict[str, threading.Timer] = {}
        self._versions: dict[str, int] = {}

    @property
    def pending(self) -> dict[str, str]:
        with self._lock:
            return dict(self._pending)

    def edit(self, chunk_id: str, body: str) -> None:
        with self._lock:
            self._pending[chunk_id] = body
            timer = self._timers.pop(chunk_id, None)
            if timer is not None:
                timer.cancel()
            version = self._versions.get(chunk_id, 0) + 1
            self._versions[chunk_id] = version
            timer = threading.Timer(self._delay, self._commit, args=(chunk_id, version))
            timer.daemon = True
            self._timers[chunk_id] = timer
            timer.start()

    def _commit(self, chunk_id: str, version: int | None = None) -> None:
        with self._lock:
            if version is not None and self._versions.get(chunk_id) != version:
                return
            body = self._pending.pop(chunk_id, None)
            self._timers.pop(chunk_id, None)
        if body is None:
            return
        try:
            current = self._session.get_chunk(chunk_id)
        except KeyError:
            logger.warning("Dropping edit for missing chunk %s", chunk_id)
            return
        if current.body != body:
            self._session.update_chunk(chunk_id, body)

    def flush(self) -> None:
        """Commit all pending edits now."""
        with self._lock:
            chunk_ids = list(self._pending)
            for timer in self._timers.values():
                timer.cancel()
            self._timers.clear()
        for chunk_id in chunk_ids:
            self._commit(chunk_id)

    def cancel(self) -> None:
        """Drop all pending edits."""
        with self._lock:
            for timer in self._timers.values():
                timer.cancel()
            self._timers.clear()
            self._pending.clear()
