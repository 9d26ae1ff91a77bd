"""Split generated markdown into editable chunks and join them back.

The raw markdown is the source of truth.  Chunks are a derived view:
every edit is applied to the chunk list and then reassembled into new
raw markdown, which is parsed again on the next render.
"""

from __future__ import annotations

import re

from copyforge.content.models import ContentChunk

HEADING_MARKER = "###"
DEFAULT_TITLE = "Generated Content"

_SECTION_SPLIT_RE = re.compile(r"^(?=###\s)", re.MULTILINE)


def _chunk_id(index: int) -> str:
    return f"chunk-{index}"


def parse_chunks(raw: str) -> list[ContentChunk]:
    """Split raw markdown into chunks at each ``### `` heading line.

    Text without any heading becomes a single chunk titled
    ``DEFAULT_TITLE``.  Empty or whitespace-only input yields ``[]``.
    """
    if not raw or not raw.strip():
        return []

    sections = [s for s in _SECTION_SPLIT_RE.split(raw) if s.strip()]
    if len(sections) <= 1 and not _SECTION_SPLIT_RE.match(sections[0]):
        return [ContentChunk(id=_chunk_id(0), title=DEFAULT_TITLE, body=raw.strip())]

    chunks: list[ContentChunk] = []
    for index, section in enumerate(sections):
        lines = section.strip().split("\n")
        title = lines[0].replace(HEADING_MARKER, "", 1).strip()
        body = "\n".join(lines[1:]).strip()
        chunks.append(ContentChunk(id=_chunk_id(index), title=title, body=body))
    return chunks


def render_chunk(chunk: ContentChunk) -> str:
    return f"{HEADING_MARKER} {chunk.title}\n\n{chunk.body}"


def reassemble_chunks(chunks: list[ContentChunk]) -> str:
    """Rebuild canonical raw markdown from an ordered chunk list."""
    return "\n\n".join(render_chunk(chunk) for chunk in chunks)


def replace_chunk_body(
    chunks: list[ContentChunk], chunk_id: str, body: str
) -> list[ContentChunk]:
    """Return a new list with the body of ``chunk_id`` replaced.

    Raises:
        KeyError: If no chunk has that id.
    """
    if not any(c.id == chunk_id for c in chunks):
        raise KeyError(chunk_id)
    return [c.model_copy(update={"body": body}) if c.id == chunk_id else c for c in chunks]


def remove_chunk(chunks: list[ContentChunk], chunk_id: str) -> list[ContentChunk]:
    """Return a new list without ``chunk_id``.

    Raises:
        KeyError: If no chunk has that id.
    """
    remaining = [c for c in chunks if c.id != chunk_id]
    if len(remaining) == len(chunks):
        raise KeyError(chunk_id)
    return remaining
