"""Markdown export."""

from __future__ import annotations

from copyforge.content.chunks import reassemble_chunks
from copyforge.content.models import ContentChunk
from copyforge.exporters.base import Exporter


class MarkdownExporter(Exporter):
    """Canonical ``###``-headed markdown, identical to the stored raw text."""

    extension = "md"
    media_type = "text/markdown;charset=utf-8"

    def render(self, chunks: list[ContentChunk], product_name: str) -> str:
        return reassemble_chunks(chunks)
