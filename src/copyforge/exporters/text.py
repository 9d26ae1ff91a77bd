"""Plain text export."""

from __future__ import annotations

from copyforge.content.models import ContentChunk
from copyforge.exporters.base import Exporter

SECTION_SEPARATOR = "\n\n---\n\n"


class TextExporter(Exporter):
    """Titles and bodies separated by horizontal rules, no markup."""

    extension = "txt"
    media_type = "text/plain;charset=utf-8"

    def render(self, chunks: list[ContentChunk], product_name: str) -> str:
        return SECTION_SEPARATOR.join(f"{c.title}\n\n{c.body}" for c in chunks)
