"""Base class for export formats."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from pathlib import Path

from copyforge.content.models import ContentChunk

_UNSAFE_FILENAME_RE = re.compile(r"[^a-z0-9]", re.IGNORECASE)


def export_filename(product_name: str, extension: str) -> str:
    """Build a download filename such as ``aurora_necklace_content.md``."""
    return f"{_UNSAFE_FILENAME_RE.sub('_', product_name).lower()}_content.{extension}"


class Exporter(ABC):
    """Renders a chunk list into a downloadable document."""

    extension: str = ""
    media_type: str = ""

    @abstractmethod
    def render(self, chunks: list[ContentChunk], product_name: str) -> str:
        """Render chunks as a document string."""

    def filename(self, product_name: str) -> str:
        return export_filename(product_name, self.extension)

    def write(self, chunks: list[ContentChunk], product_name: str, output_dir: Path) -> Path:
        """Render and write the document into ``output_dir``.

        Raises:
            ValueError: If there is nothing to export.
        """
        if not chunks:
            raise ValueError("Nothing to export: content has no sections")
        path = output_dir / self.filename(product_name)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.render(chunks, product_name), encoding="utf-8")
        return path
