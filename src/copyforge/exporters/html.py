"""Standalone HTML export."""

from __future__ import annotations

from html import escape

from copyforge.content.models import ContentChunk
from copyforge.exporters.base import Exporter

_STYLE = (
    "body { font-family: sans-serif; line-height: 1.6; padding: 1em 2em;"
    " max-width: 800px; margin: auto; } h3 { color: #4f46e5; }"
    " hr { border: 0; border-top: 1px solid #e2e8f0; margin: 2em 0; }"
)


def _paragraphs(body: str) -> str:
    """Map blank lines to paragraph breaks and single newlines to ``<br>``."""
    text = escape(body).replace("\n\n", "</p><p>").replace("\n", "<br>")
    return f"<p>{text}</p>"


class HtmlExporter(Exporter):
    """One ``<h3>`` plus paragraphs per chunk, separated by ``<hr>``."""

    extension = "html"
    media_type = "text/html;charset=utf-8"

    def render(self, chunks: list[ContentChunk], product_name: str) -> str:
        sections = "\n<hr>\n".join(
            f"<h3>{escape(c.title)}</h3>\n{_paragraphs(c.body)}" for c in chunks
        )
        lines = [
            "<!DOCTYPE html>",
            '<html lang="en">',
            "<head>",
            '  <meta charset="UTF-8">',
            '  <meta name="viewport" content="width=device-width, initial-scale=1.0">',
            f"  <title>{escape(product_name)}</title>",
            f"  <style>{_STYLE}</style>",
            "</head>",
            "<body>",
            sections,
            "</body>",
            "</html>",
        ]
        return "\n".join(lines)
