"""Exporter factory and registry."""

from __future__ import annotations

from enum import StrEnum

from copyforge.exporters.base import Exporter, export_filename
from copyforge.exporters.html import HtmlExporter
from copyforge.exporters.markdown import MarkdownExporter
from copyforge.exporters.text import TextExporter


class ExportFormat(StrEnum):
    """Available export formats."""

    TXT = "txt"
    MD = "md"
    HTML = "html"


def create_exporter(fmt: ExportFormat | str) -> Exporter:
    """Create an exporter for the given format.

    Raises:
        ValueError: If the format is unknown.
    """
    if isinstance(fmt, str):
        fmt = ExportFormat(fmt)

    exporters: dict[ExportFormat, Exporter] = {
        ExportFormat.TXT: TextExporter(),
        ExportFormat.MD: MarkdownExporter(),
        ExportFormat.HTML: HtmlExporter(),
    }
    return exporters[fmt]


__all__ = [
    "ExportFormat",
    "Exporter",
    "HtmlExporter",
    "MarkdownExporter",
    "TextExporter",
    "create_exporter",
    "export_filename",
]
