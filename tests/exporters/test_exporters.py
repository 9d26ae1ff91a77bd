"""Tests for the text, markdown and HTML exporters."""

from pathlib import Path

import pytest

from copyforge.content.chunks import parse_chunks
from copyforge.content.models import ContentChunk
from copyforge.exporters import (
    ExportFormat,
    HtmlExporter,
    MarkdownExporter,
    TextExporter,
    create_exporter,
    export_filename,
)


def _chunks() -> list[ContentChunk]:
    return [
        ContentChunk(id="chunk-0", title="Ad 1: Glow", body="Line one.\nLine two."),
        ContentChunk(id="chunk-1", title="Ad 2: <Shine>", body="Para one.\n\nPara & two."),
    ]


class TestExportFilename:
    def test_sanitizes_product_name(self):
        assert export_filename("Aurora Necklace", "md") == "aurora_necklace_content.md"

    def test_replaces_each_unsafe_character(self):
        assert export_filename("Café 2.0!", "txt") == "caf__2_0__content.txt"


class TestTextExporter:
    def test_render(self):
        text = TextExporter().render(_chunks(), "Aurora")
        assert text == (
            "Ad 1: Glow\n\nLine one.\nLine two."
            "\n\n---\n\n"
            "Ad 2: <Shine>\n\nPara one.\n\nPara & two."
        )

    def test_no_markdown_headings(self):
        assert "###" not in TextExporter().render(_chunks(), "Aurora")


class TestMarkdownExporter:
    def test_render_is_canonical_raw_text(self):
        raw = "### Ad 1: Glow\n\nLine one.\nLine two.\n\n### Ad 2: <Shine>\n\nPara one.\n\nPara & two."
        assert MarkdownExporter().render(parse_chunks(raw), "Aurora") == raw


class TestHtmlExporter:
    def test_document_structure(self):
        html = HtmlExporter().render(_chunks(), "Aurora & Co")
        assert html.startswith("<!DOCTYPE html>")
        assert "<title>Aurora &amp; Co</title>" in html
        assert html.count("<h3>") == 2
        assert html.count("<hr>") == 1

    def test_escapes_and_maps_newlines(self):
        html = HtmlExporter().render(_chunks(), "Aurora")
        assert "<h3>Ad 2: &lt;Shine&gt;</h3>" in html
        assert "<p>Line one.<br>Line two.</p>" in html
        assert "<p>Para one.</p><p>Para &amp; two.</p>" in html


class TestWrite:
    @pytest.mark.parametrize("fmt", list(ExportFormat))
    def test_writes_named_file(self, tmp_path: Path, fmt: ExportFormat):
        exporter = create_exporter(fmt)
        path = exporter.write(_chunks(), "Aurora Necklace", tmp_path / "out")
        assert path == tmp_path / "out" / f"aurora_necklace_content.{fmt.value}"
        assert path.read_text(encoding="utf-8") == exporter.render(_chunks(), "Aurora Necklace")

    def test_empty_export_rejected(self, tmp_path: Path):
        with pytest.raises(ValueError, match="Nothing to export"):
            TextExporter().write([], "Aurora", tmp_path)
        assert list(tmp_path.iterdir()) == []


class TestCreateExporter:
    def test_from_string(self):
        assert isinstance(create_exporter("html"), HtmlExporter)
        assert isinstance(create_exporter(ExportFormat.TXT), TextExporter)

    def test_unknown_format(self):
        with pytest.raises(ValueError):
            create_exporter("pdf")
