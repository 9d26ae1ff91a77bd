"""CLI interface for copyforge."""

from __future__ import annotations

import logging
import sys
import time
from pathlib import Path
from typing import Annotated, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from copyforge.config import CopyforgeConfig, load_config, merge_cli_overrides
from copyforge.content.chunks import parse_chunks
from copyforge.content.history import HistoryStore
from copyforge.content.models import (
    CONTENT_TYPES,
    ContentChunk,
    HistoryRecord,
    ProductImage,
)
from copyforge.content.templates import TEMPLATES, apply_template, get_template
from copyforge.exporters import ExportFormat, create_exporter
from copyforge.llm import GeminiClient
from copyforge.preferences import PreferencesStore
from copyforge.session import ContentSession, DebouncedEditor, RegenerationInProgressError
from copyforge.synthesizer import CopySynthesizer, SynthesisError

app = typer.Typer(
    name="copyforge",
    help="Generate, edit and export e-commerce marketing copy with Gemini.",
)
history_app = typer.Typer(help="Browse and manage saved generations.")
app.add_typer(history_app, name="history")

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from copyforge import __version__

        console.print(f"copyforge {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to a .copyforge.toml file."),
    ] = None,
    model: Annotated[
        Optional[str],
        typer.Option("--model", "-m", help="Gemini model override."),
    ] = None,
    storage_dir: Annotated[
        Optional[Path],
        typer.Option("--storage-dir", help="Where history and preferences are kept."),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Enable debug logging."),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """copyforge - AI copywriting for product pages, ads and campaigns."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)
    try:
        config = load_config(config_path)
        ctx.obj = merge_cli_overrides(
            config,
            model=model,
            storage_directory=str(storage_dir) if storage_dir else None,
        )
    except ValidationError as exc:
        console.print(f"[red]Error:[/red] Invalid configuration: {escape(str(exc))}")
        raise typer.Exit(1)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _history(config: CopyforgeConfig) -> HistoryStore:
    return HistoryStore(
        config.storage_dir,
        collapse_window_seconds=config.history.collapse_window_seconds,
    )


def _synthesizer(config: CopyforgeConfig) -> CopySynthesizer:
    client = GeminiClient(
        config.gemini.api_key or None,
        model=config.gemini.model,
        timeout=config.gemini.timeout,
    )
    return CopySynthesizer(client)


def _resolve_record(store: HistoryStore, record_id: str) -> HistoryRecord:
    try:
        return store.resolve(record_id)
    except KeyError:
        console.print(f"[red]Error:[/red] No unique history record matches '{record_id}'")
        raise typer.Exit(1)


def _chunk_id(session: ContentSession, index: int) -> str:
    """Map a 1-based index shown to the user onto a chunk id."""
    chunks = session.chunks
    if not 1 <= index <= len(chunks):
        console.print(f"[red]Error:[/red] Section {index} does not exist (1-{len(chunks)})")
        raise typer.Exit(1)
    return chunks[index - 1].id


def _render_chunks(chunks: list[ContentChunk]) -> None:
    for index, chunk in enumerate(chunks, start=1):
        console.print(
            Panel(
                chunk.body or "[dim]Empty section[/dim]",
                title=f"[bold]{index}. {chunk.title}[/bold]",
                title_align="left",
            )
        )


def _print_fragment(fragment: str) -> None:
    console.print(fragment, end="", markup=False, highlight=False, soft_wrap=True)


def _open_session(config: CopyforgeConfig, record_id: str) -> tuple[HistoryStore, ContentSession]:
    store = _history(config)
    record = _resolve_record(store, record_id)
    session = ContentSession(
        record.params,
        record.generated_content,
        on_change=lambda raw: store.update_content(record.id, raw),
    )
    return store, session


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def generate(
    ctx: typer.Context,
    product: Annotated[
        str, typer.Option("--product", "-p", help="Product name or link.")
    ],
    content_type: Annotated[
        Optional[str],
        typer.Option("--type", "-t", help=f"Content type ({', '.join(CONTENT_TYPES)})."),
    ] = None,
    tone: Annotated[Optional[str], typer.Option("--tone", help="Tone of voice.")] = None,
    country: Annotated[
        Optional[str], typer.Option("--country", help="Target audience/country.")
    ] = None,
    length: Annotated[
        Optional[str], typer.Option("--length", help="Default, Short, Medium or Long.")
    ] = None,
    stars: Annotated[
        Optional[str], typer.Option("--stars", help="Star rating for reviews, e.g. '5 Stars'.")
    ] = None,
    keywords: Annotated[
        Optional[str], typer.Option("--keywords", "-k", help="Comma-separated SEO keywords.")
    ] = None,
    company: Annotated[Optional[str], typer.Option("--company", help="Company name.")] = None,
    occasion: Annotated[Optional[str], typer.Option("--occasion", help="Occasion.")] = None,
    brand_voice: Annotated[
        Optional[str], typer.Option("--brand-voice", help="Brand voice guidelines.")
    ] = None,
    ab_test: Annotated[
        Optional[bool],
        typer.Option("--ab-test/--no-ab-test", help="Also generate an A/B test variant."),
    ] = None,
    social_post: Annotated[
        Optional[bool],
        typer.Option("--social-post/--no-social-post", help="Also generate a social post."),
    ] = None,
    image: Annotated[
        Optional[Path],
        typer.Option("--image", "-i", exists=True, dir_okay=False, help="Product image."),
    ] = None,
    template: Annotated[
        Optional[str], typer.Option("--template", help="Start from a named template.")
    ] = None,
    export: Annotated[
        Optional[ExportFormat], typer.Option("--export", "-e", help="Also export the result.")
    ] = None,
) -> None:
    """Generate copy for a product, streaming it as it arrives."""
    config: CopyforgeConfig = ctx.obj

    try:
        preset = get_template(template) if template else None
        product_image = ProductImage.from_path(image) if image else None
        params = apply_template(
            preset,
            product_name=product,
            content_type=content_type or (None if preset else CONTENT_TYPES[0]),
            tone=tone,
            country=country,
            content_length=length,
            star_rating=stars,
            seo_keywords=keywords,
            company_name=company,
            occasion=occasion,
            brand_voice=brand_voice,
            generate_ab_test=ab_test,
            generate_social_post=social_post,
            product_image=product_image,
        )
    except KeyError:
        console.print(f"[red]Error:[/red] Unknown template: {template}")
        raise typer.Exit(1)
    except (ValueError, ValidationError) as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(1)

    if params.content_type not in CONTENT_TYPES:
        console.print(
            f"[yellow]Unknown content type '{params.content_type}', using a generic task.[/yellow]"
        )

    PreferencesStore(config.storage_dir).increment_generation_count()

    try:
        raw = _synthesizer(config).generate(params, on_fragment=_print_fragment)
    except SynthesisError as exc:
        console.print()
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(1)

    console.print()
    console.rule("Sections")
    chunks = parse_chunks(raw)
    _render_chunks(chunks)

    record = _history(config).add(params, raw)
    console.print(f"[green]Saved as {record.id[:8]}[/green]")

    if export is not None and chunks:
        path = create_exporter(export).write(chunks, params.product_name, config.output_dir)
        console.print(f"[green]Exported to {path}[/green]")


@app.command()
def regenerate(
    ctx: typer.Context,
    record_id: Annotated[str, typer.Argument(help="History record id (or prefix).")],
    section: Annotated[int, typer.Argument(help="1-based section number.")],
) -> None:
    """Regenerate one section of a saved generation."""
    config: CopyforgeConfig = ctx.obj
    _store, session = _open_session(config, record_id)
    chunk_id = _chunk_id(session, section)

    try:
        with console.status(f"Regenerating section {section}..."):
            session.regenerate_chunk(chunk_id, _synthesizer(config))
    except (SynthesisError, RegenerationInProgressError) as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(1)

    _render_chunks([session.get_chunk(chunk_id)])


@app.command()
def edit(
    ctx: typer.Context,
    record_id: Annotated[str, typer.Argument(help="History record id (or prefix).")],
    section: Annotated[int, typer.Argument(help="1-based section number.")],
    body: Annotated[Optional[str], typer.Option("--body", "-b", help="New section text.")] = None,
    file: Annotated[
        Optional[Path],
        typer.Option("--file", "-f", dir_okay=False, help="Read the new text from a file."),
    ] = None,
    watch: Annotated[
        bool,
        typer.Option("--watch", "-w", help="Keep syncing --file edits until Ctrl-C."),
    ] = False,
) -> None:
    """Replace the text of one section of a saved generation."""
    config: CopyforgeConfig = ctx.obj
    if (body is None) == (file is None):
        console.print("[red]Error:[/red] Pass exactly one of --body or --file")
        raise typer.Exit(1)

    _store, session = _open_session(config, record_id)
    chunk_id = _chunk_id(session, section)

    if file is None or not watch:
        if file is not None:
            try:
                body = file.read_text(encoding="utf-8")
            except OSError as exc:
                console.print(f"[red]Error:[/red] Cannot read {escape(str(file))}: {exc.strerror}")
                raise typer.Exit(1)
        session.update_chunk(chunk_id, (body or "").strip())
        _render_chunks([session.get_chunk(chunk_id)])
        return

    if not file.exists():
        file.write_text(session.get_chunk(chunk_id).body, encoding="utf-8")
    editor = DebouncedEditor(session, delay=config.editor.autosave_delay)
    last_mtime = file.stat().st_mtime
    console.print(f"Watching {file} for section {section}. Press Ctrl-C to stop.")
    try:
        while True:
            time.sleep(0.2)
            mtime = file.stat().st_mtime
            if mtime != last_mtime:
                last_mtime = mtime
                editor.edit(chunk_id, file.read_text(encoding="utf-8").strip())
    except KeyboardInterrupt:
        editor.flush()
        console.print()
    _render_chunks([session.get_chunk(chunk_id)])


@app.command("delete-chunk")
def delete_chunk(
    ctx: typer.Context,
    record_id: Annotated[str, typer.Argument(help="History record id (or prefix).")],
    section: Annotated[int, typer.Argument(help="1-based section number.")],
) -> None:
    """Delete one section of a saved generation."""
    config: CopyforgeConfig = ctx.obj
    _store, session = _open_session(config, record_id)
    session.delete_chunk(_chunk_id(session, section))
    console.print(f"[green]Deleted section {section}[/green]")
    _render_chunks(session.chunks)


@app.command()
def improve(
    ctx: typer.Context,
    text: Annotated[
        Optional[str], typer.Argument(help="Text to improve. Reads stdin when omitted.")
    ] = None,
    action: Annotated[
        str, typer.Option("--action", "-a", help="Improvement action, e.g. 'Shorten'.")
    ] = "Improve SEO",
    tone: Annotated[
        Optional[str], typer.Option("--tone", help="New tone for 'Change Tone'.")
    ] = None,
) -> None:
    """Improve existing copy (SEO, tone, length, grammar)."""
    config: CopyforgeConfig = ctx.obj
    original = text if text is not None else sys.stdin.read()
    if not original.strip():
        console.print("[red]Error:[/red] Nothing to improve")
        raise typer.Exit(1)

    try:
        _synthesizer(config).improve(original, action, tone, on_fragment=_print_fragment)
    except SynthesisError as exc:
        console.print()
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(1)
    console.print()


@app.command("export")
def export_cmd(
    ctx: typer.Context,
    record_id: Annotated[str, typer.Argument(help="History record id (or prefix).")],
    fmt: Annotated[ExportFormat, typer.Option("--format", "-f", help="Export format.")] = (
        ExportFormat.MD
    ),
    output: Annotated[
        Optional[Path], typer.Option("--output", "-o", help="Output directory.")
    ] = None,
) -> None:
    """Export a saved generation as text, markdown or HTML."""
    config: CopyforgeConfig = ctx.obj
    record = _resolve_record(_history(config), record_id)
    chunks = parse_chunks(record.generated_content)
    try:
        path = create_exporter(fmt).write(
            chunks, record.params.product_name, output or config.output_dir
        )
    except ValueError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(1)
    console.print(f"[green]Exported to {path}[/green]")


@app.command()
def templates() -> None:
    """List the built-in parameter templates."""
    table = Table(title="Templates")
    table.add_column("Name")
    table.add_column("Settings")
    for template in TEMPLATES:
        settings = ", ".join(f"{k}={v}" for k, v in template.params.items())
        table.add_row(template.name, settings)
    console.print(table)


@app.command()
def theme(
    ctx: typer.Context,
    value: Annotated[
        Optional[str], typer.Argument(help="'light' or 'dark'. Shows current when omitted.")
    ] = None,
) -> None:
    """Show or set the preferred theme."""
    config: CopyforgeConfig = ctx.obj
    prefs = PreferencesStore(config.storage_dir)
    if value is None:
        console.print(prefs.get("theme"))
        return
    try:
        prefs.set("theme", value)
    except ValidationError:
        console.print(f"[red]Error:[/red] Theme must be 'light' or 'dark', got '{value}'")
        raise typer.Exit(1)
    console.print(f"Theme set to {value}")


@app.command()
def prefs(
    ctx: typer.Context,
    newsletter: Annotated[
        Optional[bool],
        typer.Option("--newsletter/--no-newsletter", help="Set the newsletter subscription."),
    ] = None,
) -> None:
    """Show stored preferences, optionally updating the newsletter flag."""
    config: CopyforgeConfig = ctx.obj
    store = PreferencesStore(config.storage_dir)
    if newsletter is not None:
        store.set("newsletter_subscribed", newsletter)

    table = Table(title="Preferences")
    table.add_column("Key")
    table.add_column("Value")
    table.add_row("theme", store.get("theme"))
    table.add_row("generation_count", str(store.get("generation_count")))
    table.add_row("newsletter_subscribed", "yes" if store.get("newsletter_subscribed") else "no")
    console.print(table)


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------


@history_app.command("list")
def history_list(ctx: typer.Context) -> None:
    """List saved generations, newest first."""
    config: CopyforgeConfig = ctx.obj
    records = _history(config).list()
    if not records:
        console.print("[yellow]No history yet.[/yellow]")
        return

    table = Table(title="History")
    table.add_column("ID")
    table.add_column("Created")
    table.add_column("Product")
    table.add_column("Type")
    table.add_column("Sections", justify="right")
    for record in reversed(records):
        table.add_row(
            record.id[:8],
            record.created_at.strftime("%Y-%m-%d %H:%M"),
            record.params.product_name,
            record.params.content_type,
            str(len(parse_chunks(record.generated_content))),
        )
    console.print(table)


@history_app.command("show")
def history_show(
    ctx: typer.Context,
    record_id: Annotated[str, typer.Argument(help="History record id (or prefix).")],
) -> None:
    """Show the sections of a saved generation."""
    config: CopyforgeConfig = ctx.obj
    record = _resolve_record(_history(config), record_id)
    console.print(
        f"[bold]{record.params.product_name}[/bold] - {record.params.content_type}"
        f" ({record.params.tone}, {record.params.country})"
    )
    _render_chunks(parse_chunks(record.generated_content))


@history_app.command("clear")
def history_clear(
    ctx: typer.Context,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation.")] = False,
) -> None:
    """Delete all saved generations."""
    config: CopyforgeConfig = ctx.obj
    if not yes and not typer.confirm(
        "Are you sure you want to clear all history? This action cannot be undone."
    ):
        raise typer.Exit(0)
    removed = _history(config).clear()
    console.print(f"Removed {removed} record(s)")
