"""CLI commands for SOAP Scribe."""

import asyncio
import json
import mimetypes
import sys
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from soap_scribe.config import get_settings

app = typer.Typer(
    name="soap-scribe",
    help="Transcript-to-SOAP-note generation for physical therapists and chiropractors",
    add_completion=False,
)
console = Console()


def get_generator():
    """Get a note generator bound to the configured LLM router."""
    from soap_scribe.llm import create_router_from_settings
    from soap_scribe.notes import NoteGenerator

    settings = get_settings()
    return NoteGenerator(
        llm=create_router_from_settings(),
        temperature=settings.generation_temperature,
        max_tokens=settings.generation_max_tokens,
    )


def _read_text(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    path = Path(source)
    if not path.exists():
        console.print(f"[red]File not found: {path}[/red]")
        raise typer.Exit(1)
    return path.read_text()


def _read_json(path: Path) -> Any:
    if not path.exists():
        console.print(f"[red]File not found: {path}[/red]")
        raise typer.Exit(1)
    try:
        return json.loads(path.read_text())
    except json.JSONDecodeError as e:
        console.print(f"[red]Invalid JSON in {path}: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def templates(
    profession: Optional[str] = typer.Option(
        None, "--profession", "-p", help="physical_therapy or chiropractic"
    ),
):
    """List available note templates."""
    from soap_scribe.templates import Profession, list_templates

    try:
        wanted = Profession(profession) if profession else None
    except ValueError:
        console.print(f"[red]Invalid profession: {profession}. Use physical_therapy or chiropractic[/red]")
        raise typer.Exit(1)

    table = Table(title="Templates")
    table.add_column("Key", no_wrap=True)
    table.add_column("Name")
    table.add_column("Profession")
    table.add_column("Session")
    table.add_column("Description")
    for template in list_templates(wanted):
        table.add_row(
            template.key,
            template.name,
            template.profession.value,
            template.session_type,
            template.description,
        )
    console.print(table)


@app.command()
def show(
    key: str = typer.Argument(..., help="Template key"),
    empty: bool = typer.Option(False, "--empty", help="Show the blank note instead of the schema"),
):
    """Print a template's schema (or blank note) as JSON."""
    from soap_scribe.notes import empty_note
    from soap_scribe.templates import TemplateNotFoundError, get_template

    try:
        template = get_template(key)
    except TemplateNotFoundError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    data = empty_note(key) if empty else template.build_schema()
    console.print_json(json.dumps(data))


@app.command()
def suggest(
    source: str = typer.Argument(..., help="Transcript file, or - for stdin"),
):
    """Suggest a body-region template for a transcript."""
    from soap_scribe.templates import suggest_template

    suggestion = suggest_template(_read_text(source))

    console.print(
        f"Suggested template: [bold]{suggestion.suggested}[/bold] "
        f"(confidence {suggestion.confidence:.0%})"
    )
    table = Table(title="Keyword Scores")
    table.add_column("Template")
    table.add_column("Score", justify="right")
    for key, score in sorted(suggestion.scores.items(), key=lambda item: -item[1]):
        table.add_row(key, str(score))
    console.print(table)


@app.command()
def generate(
    source: str = typer.Argument(..., help="Transcript file, or - for stdin"),
    template_key: Optional[str] = typer.Option(None, "--template", "-t", help="Built-in template key"),
    custom: Optional[Path] = typer.Option(None, "--custom", "-c", help="JSON file with a custom template"),
    profession: Optional[str] = typer.Option(
        None, "--profession", "-p", help="physical_therapy or chiropractic"
    ),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the note JSON to a file"),
    output_json: bool = typer.Option(False, "--json", help="Output the full result as JSON"),
):
    """Generate a SOAP note from a transcript."""
    from soap_scribe.templates import (
        Profession,
        TemplateError,
        build_custom_template,
    )

    try:
        wanted = Profession(profession) if profession else None
    except ValueError:
        console.print(f"[red]Invalid profession: {profession}. Use physical_therapy or chiropractic[/red]")
        raise typer.Exit(1)

    transcript = _read_text(source)

    try:
        template = None
        if custom:
            template = build_custom_template(_read_json(custom), wanted or Profession.PHYSICAL_THERAPY)

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            task = progress.add_task("Generating SOAP note...", total=None)
            generator = get_generator()
            result = asyncio.run(
                generator.generate(transcript, template_key, template=template, profession=wanted)
            )
            progress.update(task, completed=True)
    except TemplateError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    if output:
        output.write_text(json.dumps(result.data, indent=2))
        console.print(f"[green]Note written to {output}[/green]")

    if output_json:
        console.print_json(result.model_dump_json())
    else:
        _display_result(result)

    if not result.success:
        raise typer.Exit(2)


def _section_text(section: dict[str, Any]) -> str:
    kind = section.get("type")
    if kind == "wysiwyg":
        return section.get("content") or "[dim](empty)[/dim]"
    if kind == "list":
        items = section.get("items") or []
        return "\n".join(f"- {item}" for item in items) or "[dim](none)[/dim]"
    if kind == "composite":
        parts = []
        for key, sub in (section.get("fields") or {}).items():
            label = sub.get("label") or key.replace("_", " ").title()
            parts.append(f"[bold]{label}:[/bold]\n{_section_text(sub)}")
        return "\n\n".join(parts)
    return ""


def _section_table(title: str, section: dict[str, Any]) -> Table:
    columns = section.get("columns") or ["test", "result", "notes"]
    categorized = "categories" in section
    table = Table(title=title)
    if categorized:
        table.add_column("Category")
    for column in columns:
        table.add_column(column.title())

    if categorized:
        for category in section.get("categories") or []:
            for row in category.get("rows") or []:
                table.add_row(category.get("name", ""), *(str(row.get(c, "")) for c in columns))
    else:
        for row in section.get("rows") or []:
            table.add_row(*(str(row.get(c, "")) for c in columns))
    return table


def _display_result(result):
    """Display a generation result in rich format."""
    status_color = "green" if result.success else "red"
    console.print(
        Panel(
            f"[bold]Template:[/bold] {result.template_key}\n"
            f"[bold]Success:[/bold] {result.success}\n"
            f"[bold]Confidence:[/bold] {result.confidence.overall:.0%}"
            + (f"\n[bold]Error:[/bold] {result.error}" if result.error else ""),
            title="SOAP Note",
            border_style=status_color,
        )
    )

    for key, section in result.data.items():
        title = section.get("label") or key.title()
        if section.get("type") == "table":
            console.print(_section_table(title, section))
            continue
        if section.get("type") == "composite":
            tables = {k: s for k, s in (section.get("fields") or {}).items() if s.get("type") == "table"}
            text_fields = {k: s for k, s in (section.get("fields") or {}).items() if k not in tables}
            if text_fields:
                console.print(Panel(_section_text({"type": "composite", "fields": text_fields}), title=title))
            for sub_key, sub in tables.items():
                console.print(_section_table(sub.get("label") or sub_key.title(), sub))
            continue
        console.print(Panel(_section_text(section), title=title))

    if result.validation.errors:
        console.print(f"[yellow]Validation: {', '.join(result.validation.errors)}[/yellow]")


@app.command()
def validate(
    note_file: Path = typer.Argument(..., help="JSON file with a note"),
    template_key: Optional[str] = typer.Option(
        None, "--template", "-t", help="Also require every section of this template"
    ),
):
    """Validate a note's structure."""
    from soap_scribe.notes import validate_note
    from soap_scribe.templates import TemplateNotFoundError, get_template

    note = _read_json(note_file)
    schema = None
    if template_key:
        try:
            schema = get_template(template_key).build_schema()
        except TemplateNotFoundError as e:
            console.print(f"[red]{e}[/red]")
            raise typer.Exit(1)

    result = validate_note(note, schema)
    if result.is_valid:
        console.print("[green]Note is valid[/green]")
        return

    for error in result.errors:
        console.print(f"[red]- {error}[/red]")
    raise typer.Exit(1)


@app.command()
def transcribe(
    audio_file: Path = typer.Argument(..., help="Recorded session audio"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the transcript to a file"),
):
    """Transcribe a recorded session with Whisper."""
    from soap_scribe.transcription import TranscriptionError, create_transcriber_from_settings

    if not audio_file.exists():
        console.print(f"[red]File not found: {audio_file}[/red]")
        raise typer.Exit(1)

    if not get_settings().has_openai_key:
        console.print("[red]OPENAI_API_KEY is required for transcription[/red]")
        raise typer.Exit(1)

    content_type = mimetypes.guess_type(audio_file.name)[0]
    transcriber = create_transcriber_from_settings()

    try:
        transcript = asyncio.run(
            transcriber.transcribe(audio_file.read_bytes(), filename=audio_file.name, content_type=content_type)
        )
    except TranscriptionError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    if output:
        output.write_text(transcript)
        console.print(f"[green]Transcript written to {output}[/green]")
    else:
        console.print(transcript)


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", "-h", help="Host to bind"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port to bind"),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload"),
):
    """Start the REST API server."""
    import uvicorn

    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port

    console.print(f"Starting SOAP Scribe API server on {host}:{port}")
    uvicorn.run(
        "soap_scribe.api.app:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
    )


@app.command()
def health():
    """Check LLM provider health."""
    from soap_scribe.llm import create_router_from_settings

    console.print("[bold]SOAP Scribe Health Check[/bold]\n")

    llm = create_router_from_settings()
    health_status = asyncio.run(llm.health_check())

    table = Table(title="LLM Status")
    table.add_column("Provider")
    table.add_column("Status")
    for provider, status in health_status.items():
        status_str = "[green]OK[/green]" if status else "[red]UNAVAILABLE[/red]"
        table.add_row(provider, status_str)
    console.print(table)

    if not get_settings().has_openai_key:
        console.print("[yellow]Transcription: OPENAI_API_KEY not set[/yellow]")


@app.command()
def stats():
    """Show call counts and error rates from the observability logs."""
    from soap_scribe.observability import get_observability_logger

    obs = get_observability_logger()

    table = Table(title="Usage")
    table.add_column("Log", no_wrap=True)
    table.add_column("Total", justify="right")
    table.add_column("Errors", justify="right")
    table.add_column("Avg ms", justify="right")
    for log_type in obs.log_types:
        summary = obs.get_stats(log_type)
        if not summary["total"]:
            table.add_row(log_type, "0", "-", "-")
            continue
        table.add_row(
            log_type,
            str(summary["total"]),
            f"{summary['errors']} ({summary['error_rate']:.0%})",
            f"{summary['avg_duration_ms']:.0f}",
        )
    console.print(table)


@app.command()
def version():
    """Show version."""
    from soap_scribe import __version__

    console.print(f"SOAP Scribe v{__version__}")
