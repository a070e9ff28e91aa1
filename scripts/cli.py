from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import List, NoReturn, Optional

import typer
from pydantic import ValidationError
from rich import print
from rich.table import Table

# If not installed in editable mode, add repo root to PYTHONPATH
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from worksheet.config import get_settings
from worksheet.errors import WorksheetError
from worksheet.extract.batch import DEFAULT_PATTERNS, extract_directory, output_path_for
from worksheet.extract.extractor import extract_document, read_json, write_json
from worksheet.extract.schema import ExtractedContent, export_json_schema
from worksheet.extract.sections import SectionTable, load_sections
from worksheet.utils.logging import setup_logging

app = typer.Typer(add_completion=False, help="Worksheet import (PDF/Word → worksheet record)")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    setup_logging(verbose=verbose)


# unreadable input: bad document, missing file, malformed JSON or invalid record
LOAD_ERRORS = (WorksheetError, OSError, ValidationError, json.JSONDecodeError)


def _fail(msg: str) -> NoReturn:
    typer.secho(msg, fg="red")
    raise typer.Exit(1)


def _sections(path: Optional[Path]) -> SectionTable:
    return load_sections(path or get_settings().sections_file)


def _load_record(src: Path, sections: SectionTable) -> ExtractedContent:
    if src.suffix.lower() == ".json":
        return read_json(src)
    return extract_document(src, sections=sections)


def _cells(values) -> str:
    filled = [v for v in values if v]
    return "\n".join(f"• {v}" for v in filled) if filled else "[dim](No data extracted)[/dim]"


def _text(value: str) -> str:
    return value or "[dim](No data extracted)[/dim]"


def preview_table(record: ExtractedContent, title: str) -> Table:
    pv = record.personal_values
    pc = record.productivity_connection
    table = Table(title=title, show_lines=True)
    table.add_column("Field", style="bold")
    table.add_column("Extracted (please verify)")
    table.add_row("What am I most proud of?", _cells(pv.proud_of))
    table.add_row("What did it take?", _cells(pv.achievement))
    table.add_row("What makes me happiest?", _cells(pv.happiness))
    table.add_row("Who do I find inspiring?", _cells(pv.inspiration))
    table.add_row("My values", _text(pc.core_values))
    table.add_row("Productivity impact", _text(pc.value_impact))
    table.add_row("Goal", _text(record.goals.description))
    table.add_row("Goal impact", _cells(record.goals.impact))
    table.add_row("Actions", _cells(record.workshop_output.actions))
    table.add_row("Reflections", _text(record.workshop_output.reflections))
    return table


@app.command()
def extract(
    src: Path = typer.Argument(..., help="PDF or Word (.docx) worksheet"),
    out: Path = typer.Option(
        None, "--out", help="Output JSON (defaults to <output_dir>/extract/<stem>.worksheet.json)"
    ),
    sections: Path = typer.Option(None, "--sections", help="Alternative sections.yaml"),
):
    """
    Extract one worksheet document into a JSON record.
    """
    try:
        record = extract_document(src, sections=_sections(sections))
    except WorksheetError as exc:
        _fail(str(exc))

    if out is None:
        out = output_path_for(src, get_settings().output_dir_extract)
    write_json(record, out)
    print(f"[green]✓[/green] {src.name} → {out}")


@app.command("extract-dir")
def extract_dir(
    src: Path = typer.Argument(
        None, help="Directory of worksheets; defaults to WORKSHEET_DATA_DIR"
    ),
    outdir: Path = typer.Option(None, "--outdir", help="Output directory"),
    pattern: List[str] = typer.Option(
        list(DEFAULT_PATTERNS), "--pattern", help="Glob pattern(s) for documents"
    ),
    no_resume: bool = typer.Option(
        False, "--no-resume", help="Re-extract documents that already have output"
    ),
    limit: int = typer.Option(None, "--limit", help="Process at most N documents"),
    sections: Path = typer.Option(None, "--sections", help="Alternative sections.yaml"),
):
    """
    Extract every worksheet in a directory.
    Precedence: CLI args > env (WORKSHEET_DATA_DIR/WORKSHEET_OUTPUT_DIR) > repo defaults.
    """
    cfg = get_settings()
    effective_src = src or cfg.data_dir
    if not effective_src.is_dir():
        _fail(f"Not a directory: {effective_src}")

    processed, skipped = extract_directory(
        effective_src,
        out_dir=outdir,
        patterns=pattern,
        sections=_sections(sections),
        resume=not no_resume,
        limit=limit,
    )
    print(f"[green]done[/green] processed={processed} skipped={skipped}")


@app.command()
def show(
    src: Path = typer.Argument(..., help="Worksheet document or saved *.worksheet.json"),
    sections: Path = typer.Option(None, "--sections", help="Alternative sections.yaml"),
):
    """Preview the extracted fields before applying them to a worksheet."""
    try:
        record = _load_record(src, _sections(sections))
    except LOAD_ERRORS as exc:
        _fail(f"Cannot read {src.name}: {exc}")
    print(preview_table(record, title=src.name))


@app.command("validate")
def validate_file(json_path: Path):
    """Validate a saved *.worksheet.json against the record schema."""
    try:
        read_json(json_path)
    except LOAD_ERRORS as exc:
        _fail(f"Invalid record {json_path.name}: {exc}")
    print("[green]OK[/green]")


@app.command()
def schema(
    out: Path = typer.Option(None, "--out", help="Write the JSON schema here instead of stdout"),
):
    """Export the JSON schema of the extraction record."""
    text = json.dumps(export_json_schema(), indent=2)
    if out is None:
        typer.echo(text)
        return
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(text, encoding="utf-8")
    print(f"[green]✓[/green] wrote {out}")


if __name__ == "__main__":
    app()
