from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from rich import print
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    TextColumn,
    TimeElapsedColumn,
)

from worksheet.config import get_settings
from worksheet.errors import WorksheetError
from worksheet.extract.extractor import extract_document, write_json
from worksheet.extract.sections import SectionTable
from worksheet.ingest.convert import SUPPORTED_SUFFIXES

logger = logging.getLogger(__name__)

DEFAULT_PATTERNS = tuple(f"*{s}" for s in SUPPORTED_SUFFIXES)


def iter_documents(root: Path, patterns: Sequence[str] = DEFAULT_PATTERNS) -> Iterable[Path]:
    seen = set()
    for pattern in patterns:
        seen.update(root.glob(pattern))
    return sorted(seen)


def output_path_for(doc: Path, out_dir: Path) -> Path:
    return out_dir / f"{doc.stem}.worksheet.json"


def extract_directory(
    src_dir: Path,
    *,
    out_dir: Optional[Path] = None,
    patterns: Sequence[str] = DEFAULT_PATTERNS,
    sections: Optional[SectionTable] = None,
    resume: bool = True,
    limit: Optional[int] = None,
    show_progress: bool = True,
) -> Tuple[int, int]:
    """Extract every worksheet under `src_dir`; returns (processed, skipped)."""
    target = out_dir or get_settings().output_dir_extract

    docs: List[Path] = list(iter_documents(src_dir, patterns))
    if limit is not None and limit >= 0:
        docs = docs[:limit]

    processed = 0
    skipped = 0

    def process(doc: Path) -> None:
        nonlocal processed, skipped
        out_path = output_path_for(doc, target)
        if resume and out_path.exists():
            skipped += 1
            print(f"[yellow]skip[/yellow] already exists: {out_path.name}")
            return
        try:
            record = extract_document(doc, sections=sections)
        except WorksheetError as exc:
            skipped += 1
            logger.warning("skipping %s: %s", doc.name, exc)
            return
        write_json(record, out_path)
        processed += 1
        print(f"[green]✓[/green] {doc.name} → {out_path.name}")

    if show_progress:
        with Progress(
            TextColumn("[bold]Extract[/bold]"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            transient=False,
        ) as progress:
            task = progress.add_task("docs", total=len(docs))
            for doc in docs:
                process(doc)
                progress.update(task, advance=1)
    else:
        for doc in docs:
            process(doc)

    return processed, skipped
