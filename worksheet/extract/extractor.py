from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from worksheet.extract.layout import detect_layout
from worksheet.extract.mapper import map_fields
from worksheet.extract.schema import ExtractedContent
from worksheet.extract.sections import SectionTable, load_sections
from worksheet.ingest.convert import load_document_text
from worksheet.utils.textnorm import normalize_lines

logger = logging.getLogger(__name__)


# ---------- Orchestration ----------


def extract(raw_text: Optional[str], sections: Optional[SectionTable] = None) -> ExtractedContent:
    """
    Map raw worksheet text onto the fixed record.

    Never raises: any unexpected failure is logged and the all-empty
    record is returned so the caller can still show a review step.
    """
    try:
        table = sections if sections is not None else load_sections()
        lines = normalize_lines(raw_text)
        if not lines:
            return ExtractedContent.empty()
        layout = detect_layout(lines)
        logger.info(
            "extracting %d lines as %s layout%s",
            len(lines),
            layout.layout,
            f" (marker {layout.marker!r} at line {layout.line_index})" if layout.marker else "",
        )
        return map_fields(lines, layout.layout, table)
    except Exception:
        logger.exception("extraction failed; returning empty record")
        return ExtractedContent.empty()


def extract_document(
    path: Path, sections: Optional[SectionTable] = None
) -> ExtractedContent:
    """
    Convert a PDF/Word file to text and extract it.
    Only the upstream type check and converter errors propagate.
    """
    text = load_document_text(Path(path))
    return extract(text, sections=sections)


def to_json(record: ExtractedContent) -> str:
    return json.dumps(record.to_dict(by_alias=True), ensure_ascii=False, indent=2)


def write_json(record: ExtractedContent, out_path: Path) -> None:
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(to_json(record) + "\n", encoding="utf-8")


def read_json(path: Path) -> ExtractedContent:
    """Load and validate a saved record."""
    return ExtractedContent.model_validate(json.loads(path.read_text(encoding="utf-8")))
