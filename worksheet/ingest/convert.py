"""
convert.py

Turns an uploaded worksheet into raw text for the extractor:
- PDF pages via PyMuPDF, one "\\n" between pages
- Word (.docx) paragraphs via python-docx, then table cells row by row
Anything else is rejected before extraction starts.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, List

import docx  # python-docx
import fitz  # PyMuPDF

from worksheet.errors import DocumentConversionError, UnsupportedDocumentError

logger = logging.getLogger(__name__)

PDF_SUFFIXES = (".pdf",)
WORD_SUFFIXES = (".docx",)
SUPPORTED_SUFFIXES = PDF_SUFFIXES + WORD_SUFFIXES


def check_supported(path: Path) -> str:
    """Return the lower-cased suffix or raise UnsupportedDocumentError."""
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise UnsupportedDocumentError(path.name, suffix)
    return suffix


def pdf_text(path: Path) -> str:
    try:
        doc = fitz.open(path)
    except Exception as exc:
        raise DocumentConversionError(
            "Failed to parse PDF document", {"path": str(path), "error": str(exc)}
        ) from exc
    try:
        pages: List[str] = []
        for i in range(doc.page_count):
            pages.append(doc.load_page(i).get_text("text"))
        return "\n".join(pages)
    finally:
        doc.close()


def _docx_table_lines(document) -> Iterator[str]:
    for table in document.tables:
        for row in table.rows:
            for cell in row.cells:
                for paragraph in cell.paragraphs:
                    yield paragraph.text


def word_text(path: Path) -> str:
    try:
        document = docx.Document(str(path))
    except Exception as exc:
        raise DocumentConversionError(
            "Failed to parse Word document", {"path": str(path), "error": str(exc)}
        ) from exc
    lines = [p.text for p in document.paragraphs]
    lines.extend(_docx_table_lines(document))
    return "\n".join(lines)


def load_document_text(path: Path) -> str:
    """
    Raw text of a PDF or Word worksheet.
    Raises UnsupportedDocumentError for other types and
    DocumentConversionError when the converter fails.
    """
    path = Path(path)
    suffix = check_supported(path)
    if not path.is_file():
        raise DocumentConversionError("Document not found", {"path": str(path)})
    text = pdf_text(path) if suffix in PDF_SUFFIXES else word_text(path)
    logger.debug("document text sample (first 500 chars): %r", text[:500])
    return text
