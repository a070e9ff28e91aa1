from __future__ import annotations

from pathlib import Path
from typing import List

import docx
import fitz
import pytest

from worksheet.errors import DocumentConversionError, UnsupportedDocumentError
from worksheet.extract.extractor import extract_document
from worksheet.ingest.convert import check_supported, load_document_text

LINES = [
    "What am I most proud of?",
    "Raising two kind and curious children.",
    "What am I learning?",
    "Small routines compound into big results.",
]


def _make_pdf(path: Path, lines: List[str]) -> Path:
    doc = fitz.open()
    page = doc.new_page()
    y = 72
    for ln in lines:
        page.insert_text((72, y), ln, fontsize=11)
        y += 18
    doc.save(path)
    doc.close()
    return path


def _make_docx(path: Path, lines: List[str], cells: List[str] = ()) -> Path:
    document = docx.Document()
    for ln in lines:
        document.add_paragraph(ln)
    if cells:
        table = document.add_table(rows=len(cells), cols=1)
        for row, text in zip(table.rows, cells):
            row.cells[0].text = text
    document.save(str(path))
    return path


@pytest.mark.parametrize("name", ["notes.txt", "legacy.doc", "scan.png", "noext"])
def test_unsupported_types_are_rejected(tmp_path, name):
    path = tmp_path / name
    path.write_bytes(b"whatever")
    with pytest.raises(UnsupportedDocumentError) as exc:
        load_document_text(path)
    assert "Please upload a PDF or Word document" in str(exc.value)
    assert exc.value.details["filename"] == name


def test_suffix_check_ignores_case():
    assert check_supported(Path("Sheet.PDF")) == ".pdf"
    assert check_supported(Path("sheet.docx")) == ".docx"


def test_missing_file(tmp_path):
    with pytest.raises(DocumentConversionError, match="not found"):
        load_document_text(tmp_path / "gone.pdf")


def test_corrupt_pdf(tmp_path):
    path = tmp_path / "broken.pdf"
    path.write_bytes(b"this is not a pdf")
    with pytest.raises(DocumentConversionError):
        load_document_text(path)


def test_corrupt_docx(tmp_path):
    path = tmp_path / "broken.docx"
    path.write_bytes(b"this is not a zip")
    with pytest.raises(DocumentConversionError):
        load_document_text(path)


def test_pdf_text(tmp_path):
    path = _make_pdf(tmp_path / "sheet.pdf", LINES)
    text = load_document_text(path)
    for ln in LINES:
        assert ln in text


def test_pdf_pages_are_joined(tmp_path):
    path = tmp_path / "two.pdf"
    doc = fitz.open()
    for ln in ("Page one text", "Page two text"):
        doc.new_page().insert_text((72, 72), ln)
    doc.save(path)
    doc.close()
    text = load_document_text(path)
    assert text.index("Page one text") < text.index("Page two text")


def test_docx_paragraphs_then_table_cells(tmp_path):
    path = _make_docx(
        tmp_path / "sheet.docx",
        ["What am I learning?"],
        cells=["Small routines compound into big results."],
    )
    text = load_document_text(path)
    assert text.index("What am I learning?") < text.index("Small routines")


def test_extract_pdf_document(tmp_path):
    record = extract_document(_make_pdf(tmp_path / "sheet.pdf", LINES))
    assert record.personal_values.proud_of[0] == "Raising two kind and curious children."
    assert record.workshop_output.reflections == "Small routines compound into big results."


def test_extract_docx_document(tmp_path):
    record = extract_document(_make_docx(tmp_path / "sheet.docx", LINES))
    assert record.personal_values.proud_of[0] == "Raising two kind and curious children."
    assert record.workshop_output.reflections == "Small routines compound into big results."
