from __future__ import annotations

import json
from pathlib import Path

import docx
import pytest
from typer.testing import CliRunner

from scripts.cli import app
from worksheet.config import reset_settings
from worksheet.extract.extractor import read_json, write_json
from worksheet.extract.schema import ExtractedContent, Goals

runner = CliRunner()


@pytest.fixture(autouse=True)
def _settings(tmp_path, monkeypatch):
    monkeypatch.setenv("WORKSHEET_OUTPUT_DIR", str(tmp_path / "artifacts"))
    monkeypatch.setenv("WORKSHEET_DATA_DIR", str(tmp_path / "docs"))
    reset_settings()
    yield
    reset_settings()


def _make_docx(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    document = docx.Document()
    document.add_paragraph("What will be different for you?")
    document.add_paragraph("I will finish my work before dinner every day.")
    document.add_paragraph("What am I learning?")
    document.add_paragraph("Small routines compound into big results.")
    document.save(str(path))
    return path


def test_extract_with_out(tmp_path):
    src = _make_docx(tmp_path / "sheet.docx")
    out = tmp_path / "sheet.json"
    result = runner.invoke(app, ["extract", str(src), "--out", str(out)])
    assert result.exit_code == 0, result.output
    record = read_json(out)
    assert record.goals.description == "I will finish my work before dinner every day."
    assert record.workshop_output.reflections == "Small routines compound into big results."


def test_extract_default_output_location(tmp_path):
    src = _make_docx(tmp_path / "sheet.docx")
    result = runner.invoke(app, ["extract", str(src)])
    assert result.exit_code == 0, result.output
    assert (tmp_path / "artifacts" / "extract" / "sheet.worksheet.json").is_file()


def test_extract_unsupported_file(tmp_path):
    src = tmp_path / "notes.txt"
    src.write_text("hello", encoding="utf-8")
    result = runner.invoke(app, ["extract", str(src)])
    assert result.exit_code == 1
    assert "Unsupported file type" in result.output


def test_extract_dir_resumes(tmp_path):
    _make_docx(tmp_path / "docs" / "a.docx")
    _make_docx(tmp_path / "docs" / "b.docx")
    (tmp_path / "docs" / "ignored.txt").write_text("x", encoding="utf-8")
    outdir = tmp_path / "batch"

    result = runner.invoke(app, ["extract-dir", "--outdir", str(outdir)])
    assert result.exit_code == 0, result.output
    assert "processed=2 skipped=0" in result.output
    assert sorted(p.name for p in outdir.iterdir()) == [
        "a.worksheet.json",
        "b.worksheet.json",
    ]

    again = runner.invoke(app, ["extract-dir", "--outdir", str(outdir)])
    assert "processed=0 skipped=2" in again.output


def test_extract_dir_missing_directory(tmp_path):
    result = runner.invoke(app, ["extract-dir", str(tmp_path / "nope")])
    assert result.exit_code == 1


def test_show_saved_record(tmp_path):
    path = tmp_path / "r.worksheet.json"
    write_json(ExtractedContent(goals=Goals(description="Leave on time")), path)
    result = runner.invoke(app, ["show", str(path)])
    assert result.exit_code == 0, result.output
    assert "Leave on time" in result.output
    assert "No data extracted" in result.output


def test_validate(tmp_path):
    path = tmp_path / "r.worksheet.json"
    write_json(ExtractedContent.empty(), path)
    result = runner.invoke(app, ["validate", str(path)])
    assert result.exit_code == 0
    assert "OK" in result.output


def test_validate_rejects_bad_record(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"goals": {"impact": "x", "extra": 1}}), encoding="utf-8")
    result = runner.invoke(app, ["validate", str(path)])
    assert result.exit_code == 1
    assert "Invalid record bad.json" in result.output
    assert isinstance(result.exception, SystemExit)


def test_validate_rejects_malformed_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    result = runner.invoke(app, ["validate", str(path)])
    assert result.exit_code == 1
    assert "Invalid record broken.json" in result.output


def test_show_rejects_bad_record(tmp_path):
    path = tmp_path / "bad.worksheet.json"
    path.write_text(json.dumps({"personalValues": {"pride": []}}), encoding="utf-8")
    result = runner.invoke(app, ["show", str(path)])
    assert result.exit_code == 1
    assert "Cannot read bad.worksheet.json" in result.output
    assert isinstance(result.exception, SystemExit)


def test_schema_to_stdout_and_file(tmp_path):
    result = runner.invoke(app, ["schema"])
    assert result.exit_code == 0
    assert "personalValues" in result.output

    out = tmp_path / "schema.json"
    result = runner.invoke(app, ["schema", "--out", str(out)])
    assert result.exit_code == 0
    assert "workshopOutput" in json.loads(out.read_text(encoding="utf-8"))["properties"]
