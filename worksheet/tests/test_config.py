from pathlib import Path

import pytest

from worksheet.config import Settings, get_settings, reset_settings


@pytest.fixture(autouse=True)
def _fresh_settings(tmp_path, monkeypatch):
    monkeypatch.setenv("WORKSHEET_OUTPUT_DIR", str(tmp_path / "out"))
    reset_settings()
    yield
    reset_settings()


def test_defaults_resolve_against_project_root(monkeypatch):
    monkeypatch.delenv("WORKSHEET_DATA_DIR", raising=False)
    cfg = get_settings()
    assert cfg.data_dir == (cfg.project_root / "data" / "worksheets").resolve()
    assert cfg.log_level == "INFO"
    assert cfg.sections_file is None


def test_env_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("WORKSHEET_DATA_DIR", "some/relative")
    monkeypatch.setenv("WORKSHEET_LOG_LEVEL", " debug ")
    monkeypatch.setenv("WORKSHEET_SECTIONS_FILE", str(tmp_path / "s.yaml"))
    cfg = get_settings()
    assert cfg.data_dir == (cfg.project_root / "some" / "relative").resolve()
    assert cfg.log_level == "DEBUG"
    assert cfg.sections_file == tmp_path / "s.yaml"


def test_empty_sections_file_means_bundled(monkeypatch):
    monkeypatch.setenv("WORKSHEET_SECTIONS_FILE", "")
    assert get_settings().sections_file is None


def test_output_dirs_are_created(tmp_path):
    cfg = get_settings()
    assert cfg.output_dir == tmp_path / "out"
    assert cfg.output_dir.is_dir()
    assert cfg.output_dir_extract == tmp_path / "out" / "extract"
    assert cfg.output_dir_extract.is_dir()


def test_singleton_until_reset():
    first = get_settings()
    assert get_settings() is first
    reset_settings()
    assert get_settings() is not first


def test_explicit_arguments(tmp_path):
    cfg = Settings(output_dir=tmp_path / "x", data_dir=Path("docs"))
    assert cfg.output_dir == tmp_path / "x"
    assert cfg.data_dir == (cfg.project_root / "docs").resolve()
