from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_PATH_FIELDS = ("data_dir", "output_dir", "sections_file")


class Settings(BaseSettings):
    """
    Paths, log level and the section table used by the worksheet tools.

    Every field can be set from the environment with the ``WORKSHEET_``
    prefix, e.g. ``WORKSHEET_DATA_DIR=~/uploads``.
    """

    model_config = SettingsConfigDict(env_prefix="WORKSHEET_", extra="ignore")

    project_root: Path = Field(
        default_factory=lambda: Path(__file__).resolve().parents[1]
    )

    # uploaded worksheets for `extract-dir`
    data_dir: Path = Field(default=Path("data") / "worksheets")
    output_dir: Path = Field(default=Path("artifacts"))
    log_level: str = Field(default="INFO")
    # replaces the bundled worksheet/extract/sections.yaml when set
    sections_file: Optional[Path] = Field(default=None)

    @field_validator(*_PATH_FIELDS, mode="before")
    @classmethod
    def _to_path(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return Path(v).expanduser() if v else None
        return v.expanduser() if isinstance(v, Path) else v

    @field_validator("log_level", mode="after")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return v.strip().upper() or "INFO"

    @computed_field(return_type=Path)
    def output_dir_extract(self) -> Path:
        target = self.output_dir / "extract"
        target.mkdir(parents=True, exist_ok=True)
        return target

    def _anchored(self, p: Path) -> Path:
        return p if p.is_absolute() else (self.project_root / p).resolve()

    def model_post_init(self, __context) -> None:
        self.data_dir = self._anchored(self.data_dir)
        self.output_dir = self._anchored(self.output_dir)
        if self.sections_file is not None:
            self.sections_file = self._anchored(self.sections_file)
        self.output_dir.mkdir(parents=True, exist_ok=True)


_settings: Settings | None = None


def get_settings() -> Settings:
    """Settings are read from the environment once, on first use."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    global _settings
    _settings = None
