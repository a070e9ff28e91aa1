"""
Logging setup for the worksheet tools.

Library modules only create loggers via ``logging.getLogger(__name__)``;
the CLI calls :func:`setup_logging` once at startup.
"""

from __future__ import annotations

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(log_level: Optional[str] = None, *, verbose: bool = False) -> None:
    """Configure the root logger with a rich console handler on stderr."""
    if log_level is None:
        from worksheet.config import get_settings

        log_level = get_settings().log_level
    level = "DEBUG" if verbose else log_level.upper()

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console_handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
        rich_tracebacks=True,
    )
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)

    # PyMuPDF and python-docx are chatty at DEBUG
    logging.getLogger("fitz").setLevel(logging.WARNING)
    logging.getLogger("docx").setLevel(logging.WARNING)
