"""
Exceptions raised by the worksheet import tools.

Extraction itself never raises: a section that cannot be found is left
empty. The only hard failures happen before extraction, while turning an
uploaded file into text.
"""

from __future__ import annotations

from typing import Any, Optional


class WorksheetError(Exception):
    """Base exception for all worksheet-import errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class UnsupportedDocumentError(WorksheetError):
    """The file is not a PDF or Word document."""

    def __init__(self, filename: str, suffix: str) -> None:
        message = "Unsupported file type. Please upload a PDF or Word document."
        super().__init__(message, {"filename": filename, "suffix": suffix})


class DocumentConversionError(WorksheetError):
    """The PDF/Word converter could not read the document."""

    pass
