"""
Error taxonomy for bookpress.

Every failure surfaced to a caller is a BookpressError subclass with a
stable code, so the CLI can report it and exit non-zero.
"""

from typing import Any


class BookpressError(Exception):
    """Base error for all bookpress failures."""

    code = "BOOKPRESS_ERROR"
    exit_code = 1

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Serialize error for logs and structured output."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class SourceUnavailable(BookpressError):
    """The HTML input cannot be read."""

    code = "SOURCE_UNAVAILABLE"


class RenderEngineFailure(BookpressError):
    """The browser failed to start, crashed, or never settled."""

    code = "RENDER_ENGINE_FAILURE"


class ExportFailure(BookpressError):
    """The print-to-PDF step or the final write failed."""

    code = "EXPORT_FAILURE"


class DocumentBuildError(BookpressError):
    """The HTML document could not be assembled."""

    code = "DOCUMENT_BUILD_ERROR"
