"""Book module - assemble Markdown chapters into a self-contained HTML book."""

from .schemas import BookBuildResult, BookPart, TocEntry
from .service import BookBuilder

__all__ = ["BookBuilder", "BookBuildResult", "BookPart", "TocEntry"]
