"""Book module schemas."""

from pathlib import Path

from pydantic import BaseModel, Field


class TocEntry(BaseModel):
    """One heading in the table of contents."""
    level: int
    anchor: str
    label: str


class BookPart(BaseModel):
    """A converted Markdown file (chapter, example, or appendix page)."""
    name: str
    source: Path
    html: str
    toc: list[TocEntry] = Field(default_factory=list)


class BookBuildResult(BaseModel):
    """Outcome of assembling the book."""
    html_path: Path
    css_path: Path
    parts: list[str] = Field(default_factory=list, description="Included part names, in order")
    skipped: list[str] = Field(default_factory=list, description="Listed chapters that were missing")
