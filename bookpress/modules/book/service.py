"""
Book service - assemble Markdown chapters into one self-contained HTML file.

Layout under book_root:
    chapters/   ordered by Settings.chapter_order
    examples/   every *.md, sorted, under an "Examples" heading
    appendix/   every *.md, sorted, under an "Appendix" heading
"""

import re
from collections.abc import Iterator
from html import unescape
from pathlib import Path
from typing import Any

import markdown
from markdown.extensions.toc import slugify

from bookpress.config import Settings, get_settings
from bookpress.shared.errors import DocumentBuildError
from bookpress.shared.fs import safe_write
from bookpress.shared.logging import get_logger

from . import template
from .schemas import BookBuildResult, BookPart, TocEntry

logger = get_logger(__name__)

MARKDOWN_EXTENSIONS = ["fenced_code", "tables", "codehilite", "toc", "sane_lists"]

# Sections appended after the chapters: (heading, settings attribute, anchor prefix)
SECTIONS = [
    ("Examples", "examples_dir", "ex"),
    ("Appendix", "appendix_dir", "ap"),
]


def _anchor_prefix(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


def _walk_tokens(tokens: list[dict[str, Any]]) -> Iterator[dict[str, Any]]:
    for token in tokens:
        yield token
        yield from _walk_tokens(token.get("children", []))


class BookBuilder:
    """Document provider for the handbook."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    def build_document(self) -> Path:
        """Build the book and return the path of the HTML file."""
        return self.build().html_path

    def build(self) -> BookBuildResult:
        s = self.settings
        logger.info(f"Building HTML book from {s.book_root}")

        parts, skipped = self.collect_parts()
        if not parts:
            raise DocumentBuildError(
                f"No Markdown content found under {s.book_root}",
                {"book_root": str(s.book_root), "skipped": skipped},
            )

        content = [template.title_page(s.book_title, s.book_subtitle, s.book_author)]
        toc: list[TocEntry] = []
        for part in parts:
            content.append(f'<div class="chapter-section">{part.html}</div><hr>')
            toc.extend(part.toc)

        css = template.book_stylesheet()
        html = template.page(
            title=s.book_title,
            content="\n".join(content),
            toc=template.toc_list([(e.level, e.anchor, e.label) for e in toc]),
            css=css,
        )

        try:
            safe_write(s.html_path, html)
            # Standalone copy of the stylesheet for browsing the HTML build
            safe_write(s.css_path, css)
        except OSError as e:
            raise DocumentBuildError(
                f"Cannot write book to {s.html_path}: {e}",
                {"path": str(s.html_path), "reason": str(e)},
            ) from e

        logger.info(f"Book built: {s.html_path} ({len(parts)} parts, {len(skipped)} skipped)")
        return BookBuildResult(
            html_path=s.html_path,
            css_path=s.css_path,
            parts=[p.name for p in parts],
            skipped=skipped,
        )

    def collect_parts(self) -> tuple[list[BookPart], list[str]]:
        """Convert every available chapter and section page, in book order."""
        s = self.settings
        parts: list[BookPart] = []
        skipped: list[str] = []

        chapters_dir = s.resolve(s.chapters_dir)
        for filename in s.chapter_order:
            path = chapters_dir / filename
            if not path.is_file():
                logger.warning(f"Chapter {filename} not found, skipping")
                skipped.append(filename)
                continue
            part = self.convert_file(path, prefix=_anchor_prefix(Path(filename).stem))
            if part is not None:
                parts.append(part)

        for heading, attr, prefix in SECTIONS:
            parts.extend(self._collect_section(heading, s.resolve(getattr(s, attr)), prefix))

        return parts, skipped

    def _collect_section(self, heading: str, directory: Path, prefix: str) -> list[BookPart]:
        if not directory.is_dir():
            logger.warning(f"{heading} directory not found: {directory}")
            return []

        parts = []
        for path in sorted(directory.glob("*.md")):
            part = self.convert_file(path, prefix=f"{prefix}-{_anchor_prefix(path.stem)}")
            if part is not None:
                parts.append(part)

        if not parts:
            return []

        # Section heading rides at the top of its first page
        anchor = f"section-{_anchor_prefix(heading)}"
        first = parts[0]
        parts[0] = first.model_copy(update={
            "html": f'<h1 id="{anchor}">{heading}</h1>\n{first.html}',
            "toc": [TocEntry(level=1, anchor=anchor, label=heading), *first.toc],
        })
        return parts

    def convert_file(self, path: Path, prefix: str) -> BookPart | None:
        """
        Convert one Markdown file.

        Heading ids get the given prefix so they stay unique across the
        whole book. Unreadable files are logged and skipped.
        """
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Error processing {path}: {e}")
            return None

        logger.info(f"Processing {path.name}...")
        md = markdown.Markdown(
            extensions=MARKDOWN_EXTENSIONS,
            extension_configs={
                "codehilite": {"css_class": "codehilite", "guess_lang": False},
                "toc": {
                    "permalink": False,
                    "slugify": lambda value, separator: f"{prefix}{separator}{slugify(value, separator)}",
                },
            },
            output_format="html",
        )
        html = md.convert(text)

        toc = [
            TocEntry(level=t["level"], anchor=t["id"], label=unescape(t["name"]))
            for t in _walk_tokens(md.toc_tokens)
            if t["level"] <= 2
        ]
        return BookPart(name=path.name, source=path, html=html, toc=toc)
