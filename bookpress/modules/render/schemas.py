"""Render module schemas."""

import re
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bookpress.shared.ids import generate_job_id


# Formats Chromium's print-to-PDF accepts, keyed by lowercase name
PAGE_FORMATS = {
    "letter": "Letter",
    "legal": "Legal",
    "tabloid": "Tabloid",
    "ledger": "Ledger",
    "a0": "A0",
    "a1": "A1",
    "a2": "A2",
    "a3": "A3",
    "a4": "A4",
    "a5": "A5",
    "a6": "A6",
}

_CSS_LENGTH = re.compile(r"^(\d*\.)?\d+(px|in|cm|mm)?$")

HEADER_TEMPLATE = """
<div style="width: 100%; font-size: 10px; padding: 5px 0; text-align: center; color: #666;">
  <span class="title"></span>
</div>
"""

FOOTER_TEMPLATE = """
<div style="width: 100%; font-size: 10px; padding: 5px 0; text-align: center; color: #666;">
  <span class="pageNumber"></span> / <span class="totalPages"></span>
</div>
"""


class Margins(BaseModel):
    """Page margins as CSS lengths."""

    model_config = ConfigDict(frozen=True)

    top: str = "1in"
    right: str = "1in"
    bottom: str = "1in"
    left: str = "1in"

    @field_validator("top", "right", "bottom", "left")
    @classmethod
    def _check_length(cls, value: str) -> str:
        value = value.strip()
        if not _CSS_LENGTH.match(value):
            raise ValueError(f"Invalid margin length: {value!r}")
        return value

    @classmethod
    def uniform(cls, length: str) -> "Margins":
        return cls(top=length, right=length, bottom=length, left=length)


class LayoutPolicy(BaseModel):
    """Print layout applied to one export. Immutable."""

    model_config = ConfigDict(frozen=True)

    page_format: str = Field(default="A4", description="Letter, Legal, Tabloid, Ledger, A0-A6")
    margins: Margins = Field(default_factory=Margins)
    print_background: bool = True
    display_header_footer: bool = True
    header_template: str = HEADER_TEMPLATE
    footer_template: str = FOOTER_TEMPLATE

    @field_validator("page_format")
    @classmethod
    def _normalize_format(cls, value: str) -> str:
        try:
            return PAGE_FORMATS[value.strip().lower()]
        except KeyError:
            raise ValueError(f"Unknown page format: {value!r}") from None

    def to_pdf_options(self) -> dict[str, Any]:
        """Keyword arguments for Playwright's page.pdf()."""
        return {
            "format": self.page_format,
            "margin": self.margins.model_dump(),
            "print_background": self.print_background,
            "display_header_footer": self.display_header_footer,
            "header_template": self.header_template,
            "footer_template": self.footer_template,
        }


class RenderJob(BaseModel):
    """One source-to-destination conversion request."""

    model_config = ConfigDict(frozen=True)

    source_path: Path
    destination_path: Path
    policy: LayoutPolicy = Field(default_factory=LayoutPolicy)
    job_id: str = Field(default_factory=generate_job_id)
