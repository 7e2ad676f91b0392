"""Render module - HTML to PDF rendering using Playwright."""

from .engine import BrowserEngine, BrowserSession, PlaywrightEngine
from .schemas import LayoutPolicy, Margins, RenderJob
from .service import RenderService, export_to_pdf

__all__ = [
    "BrowserEngine",
    "BrowserSession",
    "PlaywrightEngine",
    "LayoutPolicy",
    "Margins",
    "RenderJob",
    "RenderService",
    "export_to_pdf",
]
