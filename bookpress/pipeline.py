"""
Handbook pipeline - build the HTML book, then print it to PDF.
"""

from pathlib import Path

from bookpress.config import Settings, get_settings
from bookpress.modules.book import BookBuilder
from bookpress.modules.render import BrowserEngine, LayoutPolicy, PlaywrightEngine, export_to_pdf
from bookpress.shared.logging import get_logger

logger = get_logger(__name__)


async def build_pdf(
    settings: Settings | None = None,
    policy: LayoutPolicy | None = None,
    engine: BrowserEngine | None = None,
) -> Path:
    """
    Run the document provider and hand its output to the exporter.

    Returns:
        Path of the written PDF
    """
    settings = settings or get_settings()
    logger.info("Building PDF version...")

    html_path = BookBuilder(settings).build_document()
    return await export_to_pdf(
        html_path,
        settings.pdf_path,
        policy=policy,
        engine=engine or PlaywrightEngine.from_settings(settings),
    )
