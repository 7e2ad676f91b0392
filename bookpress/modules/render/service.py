"""Render service - HTML file to PDF file through a headless browser."""

from pathlib import Path

from bookpress.config import get_settings
from bookpress.shared.errors import (
    BookpressError,
    ExportFailure,
    RenderEngineFailure,
    SourceUnavailable,
)
from bookpress.shared.fs import safe_write
from bookpress.shared.logging import clear_job_context, get_logger, set_job_context

from .engine import BrowserEngine, PlaywrightEngine
from .schemas import LayoutPolicy, RenderJob

logger = get_logger(__name__)


class RenderService:
    """Service for exporting HTML documents to PDF."""

    def __init__(self, engine: BrowserEngine | None = None) -> None:
        self.engine = engine or PlaywrightEngine.from_settings(get_settings())

    async def export(self, job: RenderJob) -> Path:
        """
        Run one render job.

        The source is read before the browser starts, so a missing input
        never spawns a process. The browser session is closed before this
        method returns or raises.

        Returns:
            The destination path, after the PDF is fully on disk

        Raises:
            SourceUnavailable: source HTML cannot be read
            RenderEngineFailure: browser failed to launch, crashed, or timed out
            ExportFailure: PDF generation or the final write failed
        """
        set_job_context(job.job_id)
        try:
            html = self._read_source(job.source_path)
            logger.info(
                f"Rendering {job.source_path} -> {job.destination_path} "
                f"({job.policy.page_format}, {len(html)} chars)"
            )

            try:
                pdf_bytes = await self._render(html, job)
            except BookpressError:
                raise
            except Exception as e:
                raise RenderEngineFailure(
                    f"Browser session failed: {e}",
                    {"engine_error": str(e)},
                ) from e

            self._write_pdf(job.destination_path, pdf_bytes)
            logger.info(f"Generated PDF: {len(pdf_bytes)} bytes")
            return job.destination_path

        except BookpressError as e:
            logger.error(f"Render failed [{e.code}]: {e.message}")
            raise
        finally:
            clear_job_context()

    async def _render(self, html: str, job: RenderJob) -> bytes:
        """Load, settle and print inside one exclusively-owned session."""
        async with self.engine.session() as session:
            await session.load_and_settle(html)
            logger.info("Page settled")

            try:
                return await session.print_pdf(job.policy)
            except ExportFailure as e:
                e.details.setdefault("destination", str(job.destination_path))
                raise
            except BookpressError:
                raise
            except Exception as e:
                raise ExportFailure(
                    f"Print to PDF failed: {e}",
                    {"destination": str(job.destination_path)},
                ) from e

    def _read_source(self, path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise SourceUnavailable(
                f"Cannot read source HTML: {path}",
                {"path": str(path), "reason": str(e)},
            ) from e

    def _write_pdf(self, path: Path, content: bytes) -> Path:
        try:
            return safe_write(path, content)
        except OSError as e:
            raise ExportFailure(
                f"Cannot write PDF to {path}: {e}",
                {"destination": str(path), "reason": str(e)},
            ) from e


async def export_to_pdf(
    source_html_path: str | Path,
    destination_pdf_path: str | Path,
    policy: LayoutPolicy | None = None,
    engine: BrowserEngine | None = None,
) -> Path:
    """Export one HTML file to PDF and return the destination path."""
    job = RenderJob(
        source_path=Path(source_html_path),
        destination_path=Path(destination_pdf_path),
        policy=policy or LayoutPolicy(),
    )
    return await RenderService(engine).export(job)
