"""
Browser engine interface and the Playwright/Chromium implementation.

An engine hands out sessions through an async context manager. Leaving the
context always closes the browser, whatever happened inside it.
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from contextlib import AbstractAsyncContextManager, asynccontextmanager

from playwright.async_api import Browser, Page, async_playwright
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from bookpress.config import Settings
from bookpress.shared.errors import ExportFailure, RenderEngineFailure
from bookpress.shared.logging import get_logger

from .schemas import LayoutPolicy

logger = get_logger(__name__)

SANDBOX_OPT_OUT_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]


class BrowserSession(ABC):
    """One browser process with one page, owned by a single render job."""

    @property
    @abstractmethod
    def closed(self) -> bool:
        """True once the browser process has been released."""

    @abstractmethod
    async def load_and_settle(self, html: str) -> None:
        """
        Set the page content and wait until the page is quiescent.

        Raises:
            RenderEngineFailure: timeout, crash, or any engine error
        """

    @abstractmethod
    async def print_pdf(self, policy: LayoutPolicy) -> bytes:
        """
        Print the loaded page to PDF.

        Raises:
            ExportFailure: the engine rejected the print request
            RenderEngineFailure: the browser went away mid-print
        """


class BrowserEngine(ABC):
    """Factory for exclusively-owned browser sessions."""

    @abstractmethod
    def session(self) -> AbstractAsyncContextManager[BrowserSession]:
        """Launch a browser and yield a session; close it on exit."""


class PlaywrightSession(BrowserSession):
    """BrowserSession backed by a Playwright Chromium browser."""

    def __init__(
        self,
        browser: Browser,
        settle_timeout_ms: int,
        ready_expression: str | None = None,
    ) -> None:
        self._browser = browser
        self._page: Page | None = None
        self.settle_timeout_ms = settle_timeout_ms
        self.ready_expression = ready_expression

    @property
    def closed(self) -> bool:
        return not self._browser.is_connected()

    @property
    def page(self) -> Page:
        if self._page is None:
            raise RenderEngineFailure("Browser session has no open page")
        return self._page

    async def open_page(self) -> None:
        try:
            self._page = await self._browser.new_page()
        except PlaywrightError as exc:
            raise RenderEngineFailure(
                f"Could not open a browser page: {exc}",
                {"engine_error": str(exc)},
            ) from exc

    async def load_and_settle(self, html: str) -> None:
        try:
            await self.page.set_content(
                html,
                wait_until="networkidle",
                timeout=self.settle_timeout_ms,
            )
            if self.ready_expression:
                logger.debug(f"Waiting for ready expression: {self.ready_expression}")
                await self.page.wait_for_function(
                    self.ready_expression,
                    timeout=self.settle_timeout_ms,
                )
        except PlaywrightTimeoutError as exc:
            raise RenderEngineFailure(
                f"Page did not settle within {self.settle_timeout_ms} ms",
                {"engine_error": str(exc), "timeout_ms": self.settle_timeout_ms},
            ) from exc
        except PlaywrightError as exc:
            raise RenderEngineFailure(
                f"Browser failed while loading content: {exc}",
                {"engine_error": str(exc)},
            ) from exc

    async def print_pdf(self, policy: LayoutPolicy) -> bytes:
        try:
            return await self.page.pdf(**policy.to_pdf_options())
        except PlaywrightError as exc:
            if self.closed:
                raise RenderEngineFailure(
                    f"Browser disconnected during PDF export: {exc}",
                    {"engine_error": str(exc)},
                ) from exc
            raise ExportFailure(
                f"Print to PDF failed: {exc}",
                {
                    "engine_error": str(exc),
                    "page_format": policy.page_format,
                    "margins": policy.margins.model_dump(),
                },
            ) from exc

    async def close(self) -> None:
        if self._browser.is_connected():
            await self._browser.close()


class PlaywrightEngine(BrowserEngine):
    """Headless Chromium through Playwright's async API."""

    def __init__(
        self,
        no_sandbox: bool = True,
        launch_timeout_ms: int = 30_000,
        settle_timeout_ms: int = 30_000,
        ready_expression: str | None = None,
    ) -> None:
        self.launch_args = list(SANDBOX_OPT_OUT_ARGS) if no_sandbox else []
        self.launch_timeout_ms = launch_timeout_ms
        self.settle_timeout_ms = settle_timeout_ms
        self.ready_expression = ready_expression

    @classmethod
    def from_settings(cls, settings: Settings) -> "PlaywrightEngine":
        return cls(
            no_sandbox=settings.no_sandbox,
            launch_timeout_ms=settings.launch_timeout_ms,
            settle_timeout_ms=settings.settle_timeout_ms,
            ready_expression=settings.ready_expression,
        )

    @asynccontextmanager
    async def session(self) -> AsyncIterator[PlaywrightSession]:
        async with async_playwright() as p:
            try:
                browser = await p.chromium.launch(
                    headless=True,
                    args=self.launch_args,
                    timeout=self.launch_timeout_ms,
                )
            except PlaywrightError as exc:
                raise RenderEngineFailure(
                    f"Could not launch Chromium: {exc}",
                    {"engine_error": str(exc), "args": self.launch_args},
                ) from exc

            logger.info(f"Launched Chromium {browser.version}")
            session = PlaywrightSession(
                browser,
                settle_timeout_ms=self.settle_timeout_ms,
                ready_expression=self.ready_expression,
            )

            try:
                await session.open_page()
                yield session
            except BaseException:
                # The failure already propagating wins over a failed close
                try:
                    await session.close()
                except PlaywrightError as close_exc:
                    logger.warning(f"Error closing browser after failure: {close_exc}")
                raise
            else:
                await session.close()
            finally:
                logger.info("Browser closed")
