"""
End-to-end tests against a real headless Chromium.

Skipped when Chromium is not installed (`playwright install chromium`).
"""

import asyncio
import re
import socket
import time
from contextlib import asynccontextmanager
from pathlib import Path

import pytest
from pdfminer.high_level import extract_text
from pdfminer.pdfpage import PDFPage
from playwright.async_api import async_playwright

from bookpress.modules.render import PlaywrightEngine, export_to_pdf
from bookpress.modules.render.engine import SANDBOX_OPT_OUT_ARGS
from bookpress.shared.errors import RenderEngineFailure

pytestmark = pytest.mark.browser


class RecordingEngine(PlaywrightEngine):
    """PlaywrightEngine that remembers its last session for inspection."""

    last_session = None

    @asynccontextmanager
    async def session(self):
        async with super().session() as session:
            self.last_session = session
            yield session


@pytest.fixture(scope="module", autouse=True)
def chromium_available():
    async def launch_once() -> None:
        async with async_playwright() as p:
            browser = await p.chromium.launch(args=SANDBOX_OPT_OUT_ARGS)
            await browser.close()

    try:
        asyncio.run(launch_once())
    except Exception as e:
        pytest.skip(f"Chromium not available: {e}")


def page_count(path: Path) -> int:
    with open(path, "rb") as f:
        return sum(1 for _ in PDFPage.get_pages(f))


def write_html(path: Path, body: str) -> Path:
    path.write_text(
        f"<!DOCTYPE html><html><head><meta charset='utf-8'><title>Test</title></head>"
        f"<body>{body}</body></html>",
        encoding="utf-8",
    )
    return path


class TestRealBrowser:

    def test_single_heading_is_one_page_with_footer(self, temp_dir: Path) -> None:
        source = write_html(temp_dir / "title.html", "<h1>Title</h1>")
        destination = temp_dir / "title.pdf"
        engine = RecordingEngine()

        asyncio.run(export_to_pdf(source, destination, engine=engine))

        data = destination.read_bytes()
        assert data.startswith(b"%PDF-")
        assert page_count(destination) == 1
        assert re.search(r"1\s*/\s*1", extract_text(destination))
        assert engine.last_session.closed

    def test_pagination_is_repeatable(self, temp_dir: Path) -> None:
        body = "".join(f"<h2>Section {i}</h2><p>{'Lorem ipsum dolor sit amet. ' * 40}</p>" for i in range(12))
        source = write_html(temp_dir / "long.html", body)

        counts = []
        for run in range(2):
            destination = temp_dir / f"long-{run}.pdf"
            asyncio.run(export_to_pdf(source, destination, engine=PlaywrightEngine()))
            counts.append(page_count(destination))

        assert counts[0] > 1
        assert counts[0] == counts[1]

    def test_unresolved_remote_image_never_hangs(self, temp_dir: Path) -> None:
        # Accepts connections but never answers
        server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        server.bind(("127.0.0.1", 0))
        server.listen(8)
        port = server.getsockname()[1]

        source = write_html(temp_dir / "stall.html", f"<h1>Stall</h1><img src='http://127.0.0.1:{port}/never.png'>")
        destination = temp_dir / "stall.pdf"
        engine = RecordingEngine(settle_timeout_ms=2000)

        started = time.monotonic()
        try:
            asyncio.run(export_to_pdf(source, destination, engine=engine))
        except RenderEngineFailure as e:
            assert "did not settle" in e.message
            assert not destination.exists()
        else:
            assert destination.read_bytes().startswith(b"%PDF-")
        finally:
            server.close()

        assert time.monotonic() - started < 30
        assert engine.last_session.closed
