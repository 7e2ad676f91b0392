"""
Shared pytest fixtures for bookpress.
"""

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

import pytest

from bookpress.config import Settings, init_settings, reset_settings
from bookpress.modules.render import BrowserEngine, BrowserSession, LayoutPolicy

FAKE_PDF = b"%PDF-1.7\n%fake\n1 0 obj\n<<>>\nendobj\ntrailer\n<<>>\n%%EOF\n"


class FakeSession(BrowserSession):
    """In-memory session that records what the exporter asked for."""

    def __init__(self, engine: "FakeEngine") -> None:
        self.engine = engine
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def load_and_settle(self, html: str) -> None:
        self.engine.calls.append("load")
        self.engine.loaded_html = html
        if self.engine.load_error:
            raise self.engine.load_error

    async def print_pdf(self, policy: LayoutPolicy) -> bytes:
        self.engine.calls.append("print")
        self.engine.printed_policy = policy
        if self.engine.print_error:
            raise self.engine.print_error
        return self.engine.pdf_bytes


class FakeEngine(BrowserEngine):
    """Browser engine that returns immediately; no process is spawned."""

    def __init__(
        self,
        pdf_bytes: bytes = FAKE_PDF,
        launch_error: Exception | None = None,
        load_error: Exception | None = None,
        print_error: Exception | None = None,
    ) -> None:
        self.pdf_bytes = pdf_bytes
        self.launch_error = launch_error
        self.load_error = load_error
        self.print_error = print_error
        self.calls: list[str] = []
        self.sessions: list[FakeSession] = []
        self.loaded_html: str | None = None
        self.printed_policy: LayoutPolicy | None = None

    @asynccontextmanager
    async def session(self):
        self.calls.append("launch")
        if self.launch_error:
            raise self.launch_error
        session = FakeSession(self)
        self.sessions.append(session)
        try:
            yield session
        finally:
            session._closed = True
            self.calls.append("close")


@pytest.fixture
def fake_engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def make_engine():
    """Factory for FakeEngine with injected failures."""
    return FakeEngine


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    return tmp_path


@pytest.fixture
def html_file(temp_dir: Path) -> Path:
    path = temp_dir / "book.html"
    path.write_text(
        "<!DOCTYPE html><html><head><title>Title</title></head>"
        "<body><h1>Title</h1></body></html>",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def book_root(temp_dir: Path) -> Path:
    """A small book: two chapters, two examples, no appendix."""
    root = temp_dir / "book"
    chapters = root / "chapters"
    chapters.mkdir(parents=True)
    (chapters / "00-introduction.md").write_text(
        "# Introduction\n\nWelcome.\n\n## Setup\n\nInstall things.\n",
        encoding="utf-8",
    )
    (chapters / "01-basics.md").write_text(
        "# Basics\n\n## Setup\n\n```python\nprint('hi')\n```\n\n"
        "| a | b |\n|---|---|\n| 1 | 2 |\n",
        encoding="utf-8",
    )
    examples = root / "examples"
    examples.mkdir()
    (examples / "b-second.md").write_text("# Second Example\n", encoding="utf-8")
    (examples / "a-first.md").write_text("# First Example\n", encoding="utf-8")
    return root


@pytest.fixture
def settings(book_root: Path) -> Settings:
    """Settings pointing at the sample book, installed as the process settings."""
    s = Settings(
        book_root=book_root,
        chapter_order=["00-introduction.md", "01-basics.md", "02-missing.md"],
    )
    init_settings(s)
    return s


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    """Keep tests independent of the caller's environment and of each other."""
    for key in list(os.environ):
        if key.startswith("BOOKPRESS_"):
            monkeypatch.delenv(key)
    reset_settings()

    # The CLI installs a stderr handler bound to this test's captured stream
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level

    yield

    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)
    reset_settings()
