"""
Configuration - pydantic-settings with BOOKPRESS_ env overrides.

Every field has a default; nothing has to be set in the environment.
Tests swap the cached instance with init_settings()/reset_settings().
"""

import logging
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CHAPTER_ORDER = [
    "00-introduction.md",
    "01-foundations-of-autonomous-development.md",
    "02-understanding-claude-code.md",
    "03-setting-up-your-environment.md",
    "04-custom-commands-architecture.md",
    "05-git-worktree-mastery.md",
    "06-the-testing-first-philosophy.md",
    "07-the-issue-to-pr-pipeline.md",
    "08-advanced-command-patterns.md",
    "09-tool-permissions-and-security.md",
    "10-conclusion.md",
    "11-automated-issue-detection-and-dispatch.md",
]

LOG_LEVELS = [
    logging.getLevelName(level)
    for level in (logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR, logging.CRITICAL)
]


class Settings(BaseSettings):
    """Runtime settings."""

    model_config = SettingsConfigDict(env_prefix="BOOKPRESS_", extra="ignore")

    log_level: str = "INFO"

    # Browser
    no_sandbox: bool = Field(
        default=True,
        description="Pass --no-sandbox/--disable-setuid-sandbox (containers, CI)",
    )
    launch_timeout_ms: int = Field(default=30_000, gt=0)
    settle_timeout_ms: int = Field(default=30_000, gt=0)
    ready_expression: str | None = Field(
        default=None,
        description="Optional JS expression awaited after network idle, e.g. 'window.bookReady === true'",
    )

    # Book layout on disk
    book_root: Path = Field(default_factory=Path.cwd)
    chapters_dir: str = "chapters"
    examples_dir: str = "examples"
    appendix_dir: str = "appendix"
    output_dir: str = "dist"
    output_name: str = "clide-handbook"

    # Book metadata
    book_title: str = "The Clide Handbook"
    book_subtitle: str = "Autonomous Development with Claude Code"
    book_author: str = "Claude Code Community"
    chapter_order: list[str] = Field(default_factory=lambda: list(DEFAULT_CHAPTER_ORDER))

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    def resolve(self, relative: str) -> Path:
        """Resolve a book-relative directory against book_root."""
        path = Path(relative).expanduser()
        if path.is_absolute():
            return path
        return (self.book_root / path).resolve()

    @property
    def html_path(self) -> Path:
        return self.resolve(self.output_dir) / f"{self.output_name}.html"

    @property
    def css_path(self) -> Path:
        return self.resolve(self.output_dir) / f"{self.output_name}.css"

    @property
    def pdf_path(self) -> Path:
        return self.resolve(self.output_dir) / f"{self.output_name}.pdf"


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return the process-wide settings, creating them on first use."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def init_settings(settings: Settings) -> Settings:
    """Install an explicit settings instance (tests, CLI overrides)."""
    global _settings
    _settings = settings
    return _settings


def reset_settings() -> None:
    global _settings
    _settings = None


__all__ = [
    "DEFAULT_CHAPTER_ORDER",
    "LOG_LEVELS",
    "Settings",
    "get_settings",
    "init_settings",
    "reset_settings",
]
