"""
Logging setup with per-job context.

Modules call get_logger(__name__); the entrypoint calls setup_logging once.
The current job id travels in a context variable and is stamped on every
record by JobContextFilter.
"""

import logging
import sys
from contextvars import ContextVar

_job_id: ContextVar[str | None] = ContextVar("bookpress_job_id", default=None)
_handler: logging.Handler | None = None

LOG_FORMAT = "%(asctime)s %(levelname)-7s [job=%(job_id)s] %(name)s: %(message)s"


class JobContextFilter(logging.Filter):
    """Attach the current job id to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.job_id = _job_id.get() or "-"
        return True


def setup_logging(level: str = "INFO") -> None:
    """Configure root logging for the process. Safe to call more than once."""
    global _handler
    root = logging.getLogger()
    if _handler is not None:
        root.removeHandler(_handler)

    _handler = logging.StreamHandler(sys.stderr)
    _handler.setFormatter(logging.Formatter(LOG_FORMAT))
    _handler.addFilter(JobContextFilter())

    root.addHandler(_handler)
    root.setLevel(level.upper())


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def set_job_context(job_id: str) -> None:
    _job_id.set(job_id)


def get_job_context() -> str | None:
    return _job_id.get()


def clear_job_context() -> None:
    _job_id.set(None)
