"""Centralized logging configuration and structured DEBUG helpers.

Modules log through ``logging.getLogger(__name__)``. Structured traces pass
``extra=extra_context(...)``; the fields are appended to the message when the
root logger runs at DEBUG.
"""
from __future__ import annotations

import logging
import os
import sys
import time
from typing import Any, Dict, Optional

from constants import Constants

_CONTEXT_ATTR = "sitegate_context"


class ContextFormatter(logging.Formatter):
    """Formatter that renders structured context fields after the message."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        ctx = getattr(record, _CONTEXT_ATTR, None)
        if ctx and record.levelno <= logging.DEBUG:
            fields = " ".join(f"{k}={v}" for k, v in ctx.items())
            return f"{base} | {fields}"
        return base


def _resolve_level(value: Optional[str]) -> int:
    if not value:
        return logging.INFO
    level = getattr(logging, str(value).upper(), None)
    return level if isinstance(level, int) else logging.INFO


def configure_logging(stream=None) -> None:
    """Configure the root logger once, honoring ``SITEGATE_LOG_LEVEL``.

    Repeated calls replace the handler installed by a previous call rather
    than stacking handlers.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_sitegate", False):
            root.removeHandler(handler)
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(ContextFormatter(Constants.LOG_FORMAT))
    handler._sitegate = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(_resolve_level(os.environ.get(Constants.ENV_LOG_LEVEL)))


def add_file_handler(path: str) -> None:
    """Mirror log output to ``path``."""
    file_handler = logging.FileHandler(path, encoding="utf-8")
    file_handler.setFormatter(ContextFormatter(Constants.LOG_FILE_FORMAT))
    file_handler._sitegate = True  # type: ignore[attr-defined]
    logging.getLogger().addHandler(file_handler)


def is_debug_enabled(logger: logging.Logger) -> bool:
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build the ``extra`` mapping for a structured log call; None values are dropped."""
    return {_CONTEXT_ATTR: {k: v for k, v in fields.items() if v is not None}}


class Timer:
    """Context manager measuring elapsed wall time."""

    def __init__(self):
        self._start: Optional[float] = None
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, *exc) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> int:
        if self._start is None:
            return 0
        end = self._end if self._end is not None else time.perf_counter()
        return int((end - self._start) * 1000)
