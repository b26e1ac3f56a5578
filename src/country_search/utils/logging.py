from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import structlog


def _renderer(fmt: str):
    if fmt == "console":
        return structlog.dev.ConsoleRenderer(colors=False)
    return structlog.processors.JSONRenderer()


def setup_logging(
    *,
    level: str | None = None,
    log_file: str | None = None,
    fmt: str | None = None,
) -> None:
    """
    Structured logging via structlog on top of stdlib handlers.

    - LOG_LEVEL (default INFO)
    - LOG_FORMAT: "json" (default, one object per line) or "console" (human readable)
    - LOG_FILE: optional path; the same lines are appended there
    """
    lvl = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    file_path = log_file or os.getenv("LOG_FILE")
    out_fmt = (fmt or os.getenv("LOG_FORMAT", "json")).lower()

    root = logging.getLogger()
    root.setLevel(lvl)
    root.handlers.clear()

    formatter = logging.Formatter("%(message)s")
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if file_path:
        Path(file_path).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(file_path))
    for h in handlers:
        h.setLevel(lvl)
        h.setFormatter(formatter)
        root.addHandler(h)

    # One GET per process; request-level httpx chatter is noise.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            _renderer(out_fmt),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, lvl, logging.INFO)),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(**kwargs: Any):
    # Initial values go through the lazy proxy so the logger is built on first
    # use, after setup_logging() has configured structlog.
    return structlog.get_logger(service="country_search", **kwargs)
