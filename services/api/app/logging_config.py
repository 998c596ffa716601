from __future__ import annotations

import logging
import os

import structlog


def configure_logging() -> None:
    """Set up structlog once per process.

    BURBUJA_LOG_LEVEL picks the threshold; BURBUJA_LOG_JSON=true switches to JSON lines.
    """

    level_name = os.getenv("BURBUJA_LOG_LEVEL", "INFO").strip().upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        raise ValueError(f"Unknown BURBUJA_LOG_LEVEL={level_name!r}")

    as_json = os.getenv("BURBUJA_LOG_JSON", "false").strip().lower() in {"1", "true", "yes", "y"}
    renderer = (
        structlog.processors.JSONRenderer(ensure_ascii=False)
        if as_json
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )
