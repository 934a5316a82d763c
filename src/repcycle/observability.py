"""Structured logging setup."""

import logging
import sys

import structlog

from .config import get_settings

_configured = False


def configure_logging(level: str | None = None, json_output: bool | None = None) -> None:
    """Configure structlog once for the process.

    Args:
        level: Log level name, defaults to the configured ``log_level``
        json_output: Render JSON lines instead of console output
    """
    global _configured
    if _configured:
        return

    settings = get_settings()
    level_name = (level or settings.log_level).upper()
    use_json = settings.log_json if json_output is None else json_output

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level_name, logging.INFO),
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if use_json
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level_name, logging.INFO)
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )
    _configured = True
