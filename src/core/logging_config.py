"""Structured logging configuration.

This module initializes structlog with a stable structured format.
Progress and failure events are emitted as key-value records on stderr.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from core.constants import DEFAULT_LOG_FORMAT, DEFAULT_LOG_LEVEL


def configure_logging(
    level: str = DEFAULT_LOG_LEVEL,
    log_format: str = DEFAULT_LOG_FORMAT,
) -> None:
    """Install the process-wide structlog configuration.

    Args:
        level: Minimum level name, e.g. ``info``.
        log_format: ``json`` or ``console`` rendering.
    """
    renderer: Any
    if log_format == "console":
        renderer = structlog.dev.ConsoleRenderer(colors=False)
    else:
        renderer = structlog.processors.JSONRenderer(sort_keys=True)
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_level_number(level)),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> Any:
    """Return a module logger instance.

    Args:
        name: Logger name, usually __name__.

    Returns:
        A structlog logger bound to ``logger_name=name``.
    """
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(name, logger_name=name)


def _level_number(level: str) -> int:
    return logging.getLevelName(level.upper())
