"""Structlog configuration for the application.

Configures structlog with colored console output on a terminal and
JSON lines everywhere else, e.g. when logs are collected from a service.
"""
import logging
import os
import sys

import structlog

from box_organizer.config import settings


def configure_logging() -> None:
    """Configure structlog with appropriate processors.

    Uses colored console output when running in a TTY (or FORCE_COLOR is
    set), otherwise JSON output. LOG_JSON forces JSON regardless.
    """
    force_color = os.environ.get("FORCE_COLOR", "").lower() in ("1", "true", "yes")
    use_colors = (force_color or sys.stdout.isatty()) and not settings.LOG_JSON

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if use_colors:
        processors: list[structlog.types.Processor] = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=True),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    level = logging.getLevelName(settings.LOG_LEVEL.upper())
    if not isinstance(level, int):
        level = logging.INFO

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
