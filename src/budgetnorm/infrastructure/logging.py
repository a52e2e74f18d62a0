"""structlog configuration."""

from __future__ import annotations

import logging
import sys

import structlog

_configured = False


def configure_logging(level: str | int = "INFO", json_logs: bool = False) -> None:
    """Configure stdlib logging and structlog processors (idempotent).

    Args:
        level: Log level name or number
        json_logs: Render JSON lines instead of the console format
    """
    global _configured
    if _configured:
        return

    numeric_level = logging.getLevelName(level.upper()) if isinstance(level, str) else level
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=numeric_level)

    processors: list[structlog.typing.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]
    if json_logs:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
    _configured = True


def reset_logging() -> None:
    """Allow ``configure_logging`` to run again (useful for testing)."""
    global _configured
    _configured = False
    structlog.reset_defaults()
