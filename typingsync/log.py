"""
Structured logging setup.

Modules log through ``structlog.get_logger(__name__)`` with snake_case event
names and keyword context. This module only decides how those events are
rendered: human-readable console lines or one JSON object per line.
"""

import logging
import sys

import structlog

__all__ = ["configure_logging"]


def _stderr_logger_factory(*args: object) -> structlog.PrintLogger:
    # sys.stderr resolved per call; it may be swapped after configuration
    return structlog.PrintLogger(file=sys.stderr)


def configure_logging(level: str = "INFO", fmt: str = "console") -> None:
    """Configure structlog for the CLI and the watcher.

    Args:
        level: Minimum level name ("DEBUG", "INFO", ...)
        fmt: "console" for coloured key=value lines, "json" for JSON lines
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if fmt == "json":
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=_stderr_logger_factory,
        cache_logger_on_first_use=False,
    )
