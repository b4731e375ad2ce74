"""Structured logging configuration using structlog."""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor

LOG_FORMAT_JSON = "json"
LOG_FORMAT_CONSOLE = "console"
LOG_FORMAT_CHOICES = (LOG_FORMAT_JSON, LOG_FORMAT_CONSOLE)

# Echo every statement and pool checkout at INFO
NOISY_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool")


def add_log_level(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Add log level to event dictionary."""
    event_dict["level"] = method_name.upper()
    return event_dict


def _build_processors(log_format: str) -> list[Processor]:
    """Return the processor chain ending in the renderer for log_format."""
    renderer: Processor
    if log_format == LOG_FORMAT_CONSOLE:
        renderer = structlog.dev.ConsoleRenderer(colors=False)
    else:
        # Korean titles and category names stay readable in the JSON lines
        renderer = structlog.processors.JSONRenderer(ensure_ascii=False)

    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        renderer,
    ]


def configure_logging(log_level: str = "INFO", log_format: str = LOG_FORMAT_JSON) -> None:
    """Configure structured logging on top of stdlib logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: "json" for one JSON object per line, "console" for
            key=value lines meant for a terminal
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=numeric_level,
        force=True,
    )
    logging.getLogger().setLevel(numeric_level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))

    structlog.configure(
        processors=_build_processors(log_format.lower()),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """Get a configured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


def bind_run_context(**values: Any) -> None:
    """Attach values (for example the dump path) to every event until cleared."""
    structlog.contextvars.bind_contextvars(**values)


def clear_run_context() -> None:
    structlog.contextvars.clear_contextvars()
