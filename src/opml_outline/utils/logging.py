"""Structured logging setup for opml_outline.

The library only emits events through ``structlog.get_logger()``; it never
configures logging on import. Applications that want the codec's events in a
structured form can call :func:`configure_logging` once at startup.
"""

import sys
from typing import Any, Optional, TextIO

import structlog

VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def configure_logging(level: str = "INFO", stream: Optional[TextIO] = None) -> None:
    """
    Configure structlog for JSON logging.

    Log levels:
    - DEBUG: Every decode/encode with outline counts, field validation failures
    - INFO and above: Nothing from the codec itself; left for the application

    Args:
        level: Minimum level to emit (unknown names fall back to INFO)
        stream: Text stream to write to (defaults to stderr)

    Example:
        >>> configure_logging("DEBUG")
        >>> document = decode_bytes(data)  # logs "opml_decoded"
    """
    log_level = level.upper()
    if log_level not in VALID_LEVELS:
        log_level = "INFO"

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.WriteLoggerFactory(file=stream or sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> Any:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__ of calling module)

    Returns:
        Structured logger instance

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.debug("opml_decoded", outlines=3)
    """
    return structlog.get_logger(name)
