"""Structured logging configuration using structlog.

Provides JSON or console formatted logs with consistent context including:
- session_id: Correlation ID for one interactive chat session
- timestamp: ISO8601 formatted timestamp

Usage:
    from clicoder.logging import get_logger, configure_logging

    # Configure once at startup
    configure_logging()

    # Get a logger for a module
    logger = get_logger(__name__)
    logger.info("something_happened", extra_field="value")
"""

import logging
import sys
from contextvars import ContextVar

import structlog

# Context variable for session-scoped logging
session_id_var: ContextVar[str | None] = ContextVar("session_id", default=None)


def add_session_context(logger: logging.Logger, method_name: str, event_dict: dict) -> dict:
    """Add session context to all log entries."""
    session_id = session_id_var.get()
    if session_id:
        event_dict["session_id"] = session_id
    return event_dict


def configure_logging(json_format: bool = False, level: str = "INFO") -> None:
    """Configure structlog for the application.

    Args:
        json_format: If True, output JSON logs. If False, output console-friendly logs.
        level: Root log level name.
    """
    shared_processors = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        add_session_context,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if json_format:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=shared_processors
        + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    # The CLI owns stdout, so logs go to stderr
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)
    root_logger.setLevel(level.upper())

    # Silence noisy loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger for the given name.

    Args:
        name: Logger name (typically __name__).

    Returns:
        A bound structlog logger.
    """
    return structlog.get_logger(name)


def set_session_id(session_id: str | None) -> None:
    """Set the chat session correlation ID for the current context."""
    session_id_var.set(session_id)


def clear_session_context() -> None:
    """Clear session-scoped context when a chat session ends."""
    session_id_var.set(None)
