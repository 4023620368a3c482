"""
structlog setup for the portal API.

Development gets coloured console lines, every other environment gets one
JSON object per line.

Request-scoped values (request id, method, path) are carried through
structlog contextvars so every log line of a request shares them.
"""

import logging
import sys
import uuid
from typing import Any

import structlog
from structlog.types import Processor

from core.config import Settings, settings as default_settings


def configure_logging(settings: Settings = default_settings) -> None:
    """
    Install the structlog processor chain for the configured environment.
    """
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.is_development:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=True),
        ]
    else:
        processors = shared_processors + [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )

    # uvicorn and motor log through the standard library
    logging.basicConfig(
        format="%(message)s",
        level=level,
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def bind_request_context(method: str, path: str) -> str:
    """
    Start a fresh logging context for an incoming request.

    Returns the generated request id so it can be echoed in a header.
    """
    request_id = uuid.uuid4().hex[:12]
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        request_id=request_id,
        method=method,
        path=path,
    )
    return request_id


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()


def get_logger(name: str | None = None, **initial_context: Any) -> structlog.BoundLogger:
    """
    Get a configured logger instance.

    Args:
        name: Logger name (typically __name__)
        **initial_context: Initial context values to bind

    Returns:
        A bound logger with the given context

    Usage:
        logger = get_logger(__name__, collection="events")
        logger.info("Event created", event_id="abc-123")
    """
    logger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger
