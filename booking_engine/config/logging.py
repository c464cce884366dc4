"""
Structured logging for the booking engine.

Application events go to stdout. Change records produced by accepted
booking edits go to the ``booking_engine.audit`` logger, which can be
routed to its own file via ``AUDIT_LOG_FILE``.
"""

import logging
import sys
from typing import Any, List

import structlog

from booking_engine.config.settings import settings

AUDIT_LOGGER_NAME = "booking_engine.audit"

# Chatty third-party loggers
_QUIET_LOGGERS = (
    "sqlalchemy.engine",
    "sqlalchemy.pool",
    "asyncio",
    "httpx",
    "httpcore",
    "celery.beat",
)


def _shared_processors() -> List[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer():
    if settings.ENVIRONMENT == "production":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())


def configure_logging() -> None:
    """Configure structlog on top of the standard logging module."""
    structlog.configure(
        processors=_shared_processors() + [_renderer()],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.LOG_LEVEL),
    )

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    audit = logging.getLogger(AUDIT_LOGGER_NAME)
    audit.setLevel(getattr(logging, settings.AUDIT_LOG_LEVEL))
    if settings.AUDIT_LOG_FILE:
        handler = logging.FileHandler(settings.AUDIT_LOG_FILE)
        handler.setFormatter(logging.Formatter("%(message)s"))
        audit.addHandler(handler)
        audit.propagate = False


def get_logger(name: str = None) -> structlog.BoundLogger:
    """Get a structured logger."""
    return structlog.get_logger(name)


def get_audit_logger() -> structlog.BoundLogger:
    """Get the logger that receives booking change records."""
    return structlog.get_logger(AUDIT_LOGGER_NAME)


def bind_request_context(**values: Any) -> None:
    """Attach key/value pairs to every log event of the current request or task."""
    structlog.contextvars.bind_contextvars(**values)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()
