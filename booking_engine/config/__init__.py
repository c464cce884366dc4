"""
Configuration package.
"""

from .database import (
    create_engine,
    get_async_session_factory,
    get_database_url,
    get_db_session,
    make_session_factory,
    session_scope,
)
from .logging import configure_logging, get_audit_logger, get_logger
from .settings import Settings, settings

__all__ = [
    "Settings",
    "settings",
    "configure_logging",
    "create_engine",
    "get_async_session_factory",
    "get_audit_logger",
    "get_database_url",
    "get_db_session",
    "get_logger",
    "make_session_factory",
    "session_scope",
]
