"""
Database engine and session management.
"""

from contextlib import asynccontextmanager
from functools import lru_cache
from typing import AsyncGenerator, AsyncIterator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from booking_engine.config.settings import settings


def get_database_url() -> str:
    """Get database URL from settings."""
    return str(settings.DATABASE_URL)


def _uses_pool(url: str) -> bool:
    # SQLite files and the test suite open one connection per session
    return settings.ENVIRONMENT != "test" and not url.startswith("sqlite")


def create_engine(database_url: Optional[str] = None) -> AsyncEngine:
    """Create an async engine; pooled on Postgres, unpooled on SQLite."""
    url = database_url or get_database_url()

    if not _uses_pool(url):
        return create_async_engine(url, echo=settings.DATABASE_ECHO, poolclass=NullPool)

    return create_async_engine(
        url,
        echo=settings.DATABASE_ECHO,
        pool_size=settings.DATABASE_POOL_SIZE,
        max_overflow=settings.DATABASE_MAX_OVERFLOW,
        pool_timeout=settings.DATABASE_POOL_TIMEOUT,
        pool_recycle=settings.DATABASE_POOL_RECYCLE,
        pool_pre_ping=True,
    )


def make_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Jobs are read back after commit to build notifications, so nothing expires
    return async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )


@lru_cache(maxsize=None)
def get_async_session_factory(
    database_url: Optional[str] = None,
) -> async_sessionmaker[AsyncSession]:
    """Process-wide session factory (one engine per URL)."""
    return make_session_factory(create_engine(database_url))


@asynccontextmanager
async def session_scope(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """Session that is rolled back if the block raises before committing."""
    async with session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding a request-scoped session."""
    async with session_scope(get_async_session_factory()) as session:
        yield session
