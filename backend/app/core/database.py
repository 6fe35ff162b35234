"""Database configuration and session management."""

import threading
from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager
from urllib.parse import urlparse, urlunparse

import structlog
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from app.core.config import settings

logger = structlog.get_logger(__name__)

# Created lazily so forked uvicorn workers never inherit an engine bound to the parent's event loop
_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None

_engine_lock = threading.Lock()
_session_factory_lock = threading.Lock()


def get_engine() -> AsyncEngine:
    """
    Get or create the async database engine.

    Uses NullPool in DEBUG mode (tests, local tooling) and a sized
    connection pool otherwise.

    Returns:
        AsyncEngine: SQLAlchemy async engine
    """
    global _engine  # noqa: PLW0603
    if _engine is None:
        with _engine_lock:
            if _engine is None:  # Double-checked locking
                if settings.DEBUG:
                    _engine = create_async_engine(
                        settings.DATABASE_URL,
                        echo=settings.DATABASE_ECHO,
                        poolclass=NullPool,
                    )
                else:
                    _engine = create_async_engine(
                        settings.DATABASE_URL,
                        echo=settings.DATABASE_ECHO,
                        pool_size=settings.DATABASE_POOL_SIZE,
                        max_overflow=settings.DATABASE_MAX_OVERFLOW,
                    )
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    Get or create the session factory.

    Returns:
        async_sessionmaker[AsyncSession]: SQLAlchemy async session factory
    """
    global _session_factory  # noqa: PLW0603
    if _session_factory is None:
        with _session_factory_lock:
            if _session_factory is None:  # Double-checked locking
                _session_factory = async_sessionmaker(
                    get_engine(),
                    class_=AsyncSession,
                    expire_on_commit=False,
                    autoflush=False,
                )
    return _session_factory


@asynccontextmanager
async def session_scope() -> AsyncIterator[AsyncSession]:
    """
    Open a session for one unit of work.

    Section edits lock the line row with SELECT ... FOR UPDATE and commit on
    save. If the block raises before that commit, the open transaction is
    rolled back here so the row lock is released before the connection goes
    back to the pool.

    Yields:
        AsyncSession: Database session
    """
    async with get_session_factory()() as session:
        try:
            yield session
        except Exception as e:
            if session.in_transaction():
                await session.rollback()
                logger.debug("session_rolled_back", error_type=type(e).__name__)
            raise


async def get_db() -> AsyncGenerator[AsyncSession]:
    """
    Dependency for getting async database sessions.

    Yields:
        AsyncSession: Database session
    """
    async with session_scope() as session:
        yield session


def to_sync_database_url(database_url: str) -> str:
    """
    Swap the asyncpg driver for psycopg so Alembic can run synchronously.

    Args:
        database_url: Database URL, e.g. postgresql+asyncpg://...

    Returns:
        The same URL with a postgresql+psycopg:// scheme, or unchanged if it is not asyncpg

    Examples:
        >>> to_sync_database_url("postgresql+asyncpg://u:p@db:5432/subway")
        'postgresql+psycopg://u:p@db:5432/subway'
    """
    parsed_url = urlparse(database_url)
    if "+asyncpg" not in parsed_url.scheme:
        return database_url
    return urlunparse(parsed_url._replace(scheme=parsed_url.scheme.replace("+asyncpg", "+psycopg")))
