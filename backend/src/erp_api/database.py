"""Database connection and session management."""

from collections.abc import AsyncGenerator
from functools import lru_cache

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from erp_api.config import get_settings


@lru_cache
def get_engine() -> AsyncEngine:
    """Create the process-wide async engine on first use."""
    settings = get_settings()
    return create_async_engine(
        settings.async_database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        # Validate connections before checkout to detect stale connections
        pool_pre_ping=True,
        pool_recycle=3600,
        # Never echo SQL statements, they may contain password hashes
        echo=False,
    )


@lru_cache
def get_session_maker() -> async_sessionmaker[AsyncSession]:
    """Get the session factory bound to the process-wide engine."""
    return async_sessionmaker(
        get_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency.

    The session commits when the request completes and rolls back on any
    exception, including domain errors raised after partial writes.
    """
    async with get_session_maker()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
