"""
Async engine, session factory and request-scoped sessions.

One engine per process, built lazily from DatabaseSettings. Sessions do
not expire attributes on commit, so services can return the rows they
just committed to the routers.

Dependencies: sqlalchemy, asyncpg, stacks.configs
System role: Database connection lifecycle management
"""

from functools import lru_cache
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from stacks.boundary.db.base import Base
from stacks.configs import get_settings


@lru_cache
def get_async_engine() -> AsyncEngine:
    """
    Build the pooled asyncpg engine.

    pool_pre_ping drops connections the server closed while idle.

    Returns:
        AsyncEngine: Process-wide engine
    """
    db_config = get_settings().database
    return create_async_engine(
        db_config.async_database_url,
        echo=db_config.echo_sql,
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
        pool_timeout=db_config.pool_timeout,
        pool_pre_ping=True,
    )


@lru_cache
def get_async_session_factory() -> async_sessionmaker[AsyncSession]:
    """Session factory with explicit flushes and no expiry on commit."""
    return async_sessionmaker(
        bind=get_async_engine(),
        autoflush=False,
        expire_on_commit=False,
    )


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding one session per request.

    Services commit their own units of work; anything left uncommitted
    is rolled back when the session closes.

    Yields:
        AsyncSession: Request-scoped session
    """
    SessionFactory = get_async_session_factory()
    async with SessionFactory() as session:
        yield session


async def create_tables() -> None:
    """Create the Stack tables if they do not exist."""
    # Registers the models on Base.metadata
    from stacks.boundary.db import models  # noqa: F401

    async with get_async_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    """Close pooled connections on shutdown."""
    if get_async_engine.cache_info().currsize:
        await get_async_engine().dispose()
