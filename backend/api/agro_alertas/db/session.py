"""Database session management using SQLAlchemy async engine."""
from __future__ import annotations

from collections.abc import AsyncIterator
from functools import lru_cache

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from agro_alertas.core.config import get_settings


@lru_cache
def get_engine() -> AsyncEngine:
    """Create the engine on first use so importing the API never needs a database."""

    return create_async_engine(
        get_settings().database_url,
        echo=False,
        future=True,
        pool_pre_ping=True,
    )


@lru_cache
def get_session_factory() -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=get_engine(),
        expire_on_commit=False,
        class_=AsyncSession,
    )


async def get_db_session() -> AsyncIterator[AsyncSession]:
    """Provide a transactional scope around a series of operations."""

    async with get_session_factory()() as session:
        yield session
