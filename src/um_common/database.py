"""Async PostgreSQL engine and the per-request session dependency.

The engine is module-level and shared; sessions are not. Commit and rollback
belong to the caller (the user accessor), never to ``get_db_session``.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from config.settings import settings


class Base(DeclarativeBase):
    """Declarative base for the users table mapping."""


def build_engine(url: str | None = None) -> AsyncEngine:
    return create_async_engine(
        url or settings.DATABASE_URL,
        echo=settings.DEBUG,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_recycle=settings.DB_POOL_RECYCLE_SECONDS,
        pool_pre_ping=True,
    )


engine: AsyncEngine = build_engine()

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield one AsyncSession per request; uncommitted work is discarded on close."""
    async with async_session_factory() as session:
        yield session
