"""Database module with async SQLAlchemy engine and session management."""

from functools import lru_cache
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from .settings import get_settings


@lru_cache()
def get_engine(db_url: Optional[str] = None, echo: Optional[bool] = None) -> AsyncEngine:
    """Async engine for a read-only database (the configured one by default)."""
    settings = get_settings()
    return create_async_engine(
        db_url or settings.db_url,
        echo=settings.debug if echo is None else echo,
        pool_size=10,
        max_overflow=20,
    )


def get_sessionmaker(engine: Optional[AsyncEngine] = None) -> async_sessionmaker:
    """Session maker bound to ``engine``."""
    return async_sessionmaker(
        engine or get_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
    )
