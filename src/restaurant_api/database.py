"""Engine, session and declarative base for the restaurant store."""

import re
from collections.abc import AsyncGenerator

from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase


def transform_database_url_for_asyncpg(url: str) -> str:
    """Rewrite libpq's ``sslmode=`` query option as asyncpg's ``ssl=``."""
    return re.sub(r"sslmode=(\w+)", r"ssl=\1", url)


def sync_database_url(url: str) -> str:
    """Map an async driver URL onto its blocking equivalent.

    Used by migrations and maintenance scripts, which run without an event loop.
    """
    url = url.replace("postgresql+asyncpg://", "postgresql://")
    url = url.replace("sqlite+aiosqlite://", "sqlite://")
    return re.sub(r"\bssl=(\w+)", r"sslmode=\1", url)


# Address documents and neighborhood rings
JSONVariant = JSON().with_variant(JSONB(), "postgresql")


class Base(DeclarativeBase):
    pass


_engine = None
_async_session = None


def get_engine():
    """Engine for ``settings.database_url``, created on first use."""
    global _engine
    if _engine is None:
        from restaurant_api.config import settings

        _engine = create_async_engine(
            transform_database_url_for_asyncpg(settings.database_url), echo=False
        )
    return _engine


def get_session_factory():
    global _async_session
    if _async_session is None:
        _async_session = async_sessionmaker(
            get_engine(), class_=AsyncSession, expire_on_commit=False
        )
    return _async_session


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session; overridden in tests."""
    async with get_session_factory()() as session:
        yield session
