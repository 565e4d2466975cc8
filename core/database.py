"""Async SQLAlchemy database engine and session management.

Provides the connection manager of the business objects:
- One engine per Database instance (built from AppConfig.database_url)
- A single shared connection for in-memory SQLite so every session sees
  the same data
- Automatic session lifecycle (commit on success, rollback on error)
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from core.models.base import Base

logger = logging.getLogger("bookstore.database")


def _is_memory_url(url: str) -> bool:
    return url.startswith("sqlite") and (":memory:" in url or url.endswith("://"))


class Database:
    """Engine and session factory for one data source.

    Usage::

        database = Database("sqlite+aiosqlite:///:memory:")
        await database.create_all()
        async with database.session() as session:
            ...
        await database.dispose()
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        engine_options: dict = {"echo": echo}
        if _is_memory_url(url):
            engine_options.update(
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
            )
        else:
            engine_options["pool_pre_ping"] = True

        self.engine = create_async_engine(url, **engine_options)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    # -- Sessions --

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Yield an async session with automatic commit/rollback."""
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    # -- Lifecycle hooks --

    async def create_all(self) -> None:
        """Create tables for every model registered on Base."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema created on %s", self.url)

    async def drop_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def dispose(self) -> None:
        """Dispose of the connection pool on shutdown."""
        await self.engine.dispose()
