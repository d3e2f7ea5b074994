"""
Async SQLAlchemy engine and session management for the SQL document store.

Only used when ``STORE_BACKEND=sql``. The default Notion backend never
touches a database.

Usage:
    # Initialize once at application startup (in lifespan)
    await AsyncDBPool.init(DatabaseConfig())
    await AsyncDBPool.create_all(Base.metadata)

    async with AsyncDBPool.get_session() as session:
        result = await session.execute(select(Document))
        await session.commit()

    # Cleanup at shutdown (in lifespan)
    await AsyncDBPool.dispose()
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import MetaData
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from igaming_calendar.main_config import DatabaseConfig


class AsyncDBPool:
    """Async-only SQLAlchemy engine + session manager."""

    _engine: AsyncEngine | None = None
    _maker: async_sessionmaker[AsyncSession] | None = None

    @classmethod
    async def init(cls, config: DatabaseConfig) -> None:
        """Initialize async engine and sessionmaker.

        Args:
            config: DatabaseConfig instance with credentials and pool settings
        """
        if cls._engine is not None:
            return  # already initialized

        engine_kwargs: dict[str, Any] = {"echo": config.echo}
        # SQLite dialects pick their own pool class; sizing options don't apply
        if not config.is_sqlite:
            engine_kwargs.update(
                pool_size=config.pool_size,
                max_overflow=config.max_overflow,
                pool_timeout=config.pool_timeout,
                pool_recycle=config.pool_recycle,
                pool_pre_ping=config.pool_pre_ping,
            )

        cls._engine = create_async_engine(config.url, **engine_kwargs)
        cls._maker = async_sessionmaker(cls._engine, expire_on_commit=False, class_=AsyncSession)

    @classmethod
    async def create_all(cls, metadata: MetaData) -> None:
        """Create any missing tables for ``metadata``."""
        if cls._engine is None:
            raise RuntimeError("AsyncDBPool not initialized. Call await AsyncDBPool.init() first.")
        async with cls._engine.begin() as conn:
            await conn.run_sync(metadata.create_all)

    @classmethod
    async def dispose(cls) -> None:
        """Dispose engine and clear session maker."""
        if cls._engine is not None:
            await cls._engine.dispose()
            cls._engine = None
            cls._maker = None

    @classmethod
    @asynccontextmanager
    async def get_session(cls) -> AsyncIterator[AsyncSession]:
        """Yield a session; rollback on exceptions.

        Raises:
            RuntimeError: If pool not initialized
        """
        if cls._maker is None:
            raise RuntimeError("AsyncDBPool not initialized. Call await AsyncDBPool.init() first.")

        async with cls._maker() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise
