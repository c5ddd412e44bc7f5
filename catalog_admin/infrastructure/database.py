"""Database configuration and session management.

Provides the async SQLAlchemy engine and session factory. A ``Database``
is constructed once per application and held on ``app.state``; nothing
here opens a connection at import time.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

from catalog_admin.domain.exceptions import InternalError

logger = structlog.get_logger()

# Base class for models
Base = declarative_base()


class Database:
    """Async engine plus session factory for one database URL.

    Example usage:
        database = Database(settings.database_url)
        await database.create_tables()
        async with database.session() as session:
            store = SqlCatalogStore(session)
    """

    def __init__(self, url: str, echo: bool = False, **engine_options: Any) -> None:
        """Create the engine and session factory.

        Args:
            url: SQLAlchemy async database URL.
            echo: Whether to log emitted SQL.
            **engine_options: Extra create_async_engine keyword arguments.
        """
        if not url.startswith("sqlite"):
            engine_options.setdefault("pool_pre_ping", True)
        self.engine: AsyncEngine = create_async_engine(url, echo=echo, **engine_options)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def create_tables(self) -> None:
        """Create database tables if they don't exist."""
        # Register models on Base.metadata
        from catalog_admin.infrastructure import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Open a session that commits on success and rolls back on error.

        Yields:
            AsyncSession for database operations.

        Raises:
            InternalError: If the commit fails.
        """
        async with self.session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

            try:
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error("Commit failed", error_type=type(e).__name__, error=str(e))
                raise InternalError("Failed to save changes", details=str(e)) from e

    async def dispose(self) -> None:
        """Close all pooled connections."""
        await self.engine.dispose()
