"""
PostgreSQL engine and sessions for the workflow store.

The engine is created lazily by ``init()``; each store operation runs in
its own short session that commits on exit.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from workflow_fsm.config import Settings, get_settings
from workflow_fsm.storage.postgres.models import Base

logger = logging.getLogger(__name__)


class Database:
    """Connection pool and session factory for one database."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self._engine: AsyncEngine | None = None
        self._sessions: async_sessionmaker[AsyncSession] | None = None

    @property
    def url(self) -> str:
        """``storage.uri`` if set, else the POSTGRES_* URL; ``storage.db_name`` overrides the database."""
        url = make_url(self.settings.storage.uri or self.settings.postgres.url)
        if self.settings.storage.db_name:
            url = url.set(database=self.settings.storage.db_name)
        return url.render_as_string(hide_password=False)

    async def init(self) -> None:
        pool = self.settings.postgres
        self._engine = create_async_engine(
            self.url,
            pool_size=pool.pool_size,
            max_overflow=pool.max_overflow,
            pool_timeout=pool.pool_timeout,
        )
        self._sessions = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    async def create_schema(self) -> None:
        """
        Create the ``workflow_kv`` table if it does not exist.

        Deployments normally run the Alembic migration instead; this is
        for tests and throwaway databases.
        """
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        if self._engine:
            await self._engine.dispose()
            self._engine = None
            self._sessions = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Database not initialized. Call init() first.")
        return self._engine

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Session that commits on success and rolls back on error.

        Usage:
            async with database.session() as session:
                row = await session.get(KeyValueModel, ("workflow", "currentState"))
        """
        if self._sessions is None:
            raise RuntimeError("Database not initialized. Call init() first.")

        session = self._sessions()
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def health_check(self) -> bool:
        if self._engine is None:
            return False
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.warning(f"PostgreSQL health check failed: {e}")
            return False
