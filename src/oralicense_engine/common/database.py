"""Async store for host snapshots."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from oralicense_engine.common.config import OraLicenseSettings, get_settings
from oralicense_engine.common.models import Base

# Registers the hostdata table on Base.metadata.
import oralicense_engine.hosts.models  # noqa: F401

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Owns the async engine and hands out transactional sessions."""

    def __init__(self, settings: OraLicenseSettings | None = None):
        self._settings = settings or get_settings()
        self.engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    async def init(self) -> None:
        url = make_url(self._settings.db_url)
        if url.get_backend_name() == "sqlite" and url.database not in (None, "", ":memory:"):
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)

        self.engine = create_async_engine(url, echo=False)
        self._session_factory = async_sessionmaker(self.engine, expire_on_commit=False)

    def _require_engine(self) -> AsyncEngine:
        if self.engine is None:
            raise RuntimeError("DatabaseManager not initialized, call init() first")
        return self.engine

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """Session committed on exit, rolled back if the block raises."""
        self._require_engine()
        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def create_all(self) -> None:
        async with self._require_engine().begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> bool:
        if self.engine is None:
            return False
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception:
            logger.exception("Database ping failed")
            return False
        return True

    async def close(self) -> None:
        if self.engine is not None:
            await self.engine.dispose()
            self.engine = None
            self._session_factory = None
