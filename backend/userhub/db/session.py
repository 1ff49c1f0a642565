from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from .base import Base

logger = logging.getLogger(__name__)


class Database:
    """
    Wrapper around SQLAlchemy async engine/session creation to keep the rest of
    the codebase tidy.
    """

    def __init__(self, url: str, echo: bool = False) -> None:
        self._url = make_url(url)
        self._engine: AsyncEngine = create_async_engine(self._url, echo=echo)
        self._session_factory = async_sessionmaker(
            self._engine, expire_on_commit=False, class_=AsyncSession
        )

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        async with self._session_factory() as session:
            yield session

    async def create_all(self) -> None:
        database = self._url.database
        if self._url.get_backend_name() == "sqlite" and database and database != ":memory:":
            Path(database).parent.mkdir(parents=True, exist_ok=True)
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ready at %s", self._url.render_as_string(hide_password=True))

    async def dispose(self) -> None:
        await self._engine.dispose()


__all__ = ["Database"]
