"""Database engine and session management for the MVC layout.

The engine is owned by a :class:`Database` instance created by the process
entry point (see ``app.main``) and disposed at shutdown; request handlers
reach it through FastAPI dependencies instead of a module-level global.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool, StaticPool

# Import models so they are attached to Base.metadata before table creation
from app.models import Base  # noqa: F401 - ensures metadata is registered
from app.models import case  # noqa: F401

logger = logging.getLogger(__name__)


def _engine_options(url: str, *, echo: bool, serverless: bool) -> dict[str, Any]:
    """Return engine keyword arguments appropriate for the backend."""

    options: dict[str, Any] = {"echo": echo, "future": True}

    if url.startswith("sqlite"):
        # In-memory SQLite needs one shared connection across sessions.
        if ":memory:" in url or url.endswith("://"):
            options["poolclass"] = StaticPool
            options["connect_args"] = {"check_same_thread": False}
        return options

    options["pool_pre_ping"] = True
    if serverless:
        # Disable pooling when working with serverless databases.
        options["poolclass"] = NullPool
    return options


class Database:
    """Own an async engine plus its session factory."""

    def __init__(
        self,
        url: str,
        *,
        echo: bool = False,
        serverless: bool = False,
    ) -> None:
        self.url = url
        self.engine: AsyncEngine = create_async_engine(
            url, **_engine_options(url, echo=echo, serverless=serverless)
        )
        self.session_factory = async_sessionmaker(
            self.engine,
            expire_on_commit=False,
            class_=AsyncSession,
        )

    @asynccontextmanager
    async def session_scope(self) -> AsyncIterator[AsyncSession]:
        """Async context manager that yields a configured SQLAlchemy session."""

        async with self.session_factory() as session:
            yield session

    async def init_models(self) -> None:
        """Create database tables if they do not exist."""

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Ensured database tables in default schema.")

    async def dispose(self) -> None:
        """Dispose of the engine and release pooled connections."""

        await self.engine.dispose()


__all__ = ["Database"]
