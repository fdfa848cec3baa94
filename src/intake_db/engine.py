"""Async SQLAlchemy engine and session factory constructors.

Nothing is cached here: the application builds one engine at startup,
keeps it (and the session factory bound to it) on its own state and
disposes it on shutdown.
"""

import logging

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from intake_db.config import get_async_url, pool_settings

logger = logging.getLogger(__name__)


def create_engine(url: str | None = None) -> AsyncEngine:
    """Build an async engine from ``url`` or the environment."""
    settings = pool_settings()
    engine = create_async_engine(url or get_async_url(), echo=False, **settings)
    logger.info(
        "Database engine created (pool_size=%d, max_overflow=%d)",
        settings["pool_size"], settings["max_overflow"],
    )
    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to ``engine``."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def dispose_engine(engine: AsyncEngine) -> None:
    """Close the connection pool of ``engine``."""
    await engine.dispose()
    logger.info("Database engine disposed")
