"""
Database engine and session management for the metadata catalog.

This module provides utilities for creating SQLAlchemy async engines and
session factories. Engines are built explicitly and handed to the catalog;
nothing is created at import time.
"""

from typing import Optional

import structlog
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

logger = structlog.get_logger(__name__)


def create_engine(database_uri: str, *, echo: bool = False, pool_size: Optional[int] = 5) -> AsyncEngine:
    """
    Create an async engine for the catalog database.

    Args:
        database_uri: SQLAlchemy URL (e.g. ``postgresql+asyncpg://...``)
        echo: Whether to log SQL statements
        pool_size: Connection pool size; ``None`` keeps the dialect default

    Returns:
        The async engine
    """
    options = {"echo": echo, "pool_pre_ping": True}
    if pool_size is not None and not database_uri.startswith("sqlite"):
        options["pool_size"] = pool_size
        options["max_overflow"] = pool_size * 2

    engine = create_async_engine(database_uri, **options)
    logger.info("Created catalog database engine", dialect=engine.dialect.name)
    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Create a session factory bound to an engine.

    Args:
        engine: The async engine

    Returns:
        Session factory producing AsyncSession objects
    """
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)


async def dispose_engine(engine: AsyncEngine) -> None:
    """Close all pooled connections of an engine."""
    logger.info("Closing catalog database engine")
    await engine.dispose()
