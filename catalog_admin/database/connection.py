"""
Database Connection Management

One async engine per process. Catalog reads open a short session per
fetch so the reads of a view-build can run side by side; form writes use
one session per request through ``get_db_dependency``.
"""

import time
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

import structlog
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from catalog_admin.config import get_settings
from catalog_admin.database.models import Base

logger = structlog.get_logger(__name__)
settings = get_settings()

_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


async def init_database(url: Optional[str] = None, **engine_options: Any) -> AsyncEngine:
    """
    Create the engine and verify the database answers.

    Args:
        url: SQLAlchemy async URL, defaults to ``settings.database.async_url``
        **engine_options: Extra ``create_async_engine`` arguments; override the defaults

    Returns:
        AsyncEngine: The engine now in use
    """
    global _engine, _session_factory

    if _engine is not None:
        logger.warning("Database already initialized", dialect=_engine.dialect.name)
        return _engine

    options: Dict[str, Any] = {
        "echo": settings.database.echo,
        "pool_pre_ping": True,
        "poolclass": NullPool,
        **engine_options,
    }
    engine = create_async_engine(url or settings.database.async_url, **options)

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.error("Database unreachable", error=str(e))
        await engine.dispose()
        raise

    _engine = engine
    _session_factory = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    logger.info("Database connection established", dialect=engine.dialect.name)
    return engine


async def create_schema() -> None:
    """Create any missing catalog tables"""
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Catalog schema ensured", tables=sorted(Base.metadata.tables))


async def close_database() -> None:
    """Dispose of the engine; a later ``init_database`` starts fresh"""
    global _engine, _session_factory

    if _engine is None:
        return

    await _engine.dispose()
    _engine = None
    _session_factory = None
    logger.info("Database engine disposed")


def get_engine() -> AsyncEngine:
    """
    Return the active engine.

    Raises:
        RuntimeError: ``init_database`` has not run
    """
    if _engine is None:
        raise RuntimeError("Database not initialized. Call init_database() first.")
    return _engine


@asynccontextmanager
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Session scope: commits on success, rolls back and re-raises on error.

    Example:
        async with get_db() as db:
            await db.execute(select(ProductRow))
    """
    if _session_factory is None:
        raise RuntimeError("Database not initialized. Call init_database() first.")

    async with _session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception as e:
            logger.error("Rolling back database session", error=str(e), error_type=type(e).__name__)
            await session.rollback()
            raise


async def get_db_dependency() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding a request-scoped session"""
    async with get_db() as session:
        yield session


async def check_database_health() -> Dict[str, Any]:
    """Round-trip a ``SELECT 1`` and report its latency"""
    start = time.perf_counter()
    try:
        async with get_db() as db:
            await db.execute(text("SELECT 1"))
    except Exception as e:
        return {"status": "unhealthy", "error": str(e)}

    return {
        "status": "healthy",
        "dialect": get_engine().dialect.name,
        "latency_ms": round((time.perf_counter() - start) * 1000, 2),
    }
