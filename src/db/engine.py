"""Registry storage wiring — PostgreSQL for people and audit rows, Redis for the shared CEP cache.

The engine and Redis client are created at import but connect lazily, so
importing this module never touches the network. ``db_lifespan`` opens and
closes them around the FastAPI app.
"""

from __future__ import annotations

import contextlib
import logging
import time
from collections.abc import AsyncGenerator
from typing import Any

import redis.asyncio as aioredis
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from src.config import settings

logger = logging.getLogger(__name__)

# ── PostgreSQL ───────────────────────────────────────────────────────

engine: AsyncEngine = create_async_engine(
    settings.db.database_url,
    echo=settings.log_level == "DEBUG",
    pool_size=10,
    max_overflow=20,
    pool_pre_ping=True,
)

# Objects stay readable after commit: routes serialize the person after the service returns
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session for the person routes.

    The whole request is one transaction: the registry services only flush,
    the commit happens here once the route returns. Any exception (domain
    error included) rolls the request back.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


# ── Redis (VIACEP_CACHE_BACKEND=redis only) ──────────────────────────

redis_client: aioredis.Redis = aioredis.from_url(
    settings.db.redis_url,
    decode_responses=True,
)


# ── Health / lifecycle ───────────────────────────────────────────────


async def check_db_health() -> dict[str, Any]:
    """``SELECT 1`` round trip for /health; reports the error type instead of raising."""
    start = time.monotonic()
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as exc:
        logger.warning("PostgreSQL health check failed: %s", exc)
        return {"status": "error", "error": type(exc).__name__}
    return {"status": "ok", "latency_ms": round((time.monotonic() - start) * 1000)}


async def init_db() -> None:
    """Create the person and audit tables outside production; Alembic owns them in production."""
    from src.models import Base

    async with engine.begin() as conn:
        if not settings.is_production:
            await conn.run_sync(Base.metadata.create_all)
    logger.info("Database ready (create_all=%s)", not settings.is_production)


async def close_db() -> None:
    await engine.dispose()
    await redis_client.aclose()


@contextlib.asynccontextmanager
async def db_lifespan() -> AsyncGenerator[None, None]:
    """Open storage for the app's lifetime; used by ``src.main.lifespan``."""
    await init_db()
    try:
        yield
    finally:
        await close_db()
