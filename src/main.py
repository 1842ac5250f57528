"""FastAPI application entry point — wires everything together.

Usage:
    python -m src.main

Serves the person registry API (pessoas físicas/jurídicas, CEP lookup).
"""

from __future__ import annotations

import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

import structlog
import uvicorn
from fastapi import FastAPI

from src.api import cep, pessoas_fisicas, pessoas_juridicas
from src.api.errors import register_exception_handlers
from src.config import settings
from src.db.engine import check_db_health, db_lifespan
from src.events import emit, start_event_system, stop_event_system, subscribe
from src.schemas.events import EventType, SystemEvent
from src.security.audit import audit_on_event

# ── Logging setup ────────────────────────────────────────────────────

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
    stream=sys.stdout,
)
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
)

logger = logging.getLogger(__name__)

# ── FastAPI lifespan ─────────────────────────────────────────────────


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application startup and shutdown lifecycle."""
    logger.info("Starting %s (env=%s)", settings.app_name, settings.environment)

    async with db_lifespan():
        logger.info("Database initialized")

        subscribe(audit_on_event)
        await start_event_system()
        logger.info("Event system started with audit subscriber")

        await emit(SystemEvent(
            event_type=EventType.SYSTEM_STARTUP,
            data={"environment": settings.environment},
            source_module="main",
        ))

        try:
            yield
        finally:
            logger.info("Shutting down %s...", settings.app_name)
            await emit(SystemEvent(event_type=EventType.SYSTEM_SHUTDOWN, source_module="main"))
            await stop_event_system()
            logger.info("Event system stopped")

    logger.info("Shutdown complete")


# ── FastAPI app ──────────────────────────────────────────────────────


def create_app(use_lifespan: bool = True) -> FastAPI:
    """Build the application; tests pass ``use_lifespan=False`` to skip DB startup."""
    application = FastAPI(
        title=f"{settings.app_name} API",
        description="Cadastro de pessoas físicas e jurídicas com endereço via CEP",
        version="0.1.0",
        lifespan=lifespan if use_lifespan else None,
    )
    application.include_router(pessoas_fisicas.router)
    application.include_router(pessoas_juridicas.router)
    application.include_router(cep.router)
    register_exception_handlers(application)

    @application.get("/health")
    async def health_check() -> dict[str, Any]:
        """Health check endpoint."""
        return {
            "status": "ok",
            "environment": settings.environment,
            "postgresql": await check_db_health(),
        }

    return application


app = create_app()


# ── Entry point ──────────────────────────────────────────────────────

if __name__ == "__main__":
    uvicorn.run(
        "src.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.environment == "development",
        log_level=settings.log_level.lower(),
    )
