"""Application lifespan management.

Startup Order:
1. Logging
2. Database connection check (only when a database is configured)

Shutdown Order: Reverse of startup (engine disposed, then log queue drained)
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from storefront.core.settings import get_app_settings, get_db_settings, get_logging_settings
from storefront.infra.database import close_database, init_database
from storefront.infra.logging.config import setup_logging
from storefront.infra.logging.config import shutdown as shutdown_logging

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI

logger = logging.getLogger(__name__)


async def _startup_core() -> None:
    """Configure logging and announce the service."""
    app = get_app_settings()
    setup_logging(log_settings=get_logging_settings(), force=True)
    logger.info(
        "Application starting",
        extra={
            "service": app.service_name,
            "version": app.version,
            "environment": app.environment,
        },
    )


async def _startup_database() -> None:
    """Verify the database connection."""
    db = get_db_settings()
    if not db.is_configured:
        logger.info("Database not configured, using the local SQLite fallback")
        return

    try:
        await init_database()
    except Exception as e:
        if db.startup_require_db:
            logger.exception(
                "Database required but unavailable, failing startup",
                extra={"error": str(e), "startup_require_db": True},
            )
            raise
        logger.warning(
            "Database unavailable, continuing in degraded mode",
            extra={"error": str(e), "startup_require_db": False},
        )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifecycle.

    Args:
        app: FastAPI application instance.

    Yields:
        None during application runtime.
    """
    _ = app

    await _startup_core()
    await _startup_database()

    yield

    logger.info("Application shutting down")
    await close_database()
    shutdown_logging()


__all__ = ["lifespan"]
