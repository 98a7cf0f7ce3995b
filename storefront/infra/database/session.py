"""Database session management with the psycopg3 async driver."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

from opentelemetry import trace
from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from storefront.core.settings import get_app_settings, get_db_settings
from storefront.infra.metrics.prometheus import database_query_duration_seconds

if TYPE_CHECKING:
    from storefront.core.settings import DatabaseSettings

logger = logging.getLogger(__name__)

SQLITE_FALLBACK_URL = "sqlite+aiosqlite:///./storefront.db"

_OPERATIONS = ("SELECT", "INSERT", "UPDATE", "DELETE", "BEGIN", "COMMIT", "ROLLBACK")


def _statement_operation(statement: str | None) -> str:
    """Leading SQL keyword of a statement, e.g. ``SELECT``."""
    if statement and statement.strip():
        head = statement.split(None, 1)[0].upper()
        if head in _OPERATIONS:
            return head
    return "UNKNOWN"


def _before_cursor_execute(
    conn: Any, cursor: Any, statement: str, parameters: Any, context: Any, executemany: Any
) -> None:
    """Record query start time before execution."""
    _ = conn, cursor, statement, parameters, executemany
    context._query_start_time = time.perf_counter()


def _after_cursor_execute(
    conn: Any, cursor: Any, statement: str, parameters: Any, context: Any, executemany: Any
) -> None:
    """Record query duration and link to current trace via exemplar."""
    _ = conn, cursor, parameters, executemany
    started = getattr(context, "_query_start_time", None)
    if started is None:
        return
    duration = time.perf_counter() - started
    histogram = database_query_duration_seconds.labels(operation=_statement_operation(statement))

    span = trace.get_current_span()
    if span and span.get_span_context().is_valid:
        trace_id = format(span.get_span_context().trace_id, "032x")
        histogram.observe(duration, exemplar={"trace_id": trace_id})
    else:
        histogram.observe(duration)


def instrument_engine(async_engine: AsyncEngine) -> AsyncEngine:
    """Attach query-duration listeners to an engine.

    Used for the process-wide engine and for engines built in tests.
    """
    sync_engine = async_engine.sync_engine
    if not event.contains(sync_engine, "before_cursor_execute", _before_cursor_execute):
        event.listen(sync_engine, "before_cursor_execute", _before_cursor_execute)
        event.listen(sync_engine, "after_cursor_execute", _after_cursor_execute)
    return async_engine


def build_engine(db_settings: DatabaseSettings | None = None) -> AsyncEngine:
    """Create an instrumented async engine from database settings.

    Falls back to a local SQLite file when the database integration is
    disabled or not configured.
    """
    db_settings = db_settings or get_db_settings()
    if db_settings.is_configured:
        url = db_settings.url
        kwargs = db_settings.sqlalchemy_engine_kwargs()
    else:
        url = SQLITE_FALLBACK_URL
        kwargs = {"echo": db_settings.echo}
    kwargs["echo"] = kwargs.get("echo", False) or get_app_settings().debug
    return instrument_engine(create_async_engine(url, **kwargs))


def build_session_factory(async_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory with the options every storefront session uses."""
    return async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


engine = build_engine()
AsyncSessionLocal = build_session_factory(engine)


async def init_database() -> None:
    """Verify the database connection at startup.

    Raises:
        Exception: Whatever the driver raises when the database is unreachable.
    """
    logger.info("Initializing database connection")
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(
            "Failed to connect to database",
            extra={"url": engine.url.render_as_string(hide_password=True), "error": str(e)},
        )
        raise
    logger.info(
        "Database connection established successfully",
        extra={"url": engine.url.render_as_string(hide_password=True)},
    )


async def close_database() -> None:
    """Dispose the engine and its pooled connections.

    This should be called during application shutdown.
    """
    logger.info("Closing database connection")
    try:
        await engine.dispose()
        logger.info("Database connection closed successfully")
    except Exception as e:
        logger.exception("Error closing database connection", extra={"error": str(e)})


__all__ = [
    "SQLITE_FALLBACK_URL",
    "AsyncSessionLocal",
    "build_engine",
    "build_session_factory",
    "close_database",
    "engine",
    "init_database",
    "instrument_engine",
]
