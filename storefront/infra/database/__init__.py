"""Database infrastructure package.

Async SQLAlchemy engine, session factory and lifecycle helpers.

Example:
    from storefront.infra.database import AsyncSessionLocal

    async with AsyncSessionLocal() as session:
        result = await session.execute(...)
"""

from .session import (
    AsyncSessionLocal,
    build_engine,
    build_session_factory,
    close_database,
    engine,
    init_database,
    instrument_engine,
)

__all__ = [
    "AsyncSessionLocal",
    "build_engine",
    "build_session_factory",
    "close_database",
    "engine",
    "init_database",
    "instrument_engine",
]
