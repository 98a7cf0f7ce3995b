"""Pytest configuration and shared fixtures.

Organization:
    - Application Fixtures: FastAPI app and HTTP client
    - Database Fixtures: SQLite engine, session factory and seeded catalog
    - Catalog Fixtures: recording catalog store and request loaders

The catalog is seeded into a temporary SQLite file per test so concurrent
sessions (``asyncio.gather`` in the service, batched loader fetches) each
get their own connection.
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator
from typing import TYPE_CHECKING

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

if TYPE_CHECKING:
    from fastapi import FastAPI
    from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

    from storefront.features.graphql.dataloaders import DataLoaders

# Ensure tests run without external infrastructure
os.environ.setdefault("APP_ENVIRONMENT", "test")
os.environ.setdefault("DB_ENABLED", "false")
os.environ.setdefault("GRAPHQL_ENABLED", "true")
os.environ.setdefault("LOG_JSON_LOGS", "false")

from tests.utils import RecordingStore, SeededCatalog, seed_catalog  # noqa: E402


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
async def db_engine(tmp_path) -> AsyncGenerator[AsyncEngine]:
    """SQLite engine with every table created.

    The engine carries the same query-duration listeners as the
    process-wide engine.
    """
    from storefront.core.database import Base
    from storefront.features.catalog import models  # noqa: F401  (registers tables)
    from storefront.infra.database import instrument_engine

    engine = instrument_engine(create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}"))
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    from storefront.infra.database import build_session_factory

    return build_session_factory(db_engine)


@pytest.fixture
async def seeded(session_factory: async_sessionmaker[AsyncSession]) -> SeededCatalog:
    """Seed the standard test catalog and return its identifiers."""
    return await seed_catalog(session_factory)


# ============================================================================
# Catalog Fixtures
# ============================================================================


@pytest.fixture
def catalog_store(
    session_factory: async_sessionmaker[AsyncSession], seeded: SeededCatalog
) -> RecordingStore:
    """SQLAlchemy catalog store over the seeded database, recording calls."""
    from storefront.features.catalog.store import SqlAlchemyCatalogStore

    _ = seeded
    return RecordingStore(SqlAlchemyCatalogStore(session_factory))


@pytest.fixture
def loaders(catalog_store: RecordingStore) -> DataLoaders:
    """A fresh request-scoped loader registry."""
    from storefront.features.graphql.dataloaders import create_dataloaders

    return create_dataloaders(catalog_store)


# ============================================================================
# Application Fixtures
# ============================================================================


@pytest.fixture
def app(catalog_store: RecordingStore) -> FastAPI:
    """FastAPI application reading from the seeded catalog.

    Lifespan does not run under ``ASGITransport``, so no database
    connection check or logging reconfiguration happens here.
    """
    from storefront.app.main import create_app
    from storefront.core.dependencies import get_catalog_store

    application = create_app()
    application.dependency_overrides[get_catalog_store] = lambda: catalog_store
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Async HTTP client bound to the test application.

    Example:
        async def test_health(client):
            response = await client.get("/health")
            assert response.status_code == 200
    """
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
