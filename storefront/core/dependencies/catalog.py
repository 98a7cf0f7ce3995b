"""Catalog dependencies for FastAPI route handlers.

``get_catalog_store`` hands out the process-wide SQLAlchemy store (it holds
no per-request state: every call opens its own session). ``get_dataloaders``
builds a fresh loader registry; FastAPI caches a dependency's value for the
duration of one request, so every handler and sub-dependency of a request
shares that request's loaders and nothing else does.

Usage:
    from storefront.core.dependencies import DataLoadersDep

    @router.get("/products/{slug}")
    async def get_product(slug: str, loaders: DataLoadersDep):
        ...
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from storefront.features.catalog.store import CatalogStore, SqlAlchemyCatalogStore
from storefront.features.graphql.dataloaders import DataLoaders, create_dataloaders
from storefront.infra.database import AsyncSessionLocal


@lru_cache(maxsize=1)
def get_catalog_store() -> CatalogStore:
    """Provide the catalog store backed by the pooled session factory."""
    return SqlAlchemyCatalogStore(AsyncSessionLocal)


async def get_dataloaders(
    store: Annotated[CatalogStore, Depends(get_catalog_store)],
) -> DataLoaders:
    """Provide the request's loader registry.

    Args:
        store: Catalog store (injected automatically)

    Returns:
        DataLoaders created for this request only
    """
    return create_dataloaders(store)


CatalogStoreDep = Annotated[CatalogStore, Depends(get_catalog_store)]
DataLoadersDep = Annotated[DataLoaders, Depends(get_dataloaders)]

__all__ = [
    "CatalogStoreDep",
    "DataLoadersDep",
    "get_catalog_store",
    "get_dataloaders",
]
