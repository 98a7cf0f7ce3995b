"""FastAPI dependencies for route handlers.

Usage:
    from storefront.core.dependencies import CatalogStoreDep, DataLoadersDep

    @router.get("/products")
    async def list_products(store: CatalogStoreDep, loaders: DataLoadersDep):
        ...
"""

from storefront.core.dependencies.catalog import (
    CatalogStoreDep,
    DataLoadersDep,
    get_catalog_store,
    get_dataloaders,
)

__all__ = [
    "CatalogStoreDep",
    "DataLoadersDep",
    "get_catalog_store",
    "get_dataloaders",
]
