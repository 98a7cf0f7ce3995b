"""API router for the catalog feature.

Read-only endpoints for products, categories and collections. Every handler
gets a ``CatalogService`` bound to the request's loader registry.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from storefront.core.dependencies import CatalogStoreDep, DataLoadersDep
from storefront.core.settings import get_catalog_settings
from storefront.features.catalog.schemas import (
    CategoryDetailResponse,
    CategorySummaryResponse,
    CollectionDetailResponse,
    CollectionSummaryResponse,
    DataResponse,
    ProductDetailResponse,
    ProductListResponse,
    SearchIndexEntry,
)
from storefront.features.catalog.service import CatalogService, ProductQuery

_catalog_settings = get_catalog_settings()


async def get_catalog_service(store: CatalogStoreDep, loaders: DataLoadersDep) -> CatalogService:
    """Provide a CatalogService bound to this request's loaders."""
    return CatalogService(store, loaders)


CatalogServiceDep = Annotated[CatalogService, Depends(get_catalog_service)]

products_router = APIRouter(prefix="/products", tags=["products"])
categories_router = APIRouter(prefix="/categories", tags=["categories"])
collections_router = APIRouter(prefix="/collections", tags=["collections"])


@products_router.get(
    "",
    response_model=ProductListResponse,
    summary="List products",
    description="Paginated product listing with filters and sorting. "
    "Only published products are listed unless a status is given.",
)
async def list_products(
    service: CatalogServiceDep,
    page: Annotated[int, Query(ge=1, description="1-based page number")] = 1,
    limit: Annotated[
        int,
        Query(ge=1, le=_catalog_settings.max_page_size, description="Page size"),
    ] = _catalog_settings.default_page_size,
    status: Annotated[str | None, Query(description="DRAFT, PUBLISHED or ARCHIVED")] = None,
    featured: bool | None = None,
    category: Annotated[str | None, Query(description="Category slug")] = None,
    collection: Annotated[str | None, Query(description="Collection slug")] = None,
    search: Annotated[str | None, Query(max_length=200, description="Title substring")] = None,
    sort_by: Annotated[
        str | None,
        Query(
            alias="sortBy",
            description="newest, oldest, price-asc, price-desc, name-asc or name-desc",
        ),
    ] = None,
) -> ProductListResponse:
    return await service.list_products(
        ProductQuery(
            page=page,
            limit=limit,
            status=status,
            featured=featured,
            category=category,
            collection=collection,
            search=search,
            sort_by=sort_by,
        )
    )


# Registered before /{slug} so "search" is not taken for a product slug
@products_router.get(
    "/search/index",
    response_model=DataResponse[list[SearchIndexEntry]],
    summary="Search index",
    description="All published products flattened for a client-side search index.",
)
async def product_search_index(service: CatalogServiceDep) -> DataResponse[list[SearchIndexEntry]]:
    return DataResponse(data=await service.search_index())


@products_router.get(
    "/{slug}",
    response_model=DataResponse[ProductDetailResponse],
    summary="Get product",
    responses={404: {"description": "Product not found"}},
)
async def get_product(slug: str, service: CatalogServiceDep) -> DataResponse[ProductDetailResponse]:
    """Product with its gallery, variants, categories and collections, loaded concurrently."""
    return DataResponse(data=await service.get_product(slug))


@categories_router.get(
    "",
    response_model=DataResponse[list[CategorySummaryResponse]],
    summary="List visible categories",
    description="Each category carries its cover image, visible children and product count.",
)
async def list_categories(service: CatalogServiceDep) -> DataResponse[list[CategorySummaryResponse]]:
    return DataResponse(data=await service.list_categories())


@categories_router.get(
    "/{slug}",
    response_model=DataResponse[CategoryDetailResponse],
    summary="Get category",
    responses={404: {"description": "Category not found"}},
)
async def get_category(slug: str, service: CatalogServiceDep) -> DataResponse[CategoryDetailResponse]:
    return DataResponse(data=await service.get_category(slug))


@collections_router.get(
    "",
    response_model=DataResponse[list[CollectionSummaryResponse]],
    summary="List visible collections",
    description="Each collection carries its product count.",
)
async def list_collections(service: CatalogServiceDep) -> DataResponse[list[CollectionSummaryResponse]]:
    return DataResponse(data=await service.list_collections())


@collections_router.get(
    "/{slug}",
    response_model=DataResponse[CollectionDetailResponse],
    summary="Get collection",
    responses={404: {"description": "Collection not found"}},
)
async def get_collection(slug: str, service: CatalogServiceDep) -> DataResponse[CollectionDetailResponse]:
    return DataResponse(data=await service.get_collection(slug))


router = APIRouter()
router.include_router(products_router)
router.include_router(categories_router)
router.include_router(collections_router)

__all__ = [
    "categories_router",
    "collections_router",
    "get_catalog_service",
    "products_router",
    "router",
]
