"""Service layer for the catalog REST endpoints.

Lists go through ``build_query`` and the catalog store; everything attached
to a row (variants, images, taxonomies, children, product counts) goes
through the request's loaders, so a page of twenty products costs one
variant fetch and one image fetch, not forty.
"""

from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any, TypeVar

from storefront.core.exceptions import NotFoundException, ValidationException
from storefront.features.catalog.models import ProductStatus
from storefront.features.catalog.query_builder import (
    FilterSpec,
    Listing,
    ListingParams,
    SortKey,
    build_query,
)
from storefront.features.catalog.schemas import (
    CategoryDetailResponse,
    CategorySummaryResponse,
    CollectionDetailResponse,
    CollectionResponse,
    CollectionSummaryResponse,
    PaginationMeta,
    ProductDetailResponse,
    ProductListResponse,
    ProductSummaryResponse,
    SearchIndexEntry,
)
from storefront.features.catalog.store import EntityKind
from storefront.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from storefront.features.catalog.models import Category, Product
    from storefront.features.catalog.store import CatalogStore
    from storefront.features.graphql.dataloaders import DataLoaders

E = TypeVar("E", bound=StrEnum)


def _parse_choice(enum: type[E], field: str, value: str | None) -> E | None:
    """Validate an optional query value against a closed set of choices."""
    if value is None:
        return None
    try:
        return enum(value)
    except ValueError:
        allowed = [member.value for member in enum]
        msg = f"Invalid {field} {value!r}; expected one of {', '.join(allowed)}"
        raise ValidationException(
            detail=msg,
            extra={"field": field, "value": value, "allowed": allowed},
        ) from None


@dataclass(frozen=True, slots=True)
class ProductQuery:
    """Query parameters of ``GET /products`` after request validation."""

    page: int = 1
    limit: int = 20
    status: str | None = None
    featured: bool | None = None
    category: str | None = None
    collection: str | None = None
    search: str | None = None
    sort_by: str | None = None


class CatalogService:
    """Read-only catalog operations for one request.

    Loggers:
        - self.logger: Standard logger for INFO/WARNING/ERROR
        - self._lazy: Lazy logger for DEBUG
    """

    def __init__(self, store: CatalogStore, loaders: DataLoaders) -> None:
        self.logger = logging.getLogger(self.__class__.__name__)
        self._lazy = get_lazy_logger(self.__class__.__name__)
        self._store = store
        self._loaders = loaders

    async def _find_one(self, kind: EntityKind, slug: str) -> Any | None:
        rows = await self._store.find_many(kind, FilterSpec.where(slug=slug), limit=1)
        return rows[0] if rows else None

    async def _media(self, image_id: int | None) -> Any | None:
        if image_id is None:
            return None
        return await self._loaders.media.load(image_id)

    async def _parent(self, category: Category) -> Category | None:
        if category.parent_id is None:
            return None
        return await self._loaders.categories.load(category.parent_id)

    async def _summaries(self, products: Sequence[Product]) -> list[ProductSummaryResponse]:
        """Listing entries: first variant and primary image, batched over all products."""
        for product in products:
            self._loaders.products.prime(product.id, product)
        keys = [product.id for product in products]
        variants, images = await asyncio.gather(
            self._loaders.product_variants.load_many(keys),
            self._loaders.product_images.load_many(keys),
        )
        return [
            ProductSummaryResponse.from_model(product, product_variants, product_images)
            for product, product_variants, product_images in zip(
                products, variants, images, strict=True
            )
        ]

    async def _category_summary(self, category: Category) -> CategorySummaryResponse:
        image, children, product_count = await asyncio.gather(
            self._media(category.image_id),
            self._loaders.category_children.load(category.id),
            self._loaders.category_product_counts.load(category.id),
        )
        return CategorySummaryResponse.from_model(category, image, children, product_count)

    async def list_products(self, query: ProductQuery) -> ProductListResponse:
        """One page of products with each product's first variant and primary image."""
        status = _parse_choice(ProductStatus, "status", query.status)
        sort_key = _parse_choice(SortKey, "sortBy", query.sort_by)
        filters, order = build_query(
            ListingParams(
                Listing.PRODUCTS,
                status=status.value if status else None,
                featured=query.featured,
                category_slug=query.category,
                collection_slug=query.collection,
                search=query.search,
                sort_by=sort_key.value if sort_key else None,
            )
        )
        skip = (query.page - 1) * query.limit

        products, total = await asyncio.gather(
            self._store.find_many(
                EntityKind.PRODUCT, filters, order, limit=query.limit, skip=skip
            ),
            self._store.count(EntityKind.PRODUCT, filters),
        )
        data = await self._summaries(products)

        self._lazy.debug(
            lambda: f"list_products(page={query.page}, limit={query.limit}) -> "
            f"{len(products)} of {total}"
        )
        return ProductListResponse(
            data=data,
            pagination=PaginationMeta(
                page=query.page,
                limit=query.limit,
                total=total,
                total_pages=math.ceil(total / query.limit),
            ),
        )

    async def get_product(self, slug: str) -> ProductDetailResponse:
        """Product by slug with its gallery, variants (and their galleries) and taxonomies.

        Raises:
            NotFoundException: No product has this slug.
        """
        product = await self._find_one(EntityKind.PRODUCT, slug)
        if product is None:
            raise NotFoundException(
                detail=f"Product {slug!r} not found",
                type="product-not-found",
                extra={"slug": slug},
            )
        self._loaders.products.prime(product.id, product)

        images, variants, categories, collections = await asyncio.gather(
            self._loaders.product_images.load(product.id),
            self._loaders.product_variants.load(product.id),
            self._loaders.product_categories.load(product.id),
            self._loaders.product_collections.load(product.id),
        )
        variant_images = await self._loaders.variant_images.load_many([v.id for v in variants])
        return ProductDetailResponse.from_model(
            product, images, variants, variant_images, categories, collections
        )

    async def search_index(self) -> list[SearchIndexEntry]:
        """Every published product, flattened for a client search index."""
        filters, order = build_query(ListingParams(Listing.PRODUCTS))
        products = await self._store.find_many(EntityKind.PRODUCT, filters, order)
        images = await self._loaders.product_images.load_many([p.id for p in products])
        self.logger.info("Search index built", extra={"product_count": len(products)})
        return [
            SearchIndexEntry.from_model(product, product_images)
            for product, product_images in zip(products, images, strict=True)
        ]

    async def list_categories(self) -> list[CategorySummaryResponse]:
        """Visible categories with cover image, visible children and product count."""
        filters, order = build_query(ListingParams(Listing.CATEGORIES, is_visible=True))
        categories = await self._store.find_many(EntityKind.CATEGORY, filters, order)
        for category in categories:
            self._loaders.categories.prime(category.id, category)
        return list(
            await asyncio.gather(*(self._category_summary(category) for category in categories))
        )

    async def get_category(self, slug: str) -> CategoryDetailResponse:
        """Category by slug with its parent, visible children and products.

        Raises:
            NotFoundException: No category has this slug.
        """
        category = await self._find_one(EntityKind.CATEGORY, slug)
        if category is None:
            raise NotFoundException(
                detail=f"Category {slug!r} not found",
                type="category-not-found",
                extra={"slug": slug},
            )
        self._loaders.categories.prime(category.id, category)

        summary, parent, products = await asyncio.gather(
            self._category_summary(category),
            self._parent(category),
            self._loaders.category_products.load(category.id),
        )
        return CategoryDetailResponse.from_parts(summary, parent, await self._summaries(products))

    async def list_collections(self) -> list[CollectionSummaryResponse]:
        """Visible collections with their product counts."""
        filters, order = build_query(ListingParams(Listing.COLLECTIONS, is_visible=True))
        collections = await self._store.find_many(EntityKind.COLLECTION, filters, order)
        counts = await self._loaders.collection_product_counts.load_many(
            [collection.id for collection in collections]
        )
        return [
            CollectionSummaryResponse(
                **CollectionResponse.model_validate(collection).model_dump(),
                product_count=count,
            )
            for collection, count in zip(collections, counts, strict=True)
        ]

    async def get_collection(self, slug: str) -> CollectionDetailResponse:
        """Collection by slug with its products in collection order.

        Raises:
            NotFoundException: No collection has this slug.
        """
        collection = await self._find_one(EntityKind.COLLECTION, slug)
        if collection is None:
            raise NotFoundException(
                detail=f"Collection {slug!r} not found",
                type="collection-not-found",
                extra={"slug": slug},
            )
        products = await self._loaders.collection_products.load(collection.id)
        return CollectionDetailResponse(
            **CollectionResponse.model_validate(collection).model_dump(),
            products=await self._summaries(products),
        )


__all__ = ["CatalogService", "ProductQuery"]
