"""Query resolvers for the catalog GraphQL API.

Provides read operations:
- products(...), product(slug), productById(id)
- categories(...), category(slug)
- collections(...), collection(slug)
- variants(productId), reviews(productId, ...), variantTypes

List fields build their filter and ordering with ``build_query`` (the same
builder the REST endpoints use) and read through the catalog store. Rows they
return are primed into the request's loaders so nested fields asking for the
same entity again are served from cache.
"""

from __future__ import annotations

import logging
from typing import Annotated

import strawberry
from strawberry.types import Info

from storefront.core.settings import get_catalog_settings, get_graphql_settings
from storefront.features.catalog.query_builder import (
    UNSET,
    FilterSpec,
    Listing,
    ListingParams,
    OrderSpec,
    OrderTerm,
    SortDirection,
    build_query,
)
from storefront.features.catalog.store import EntityKind
from storefront.features.graphql.context import GraphQLContext
from storefront.features.graphql.error_handler import user_error
from storefront.features.graphql.types.catalog import (
    CategoryType,
    CollectionType,
    ProductStatusEnum,
    ProductType,
    ProductVariantType,
    ReviewType,
    VariantTypeType,
)

logger = logging.getLogger(__name__)

# Type aliases for annotated arguments with descriptions
LimitArg = Annotated[
    int | None, strawberry.argument(description="Maximum number of items to return"),
]
SkipArg = Annotated[int, strawberry.argument(description="Number of items to skip")]
SlugArg = Annotated[str, strawberry.argument(description="URL slug")]


def _page(limit: int | None, skip: int, default: int) -> tuple[int, int]:
    """Resolve and validate ``limit``/``skip`` arguments."""
    max_page_size = get_graphql_settings().max_page_size
    limit = default if limit is None else limit
    if not 1 <= limit <= max_page_size:
        msg = f"limit must be between 1 and {max_page_size}"
        raise user_error(msg, field="limit")
    if skip < 0:
        msg = "skip must be zero or greater"
        raise user_error(msg, field="skip")
    return limit, skip


@strawberry.type(description="Root query type")
class Query:
    """GraphQL Query resolvers."""

    @strawberry.field(description="List products; published only unless a status is given")
    async def products(
        self,
        info: Info[GraphQLContext, None],
        limit: LimitArg = None,
        skip: SkipArg = 0,
        status: ProductStatusEnum | None = None,
        category_slug: str | None = None,
        collection_slug: str | None = None,
        featured: bool | None = None,
        search: str | None = None,
        sort_by: Annotated[
            str | None,
            strawberry.argument(description="newest, oldest, price-asc, price-desc, name-asc, name-desc"),
        ] = None,
    ) -> list[ProductType]:
        """List products with filters and sorting.

        Args:
            info: Strawberry info with context
            limit: Page size (default from ``CATALOG_GRAPHQL_PRODUCT_LIMIT``)
            skip: Offset
            status: Exact status; PUBLISHED when omitted
            category_slug: Only products filed under this category
            collection_slug: Only products in this collection
            featured: Exact featured flag
            search: Case-insensitive substring of the title
            sort_by: Sort key (default newest)

        Returns:
            List of ProductType
        """
        ctx = info.context
        limit, skip = _page(limit, skip, get_catalog_settings().graphql_product_limit)
        filters, order = build_query(
            ListingParams(
                Listing.PRODUCTS,
                status=status.value if status else None,
                featured=featured,
                category_slug=category_slug,
                collection_slug=collection_slug,
                search=search,
                sort_by=sort_by,
            )
        )
        rows = await ctx.store.find_many(EntityKind.PRODUCT, filters, order, limit=limit, skip=skip)
        for row in rows:
            ctx.loaders.products.prime(row.id, row)
        return [ProductType.from_model(row) for row in rows]

    @strawberry.field(description="Get a single product by slug")
    async def product(self, info: Info[GraphQLContext, None], slug: SlugArg) -> ProductType | None:
        ctx = info.context
        rows = await ctx.store.find_many(EntityKind.PRODUCT, FilterSpec.where(slug=slug), limit=1)
        if not rows:
            return None
        ctx.loaders.products.prime(rows[0].id, rows[0])
        return ProductType.from_model(rows[0])

    @strawberry.field(description="Get a single product by ID")
    async def product_by_id(self, info: Info[GraphQLContext, None], id: int) -> ProductType | None:
        """Get a single product by ID.

        Uses DataLoader for efficient batching if called multiple times.
        """
        product = await info.context.loaders.products.load(id)
        return ProductType.from_model(product) if product else None

    @strawberry.field(description="List categories ordered by sort order")
    async def categories(
        self,
        info: Info[GraphQLContext, None],
        limit: LimitArg = None,
        skip: SkipArg = 0,
        parent_id: Annotated[
            str | None,
            strawberry.argument(description="Parent category ID; pass null for root categories"),
        ] = strawberry.UNSET,
        is_visible: bool | None = None,
    ) -> list[CategoryType]:
        ctx = info.context
        limit, skip = _page(limit, skip, get_catalog_settings().graphql_taxonomy_limit)
        filters, order = build_query(
            ListingParams(
                Listing.CATEGORIES,
                is_visible=is_visible,
                parent_id=UNSET if parent_id is strawberry.UNSET else parent_id,
            )
        )
        rows = await ctx.store.find_many(EntityKind.CATEGORY, filters, order, limit=limit, skip=skip)
        for row in rows:
            ctx.loaders.categories.prime(row.id, row)
        return [CategoryType.from_model(row) for row in rows]

    @strawberry.field(description="Get a single category by slug")
    async def category(self, info: Info[GraphQLContext, None], slug: SlugArg) -> CategoryType | None:
        ctx = info.context
        rows = await ctx.store.find_many(EntityKind.CATEGORY, FilterSpec.where(slug=slug), limit=1)
        if not rows:
            return None
        ctx.loaders.categories.prime(rows[0].id, rows[0])
        return CategoryType.from_model(rows[0])

    @strawberry.field(description="List collections ordered by sort order")
    async def collections(
        self,
        info: Info[GraphQLContext, None],
        limit: LimitArg = None,
        skip: SkipArg = 0,
        is_visible: bool | None = None,
    ) -> list[CollectionType]:
        ctx = info.context
        limit, skip = _page(limit, skip, get_catalog_settings().graphql_taxonomy_limit)
        filters, order = build_query(ListingParams(Listing.COLLECTIONS, is_visible=is_visible))
        rows = await ctx.store.find_many(EntityKind.COLLECTION, filters, order, limit=limit, skip=skip)
        for row in rows:
            ctx.loaders.collections.prime(row.id, row)
        return [CollectionType.from_model(row) for row in rows]

    @strawberry.field(description="Get a single collection by slug")
    async def collection(self, info: Info[GraphQLContext, None], slug: SlugArg) -> CollectionType | None:
        ctx = info.context
        rows = await ctx.store.find_many(EntityKind.COLLECTION, FilterSpec.where(slug=slug), limit=1)
        if not rows:
            return None
        ctx.loaders.collections.prime(rows[0].id, rows[0])
        return CollectionType.from_model(rows[0])

    @strawberry.field(description="Variants of a product ordered by sort order")
    async def variants(self, info: Info[GraphQLContext, None], product_id: int) -> list[ProductVariantType]:
        variants = await info.context.loaders.product_variants.load(product_id)
        return [ProductVariantType.from_model(variant) for variant in variants]

    @strawberry.field(description="Reviews of a product, newest first")
    async def reviews(
        self,
        info: Info[GraphQLContext, None],
        product_id: int,
        published: Annotated[
            bool | None,
            strawberry.argument(description="Published state to match; null for all reviews"),
        ] = True,
        limit: LimitArg = None,
        skip: SkipArg = 0,
    ) -> list[ReviewType]:
        limit, skip = _page(limit, skip, get_catalog_settings().graphql_product_limit)
        filters = FilterSpec.where(product_id=product_id)
        if published is not None:
            filters = filters.and_(*FilterSpec.where(is_published=published))
        order = OrderSpec((OrderTerm("created_at", SortDirection.DESC),))
        rows = await info.context.store.find_many(
            EntityKind.REVIEW, filters, order, limit=limit, skip=skip
        )
        return [ReviewType.from_model(row) for row in rows]

    @strawberry.field(description="Variant types with their options, ordered by sort order")
    async def variant_types(self, info: Info[GraphQLContext, None]) -> list[VariantTypeType]:
        rows = await info.context.store.find_many(
            EntityKind.VARIANT_TYPE, FilterSpec(), OrderSpec.by("sort_order")
        )
        return [VariantTypeType.from_model(row) for row in rows]


__all__ = ["Query"]
