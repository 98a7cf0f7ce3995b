"""DataLoader container and factory.

Loaders batch and cache catalog lookups within a single request, preventing
N+1 query problems in GraphQL resolvers and REST handlers alike.

Each request gets its own ``DataLoaders`` instance, so batching boundaries
and caches never cross requests.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from storefront.features.graphql.dataloaders.base import (
    BatchLoader,
    CountLoader,
    EntityLoader,
    LoaderContractError,
    RelationLoader,
)
from storefront.features.graphql.dataloaders.entities import (
    AddressLoader,
    CategoryLoader,
    CollectionLoader,
    MediaLoader,
    ProductLoader,
    UserLoader,
    VariantLoader,
)
from storefront.features.graphql.dataloaders.relationships import (
    CategoryChildrenLoader,
    CategoryProductCountLoader,
    CategoryProductsLoader,
    CollectionProductCountLoader,
    CollectionProductsLoader,
    ProductCategoriesLoader,
    ProductCollectionsLoader,
    ProductImagesLoader,
    ProductReviewsLoader,
    ProductVariantsLoader,
    UserAddressesLoader,
    VariantImagesLoader,
    VariantOptionsLoader,
)

if TYPE_CHECKING:
    from storefront.features.catalog.store import CatalogStore


@dataclass(frozen=True)
class DataLoaders:
    """Container for all loader instances.

    One instance created per request. Provides typed access to loaders.

    Usage in resolver:
        product = await info.context.loaders.products.load(product_id)
        variants = await info.context.loaders.product_variants.load(product.id)
    """

    products: ProductLoader
    categories: CategoryLoader
    collections: CollectionLoader
    variants: VariantLoader
    users: UserLoader
    addresses: AddressLoader
    media: MediaLoader
    product_variants: ProductVariantsLoader
    product_reviews: ProductReviewsLoader
    product_categories: ProductCategoriesLoader
    product_collections: ProductCollectionsLoader
    product_images: ProductImagesLoader
    variant_images: VariantImagesLoader
    category_children: CategoryChildrenLoader
    category_products: CategoryProductsLoader
    collection_products: CollectionProductsLoader
    category_product_counts: CategoryProductCountLoader
    collection_product_counts: CollectionProductCountLoader
    user_addresses: UserAddressesLoader
    variant_options: VariantOptionsLoader


def create_dataloaders(store: CatalogStore) -> DataLoaders:
    """Factory for creating request-scoped loaders.

    Constructs every loader eagerly; nothing is fetched until a ``load``.

    Args:
        store: Catalog store the loaders fetch through

    Returns:
        DataLoaders container with all loaders initialized
    """
    return DataLoaders(
        products=ProductLoader(store),
        categories=CategoryLoader(store),
        collections=CollectionLoader(store),
        variants=VariantLoader(store),
        users=UserLoader(store),
        addresses=AddressLoader(store),
        media=MediaLoader(store),
        product_variants=ProductVariantsLoader(store),
        product_reviews=ProductReviewsLoader(store),
        product_categories=ProductCategoriesLoader(store),
        product_collections=ProductCollectionsLoader(store),
        product_images=ProductImagesLoader(store),
        variant_images=VariantImagesLoader(store),
        category_children=CategoryChildrenLoader(store),
        category_products=CategoryProductsLoader(store),
        collection_products=CollectionProductsLoader(store),
        category_product_counts=CategoryProductCountLoader(store),
        collection_product_counts=CollectionProductCountLoader(store),
        user_addresses=UserAddressesLoader(store),
        variant_options=VariantOptionsLoader(store),
    )


__all__ = [
    "AddressLoader",
    "BatchLoader",
    "CategoryChildrenLoader",
    "CategoryLoader",
    "CategoryProductCountLoader",
    "CategoryProductsLoader",
    "CollectionLoader",
    "CollectionProductCountLoader",
    "CollectionProductsLoader",
    "CountLoader",
    "DataLoaders",
    "EntityLoader",
    "LoaderContractError",
    "MediaLoader",
    "ProductCategoriesLoader",
    "ProductCollectionsLoader",
    "ProductImagesLoader",
    "ProductLoader",
    "ProductReviewsLoader",
    "ProductVariantsLoader",
    "RelationLoader",
    "UserAddressesLoader",
    "UserLoader",
    "VariantImagesLoader",
    "VariantLoader",
    "VariantOptionsLoader",
    "create_dataloaders",
]
