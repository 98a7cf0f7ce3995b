"""Relationship loaders for one-to-many and many-to-many associations.

Each loader maps a parent key to the list of related rows (or, for the
count loaders, to how many there are), fetched for all requested parents in
a single store call.
"""

from __future__ import annotations

from storefront.features.accounts.models import Address
from storefront.features.catalog.models import (
    Category,
    Collection,
    Product,
    ProductCategory,
    ProductCollection,
    ProductImage,
    ProductVariant,
    Review,
    VariantImage,
    VariantOptionSelection,
)
from storefront.features.catalog.query_builder import (
    FilterSpec,
    OrderSpec,
    OrderTerm,
    SortDirection,
)
from storefront.features.catalog.store import EntityKind
from storefront.features.graphql.dataloaders.base import CountLoader, RelationLoader


class ProductVariantsLoader(RelationLoader[int, ProductVariant]):
    """Variants per product id, by ``sort_order``."""

    name = "product_variants"
    kind = EntityKind.VARIANT
    parent_attr = "product_id"
    order = OrderSpec.by("sort_order")


class ProductReviewsLoader(RelationLoader[int, Review]):
    """Published reviews per product id, newest first."""

    name = "product_reviews"
    kind = EntityKind.REVIEW
    parent_attr = "product_id"
    filters = FilterSpec.where(is_published=True)
    order = OrderSpec((OrderTerm("created_at", SortDirection.DESC),))


class ProductCategoriesLoader(RelationLoader[int, Category]):
    """Categories per product id, through the product/category link table."""

    name = "product_categories"
    kind = EntityKind.PRODUCT_CATEGORY
    parent_attr = "product_id"

    def select(self, row: ProductCategory) -> Category:
        return row.category


class ProductCollectionsLoader(RelationLoader[int, Collection]):
    """Collections per product id, through the product/collection link table."""

    name = "product_collections"
    kind = EntityKind.PRODUCT_COLLECTION
    parent_attr = "product_id"
    order = OrderSpec.by("sort_order")

    def select(self, row: ProductCollection) -> Collection:
        return row.collection


class ProductImagesLoader(RelationLoader[int, ProductImage]):
    """Gallery entries per product id, by ``sort_order``, each with its media row."""

    name = "product_images"
    kind = EntityKind.PRODUCT_IMAGE
    parent_attr = "product_id"
    order = OrderSpec.by("sort_order")


class VariantImagesLoader(RelationLoader[int, VariantImage]):
    name = "variant_images"
    kind = EntityKind.VARIANT_IMAGE
    parent_attr = "variant_id"
    order = OrderSpec.by("sort_order")


class CategoryChildrenLoader(RelationLoader[str, Category]):
    """Visible child categories per category id, by ``sort_order``."""

    name = "category_children"
    kind = EntityKind.CATEGORY
    parent_attr = "parent_id"
    filters = FilterSpec.where(is_visible=True)
    order = OrderSpec.by("sort_order")


class CategoryProductsLoader(RelationLoader[str, Product]):
    """Products per category id, through the product/category link table."""

    name = "category_products"
    kind = EntityKind.PRODUCT_CATEGORY
    parent_attr = "category_id"
    order = OrderSpec.by("product_id")

    def select(self, row: ProductCategory) -> Product:
        return row.product


class CollectionProductsLoader(RelationLoader[str, Product]):
    """Products per collection id, in the collection's ``sort_order``."""

    name = "collection_products"
    kind = EntityKind.PRODUCT_COLLECTION
    parent_attr = "collection_id"
    order = OrderSpec.by("sort_order")

    def select(self, row: ProductCollection) -> Product:
        return row.product


class CategoryProductCountLoader(CountLoader[str]):
    name = "category_product_counts"
    kind = EntityKind.PRODUCT_CATEGORY
    parent_attr = "category_id"


class CollectionProductCountLoader(CountLoader[str]):
    name = "collection_product_counts"
    kind = EntityKind.PRODUCT_COLLECTION
    parent_attr = "collection_id"


class UserAddressesLoader(RelationLoader[int, Address]):
    """Addresses per user id, default address first."""

    name = "user_addresses"
    kind = EntityKind.ADDRESS
    parent_attr = "user_id"
    order = OrderSpec((OrderTerm("is_default", SortDirection.DESC),))


class VariantOptionsLoader(RelationLoader[int, VariantOptionSelection]):
    """Option selections per variant id.

    Each selection arrives with its option, the option's variant type and
    swatch image, which is everything ``size``, ``color`` and ``colorHex``
    need.
    """

    name = "variant_options"
    kind = EntityKind.VARIANT_OPTION_SELECTION
    parent_attr = "variant_id"


__all__ = [
    "CategoryChildrenLoader",
    "CategoryProductCountLoader",
    "CategoryProductsLoader",
    "CollectionProductCountLoader",
    "CollectionProductsLoader",
    "ProductCategoriesLoader",
    "ProductCollectionsLoader",
    "ProductImagesLoader",
    "ProductReviewsLoader",
    "ProductVariantsLoader",
    "UserAddressesLoader",
    "VariantImagesLoader",
    "VariantOptionsLoader",
]
