"""Strawberry object types exposed by the catalog schema."""

from storefront.features.graphql.types.catalog import (
    CategoryType,
    CollectionType,
    MediaType,
    ProductImageType,
    ProductStatusEnum,
    ProductType,
    ProductVariantType,
    PublicUserType,
    ReviewType,
    VariantImageType,
    VariantOptionSelectionType,
    VariantOptionType,
    VariantTypeType,
)

__all__ = [
    "CategoryType",
    "CollectionType",
    "MediaType",
    "ProductImageType",
    "ProductStatusEnum",
    "ProductType",
    "ProductVariantType",
    "PublicUserType",
    "ReviewType",
    "VariantImageType",
    "VariantOptionSelectionType",
    "VariantOptionType",
    "VariantTypeType",
]
