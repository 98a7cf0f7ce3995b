"""Single-entity loaders: one row (or None) per primary key."""

from __future__ import annotations

from storefront.features.accounts.models import Address, User
from storefront.features.catalog.models import Category, Collection, Media, Product, ProductVariant
from storefront.features.catalog.store import EntityKind
from storefront.features.graphql.dataloaders.base import EntityLoader


class ProductLoader(EntityLoader[int, Product]):
    """Products by id."""

    name = "products"
    kind = EntityKind.PRODUCT


class CategoryLoader(EntityLoader[str, Category]):
    """Categories by (string) id; resolves ``Category.parent``."""

    name = "categories"
    kind = EntityKind.CATEGORY


class CollectionLoader(EntityLoader[str, Collection]):
    name = "collections"
    kind = EntityKind.COLLECTION


class VariantLoader(EntityLoader[int, ProductVariant]):
    name = "variants"
    kind = EntityKind.VARIANT


class UserLoader(EntityLoader[int, User]):
    """Users by id; resolves review authors."""

    name = "users"
    kind = EntityKind.USER


class AddressLoader(EntityLoader[int, Address]):
    name = "addresses"
    kind = EntityKind.ADDRESS


class MediaLoader(EntityLoader[int, Media]):
    """Media by id; resolves taxonomy covers and option swatches."""

    name = "media"
    kind = EntityKind.MEDIA


__all__ = [
    "AddressLoader",
    "CategoryLoader",
    "CollectionLoader",
    "MediaLoader",
    "ProductLoader",
    "UserLoader",
    "VariantLoader",
]
