"""Pydantic schemas for the catalog REST endpoints.

Responses use camelCase keys and serialise prices as floats, the shape the
storefront client consumes.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

if TYPE_CHECKING:
    from collections.abc import Sequence

    from storefront.features.catalog.models import (
        Category,
        Collection,
        Media,
        Product,
        ProductImage,
        ProductVariant,
        VariantImage,
    )

T = TypeVar("T")


class CatalogModel(BaseModel):
    """Base for catalog responses: camelCase aliases, built from ORM rows."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MediaResponse(CatalogModel):
    id: int
    url: str
    thumbnail_url: str | None
    alt: str
    filename: str | None
    mime_type: str | None
    filesize: int | None
    width: int | None
    height: int | None
    created_at: datetime
    updated_at: datetime


class ProductImageResponse(CatalogModel):
    """Gallery entry with its media row."""

    id: int
    product_id: int
    image_id: int
    sort_order: int
    is_primary: bool
    image: MediaResponse


class VariantImageResponse(CatalogModel):
    id: int
    variant_id: int
    image_id: int
    sort_order: int
    is_primary: bool
    created_at: datetime
    image: MediaResponse


def primary_image(images: Sequence[ProductImage]) -> ProductImage | None:
    """The gallery entry flagged primary, if any."""
    return next((image for image in images if image.is_primary), None)


class VariantResponse(CatalogModel):
    id: int
    product_id: int
    sku: str | None
    title: str | None
    price: float | None
    compare_at_price: float | None
    inventory_qty: int
    weight: float | None
    status: str
    sort_order: int
    is_available: bool
    created_at: datetime
    updated_at: datetime


class VariantDetailResponse(VariantResponse):
    images: list[VariantImageResponse] = Field(default_factory=list)

    @classmethod
    def from_model(
        cls, variant: ProductVariant, images: Sequence[VariantImage]
    ) -> VariantDetailResponse:
        base = VariantResponse.model_validate(variant)
        return cls(
            **base.model_dump(),
            images=[VariantImageResponse.model_validate(image) for image in images],
        )


class CategoryResponse(CatalogModel):
    id: str
    name: str
    slug: str
    description: str | None
    image_id: int | None
    parent_id: str | None
    sort_order: int
    is_visible: bool
    created_at: datetime
    updated_at: datetime


class CategorySummaryResponse(CategoryResponse):
    """Listing entry: cover image, visible children and number of products."""

    image: MediaResponse | None = None
    children: list[CategoryResponse] = Field(default_factory=list)
    product_count: int = 0

    @classmethod
    def from_model(
        cls,
        category: Category,
        image: Media | None,
        children: Sequence[Category],
        product_count: int,
    ) -> CategorySummaryResponse:
        base = CategoryResponse.model_validate(category)
        return cls(
            **base.model_dump(),
            image=MediaResponse.model_validate(image) if image else None,
            children=[CategoryResponse.model_validate(child) for child in children],
            product_count=product_count,
        )


class CollectionResponse(CatalogModel):
    id: str
    name: str
    slug: str
    description: str | None
    image_id: int | None
    is_visible: bool
    sort_order: int
    created_at: datetime
    updated_at: datetime


class CollectionSummaryResponse(CollectionResponse):
    product_count: int = 0


class ProductResponse(CatalogModel):
    """Product columns only; relation lists are added by the subclasses."""

    id: int
    slug: str
    title: str
    description: str | None
    status: str
    is_featured: bool
    base_price: float
    compare_at_price: float | None
    price_enabled: bool
    track_inventory: bool
    inventory_qty: int
    low_stock_threshold: int
    brand: str | None
    vendor: str | None
    product_type: str | None
    material: str | None
    care_instructions: str | None
    made_in: str | None
    has_variants: bool
    meta_title: str | None
    meta_description: str | None
    created_at: datetime
    updated_at: datetime
    published_at: datetime | None


class ProductSummaryResponse(ProductResponse):
    """Listing entry: the product, its primary image and its first variant."""

    images: list[ProductImageResponse] = Field(default_factory=list, max_length=1)
    variants: list[VariantResponse] = Field(default_factory=list, max_length=1)

    @classmethod
    def from_model(
        cls,
        product: Product,
        variants: Sequence[ProductVariant],
        images: Sequence[ProductImage] = (),
    ) -> ProductSummaryResponse:
        base = ProductResponse.model_validate(product)
        primary = primary_image(images)
        return cls(
            **base.model_dump(),
            images=[ProductImageResponse.model_validate(primary)] if primary else [],
            variants=[VariantResponse.model_validate(variant) for variant in variants[:1]],
        )


class ProductDetailResponse(ProductResponse):
    """Single product with its gallery, all variants and its taxonomies."""

    images: list[ProductImageResponse] = Field(default_factory=list)
    variants: list[VariantDetailResponse] = Field(default_factory=list)
    categories: list[CategoryResponse] = Field(default_factory=list)
    collections: list[CollectionResponse] = Field(default_factory=list)

    @classmethod
    def from_model(
        cls,
        product: Product,
        images: Sequence[ProductImage],
        variants: Sequence[ProductVariant],
        variant_images: Sequence[Sequence[VariantImage]],
        categories: Sequence[Category],
        collections: Sequence[Collection],
    ) -> ProductDetailResponse:
        base = ProductResponse.model_validate(product)
        return cls(
            **base.model_dump(),
            images=[ProductImageResponse.model_validate(image) for image in images],
            variants=[
                VariantDetailResponse.from_model(variant, gallery)
                for variant, gallery in zip(variants, variant_images, strict=True)
            ],
            categories=[CategoryResponse.model_validate(category) for category in categories],
            collections=[CollectionResponse.model_validate(collection) for collection in collections],
        )


class CategoryDetailResponse(CategorySummaryResponse):
    """Category with its parent, visible children and products."""

    parent: CategoryResponse | None = None
    products: list[ProductSummaryResponse] = Field(default_factory=list)

    @classmethod
    def from_parts(
        cls,
        summary: CategorySummaryResponse,
        parent: Category | None,
        products: list[ProductSummaryResponse],
    ) -> CategoryDetailResponse:
        return cls(
            **summary.model_dump(),
            parent=CategoryResponse.model_validate(parent) if parent else None,
            products=products,
        )


class CollectionDetailResponse(CollectionResponse):
    """Collection with its products in the collection's own order."""

    products: list[ProductSummaryResponse] = Field(default_factory=list)


class SearchIndexEntry(CatalogModel):
    """Flattened published product for a client-side search index."""

    id: int
    slug: str
    title: str
    description: str
    brand: str
    base_price: float
    image_url: str
    status: str

    @classmethod
    def from_model(cls, product: Product, images: Sequence[ProductImage] = ()) -> SearchIndexEntry:
        primary = primary_image(images)
        return cls(
            id=product.id,
            slug=product.slug,
            title=product.title,
            description=product.description or "",
            brand=product.brand or "",
            base_price=float(product.base_price),
            image_url=primary.image.url if primary else "",
            status=product.status,
        )


class PaginationMeta(CatalogModel):
    page: int = Field(ge=1)
    limit: int = Field(ge=1)
    total: int = Field(ge=0)
    total_pages: int = Field(ge=0)


class ProductListResponse(CatalogModel):
    data: list[ProductSummaryResponse]
    pagination: PaginationMeta


class DataResponse(CatalogModel, Generic[T]):
    """Envelope used by every non-paginated catalog endpoint."""

    data: T


__all__ = [
    "CategoryDetailResponse",
    "CategoryResponse",
    "CategorySummaryResponse",
    "CollectionDetailResponse",
    "CollectionResponse",
    "CollectionSummaryResponse",
    "DataResponse",
    "MediaResponse",
    "PaginationMeta",
    "ProductDetailResponse",
    "ProductImageResponse",
    "ProductListResponse",
    "ProductResponse",
    "ProductSummaryResponse",
    "SearchIndexEntry",
    "VariantDetailResponse",
    "VariantImageResponse",
    "VariantResponse",
    "primary_image",
]
