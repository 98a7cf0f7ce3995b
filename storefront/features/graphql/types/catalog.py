"""GraphQL types for the product catalog.

Provides:
- ProductType, ProductVariantType: products and their purchasable variations
- CategoryType, CollectionType: taxonomies
- ReviewType, PublicUserType: published reviews and their authors
- VariantTypeType, VariantOptionType: option dimensions (size, color, ...)
- MediaType, ProductImageType, VariantImageType: galleries and the media behind them

Relation fields never touch the database directly: they go through the
request's DataLoaders, so a list of N products resolves its variants with a
single batched fetch instead of N.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

import strawberry
from strawberry.types import Info

from storefront.features.accounts.models import UserRole
from storefront.features.catalog.models import ProductStatus
from storefront.features.graphql.context import GraphQLContext

if TYPE_CHECKING:
    from storefront.features.accounts.models import User
    from storefront.features.catalog.models import (
        Category,
        Collection,
        Media,
        Product,
        ProductImage,
        ProductVariant,
        Review,
        VariantImage,
        VariantOption,
        VariantOptionSelection,
        VariantType,
    )

ProductStatusEnum = strawberry.enum(
    ProductStatus, name="ProductStatus", description="Publication state of a product or variant"
)
UserRoleEnum = strawberry.enum(UserRole, name="UserRole")


def _price(value: Decimal | None) -> float | None:
    return float(value) if value is not None else None


def _option_for(selections: list[VariantOptionSelection], type_name: str) -> VariantOption | None:
    """First selected option whose variant type is ``type_name`` (case-insensitive)."""
    for selection in selections:
        if selection.option.variant_type.name.lower() == type_name:
            return selection.option
    return None


@strawberry.type(description="Uploaded image")
class MediaType:
    id: strawberry.ID
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

    @classmethod
    def from_model(cls, media: Media) -> MediaType:
        return cls(
            id=strawberry.ID(str(media.id)),
            url=media.url,
            thumbnail_url=media.thumbnail_url,
            alt=media.alt,
            filename=media.filename,
            mime_type=media.mime_type,
            filesize=media.filesize,
            width=media.width,
            height=media.height,
            created_at=media.created_at,
            updated_at=media.updated_at,
        )


async def _media(info: Info[GraphQLContext, None], image_id: int | None) -> MediaType | None:
    if image_id is None:
        return None
    media = await info.context.loaders.media.load(image_id)
    return MediaType.from_model(media) if media else None


@strawberry.type(description="Hierarchical product category")
class CategoryType:
    """GraphQL type for Category entity."""

    id: strawberry.ID
    name: str
    slug: str
    description: str | None
    image_id: int | None
    parent_id: str | None = strawberry.field(description="Parent category ID; null at the root")
    sort_order: int
    is_visible: bool
    created_at: datetime
    updated_at: datetime

    @strawberry.field(description="Parent category (batched through the category loader)")
    async def parent(self, info: Info[GraphQLContext, None]) -> CategoryType | None:
        if self.parent_id is None:
            return None
        category = await info.context.loaders.categories.load(self.parent_id)
        return CategoryType.from_model(category) if category else None

    @strawberry.field(description="Cover image")
    async def image(self, info: Info[GraphQLContext, None]) -> MediaType | None:
        return await _media(info, self.image_id)

    @strawberry.field(description="Visible child categories ordered by sort order")
    async def children(self, info: Info[GraphQLContext, None]) -> list[CategoryType]:
        children = await info.context.loaders.category_children.load(str(self.id))
        return [CategoryType.from_model(child) for child in children]

    @classmethod
    def from_model(cls, category: Category) -> CategoryType:
        return cls(
            id=strawberry.ID(category.id),
            name=category.name,
            slug=category.slug,
            description=category.description,
            image_id=category.image_id,
            parent_id=category.parent_id,
            sort_order=category.sort_order,
            is_visible=category.is_visible,
            created_at=category.created_at,
            updated_at=category.updated_at,
        )


@strawberry.type(description="Curated grouping of products")
class CollectionType:
    """GraphQL type for Collection entity."""

    id: strawberry.ID
    name: str
    slug: str
    description: str | None
    image_id: int | None
    is_visible: bool
    sort_order: int
    created_at: datetime
    updated_at: datetime

    @strawberry.field(description="Cover image")
    async def image(self, info: Info[GraphQLContext, None]) -> MediaType | None:
        return await _media(info, self.image_id)

    @classmethod
    def from_model(cls, collection: Collection) -> CollectionType:
        return cls(
            id=strawberry.ID(collection.id),
            name=collection.name,
            slug=collection.slug,
            description=collection.description,
            image_id=collection.image_id,
            is_visible=collection.is_visible,
            sort_order=collection.sort_order,
            created_at=collection.created_at,
            updated_at=collection.updated_at,
        )


@strawberry.type(description="One value of a variant type, e.g. 'M' for size")
class VariantOptionType:
    id: strawberry.ID
    variant_type_id: int
    value: str
    label: str
    swatch_image_id: int | None
    sort_order: int
    created_at: datetime
    updated_at: datetime

    @strawberry.field(description="Swatch image, for color options")
    async def swatch_image(self, info: Info[GraphQLContext, None]) -> MediaType | None:
        return await _media(info, self.swatch_image_id)

    @classmethod
    def from_model(cls, option: VariantOption) -> VariantOptionType:
        return cls(
            id=strawberry.ID(str(option.id)),
            variant_type_id=option.variant_type_id,
            value=option.value,
            label=option.label,
            swatch_image_id=option.swatch_image_id,
            sort_order=option.sort_order,
            created_at=option.created_at,
            updated_at=option.updated_at,
        )


@strawberry.type(description="Option dimension such as size or color")
class VariantTypeType:
    id: strawberry.ID
    name: str
    label: str
    sort_order: int
    options: list[VariantOptionType]

    @classmethod
    def from_model(cls, variant_type: VariantType) -> VariantTypeType:
        return cls(
            id=strawberry.ID(str(variant_type.id)),
            name=variant_type.name,
            label=variant_type.label,
            sort_order=variant_type.sort_order,
            options=[VariantOptionType.from_model(option) for option in variant_type.options],
        )


@strawberry.type(description="Option chosen for a variant")
class VariantOptionSelectionType:
    id: strawberry.ID
    variant_id: int
    option_id: int
    created_at: datetime
    option: VariantOptionType

    @classmethod
    def from_model(cls, selection: VariantOptionSelection) -> VariantOptionSelectionType:
        return cls(
            id=strawberry.ID(str(selection.id)),
            variant_id=selection.variant_id,
            option_id=selection.option_id,
            created_at=selection.created_at,
            option=VariantOptionType.from_model(selection.option),
        )


@strawberry.type(description="Image in a variant's gallery")
class VariantImageType:
    id: strawberry.ID
    variant_id: int
    image_id: int
    sort_order: int
    is_primary: bool
    created_at: datetime
    image: MediaType

    @classmethod
    def from_model(cls, entry: VariantImage) -> VariantImageType:
        return cls(
            id=strawberry.ID(str(entry.id)),
            variant_id=entry.variant_id,
            image_id=entry.image_id,
            sort_order=entry.sort_order,
            is_primary=entry.is_primary,
            created_at=entry.created_at,
            image=MediaType.from_model(entry.image),
        )


@strawberry.type(description="Image in a product's gallery")
class ProductImageType:
    """Gallery entry; the media row arrives with it, the product is loaded on demand."""

    id: strawberry.ID
    product_id: int
    image_id: int
    sort_order: int
    is_primary: bool
    image: MediaType

    @strawberry.field(description="Product the image belongs to")
    async def product(self, info: Info[GraphQLContext, None]) -> ProductType | None:
        product = await info.context.loaders.products.load(self.product_id)
        return ProductType.from_model(product) if product else None

    @classmethod
    def from_model(cls, entry: ProductImage) -> ProductImageType:
        return cls(
            id=strawberry.ID(str(entry.id)),
            product_id=entry.product_id,
            image_id=entry.image_id,
            sort_order=entry.sort_order,
            is_primary=entry.is_primary,
            image=MediaType.from_model(entry.image),
        )


@strawberry.type(description="Purchasable variation of a product")
class ProductVariantType:
    """GraphQL type for ProductVariant entity.

    ``size``, ``color`` and ``colorHex`` all read the same batched
    ``variant_options`` load, so asking for all three on every variant of a
    page still costs one fetch.
    """

    id: strawberry.ID
    product_id: int
    sku: str | None
    title: str | None
    price: float | None
    compare_at_price: float | None
    inventory_qty: int
    weight: float | None
    status: ProductStatusEnum
    sort_order: int
    is_available: bool = strawberry.field(description="Published and in stock")
    created_at: datetime
    updated_at: datetime

    @strawberry.field(description="Product this variant belongs to")
    async def product(self, info: Info[GraphQLContext, None]) -> ProductType | None:
        product = await info.context.loaders.products.load(self.product_id)
        return ProductType.from_model(product) if product else None

    @strawberry.field(description="Label of the selected size option")
    async def size(self, info: Info[GraphQLContext, None]) -> str | None:
        selections = await info.context.loaders.variant_options.load(int(self.id))
        option = _option_for(selections, "size")
        return option.label if option else None

    @strawberry.field(description="Label of the selected color option")
    async def color(self, info: Info[GraphQLContext, None]) -> str | None:
        selections = await info.context.loaders.variant_options.load(int(self.id))
        option = _option_for(selections, "color")
        return option.label if option else None

    @strawberry.field(description="Swatch image URL of the selected color option")
    async def color_hex(self, info: Info[GraphQLContext, None]) -> str | None:
        selections = await info.context.loaders.variant_options.load(int(self.id))
        option = _option_for(selections, "color")
        if option is None or option.swatch_image is None:
            return None
        return option.swatch_image.url

    @strawberry.field(description="Variant gallery ordered by sort order")
    async def images(self, info: Info[GraphQLContext, None]) -> list[VariantImageType]:
        entries = await info.context.loaders.variant_images.load(int(self.id))
        return [VariantImageType.from_model(entry) for entry in entries]

    @strawberry.field(description="Selected options with their values")
    async def options(self, info: Info[GraphQLContext, None]) -> list[VariantOptionSelectionType]:
        selections = await info.context.loaders.variant_options.load(int(self.id))
        return [VariantOptionSelectionType.from_model(selection) for selection in selections]

    @classmethod
    def from_model(cls, variant: ProductVariant) -> ProductVariantType:
        return cls(
            id=strawberry.ID(str(variant.id)),
            product_id=variant.product_id,
            sku=variant.sku,
            title=variant.title,
            price=_price(variant.price),
            compare_at_price=_price(variant.compare_at_price),
            inventory_qty=variant.inventory_qty,
            weight=_price(variant.weight),
            status=ProductStatus(variant.status),
            sort_order=variant.sort_order,
            is_available=variant.is_available,
            created_at=variant.created_at,
            updated_at=variant.updated_at,
        )


@strawberry.type(description="Sellable product")
class ProductType:
    """GraphQL type for Product entity.

    Maps from the SQLAlchemy Product model; prices are exposed as floats.
    """

    id: strawberry.ID
    slug: str
    title: str
    description: str | None
    status: ProductStatusEnum
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

    @strawberry.field(description="Gallery ordered by sort order")
    async def images(self, info: Info[GraphQLContext, None]) -> list[ProductImageType]:
        entries = await info.context.loaders.product_images.load(int(self.id))
        return [ProductImageType.from_model(entry) for entry in entries]

    @strawberry.field(description="Variants ordered by sort order")
    async def variants(self, info: Info[GraphQLContext, None]) -> list[ProductVariantType]:
        variants = await info.context.loaders.product_variants.load(int(self.id))
        return [ProductVariantType.from_model(variant) for variant in variants]

    @strawberry.field(description="Published reviews, newest first")
    async def reviews(self, info: Info[GraphQLContext, None]) -> list[ReviewType]:
        reviews = await info.context.loaders.product_reviews.load(int(self.id))
        return [ReviewType.from_model(review) for review in reviews]

    @strawberry.field(description="Categories the product is filed under")
    async def categories(self, info: Info[GraphQLContext, None]) -> list[CategoryType]:
        categories = await info.context.loaders.product_categories.load(int(self.id))
        return [CategoryType.from_model(category) for category in categories]

    @strawberry.field(description="Collections featuring the product")
    async def collections(self, info: Info[GraphQLContext, None]) -> list[CollectionType]:
        collections = await info.context.loaders.product_collections.load(int(self.id))
        return [CollectionType.from_model(collection) for collection in collections]

    @classmethod
    def from_model(cls, product: Product) -> ProductType:
        """Convert SQLAlchemy model to GraphQL type.

        Args:
            product: SQLAlchemy Product model instance

        Returns:
            ProductType instance
        """
        return cls(
            id=strawberry.ID(str(product.id)),
            slug=product.slug,
            title=product.title,
            description=product.description,
            status=ProductStatus(product.status),
            is_featured=product.is_featured,
            base_price=float(product.base_price),
            compare_at_price=_price(product.compare_at_price),
            price_enabled=product.price_enabled,
            track_inventory=product.track_inventory,
            inventory_qty=product.inventory_qty,
            low_stock_threshold=product.low_stock_threshold,
            brand=product.brand,
            vendor=product.vendor,
            product_type=product.product_type,
            material=product.material,
            care_instructions=product.care_instructions,
            made_in=product.made_in,
            has_variants=product.has_variants,
            meta_title=product.meta_title,
            meta_description=product.meta_description,
            created_at=product.created_at,
            updated_at=product.updated_at,
            published_at=product.published_at,
        )


@strawberry.type(description="Public profile of a review author")
class PublicUserType:
    id: strawberry.ID
    name: str | None
    role: UserRoleEnum

    @classmethod
    def from_model(cls, user: User) -> PublicUserType:
        return cls(id=strawberry.ID(str(user.id)), name=user.name, role=UserRole(user.role))


@strawberry.type(description="Customer review of a product")
class ReviewType:
    """GraphQL type for Review entity."""

    id: strawberry.ID
    product_id: int
    user_id: int
    rating: int
    title: str | None
    content: str | None
    is_verified: bool
    is_published: bool
    created_at: datetime
    updated_at: datetime

    @strawberry.field(description="Reviewed product")
    async def product(self, info: Info[GraphQLContext, None]) -> ProductType | None:
        product = await info.context.loaders.products.load(self.product_id)
        return ProductType.from_model(product) if product else None

    @strawberry.field(description="Author of the review")
    async def author(self, info: Info[GraphQLContext, None]) -> PublicUserType | None:
        user = await info.context.loaders.users.load(self.user_id)
        return PublicUserType.from_model(user) if user else None

    @classmethod
    def from_model(cls, review: Review) -> ReviewType:
        return cls(
            id=strawberry.ID(str(review.id)),
            product_id=review.product_id,
            user_id=review.user_id,
            rating=review.rating,
            title=review.title,
            content=review.content,
            is_verified=review.is_verified,
            is_published=review.is_published,
            created_at=review.created_at,
            updated_at=review.updated_at,
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
    "UserRoleEnum",
    "VariantImageType",
    "VariantOptionSelectionType",
    "VariantOptionType",
    "VariantTypeType",
]
