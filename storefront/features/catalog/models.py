"""SQLAlchemy models for the product catalog.

Relationships default to ``lazy="raise"``: every related row a caller needs is
either loaded through a request-scoped loader or eagerly by the catalog store,
never by an implicit lazy load inside the event loop.
"""

from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal
from enum import StrEnum

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from storefront.core.database import Base, StringKeyedBase, TimestampedBase
from storefront.features.accounts.models import User


class ProductStatus(StrEnum):
    """Publication state shared by products and variants."""

    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"


class Media(TimestampedBase):
    """Uploaded image: product and variant galleries, taxonomy covers, option swatches."""

    __tablename__ = "media"

    url: Mapped[str] = mapped_column(String(1024), nullable=False)
    thumbnail_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    alt: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    filename: Mapped[str | None] = mapped_column(String(255), nullable=True)
    mime_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    filesize: Mapped[int | None] = mapped_column(Integer, nullable=True)
    width: Mapped[int | None] = mapped_column(Integer, nullable=True)
    height: Mapped[int | None] = mapped_column(Integer, nullable=True)


class Category(StringKeyedBase):
    """Hierarchical product category (``parent_id`` is None at the root)."""

    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(String(200), unique=True, nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_id: Mapped[int | None] = mapped_column(
        ForeignKey("media.id", ondelete="SET NULL"), nullable=True
    )
    parent_id: Mapped[str | None] = mapped_column(
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
        comment="Parent category; None for root categories",
    )
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_visible: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    parent: Mapped[Category | None] = relationship(
        remote_side="Category.id",
        back_populates="children",
        lazy="raise",
    )
    children: Mapped[list[Category]] = relationship(back_populates="parent", lazy="raise")

    def __repr__(self) -> str:
        return f"<Category(id={self.id!r}, slug={self.slug!r})>"


class Collection(StringKeyedBase):
    """Curated, flat grouping of products."""

    __tablename__ = "collections"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(String(200), unique=True, nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_id: Mapped[int | None] = mapped_column(
        ForeignKey("media.id", ondelete="SET NULL"), nullable=True
    )
    is_visible: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<Collection(id={self.id!r}, slug={self.slug!r})>"


class Product(TimestampedBase):
    """Sellable product; prices are stored as exact decimals."""

    __tablename__ = "products"
    __table_args__ = (Index("ix_products_status_created", "status", "created_at"),)

    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ProductStatus.DRAFT.value,
        comment="DRAFT, PUBLISHED or ARCHIVED",
    )
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Pricing
    base_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    compare_at_price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    price_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Inventory
    track_inventory: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    inventory_qty: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    low_stock_threshold: Mapped[int] = mapped_column(Integer, nullable=False, default=5)

    # Details
    brand: Mapped[str | None] = mapped_column(String(200), nullable=True)
    vendor: Mapped[str | None] = mapped_column(String(200), nullable=True)
    product_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    material: Mapped[str | None] = mapped_column(String(200), nullable=True)
    care_instructions: Mapped[str | None] = mapped_column(Text, nullable=True)
    made_in: Mapped[str | None] = mapped_column(String(100), nullable=True)
    has_variants: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # SEO
    meta_title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    meta_description: Mapped[str | None] = mapped_column(Text, nullable=True)

    published_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    variants: Mapped[list[ProductVariant]] = relationship(back_populates="product", lazy="raise")
    reviews: Mapped[list[Review]] = relationship(back_populates="product", lazy="raise")

    # Read-only paths through the link tables, used for "has related" filters
    categories: Mapped[list[Category]] = relationship(
        secondary="product_categories",
        viewonly=True,
        lazy="raise",
    )
    collections: Mapped[list[Collection]] = relationship(
        secondary="product_collections",
        viewonly=True,
        lazy="raise",
    )

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, slug={self.slug!r})>"


class ProductCategory(Base):
    """Link row between a product and one of its categories."""

    __tablename__ = "product_categories"

    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id", ondelete="CASCADE"), primary_key=True
    )
    category_id: Mapped[str] = mapped_column(
        ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True, index=True
    )

    product: Mapped[Product] = relationship(lazy="raise")
    category: Mapped[Category] = relationship(lazy="raise")


class ProductCollection(Base):
    """Link row between a product and one of its collections."""

    __tablename__ = "product_collections"

    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id", ondelete="CASCADE"), primary_key=True
    )
    collection_id: Mapped[str] = mapped_column(
        ForeignKey("collections.id", ondelete="CASCADE"), primary_key=True, index=True
    )
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    product: Mapped[Product] = relationship(lazy="raise")
    collection: Mapped[Collection] = relationship(lazy="raise")


class ProductImage(Base):
    """Position of a media item in a product's gallery."""

    __tablename__ = "product_images"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True
    )
    image_id: Mapped[int] = mapped_column(
        ForeignKey("media.id", ondelete="CASCADE"), nullable=False
    )
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_primary: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    image: Mapped[Media] = relationship(lazy="raise")


class ProductVariant(TimestampedBase):
    """Purchasable variation of a product (size/color combination)."""

    __tablename__ = "product_variants"

    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True
    )
    sku: Mapped[str | None] = mapped_column(String(100), unique=True, nullable=True)
    title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    compare_at_price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    inventory_qty: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    weight: Mapped[Decimal | None] = mapped_column(Numeric(10, 3), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ProductStatus.PUBLISHED.value
    )
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    product: Mapped[Product] = relationship(back_populates="variants", lazy="raise")
    option_selections: Mapped[list[VariantOptionSelection]] = relationship(
        back_populates="variant", lazy="raise"
    )

    @property
    def is_available(self) -> bool:
        """Published and in stock."""
        return self.status == ProductStatus.PUBLISHED and self.inventory_qty > 0

    def __repr__(self) -> str:
        return f"<ProductVariant(id={self.id}, product_id={self.product_id}, sku={self.sku!r})>"


class VariantImage(Base):
    """Position of a media item in a variant's gallery."""

    __tablename__ = "variant_images"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    variant_id: Mapped[int] = mapped_column(
        ForeignKey("product_variants.id", ondelete="CASCADE"), nullable=False, index=True
    )
    image_id: Mapped[int] = mapped_column(
        ForeignKey("media.id", ondelete="CASCADE"), nullable=False
    )
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_primary: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        server_default=func.now(),
        nullable=False,
    )

    image: Mapped[Media] = relationship(lazy="raise")


class VariantType(TimestampedBase):
    """Option dimension such as size or color."""

    __tablename__ = "variant_types"

    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    label: Mapped[str] = mapped_column(String(100), nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    options: Mapped[list[VariantOption]] = relationship(
        back_populates="variant_type",
        order_by="VariantOption.sort_order",
        lazy="selectin",
    )


class VariantOption(TimestampedBase):
    """One value of a variant type, optionally with a swatch image."""

    __tablename__ = "variant_options"
    __table_args__ = (
        UniqueConstraint("variant_type_id", "value", name="uq_variant_options_type_value"),
    )

    variant_type_id: Mapped[int] = mapped_column(
        ForeignKey("variant_types.id", ondelete="CASCADE"), nullable=False, index=True
    )
    value: Mapped[str] = mapped_column(String(100), nullable=False)
    label: Mapped[str] = mapped_column(String(100), nullable=False)
    swatch_image_id: Mapped[int | None] = mapped_column(
        ForeignKey("media.id", ondelete="SET NULL"), nullable=True
    )
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    variant_type: Mapped[VariantType] = relationship(back_populates="options", lazy="raise")
    swatch_image: Mapped[Media | None] = relationship(lazy="raise")


class VariantOptionSelection(Base):
    """Assignment of an option value to a variant."""

    __tablename__ = "variant_option_selections"
    __table_args__ = (
        UniqueConstraint("variant_id", "option_id", name="uq_variant_option_selections_pair"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    variant_id: Mapped[int] = mapped_column(
        ForeignKey("product_variants.id", ondelete="CASCADE"), nullable=False, index=True
    )
    option_id: Mapped[int] = mapped_column(
        ForeignKey("variant_options.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        server_default=func.now(),
        nullable=False,
    )

    variant: Mapped[ProductVariant] = relationship(
        back_populates="option_selections", lazy="raise"
    )
    option: Mapped[VariantOption] = relationship(lazy="raise")


class Review(TimestampedBase):
    """Customer review of a product; only published reviews are served by default."""

    __tablename__ = "reviews"
    __table_args__ = (Index("ix_reviews_product_published", "product_id", "is_published"),)

    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    product: Mapped[Product] = relationship(back_populates="reviews", lazy="raise")
    user: Mapped[User] = relationship(lazy="raise")
