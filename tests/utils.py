"""Test helpers: catalog seed data and catalog store doubles."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from storefront.features.accounts.models import Address, User, UserRole
from storefront.features.catalog.models import (
    Category,
    Collection,
    Media,
    Product,
    ProductCategory,
    ProductCollection,
    ProductImage,
    ProductStatus,
    ProductVariant,
    Review,
    VariantImage,
    VariantOption,
    VariantOptionSelection,
    VariantType,
)
from storefront.features.catalog.query_builder import FilterOp, SortDirection

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from storefront.features.catalog.query_builder import FilterSpec, OrderSpec
    from storefront.features.catalog.store import CatalogStore, EntityKind

BASE_TIME = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)


def day(n: int) -> datetime:
    return BASE_TIME + timedelta(days=n)


# ============================================================================
# Seed data
# ============================================================================


@dataclass
class SeededCatalog:
    """Identifiers of the rows written by ``seed_catalog``."""

    products: dict[str, int] = field(default_factory=dict)
    variants: dict[str, int] = field(default_factory=dict)
    options: dict[str, int] = field(default_factory=dict)
    reviews: dict[str, int] = field(default_factory=dict)
    media: dict[str, int] = field(default_factory=dict)
    user_id: int = 0
    other_user_id: int = 0


async def seed_catalog(session_factory: async_sessionmaker[AsyncSession]) -> SeededCatalog:
    """Write a small, fully linked catalog.

    Products (newest last): linen-shirt, wool-sweater, canvas-tote are
    PUBLISHED, draft-jacket is a DRAFT. Only linen-shirt has two variants
    with size and color selections. The summer collection lists canvas-tote
    before linen-shirt. linen-shirt has a two-image gallery whose primary
    image is the second one, wool-sweater has one image, and the apparel
    category has a cover image.
    """
    seeded = SeededCatalog()

    async with session_factory() as session:
        swatch = Media(url="https://cdn.test/swatches/navy.png", alt="Navy")
        media = {
            "apparel-cover": Media(url="https://cdn.test/categories/apparel.jpg", alt="Apparel"),
            "shirt-back": Media(url="https://cdn.test/products/shirt-back.jpg", alt="Back"),
            "shirt-front": Media(
                url="https://cdn.test/products/shirt-front.jpg",
                thumbnail_url="https://cdn.test/products/shirt-front-thumb.jpg",
                alt="Front",
                mime_type="image/jpeg",
                filesize=48_213,
                width=1200,
                height=1600,
            ),
            "sweater-front": Media(url="https://cdn.test/products/sweater.jpg", alt="Sweater"),
            "navy-detail": Media(url="https://cdn.test/variants/navy-detail.jpg", alt="Navy detail"),
        }
        size = VariantType(name="size", label="Size", sort_order=0)
        color = VariantType(name="color", label="Color", sort_order=1)
        session.add_all([swatch, *media.values(), size, color])
        await session.flush()

        options = {
            "S": VariantOption(variant_type_id=size.id, value="s", label="S", sort_order=0),
            "M": VariantOption(variant_type_id=size.id, value="m", label="M", sort_order=1),
            "Navy": VariantOption(
                variant_type_id=color.id,
                value="navy",
                label="Navy",
                swatch_image_id=swatch.id,
                sort_order=0,
            ),
            "Sand": VariantOption(variant_type_id=color.id, value="sand", label="Sand", sort_order=1),
        }
        session.add_all(options.values())

        session.add_all(
            [
                Category(
                    id="cat-apparel",
                    name="Apparel",
                    slug="apparel",
                    image_id=media["apparel-cover"].id,
                    sort_order=0,
                ),
                Category(
                    id="cat-shirts",
                    name="Shirts",
                    slug="shirts",
                    parent_id="cat-apparel",
                    sort_order=1,
                ),
                Category(
                    id="cat-archive",
                    name="Archive",
                    slug="archive",
                    sort_order=2,
                    is_visible=False,
                ),
                Collection(id="col-summer", name="Summer", slug="summer", sort_order=0),
                Collection(
                    id="col-retired",
                    name="Retired",
                    slug="retired",
                    sort_order=1,
                    is_visible=False,
                ),
            ]
        )

        ada = User(email="ada@example.com", name="Ada", role=UserRole.CUSTOMER.value)
        grace = User(email="grace@example.com", name="Grace", role=UserRole.ADMIN.value)
        session.add_all([ada, grace])

        products = {
            "linen-shirt": Product(
                slug="linen-shirt",
                title="Linen Shirt",
                description="Breathable summer shirt",
                status=ProductStatus.PUBLISHED.value,
                is_featured=True,
                base_price=Decimal("49.00"),
                brand="Coast",
                has_variants=True,
                created_at=day(1),
                updated_at=day(1),
            ),
            "wool-sweater": Product(
                slug="wool-sweater",
                title="Wool Sweater",
                status=ProductStatus.PUBLISHED.value,
                base_price=Decimal("89.00"),
                has_variants=True,
                created_at=day(2),
                updated_at=day(2),
            ),
            "canvas-tote": Product(
                slug="canvas-tote",
                title="Canvas Tote",
                status=ProductStatus.PUBLISHED.value,
                base_price=Decimal("25.00"),
                created_at=day(3),
                updated_at=day(3),
            ),
            "draft-jacket": Product(
                slug="draft-jacket",
                title="Draft Jacket",
                status=ProductStatus.DRAFT.value,
                base_price=Decimal("120.00"),
                created_at=day(4),
                updated_at=day(4),
            ),
        }
        session.add_all(products.values())
        await session.flush()

        shirt = products["linen-shirt"].id
        variants = {
            "LS-S-NAVY": ProductVariant(
                product_id=shirt,
                sku="LS-S-NAVY",
                title="S / Navy",
                price=Decimal("49.00"),
                inventory_qty=5,
                status=ProductStatus.PUBLISHED.value,
                sort_order=0,
            ),
            "LS-M-SAND": ProductVariant(
                product_id=shirt,
                sku="LS-M-SAND",
                title="M / Sand",
                price=Decimal("52.00"),
                inventory_qty=0,
                status=ProductStatus.PUBLISHED.value,
                sort_order=1,
            ),
            "WS-M": ProductVariant(
                product_id=products["wool-sweater"].id,
                sku="WS-M",
                title="M",
                inventory_qty=3,
                status=ProductStatus.PUBLISHED.value,
                sort_order=0,
            ),
        }
        session.add_all(variants.values())
        await session.flush()

        session.add_all(
            [
                VariantOptionSelection(variant_id=variants["LS-S-NAVY"].id, option_id=options["S"].id),
                VariantOptionSelection(
                    variant_id=variants["LS-S-NAVY"].id, option_id=options["Navy"].id
                ),
                VariantOptionSelection(variant_id=variants["LS-M-SAND"].id, option_id=options["M"].id),
                VariantOptionSelection(
                    variant_id=variants["LS-M-SAND"].id, option_id=options["Sand"].id
                ),
                VariantOptionSelection(variant_id=variants["WS-M"].id, option_id=options["M"].id),
                ProductCategory(product_id=shirt, category_id="cat-shirts"),
                ProductCategory(product_id=shirt, category_id="cat-apparel"),
                ProductCategory(product_id=products["wool-sweater"].id, category_id="cat-apparel"),
                ProductCollection(product_id=shirt, collection_id="col-summer", sort_order=1),
                ProductCollection(
                    product_id=products["canvas-tote"].id, collection_id="col-summer", sort_order=0
                ),
                ProductImage(
                    product_id=shirt, image_id=media["shirt-back"].id, sort_order=0, is_primary=False
                ),
                ProductImage(
                    product_id=shirt, image_id=media["shirt-front"].id, sort_order=1, is_primary=True
                ),
                ProductImage(
                    product_id=products["wool-sweater"].id,
                    image_id=media["sweater-front"].id,
                    sort_order=0,
                    is_primary=True,
                ),
                VariantImage(
                    variant_id=variants["LS-S-NAVY"].id,
                    image_id=media["navy-detail"].id,
                    sort_order=0,
                    is_primary=True,
                ),
                Address(
                    user_id=ada.id,
                    first_name="Ada",
                    last_name="Lovelace",
                    address1="1 Analytical Way",
                    city="London",
                    zip="N1 1AA",
                    country="GB",
                    is_default=False,
                ),
                Address(
                    user_id=ada.id,
                    first_name="Ada",
                    last_name="Lovelace",
                    address1="12 Engine Street",
                    city="London",
                    zip="N1 2BB",
                    country="GB",
                    is_default=True,
                ),
            ]
        )

        reviews = {
            "shirt-great": Review(
                product_id=shirt,
                user_id=ada.id,
                rating=5,
                title="Great fit",
                is_verified=True,
                is_published=True,
                created_at=day(6),
                updated_at=day(6),
            ),
            "shirt-older": Review(
                product_id=shirt,
                user_id=grace.id,
                rating=4,
                title="Nice fabric",
                is_published=True,
                created_at=day(5),
                updated_at=day(5),
            ),
            "shirt-hidden": Review(
                product_id=shirt,
                user_id=grace.id,
                rating=1,
                title="Spam",
                is_published=False,
                created_at=day(7),
                updated_at=day(7),
            ),
        }
        session.add_all(reviews.values())
        await session.commit()

        seeded.products = {slug: product.id for slug, product in products.items()}
        seeded.variants = {sku: variant.id for sku, variant in variants.items()}
        seeded.options = {label: option.id for label, option in options.items()}
        seeded.reviews = {name: review.id for name, review in reviews.items()}
        seeded.media = {name: row.id for name, row in media.items()}
        seeded.user_id = ada.id
        seeded.other_user_id = grace.id

    return seeded


# ============================================================================
# Store doubles
# ============================================================================


class RecordingStore:
    """Wrap a ``CatalogStore`` and record every call made through it.

    Example:
        store = RecordingStore(SqlAlchemyCatalogStore(session_factory))
        ...
        assert store.count_calls("find_many", EntityKind.VARIANT) == 1
    """

    def __init__(self, inner: CatalogStore) -> None:
        self.inner = inner
        self.calls: list[tuple[str, EntityKind, Any]] = []

    async def find_many(
        self,
        kind: EntityKind,
        filters: FilterSpec,
        order: OrderSpec | None = None,
        *,
        limit: int | None = None,
        skip: int | None = None,
    ) -> list[Any]:
        self.calls.append(("find_many", kind, filters))
        return await self.inner.find_many(kind, filters, order, limit=limit, skip=skip)

    async def find_by_keys(self, kind: EntityKind, keys: Sequence[Any]) -> list[Any]:
        self.calls.append(("find_by_keys", kind, tuple(keys)))
        return await self.inner.find_by_keys(kind, keys)

    async def count(self, kind: EntityKind, filters: FilterSpec) -> int:
        self.calls.append(("count", kind, filters))
        return await self.inner.count(kind, filters)

    async def count_by(
        self, kind: EntityKind, group_by: str, filters: FilterSpec
    ) -> dict[Any, int]:
        self.calls.append(("count_by", kind, filters))
        return await self.inner.count_by(kind, group_by, filters)

    def count_calls(self, method: str, kind: EntityKind | None = None) -> int:
        return sum(
            1 for name, called_kind, _ in self.calls if name == method and kind in (None, called_kind)
        )

    def reset(self) -> None:
        self.calls.clear()


class InMemoryStore:
    """Dictionary-backed ``CatalogStore`` for loader tests.

    Rows are any objects with attributes. Supports ``EQ`` and ``IN``
    predicates on plain attributes. Set ``fail_with`` to make every read
    raise that exception.
    """

    def __init__(self, rows: dict[EntityKind, list[Any]] | None = None) -> None:
        self.rows = rows or {}
        self.calls: list[tuple[str, EntityKind, Any]] = []
        self.fail_with: Exception | None = None

    def _check(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    @staticmethod
    def _matches(row: Any, filters: FilterSpec) -> bool:
        for predicate in filters:
            value = getattr(row, predicate.field)
            if predicate.op is FilterOp.EQ and value != predicate.value:
                return False
            if predicate.op is FilterOp.IN and value not in predicate.value:
                return False
        return True

    async def find_many(
        self,
        kind: EntityKind,
        filters: FilterSpec,
        order: OrderSpec | None = None,
        *,
        limit: int | None = None,
        skip: int | None = None,
    ) -> list[Any]:
        self.calls.append(("find_many", kind, filters))
        self._check()
        rows = [row for row in self.rows.get(kind, []) if self._matches(row, filters)]
        for term in reversed(list(order or ())):
            rows.sort(
                key=lambda row, name=term.field: getattr(row, name),
                reverse=term.direction is SortDirection.DESC,
            )
        start = skip or 0
        return rows[start : start + limit] if limit is not None else rows[start:]

    async def find_by_keys(self, kind: EntityKind, keys: Sequence[Any]) -> list[Any]:
        self.calls.append(("find_by_keys", kind, tuple(keys)))
        self._check()
        wanted = set(keys)
        return [row for row in self.rows.get(kind, []) if row.id in wanted]

    async def count(self, kind: EntityKind, filters: FilterSpec) -> int:
        self.calls.append(("count", kind, filters))
        self._check()
        return sum(1 for row in self.rows.get(kind, []) if self._matches(row, filters))

    async def count_by(
        self, kind: EntityKind, group_by: str, filters: FilterSpec
    ) -> dict[Any, int]:
        self.calls.append(("count_by", kind, filters))
        self._check()
        counts: dict[Any, int] = {}
        for row in self.rows.get(kind, []):
            if self._matches(row, filters):
                key = getattr(row, group_by)
                counts[key] = counts.get(key, 0) + 1
        return counts

    def count_calls(self, method: str, kind: EntityKind | None = None) -> int:
        return sum(
            1 for name, called_kind, _ in self.calls if name == method and kind in (None, called_kind)
        )
