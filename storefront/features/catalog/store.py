"""Catalog storage collaborator.

``CatalogStore`` is the only storage surface the loaders, REST handlers and
GraphQL resolvers talk to. ``SqlAlchemyCatalogStore`` implements it on top of
an ``async_sessionmaker``: each call opens its own session and closes it
before returning, so no connection is held while a loader waits for the next
event-loop tick.

Storage errors are not caught here; they propagate unchanged to the caller
(and from a loader batch, to every waiter of that batch).
"""

from __future__ import annotations

import time
from collections.abc import Sequence
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from sqlalchemy import func, select
from sqlalchemy.orm import joinedload

from storefront.core.database.filters import (
    CollectionFilter,
    EqualityFilter,
    LimitOffset,
    OrderBy,
    RelatedFilter,
    SearchFilter,
    StatementFilter,
)
from storefront.features.accounts.models import Address, User
from storefront.features.catalog.models import (
    Category,
    Collection,
    Media,
    Product,
    ProductCategory,
    ProductCollection,
    ProductImage,
    ProductVariant,
    Review,
    VariantImage,
    VariantOption,
    VariantOptionSelection,
    VariantType,
)
from storefront.features.catalog.query_builder import (
    FilterOp,
    FilterSpec,
    OrderSpec,
    Predicate,
    SortDirection,
)
from storefront.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from sqlalchemy import Select
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
    from sqlalchemy.orm import InstrumentedAttribute

logger = get_lazy_logger(__name__)


class EntityKind(StrEnum):
    """Row kinds the store can fetch."""

    PRODUCT = "product"
    VARIANT = "variant"
    CATEGORY = "category"
    COLLECTION = "collection"
    PRODUCT_CATEGORY = "product_category"
    PRODUCT_COLLECTION = "product_collection"
    REVIEW = "review"
    USER = "user"
    ADDRESS = "address"
    VARIANT_OPTION_SELECTION = "variant_option_selection"
    VARIANT_TYPE = "variant_type"
    MEDIA = "media"
    PRODUCT_IMAGE = "product_image"
    VARIANT_IMAGE = "variant_image"


class UnsupportedFilterError(ValueError):
    """A predicate names a field or operator the store cannot translate."""


@runtime_checkable
class CatalogStore(Protocol):
    """Bulk read access to catalog rows."""

    async def find_many(
        self,
        kind: EntityKind,
        filters: FilterSpec,
        order: OrderSpec | None = None,
        *,
        limit: int | None = None,
        skip: int | None = None,
    ) -> list[Any]:
        """Rows of ``kind`` matching every predicate, in ``order``."""
        ...

    async def find_by_keys(self, kind: EntityKind, keys: Sequence[Any]) -> list[Any]:
        """Rows whose primary key is in ``keys``, in no particular order.

        Missing keys are simply absent from the result.
        """
        ...

    async def count(self, kind: EntityKind, filters: FilterSpec) -> int:
        """Number of rows of ``kind`` matching ``filters``."""
        ...

    async def count_by(
        self, kind: EntityKind, group_by: str, filters: FilterSpec
    ) -> dict[Any, int]:
        """Matching rows of ``kind`` counted per value of ``group_by``.

        Values with no matching rows are absent from the result.
        """
        ...


_MODELS: dict[EntityKind, type[Any]] = {
    EntityKind.PRODUCT: Product,
    EntityKind.VARIANT: ProductVariant,
    EntityKind.CATEGORY: Category,
    EntityKind.COLLECTION: Collection,
    EntityKind.PRODUCT_CATEGORY: ProductCategory,
    EntityKind.PRODUCT_COLLECTION: ProductCollection,
    EntityKind.REVIEW: Review,
    EntityKind.USER: User,
    EntityKind.ADDRESS: Address,
    EntityKind.VARIANT_OPTION_SELECTION: VariantOptionSelection,
    EntityKind.VARIANT_TYPE: VariantType,
    EntityKind.MEDIA: Media,
    EntityKind.PRODUCT_IMAGE: ProductImage,
    EntityKind.VARIANT_IMAGE: VariantImage,
}


def _eager_options(kind: EntityKind) -> tuple[Any, ...]:
    """Related rows each kind is always fetched with."""
    if kind is EntityKind.PRODUCT_CATEGORY:
        return (joinedload(ProductCategory.category), joinedload(ProductCategory.product))
    if kind is EntityKind.PRODUCT_COLLECTION:
        return (joinedload(ProductCollection.collection), joinedload(ProductCollection.product))
    if kind is EntityKind.PRODUCT_IMAGE:
        return (joinedload(ProductImage.image),)
    if kind is EntityKind.VARIANT_IMAGE:
        return (joinedload(VariantImage.image),)
    if kind is EntityKind.VARIANT_OPTION_SELECTION:
        option = joinedload(VariantOptionSelection.option)
        return (
            option.joinedload(VariantOption.variant_type),
            option.joinedload(VariantOption.swatch_image),
        )
    return ()


def _attribute(model: type[Any], name: str) -> InstrumentedAttribute[Any]:
    try:
        return getattr(model, name)
    except AttributeError as exc:
        msg = f"{model.__name__} has no attribute {name!r}"
        raise UnsupportedFilterError(msg) from exc


def _statement_filter(model: type[Any], predicate: Predicate) -> StatementFilter:
    if predicate.is_related:
        relation_name, attr_name = predicate.field.split(".", 1)
        relationship = _attribute(model, relation_name)
        target = relationship.property.mapper.class_
        if predicate.op is not FilterOp.EQ:
            msg = f"related predicates only support equality, got {predicate.op}"
            raise UnsupportedFilterError(msg)
        return RelatedFilter(relationship, _attribute(target, attr_name), predicate.value)

    column = _attribute(model, predicate.field)
    if predicate.op is FilterOp.EQ:
        return EqualityFilter(column, predicate.value)
    if predicate.op is FilterOp.IN:
        return CollectionFilter(column, list(predicate.value))
    if predicate.op is FilterOp.ICONTAINS:
        return SearchFilter(column, str(predicate.value))
    msg = f"unsupported operator {predicate.op!r}"
    raise UnsupportedFilterError(msg)


def apply_filters(statement: Select[Any], model: type[Any], filters: FilterSpec) -> Select[Any]:
    """Add one WHERE clause per predicate (conjunction)."""
    for predicate in filters:
        statement = _statement_filter(model, predicate).apply(statement)
    return statement


def apply_order(statement: Select[Any], model: type[Any], order: OrderSpec | None) -> Select[Any]:
    if not order:
        return statement
    fields = [_attribute(model, term.field) for term in order]
    directions = ["desc" if term.direction is SortDirection.DESC else "asc" for term in order]
    return OrderBy(fields, directions).apply(statement)


class SqlAlchemyCatalogStore:
    """``CatalogStore`` over SQLAlchemy async sessions.

    Args:
        session_factory: Pooled ``async_sessionmaker``; one session per call.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    @staticmethod
    def model_for(kind: EntityKind) -> type[Any]:
        return _MODELS[EntityKind(kind)]

    async def find_many(
        self,
        kind: EntityKind,
        filters: FilterSpec,
        order: OrderSpec | None = None,
        *,
        limit: int | None = None,
        skip: int | None = None,
    ) -> list[Any]:
        kind = EntityKind(kind)
        model = self.model_for(kind)
        statement = select(model).options(*_eager_options(kind))
        statement = apply_filters(statement, model, filters)
        statement = apply_order(statement, model, order)
        if limit is not None or skip:
            statement = LimitOffset(limit, skip).apply(statement)

        started = time.perf_counter()
        async with self._session_factory() as session:
            result = await session.execute(statement)
            rows = list(result.unique().scalars().all())

        logger.debug(
            "find_many %s returned %d rows in %.1fms",
            kind.value,
            len(rows),
            lambda: (time.perf_counter() - started) * 1000,
            extra={"kind": kind.value, "predicates": len(filters)},
        )
        return rows

    async def find_by_keys(self, kind: EntityKind, keys: Sequence[Any]) -> list[Any]:
        if not keys:
            return []
        filters = FilterSpec((Predicate("id", FilterOp.IN, tuple(keys)),))
        return await self.find_many(kind, filters)

    async def count(self, kind: EntityKind, filters: FilterSpec) -> int:
        model = self.model_for(kind)
        inner = apply_filters(select(model), model, filters).subquery()
        statement = select(func.count()).select_from(inner)
        async with self._session_factory() as session:
            total = await session.scalar(statement)
        return int(total or 0)

    async def count_by(
        self, kind: EntityKind, group_by: str, filters: FilterSpec
    ) -> dict[Any, int]:
        model = self.model_for(kind)
        column = _attribute(model, group_by)
        statement = apply_filters(select(column, func.count()), model, filters).group_by(column)
        async with self._session_factory() as session:
            result = await session.execute(statement)
            return {key: int(total) for key, total in result.all()}


__all__ = [
    "CatalogStore",
    "EntityKind",
    "SqlAlchemyCatalogStore",
    "UnsupportedFilterError",
    "apply_filters",
    "apply_order",
]
