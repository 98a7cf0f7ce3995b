"""Query filtering utilities for SQLAlchemy.

These filters work directly with SQLAlchemy statements without hiding the
query. They're utility helpers, not an abstraction layer.

Usage:
    from sqlalchemy import select
    from storefront.core.database.filters import SearchFilter, OrderBy, LimitOffset

    stmt = select(Product)
    stmt = SearchFilter(Product.title, "shirt").apply(stmt)
    stmt = OrderBy(Product.created_at, "desc").apply(stmt)
    stmt = LimitOffset(limit=20, offset=0).apply(stmt)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Literal

from sqlalchemy import Select, false, or_

if TYPE_CHECKING:
    from sqlalchemy.orm import InstrumentedAttribute


class StatementFilter(ABC):
    """Base class for statement filters.

    All filters implement `apply()` which modifies a SQLAlchemy statement.
    """

    @abstractmethod
    def apply(self, statement: Select[Any]) -> Select[Any]:
        """Apply filter to statement."""
        ...


class EqualityFilter(StatementFilter):
    """Exact match (``IS NULL`` when the value is None).

    Example:
        stmt = EqualityFilter(Category.parent_id, None).apply(stmt)
        # WHERE categories.parent_id IS NULL
    """

    def __init__(self, field: InstrumentedAttribute[Any], value: Any):
        self.field = field
        self.value = value

    def apply(self, statement: Select[Any]) -> Select[Any]:
        if self.value is None:
            return statement.where(self.field.is_(None))
        return statement.where(self.field == self.value)


class SearchFilter(StatementFilter):
    """Multi-field case-insensitive substring search.

    The value is matched literally: ``%`` and ``_`` in it are escaped, not
    treated as LIKE wildcards.

    Example:
        stmt = SearchFilter([Product.title, Product.brand], "linen").apply(stmt)
        # WHERE (lower(title) LIKE lower('%linen%') ESCAPE '/' OR ...)
    """

    def __init__(
        self,
        fields: InstrumentedAttribute[Any] | Sequence[InstrumentedAttribute[Any]],
        value: str,
    ):
        """Initialize search filter.

        Args:
            fields: Single field or list of fields to search
            value: Search term
        """
        self.fields = [fields] if not isinstance(fields, Sequence) else list(fields)
        self.value = value

    def apply(self, statement: Select[Any]) -> Select[Any]:
        """Apply search filter to statement."""
        if not self.value or not self.fields:
            return statement

        conditions = [field.icontains(self.value, autoescape=True) for field in self.fields]
        return statement.where(or_(*conditions))


class CollectionFilter(StatementFilter):
    """Filter by collection (WHERE ... IN).

    Example:
        stmt = CollectionFilter(ProductVariant.product_id, [1, 2, 3]).apply(stmt)
        # WHERE product_variants.product_id IN (1, 2, 3)
    """

    def __init__(
        self,
        field: InstrumentedAttribute[Any],
        values: Sequence[Any],
        *,
        invert: bool = False,
    ):
        self.field = field
        self.values = list(values)
        self.invert = invert

    def apply(self, statement: Select[Any]) -> Select[Any]:
        """Apply collection filter to statement."""
        if not self.values:
            # Empty collection - return statement that matches nothing
            return statement.where(false()) if not self.invert else statement

        if self.invert:
            return statement.where(self.field.notin_(self.values))
        return statement.where(self.field.in_(self.values))


class RelatedFilter(StatementFilter):
    """Match rows having at least one related row with an attribute value.

    Example:
        stmt = RelatedFilter(Product.categories, Category.slug, "shirts").apply(stmt)
        # WHERE EXISTS (SELECT 1 FROM product_categories ... WHERE categories.slug = 'shirts')
    """

    def __init__(
        self,
        relationship: InstrumentedAttribute[Any],
        field: InstrumentedAttribute[Any],
        value: Any,
    ):
        self.relationship = relationship
        self.field = field
        self.value = value

    def apply(self, statement: Select[Any]) -> Select[Any]:
        return statement.where(self.relationship.any(self.field == self.value))


class OrderBy(StatementFilter):
    """Column ordering/sorting.

    Example:
        stmt = OrderBy(Product.created_at, "desc").apply(stmt)

        # Multiple orderings
        stmt = OrderBy([Review.created_at, Review.id], ["desc", "desc"]).apply(stmt)
    """

    def __init__(
        self,
        fields: InstrumentedAttribute[Any] | Sequence[InstrumentedAttribute[Any]],
        sort_order: Literal["asc", "desc"] | Sequence[Literal["asc", "desc"]] = "asc",
    ):
        self.fields = [fields] if not isinstance(fields, Sequence) else list(fields)

        if isinstance(sort_order, str):
            self.sort_orders = [sort_order] * len(self.fields)
        else:
            self.sort_orders = list(sort_order)
            if len(self.sort_orders) != len(self.fields):
                msg = "sort_order length must match fields length"
                raise ValueError(msg)

    def apply(self, statement: Select[Any]) -> Select[Any]:
        """Apply ordering to statement."""
        for field, order in zip(self.fields, self.sort_orders, strict=False):
            if order == "desc":
                statement = statement.order_by(field.desc())
            else:
                statement = statement.order_by(field.asc())
        return statement


class LimitOffset(StatementFilter):
    """Pagination using LIMIT and OFFSET.

    Either bound may be None to leave it off the statement.
    """

    def __init__(self, limit: int | None, offset: int | None = 0):
        self.limit = limit
        self.offset = offset

    def apply(self, statement: Select[Any]) -> Select[Any]:
        """Apply pagination to statement."""
        if self.limit is not None:
            statement = statement.limit(self.limit)
        if self.offset:
            statement = statement.offset(self.offset)
        return statement


__all__ = [
    "CollectionFilter",
    "EqualityFilter",
    "LimitOffset",
    "OrderBy",
    "RelatedFilter",
    "SearchFilter",
    "StatementFilter",
]
