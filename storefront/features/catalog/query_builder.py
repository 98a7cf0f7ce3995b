"""Listing query builder.

Turns the optional filter/sort options of a listing request into an inert
``FilterSpec`` and ``OrderSpec``. Both REST list endpoints and GraphQL list
fields go through ``build_query``; the catalog store is the only place that
turns them into SQL.

Example:
    filters, order = build_query(
        ListingParams(Listing.PRODUCTS, category_slug="shirts", sort_by="price-desc")
    )
    # filters.predicates == (
    #     Predicate("status", FilterOp.EQ, "PUBLISHED"),
    #     Predicate("categories.slug", FilterOp.EQ, "shirts"),
    # )
    # order.terms == (OrderTerm("base_price", SortDirection.DESC),)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Final

from storefront.features.catalog.models import ProductStatus


class FilterOp(StrEnum):
    """Closed set of predicate operators."""

    EQ = "eq"
    IN = "in"
    ICONTAINS = "icontains"


class SortDirection(StrEnum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True, slots=True)
class Predicate:
    """One filter condition.

    A dotted ``field`` (``"categories.slug"``) means the row has at least one
    related row whose attribute matches ``value``.
    """

    field: str
    op: FilterOp
    value: Any

    @property
    def is_related(self) -> bool:
        return "." in self.field


@dataclass(frozen=True, slots=True)
class FilterSpec:
    """Conjunction of predicates. An empty spec matches every row."""

    predicates: tuple[Predicate, ...] = ()

    def __iter__(self):
        return iter(self.predicates)

    def __len__(self) -> int:
        return len(self.predicates)

    def and_(self, *predicates: Predicate) -> FilterSpec:
        """New spec with extra predicates appended."""
        return FilterSpec(self.predicates + predicates)

    @classmethod
    def where(cls, **equals: Any) -> FilterSpec:
        """Spec of ``EQ`` predicates, e.g. ``FilterSpec.where(slug="shirts")``."""
        return cls(tuple(Predicate(name, FilterOp.EQ, value) for name, value in equals.items()))


@dataclass(frozen=True, slots=True)
class OrderTerm:
    field: str
    direction: SortDirection = SortDirection.ASC


@dataclass(frozen=True, slots=True)
class OrderSpec:
    """Ordered sort terms. An empty spec leaves the order to the store."""

    terms: tuple[OrderTerm, ...] = ()

    def __iter__(self):
        return iter(self.terms)

    def __len__(self) -> int:
        return len(self.terms)

    @classmethod
    def by(cls, field_name: str, direction: SortDirection = SortDirection.ASC) -> OrderSpec:
        return cls((OrderTerm(field_name, direction),))


class Listing(StrEnum):
    """Listings the builder knows how to shape."""

    PRODUCTS = "products"
    CATEGORIES = "categories"
    COLLECTIONS = "collections"


class SortKey(StrEnum):
    """Client-facing product sort keys."""

    NEWEST = "newest"
    OLDEST = "oldest"
    PRICE_ASC = "price-asc"
    PRICE_DESC = "price-desc"
    NAME_ASC = "name-asc"
    NAME_DESC = "name-desc"


class _Unset:
    """Marker for an option that was not supplied at all."""

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Final = _Unset()


@dataclass(frozen=True, slots=True)
class ListingParams:
    """Optional listing options as received from a REST query or GraphQL args.

    ``parent_id`` distinguishes "not given" (``UNSET``) from an explicit
    ``None`` meaning root-level categories.
    """

    listing: Listing
    status: str | None = None
    featured: bool | None = None
    category_slug: str | None = None
    collection_slug: str | None = None
    search: str | None = None
    is_visible: bool | None = None
    parent_id: str | None | _Unset = UNSET
    sort_by: str | None = None
    public: bool = True


_PRODUCT_SORTS: Final[dict[str, OrderTerm]] = {
    SortKey.NEWEST: OrderTerm("created_at", SortDirection.DESC),
    SortKey.OLDEST: OrderTerm("created_at", SortDirection.ASC),
    SortKey.PRICE_ASC: OrderTerm("base_price", SortDirection.ASC),
    SortKey.PRICE_DESC: OrderTerm("base_price", SortDirection.DESC),
    SortKey.NAME_ASC: OrderTerm("title", SortDirection.ASC),
    SortKey.NAME_DESC: OrderTerm("title", SortDirection.DESC),
}

_TAXONOMY_ORDER: Final = OrderSpec.by("sort_order")


def _product_query(params: ListingParams) -> tuple[FilterSpec, OrderSpec]:
    predicates: list[Predicate] = []

    if params.status:
        predicates.append(Predicate("status", FilterOp.EQ, params.status))
    elif params.public:
        predicates.append(Predicate("status", FilterOp.EQ, ProductStatus.PUBLISHED.value))

    if params.featured is not None:
        predicates.append(Predicate("is_featured", FilterOp.EQ, params.featured))
    if params.category_slug:
        predicates.append(Predicate("categories.slug", FilterOp.EQ, params.category_slug))
    if params.collection_slug:
        predicates.append(Predicate("collections.slug", FilterOp.EQ, params.collection_slug))
    if params.search:
        predicates.append(Predicate("title", FilterOp.ICONTAINS, params.search))

    term = _PRODUCT_SORTS.get(params.sort_by or SortKey.NEWEST, _PRODUCT_SORTS[SortKey.NEWEST])
    return FilterSpec(tuple(predicates)), OrderSpec((term,))


def _taxonomy_query(params: ListingParams) -> tuple[FilterSpec, OrderSpec]:
    predicates: list[Predicate] = []

    if params.is_visible is not None:
        predicates.append(Predicate("is_visible", FilterOp.EQ, params.is_visible))
    if params.listing == Listing.CATEGORIES and params.parent_id is not UNSET:
        predicates.append(Predicate("parent_id", FilterOp.EQ, params.parent_id))
    if params.search:
        predicates.append(Predicate("name", FilterOp.ICONTAINS, params.search))

    return FilterSpec(tuple(predicates)), _TAXONOMY_ORDER


def build_query(params: ListingParams) -> tuple[FilterSpec, OrderSpec]:
    """Map listing options to a filter and an ordering.

    Options that do not apply to the listing are ignored. An unknown sort
    key falls back to ``newest``. Never raises; malformed input is rejected
    by request validation before this runs.
    """
    if params.listing == Listing.PRODUCTS:
        return _product_query(params)
    return _taxonomy_query(params)


__all__ = [
    "UNSET",
    "FilterOp",
    "FilterSpec",
    "Listing",
    "ListingParams",
    "OrderSpec",
    "OrderTerm",
    "Predicate",
    "SortDirection",
    "SortKey",
    "build_query",
]
