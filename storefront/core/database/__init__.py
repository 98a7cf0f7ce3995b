"""Core database building blocks: declarative base, mixins and statement filters."""

from .base import (
    NAMING_CONVENTION,
    Base,
    IntegerPKMixin,
    StringKeyedBase,
    StringPKMixin,
    TimestampedBase,
    TimestampMixin,
)
from .filters import (
    CollectionFilter,
    EqualityFilter,
    LimitOffset,
    OrderBy,
    RelatedFilter,
    SearchFilter,
    StatementFilter,
)

__all__ = [
    "NAMING_CONVENTION",
    "Base",
    "CollectionFilter",
    "EqualityFilter",
    "IntegerPKMixin",
    "LimitOffset",
    "OrderBy",
    "RelatedFilter",
    "SearchFilter",
    "StatementFilter",
    "StringKeyedBase",
    "StringPKMixin",
    "TimestampMixin",
    "TimestampedBase",
]
