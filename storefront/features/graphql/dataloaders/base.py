"""Batching primitives shared by every request-scoped loader.

``BatchLoader`` wraps ``strawberry.dataloader.DataLoader``: loads issued in
the same event-loop tick are coalesced into one call of the batch function,
and each key's future is cached for the life of the loader (one request).

Subclasses only describe *what* to fetch:

- ``EntityLoader``: one row (or None) per primary key.
- ``RelationLoader``: a list of child rows (possibly empty) per parent key.
- ``CountLoader``: the number of child rows (possibly 0) per parent key.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Hashable, Sequence
from typing import TYPE_CHECKING, Any, ClassVar, Generic, TypeVar

from strawberry.dataloader import DataLoader

from storefront.features.catalog.query_builder import (
    FilterOp,
    FilterSpec,
    OrderSpec,
    Predicate,
)
from storefront.infra.logging import get_lazy_logger
from storefront.infra.metrics.prometheus import dataloader_batch_size, dataloader_batches_total

if TYPE_CHECKING:
    from storefront.features.catalog.store import CatalogStore, EntityKind

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")
R = TypeVar("R")

logger = get_lazy_logger(__name__)


class LoaderContractError(RuntimeError):
    """A batch function returned a result list of the wrong length.

    This is a programming error in the loader definition, never a data
    condition; every caller waiting on the batch receives it.
    """

    def __init__(self, loader: str, expected: int, received: int) -> None:
        self.loader = loader
        self.expected = expected
        self.received = received
        super().__init__(
            f"Loader {loader!r} returned {received} results for {expected} keys"
        )


class BatchLoader(ABC, Generic[K, V]):
    """Request-scoped cache-and-coalesce loader.

    Usage:
        loader = ProductLoader(store)
        product = await loader.load(42)  # Batched with other loads this tick
        products = await loader.load_many([1, 2, 3])
    """

    name: ClassVar[str]

    def __init__(self, store: CatalogStore) -> None:
        self._store = store
        self._loader: DataLoader[K, V] = DataLoader(load_fn=self._dispatch)

    async def _dispatch(self, keys: list[K]) -> list[V]:
        """Run one batch: de-duplicate, fetch, check, fan results back out."""
        if not keys:
            return []

        distinct = list(dict.fromkeys(keys))
        dataloader_batches_total.labels(loader=self.name).inc()
        dataloader_batch_size.labels(loader=self.name).observe(len(distinct))
        logger.debug(
            "Dispatching %s batch of %d keys: %s",
            self.name,
            len(distinct),
            lambda: distinct[:20],
            extra={"loader": self.name, "batch_size": len(distinct)},
        )

        results = list(await self.batch_load(distinct))
        if len(results) != len(distinct):
            raise LoaderContractError(self.name, len(distinct), len(results))

        by_key = dict(zip(distinct, results, strict=True))
        return [by_key[key] for key in keys]

    @abstractmethod
    async def batch_load(self, keys: list[K]) -> Sequence[V]:
        """Fetch values for distinct ``keys``, positionally aligned."""
        ...

    async def load(self, key: K) -> V:
        """Load one value; batched with other loads in the same tick."""
        return await self._loader.load(key)

    async def load_many(self, keys: Sequence[K]) -> list[V]:
        """Load several values, in the order of ``keys``."""
        return await self._loader.load_many(keys)

    def prime(self, key: K, value: V) -> None:
        """Seed the cache with a value fetched some other way."""
        self._loader.prime(key, value)


class EntityLoader(BatchLoader[K, R | None]):
    """One row per key, ``None`` where no row exists."""

    kind: ClassVar[EntityKind]
    key_attr: ClassVar[str] = "id"

    async def batch_load(self, keys: list[K]) -> list[R | None]:
        rows = await self._store.find_by_keys(self.kind, keys)
        index = {getattr(row, self.key_attr): row for row in rows}
        return [index.get(key) for key in keys]


class RelationLoader(BatchLoader[K, list[R]]):
    """All child rows per parent key, ``[]`` for parents without children.

    ``filters`` and ``order`` are fixed per relation; ``select`` projects the
    value out of each fetched row (the related row of a link table).
    """

    kind: ClassVar[EntityKind]
    parent_attr: ClassVar[str]
    filters: ClassVar[FilterSpec] = FilterSpec()
    order: ClassVar[OrderSpec | None] = None

    def select(self, row: Any) -> R:
        return row

    async def batch_load(self, keys: list[K]) -> list[list[R]]:
        spec = FilterSpec((Predicate(self.parent_attr, FilterOp.IN, tuple(keys)),))
        rows = await self._store.find_many(self.kind, spec.and_(*self.filters), self.order)

        grouped: dict[K, list[R]] = {key: [] for key in keys}
        for row in rows:
            parent = getattr(row, self.parent_attr)
            if parent in grouped:
                grouped[parent].append(self.select(row))
        return [grouped[key] for key in keys]


class CountLoader(BatchLoader[K, int]):
    """Number of child rows per parent key, 0 for parents without children."""

    kind: ClassVar[EntityKind]
    parent_attr: ClassVar[str]
    filters: ClassVar[FilterSpec] = FilterSpec()

    async def batch_load(self, keys: list[K]) -> list[int]:
        spec = FilterSpec((Predicate(self.parent_attr, FilterOp.IN, tuple(keys)),))
        counts = await self._store.count_by(self.kind, self.parent_attr, spec.and_(*self.filters))
        return [counts.get(key, 0) for key in keys]


__all__ = [
    "BatchLoader",
    "CountLoader",
    "EntityLoader",
    "LoaderContractError",
    "RelationLoader",
]
