"""Unit tests for the request-scoped batching loaders."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime
from types import SimpleNamespace

import pytest

from storefront.features.catalog.query_builder import FilterOp
from storefront.features.catalog.store import EntityKind
from storefront.features.graphql.dataloaders import (
    CategoryProductCountLoader,
    LoaderContractError,
    ProductLoader,
    ProductVariantsLoader,
    create_dataloaders,
)
from storefront.features.graphql.dataloaders.base import BatchLoader
from storefront.infra.metrics.prometheus import REGISTRY
from tests.utils import InMemoryStore


def _product(id_: int, title: str | None = None) -> SimpleNamespace:
    return SimpleNamespace(id=id_, title=title or f"Product {id_}")


def _variant(id_: int, product_id: int, sort_order: int = 0) -> SimpleNamespace:
    return SimpleNamespace(id=id_, product_id=product_id, sort_order=sort_order)


def _review(id_: int, product_id: int, *, published: bool, day: int) -> SimpleNamespace:
    return SimpleNamespace(
        id=id_, product_id=product_id, is_published=published, created_at=datetime(2025, 3, day, tzinfo=UTC)
    )


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore(
        {
            EntityKind.PRODUCT: [_product(1), _product(3)],
            EntityKind.VARIANT: [
                _variant(10, product_id=1, sort_order=1),
                _variant(11, product_id=1, sort_order=0),
                _variant(20, product_id=3),
                _variant(30, product_id=99),
            ],
        }
    )


class TestEntityLoader:
    """One row or None per key, fetched in a single batch."""

    async def test_loads_in_one_tick_are_fetched_once(self, store):
        loader = ProductLoader(store)

        results = await asyncio.gather(loader.load(1), loader.load(2), loader.load(3))

        assert [r.id if r else None for r in results] == [1, None, 3]
        assert store.count_calls("find_by_keys", EntityKind.PRODUCT) == 1

    async def test_results_follow_key_positions_with_duplicates(self, store):
        loader = ProductLoader(store)

        results = await asyncio.gather(
            loader.load(1), loader.load(2), loader.load(1), loader.load(3)
        )

        assert results[0] is results[2]
        assert results[1] is None
        assert results[3].id == 3
        (_, _, fetched_keys), = store.calls
        assert sorted(fetched_keys) == [1, 2, 3]

    async def test_load_many_preserves_order(self, store):
        loader = ProductLoader(store)

        results = await loader.load_many([3, 2, 1])

        assert [r.id if r else None for r in results] == [3, None, 1]

    async def test_cached_value_is_reused_across_ticks(self, store):
        loader = ProductLoader(store)

        first = await loader.load(1)
        second = await loader.load(1)

        assert first is second
        assert store.count_calls("find_by_keys") == 1

    async def test_cached_none_is_not_refetched(self, store):
        loader = ProductLoader(store)

        assert await loader.load(42) is None
        assert await loader.load(42) is None
        assert store.count_calls("find_by_keys") == 1

    async def test_primed_value_skips_fetch(self, store):
        loader = ProductLoader(store)
        primed = _product(7)

        loader.prime(7, primed)

        assert await loader.load(7) is primed
        assert store.calls == []

    async def test_prime_does_not_replace_cached_value(self, store):
        loader = ProductLoader(store)
        original = await loader.load(1)

        loader.prime(1, _product(1))

        assert await loader.load(1) is original

    async def test_empty_load_many_does_not_fetch(self, store):
        loader = ProductLoader(store)

        assert await loader.load_many([]) == []
        assert store.calls == []

    async def test_fetch_failure_reaches_every_waiter(self, store):
        store.fail_with = ConnectionError("database unavailable")
        loader = ProductLoader(store)

        results = await asyncio.gather(loader.load(1), loader.load(3), return_exceptions=True)

        assert all(isinstance(r, ConnectionError) for r in results)
        assert store.count_calls("find_by_keys") == 1


class TestRelationLoader:
    """Lists of child rows grouped under their parent key."""

    async def test_groups_children_by_parent(self, store):
        loader = ProductVariantsLoader(store)

        with_variants, without, other = await asyncio.gather(
            loader.load(1), loader.load(2), loader.load(3)
        )

        assert [v.id for v in with_variants] == [11, 10]
        assert without == []
        assert [v.id for v in other] == [20]
        assert store.count_calls("find_many", EntityKind.VARIANT) == 1

    async def test_fetch_uses_parent_key_membership(self, store):
        loader = ProductVariantsLoader(store)

        await loader.load_many([3, 1])

        (_, _, filters), = store.calls
        (predicate,) = list(filters)
        assert predicate.field == "product_id"
        assert sorted(predicate.value) == [1, 3]

    async def test_rows_for_unrequested_parents_are_dropped(self, store):
        loader = ProductVariantsLoader(store)

        results = await loader.load_many([1, 3])

        assert all(v.product_id in (1, 3) for group in results for v in group)


class TestCountLoader:
    async def test_parents_without_children_count_zero(self):
        store = InMemoryStore(
            {
                EntityKind.PRODUCT_CATEGORY: [
                    SimpleNamespace(product_id=1, category_id="cat-a"),
                    SimpleNamespace(product_id=2, category_id="cat-a"),
                    SimpleNamespace(product_id=2, category_id="cat-b"),
                ]
            }
        )
        loader = CategoryProductCountLoader(store)

        counts = await asyncio.gather(loader.load("cat-b"), loader.load("cat-c"), loader.load("cat-a"))

        assert counts == [1, 0, 2]
        (name, kind, filters), = store.calls
        assert (name, kind) == ("count_by", EntityKind.PRODUCT_CATEGORY)
        (predicate,) = list(filters)
        assert predicate.field == "category_id"
        assert sorted(predicate.value) == ["cat-a", "cat-b", "cat-c"]


class TestLoaderContract:
    async def test_wrong_result_length_fails_every_waiter(self, store):
        class ShortLoader(BatchLoader[int, int]):
            name = "short"

            async def batch_load(self, keys):
                return keys[:-1]

        loader = ShortLoader(store)

        results = await asyncio.gather(loader.load(1), loader.load(2), return_exceptions=True)

        assert all(isinstance(r, LoaderContractError) for r in results)
        assert results[0].expected == 2
        assert results[0].received == 1


class TestDataLoaderRegistry:
    async def test_registries_do_not_share_cache(self, store):
        first = create_dataloaders(store)
        second = create_dataloaders(store)

        await first.products.load(1)
        await second.products.load(1)

        assert store.count_calls("find_by_keys") == 2

    async def test_storage_change_is_visible_to_next_registry(self, store):
        first = create_dataloaders(store)
        assert (await first.products.load(1)).title == "Product 1"

        store.rows[EntityKind.PRODUCT] = [_product(1, title="Renamed"), _product(3)]
        second = create_dataloaders(store)

        assert (await second.products.load(1)).title == "Renamed"
        assert (await first.products.load(1)).title == "Product 1"
        assert store.count_calls("find_by_keys", EntityKind.PRODUCT) == 2

    async def test_registry_holds_fresh_loader_instances(self, store):
        loaders = create_dataloaders(store)

        assert loaders.products is not create_dataloaders(store).products
        assert await loaders.variants.load(999) is None

    async def test_batches_are_counted(self, store):
        before = REGISTRY.get_sample_value("dataloader_batches_total", {"loader": "products"}) or 0
        loader = ProductLoader(store)

        await asyncio.gather(loader.load(1), loader.load(3))

        after = REGISTRY.get_sample_value("dataloader_batches_total", {"loader": "products"})
        assert after == before + 1


class TestRequestScenario:
    """Variants of two products and reviews of one, requested in the same tick."""

    @pytest.fixture
    def catalog(self) -> InMemoryStore:
        return InMemoryStore(
            {
                EntityKind.VARIANT: [
                    _variant(100, product_id=10, sort_order=1),
                    _variant(101, product_id=10, sort_order=0),
                    _variant(110, product_id=11),
                    _variant(120, product_id=12),
                ],
                EntityKind.REVIEW: [
                    _review(1, product_id=10, published=True, day=5),
                    _review(2, product_id=10, published=False, day=7),
                    _review(3, product_id=10, published=True, day=6),
                    _review(4, product_id=12, published=True, day=6),
                ],
            }
        )

    async def test_two_fetches_for_three_loads(self, catalog):
        loaders = create_dataloaders(catalog)

        first, second, reviews = await asyncio.gather(
            loaders.product_variants.load(10),
            loaders.product_variants.load(11),
            loaders.product_reviews.load(10),
        )

        assert [v.id for v in first] == [101, 100]
        assert [v.id for v in second] == [110]
        assert [r.id for r in reviews] == [3, 1]
        assert len(catalog.calls) == 2

        calls = {kind: filters for _, kind, filters in catalog.calls}
        (variant_predicate,) = list(calls[EntityKind.VARIANT])
        assert variant_predicate.field == "product_id"
        assert set(variant_predicate.value) == {10, 11}

        review_predicates = {p.field: p for p in calls[EntityKind.REVIEW]}
        assert set(review_predicates["product_id"].value) == {10}
        assert review_predicates["is_published"].op is FilterOp.EQ
        assert review_predicates["is_published"].value is True
