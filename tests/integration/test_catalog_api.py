"""HTTP tests for the catalog REST endpoints."""

from __future__ import annotations

import pytest

from storefront.features.catalog.store import EntityKind

pytestmark = pytest.mark.integration


class TestListProducts:
    async def test_first_page_with_pagination(self, client):
        response = await client.get("/api/products", params={"limit": 2})

        assert response.status_code == 200
        body = response.json()
        assert [p["slug"] for p in body["data"]] == ["canvas-tote", "wool-sweater"]
        assert body["pagination"] == {"page": 1, "limit": 2, "total": 3, "totalPages": 2}

    async def test_second_page(self, client):
        response = await client.get("/api/products", params={"limit": 2, "page": 2})

        body = response.json()
        assert [p["slug"] for p in body["data"]] == ["linen-shirt"]
        assert body["pagination"]["page"] == 2

    async def test_entries_use_camel_case_and_first_variant(self, client):
        response = await client.get("/api/products", params={"search": "linen"})

        (product,) = response.json()["data"]
        assert product["basePrice"] == 49.0
        assert product["isFeatured"] is True
        assert [v["sku"] for v in product["variants"]] == ["LS-S-NAVY"]
        assert product["variants"][0]["isAvailable"] is True

    async def test_variants_are_batched_for_the_page(self, client, catalog_store):
        response = await client.get("/api/products")

        assert response.status_code == 200
        assert catalog_store.count_calls("find_many", EntityKind.VARIANT) == 1
        assert catalog_store.count_calls("count", EntityKind.PRODUCT) == 1
        assert catalog_store.count_calls("find_many", EntityKind.PRODUCT_IMAGE) == 1

    async def test_entries_carry_only_the_primary_image(self, client):
        response = await client.get("/api/products")

        by_slug = {p["slug"]: p for p in response.json()["data"]}
        (shirt_image,) = by_slug["linen-shirt"]["images"]
        assert shirt_image["isPrimary"] is True
        assert shirt_image["image"]["url"] == "https://cdn.test/products/shirt-front.jpg"
        assert shirt_image["image"]["thumbnailUrl"] == "https://cdn.test/products/shirt-front-thumb.jpg"
        assert by_slug["canvas-tote"]["images"] == []

    async def test_filters_and_sort(self, client):
        response = await client.get(
            "/api/products", params={"category": "apparel", "sortBy": "price-desc"}
        )

        assert [p["slug"] for p in response.json()["data"]] == ["wool-sweater", "linen-shirt"]

    async def test_status_filter(self, client):
        response = await client.get("/api/products", params={"status": "DRAFT"})

        assert [p["slug"] for p in response.json()["data"]] == ["draft-jacket"]

    async def test_featured_filter(self, client):
        response = await client.get("/api/products", params={"featured": "true"})

        assert [p["slug"] for p in response.json()["data"]] == ["linen-shirt"]

    async def test_empty_result(self, client):
        response = await client.get("/api/products", params={"collection": "retired"})

        body = response.json()
        assert body["data"] == []
        assert body["pagination"]["total"] == 0
        assert body["pagination"]["totalPages"] == 0

    async def test_invalid_status_is_rejected(self, client, catalog_store):
        response = await client.get("/api/products", params={"status": "SOLD"})

        assert response.status_code == 422
        body = response.json()
        assert body["type"] == "validation-error"
        assert body["field"] == "status"
        assert body["allowed"] == ["DRAFT", "PUBLISHED", "ARCHIVED"]
        assert catalog_store.calls == []

    async def test_invalid_sort_is_rejected(self, client):
        response = await client.get("/api/products", params={"sortBy": "cheapest"})

        assert response.status_code == 422
        assert response.json()["field"] == "sortBy"

    @pytest.mark.parametrize("params", [{"page": 0}, {"limit": 0}, {"limit": 1000}])
    async def test_out_of_range_paging_is_rejected(self, client, params):
        response = await client.get("/api/products", params=params)

        assert response.status_code == 422
        body = response.json()
        assert body["status"] == 422
        assert body["errors"][0]["field"].startswith("query.")


class TestSearchIndex:
    async def test_route_is_not_taken_as_a_slug(self, client):
        response = await client.get("/api/products/search/index")

        assert response.status_code == 200
        entries = response.json()["data"]
        assert sorted(e["slug"] for e in entries) == ["canvas-tote", "linen-shirt", "wool-sweater"]

    async def test_missing_text_fields_are_empty_strings(self, client):
        response = await client.get("/api/products/search/index")

        tote = next(e for e in response.json()["data"] if e["slug"] == "canvas-tote")
        assert tote["description"] == ""
        assert tote["brand"] == ""
        assert tote["basePrice"] == 25.0
        assert tote["imageUrl"] == ""

    async def test_image_url_is_the_primary_image(self, client, catalog_store):
        response = await client.get("/api/products/search/index")

        by_slug = {e["slug"]: e for e in response.json()["data"]}
        assert by_slug["linen-shirt"]["imageUrl"] == "https://cdn.test/products/shirt-front.jpg"
        assert by_slug["wool-sweater"]["imageUrl"] == "https://cdn.test/products/sweater.jpg"
        assert catalog_store.count_calls("find_many", EntityKind.PRODUCT_IMAGE) == 1


class TestGetProduct:
    async def test_product_with_relations(self, client):
        response = await client.get("/api/products/linen-shirt")

        assert response.status_code == 200
        product = response.json()["data"]
        assert [v["sku"] for v in product["variants"]] == ["LS-S-NAVY", "LS-M-SAND"]
        assert sorted(c["slug"] for c in product["categories"]) == ["apparel", "shirts"]
        assert [c["slug"] for c in product["collections"]] == ["summer"]

    async def test_product_gallery_and_variant_images(self, client, catalog_store):
        response = await client.get("/api/products/linen-shirt")

        product = response.json()["data"]
        assert [(i["image"]["alt"], i["isPrimary"]) for i in product["images"]] == [
            ("Back", False),
            ("Front", True),
        ]
        front = product["images"][1]["image"]
        assert front["mimeType"] == "image/jpeg"
        assert (front["width"], front["height"], front["filesize"]) == (1200, 1600, 48_213)
        navy, sand = product["variants"]
        assert [i["image"]["alt"] for i in navy["images"]] == ["Navy detail"]
        assert sand["images"] == []
        assert catalog_store.count_calls("find_many", EntityKind.VARIANT_IMAGE) == 1

    async def test_draft_product_is_served_by_slug(self, client):
        response = await client.get("/api/products/draft-jacket")

        assert response.status_code == 200
        assert response.json()["data"]["status"] == "DRAFT"

    async def test_unknown_slug_is_problem_details_404(self, client):
        response = await client.get("/api/products/no-such-thing")

        assert response.status_code == 404
        body = response.json()
        assert body["type"] == "product-not-found"
        assert body["title"] == "Not Found"
        assert body["status"] == 404
        assert body["instance"] == "/api/products/no-such-thing"
        assert body["slug"] == "no-such-thing"
        assert body["request_id"] == response.headers["x-request-id"]


class TestCategories:
    async def test_lists_visible_categories_in_order(self, client):
        response = await client.get("/api/categories")

        assert response.status_code == 200
        assert [c["slug"] for c in response.json()["data"]] == ["apparel", "shirts"]

    async def test_entries_carry_image_children_and_product_count(self, client, catalog_store):
        response = await client.get("/api/categories")

        apparel, shirts = response.json()["data"]
        assert apparel["image"]["url"] == "https://cdn.test/categories/apparel.jpg"
        assert [c["slug"] for c in apparel["children"]] == ["shirts"]
        assert apparel["productCount"] == 2
        assert shirts["image"] is None
        assert shirts["children"] == []
        assert shirts["productCount"] == 1
        assert catalog_store.count_calls("count_by", EntityKind.PRODUCT_CATEGORY) == 1
        assert catalog_store.count_calls("find_many", EntityKind.CATEGORY) == 2

    async def test_category_with_parent(self, client):
        response = await client.get("/api/categories/shirts")

        category = response.json()["data"]
        assert category["parentId"] == "cat-apparel"
        assert category["parent"]["slug"] == "apparel"

    async def test_root_category_has_no_parent(self, client):
        response = await client.get("/api/categories/apparel")

        assert response.json()["data"]["parent"] is None

    async def test_category_products_with_image_and_first_variant(self, client):
        response = await client.get("/api/categories/apparel")

        category = response.json()["data"]
        assert [p["slug"] for p in category["products"]] == ["linen-shirt", "wool-sweater"]
        shirt = category["products"][0]
        assert [i["image"]["alt"] for i in shirt["images"]] == ["Front"]
        assert [v["sku"] for v in shirt["variants"]] == ["LS-S-NAVY"]
        assert [c["slug"] for c in category["children"]] == ["shirts"]
        assert category["productCount"] == 2

    async def test_unknown_category(self, client):
        response = await client.get("/api/categories/nothing")

        assert response.status_code == 404
        assert response.json()["type"] == "category-not-found"


class TestCollections:
    async def test_lists_visible_collections(self, client):
        response = await client.get("/api/collections")

        assert [c["slug"] for c in response.json()["data"]] == ["summer"]
        assert response.json()["data"][0]["productCount"] == 2

    async def test_collection_products_follow_collection_order(self, client, catalog_store):
        response = await client.get("/api/collections/summer")

        products = response.json()["data"]["products"]
        assert [p["slug"] for p in products] == ["canvas-tote", "linen-shirt"]
        assert [v["sku"] for v in products[1]["variants"]] == ["LS-S-NAVY"]
        assert catalog_store.count_calls("find_many", EntityKind.VARIANT) == 1

    async def test_hidden_collection_is_served_by_slug(self, client):
        response = await client.get("/api/collections/retired")

        assert response.status_code == 200
        assert response.json()["data"]["isVisible"] is False
        assert response.json()["data"]["products"] == []

    async def test_unknown_collection(self, client):
        response = await client.get("/api/collections/nothing")

        assert response.status_code == 404
        assert response.json()["type"] == "collection-not-found"
