"""
Product API: Endpoint Tests
==============================

What:  HTTP-level tests for /products and the error response contract.
How:   HTTPX AsyncClient against the ASGI app; the product store runs on the
       in-memory collection double from conftest.py.

What we test:
    ✅ Status codes and bodies for every endpoint
    ✅ Resolve-by-id short-circuits (404 before body parsing, 500 on bad id)
    ✅ Validation failures are 400 with {"message": ...}, never 422
    ✅ Store failures are 500 with a generic message (no driver details)
"""

from unittest.mock import AsyncMock

import pytest
from bson import ObjectId

from app.exceptions import DatabaseError


async def _create(client, payload):
    response = await client.post("/products", json=payload)
    assert response.status_code == 201
    return response.json()


class TestListProducts:
    @pytest.mark.asyncio
    async def test_empty_store(self, test_client):
        response = await test_client.get("/products")

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_lists_created_products(self, test_client, product_payload):
        ids = [
            (await _create(test_client, {**product_payload, "name": f"Phone {i}"}))["id"]
            for i in range(3)
        ]

        response = await test_client.get("/products")

        assert response.status_code == 200
        body = response.json()
        assert [p["id"] for p in body] == ids
        assert [p["name"] for p in body] == ["Phone 0", "Phone 1", "Phone 2"]

    @pytest.mark.asyncio
    async def test_store_failure_is_500(self, test_client, product_store):
        product_store.get_all_products = AsyncMock(side_effect=DatabaseError(
            context={"error_type": "ServerSelectionTimeoutError"}
        ))

        response = await test_client.get("/products")

        assert response.status_code == 500
        assert "ServerSelectionTimeoutError" not in response.text
        assert "message" in response.json()


class TestCreateProduct:
    @pytest.mark.asyncio
    async def test_example_scenario(self, test_client, product_payload):
        """POST the Galaxy S21 body, then GET it back unchanged."""
        response = await test_client.post("/products", json=product_payload)

        assert response.status_code == 201
        created = response.json()
        assert ObjectId.is_valid(created["id"])
        assert {k: created[k] for k in product_payload} == product_payload

        fetched = await test_client.get(f"/products/{created['id']}")
        assert fetched.status_code == 200
        assert fetched.json() == created

    @pytest.mark.asyncio
    async def test_int_price_returned_as_int(self, test_client, product_payload):
        response = await test_client.post("/products", json=product_payload)
        price = response.json()["price"]

        assert price == 799
        assert isinstance(price, int)

    @pytest.mark.asyncio
    async def test_missing_field_is_400(self, test_client, product_payload):
        del product_payload["brand"]

        response = await test_client.post("/products", json=product_payload)

        assert response.status_code == 400
        assert "brand" in response.json()["message"]
        assert (await test_client.get("/products")).json() == []

    @pytest.mark.asyncio
    async def test_wrong_type_is_400(self, test_client, product_payload):
        product_payload["fingerprint"] = "yes"

        response = await test_client.post("/products", json=product_payload)

        assert response.status_code == 400
        assert "fingerprint" in response.json()["message"]

    @pytest.mark.asyncio
    async def test_malformed_json_is_400(self, test_client):
        response = await test_client.post(
            "/products",
            content=b'{"name": "Galaxy',
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["message"].startswith("Malformed JSON body")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("literal", ["NaN", "Infinity", "-Infinity"])
    async def test_non_finite_number_is_400(self, test_client, literal):
        body = (
            '{"name": "Galaxy S21", "brand": "Samsung", "ram": 8, "camera": "64 MP", '
            f'"network": "5G", "fingerprint": true, "price": {literal}}}'
        )

        response = await test_client.post(
            "/products",
            content=body.encode(),
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert literal in response.json()["message"]
        assert (await test_client.get("/products")).json() == []

    @pytest.mark.asyncio
    async def test_ram_beyond_int64_is_400(self, test_client, product_payload):
        product_payload["ram"] = 2**70

        response = await test_client.post("/products", json=product_payload)

        assert response.status_code == 400
        assert "ram" in response.json()["message"]
        assert (await test_client.get("/products")).json() == []

    @pytest.mark.asyncio
    async def test_array_body_is_400(self, test_client, product_payload):
        response = await test_client.post("/products", json=[product_payload])

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_client_id_ignored(self, test_client, product_payload):
        supplied = str(ObjectId())

        created = await _create(test_client, {**product_payload, "id": supplied})

        assert created["id"] != supplied


class TestGetProduct:
    @pytest.mark.asyncio
    async def test_unknown_id_is_404(self, test_client):
        response = await test_client.get(f"/products/{ObjectId()}")

        assert response.status_code == 404
        assert response.json() == {"message": "Product not found"}

    @pytest.mark.asyncio
    async def test_malformed_id_is_500(self, test_client):
        response = await test_client.get("/products/not-an-object-id")

        assert response.status_code == 500
        assert "not-an-object-id" not in response.json()["message"]


class TestUpdateProduct:
    @pytest.mark.asyncio
    async def test_partial_update(self, test_client, product_payload):
        created = await _create(test_client, product_payload)

        response = await test_client.put(f"/products/{created['id']}", json={"price": 500})

        assert response.status_code == 200
        updated = response.json()
        assert updated["price"] == 500
        assert {k: v for k, v in updated.items() if k != "price"} == {
            k: v for k, v in created.items() if k != "price"
        }

    @pytest.mark.asyncio
    async def test_full_update(self, test_client, product_payload):
        created = await _create(test_client, product_payload)
        replacement = {
            "name": "Pixel 8",
            "brand": "Google",
            "ram": 12,
            "camera": "50 MP",
            "network": "5G",
            "fingerprint": False,
            "price": 699.5,
        }

        response = await test_client.put(f"/products/{created['id']}", json=replacement)

        assert response.status_code == 200
        assert response.json() == {"id": created["id"], **replacement}

    @pytest.mark.asyncio
    async def test_empty_body_changes_nothing(self, test_client, product_payload):
        created = await _create(test_client, product_payload)

        response = await test_client.put(f"/products/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created

    @pytest.mark.asyncio
    async def test_invalid_merge_is_400(self, test_client, product_payload):
        created = await _create(test_client, product_payload)

        response = await test_client.put(f"/products/{created['id']}", json={"ram": "8GB"})

        assert response.status_code == 400
        assert "ram" in response.json()["message"]
        fetched = await test_client.get(f"/products/{created['id']}")
        assert fetched.json() == created

    @pytest.mark.asyncio
    async def test_infinity_price_is_400(self, test_client, product_payload):
        created = await _create(test_client, product_payload)

        response = await test_client.put(
            f"/products/{created['id']}",
            content=b'{"price": Infinity}',
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert (await test_client.get(f"/products/{created['id']}")).json() == created

    @pytest.mark.asyncio
    async def test_reads_record_once(self, test_client, product_store, product_payload):
        created = await _create(test_client, product_payload)
        product_store.get_product_by_id = AsyncMock(wraps=product_store.get_product_by_id)

        response = await test_client.put(f"/products/{created['id']}", json={"price": 500})

        assert response.status_code == 200
        product_store.get_product_by_id.assert_awaited_once_with(created["id"])

    @pytest.mark.asyncio
    async def test_unknown_id_is_404_even_with_bad_body(self, test_client):
        response = await test_client.put(
            f"/products/{ObjectId()}",
            content=b"not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 404
        assert response.json() == {"message": "Product not found"}


class TestDeleteProduct:
    @pytest.mark.asyncio
    async def test_delete_twice(self, test_client, product_payload):
        created = await _create(test_client, product_payload)

        first = await test_client.delete(f"/products/{created['id']}")
        second = await test_client.delete(f"/products/{created['id']}")

        assert first.status_code == 200
        assert first.json() == {"message": "Product deleted successfully"}
        assert second.status_code == 404
        assert second.json() == {"message": "Product not found"}

    @pytest.mark.asyncio
    async def test_deleted_product_gone(self, test_client, product_payload):
        created = await _create(test_client, product_payload)
        await test_client.delete(f"/products/{created['id']}")

        assert (await test_client.get(f"/products/{created['id']}")).status_code == 404
        assert (await test_client.get("/products")).json() == []

    @pytest.mark.asyncio
    async def test_store_failure_is_500(self, test_client, product_store, product_payload):
        created = await _create(test_client, product_payload)
        product_store.delete_product = AsyncMock(side_effect=DatabaseError())

        response = await test_client.delete(f"/products/{created['id']}")

        assert response.status_code == 500


class TestPipeline:
    @pytest.mark.asyncio
    async def test_unexpected_error_is_generic_500(self, test_client, product_store):
        product_store.get_all_products = AsyncMock(side_effect=RuntimeError("secret detail"))

        response = await test_client.get("/products")

        assert response.status_code == 500
        assert response.json() == {"message": "Something went wrong!"}

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, test_client):
        response = await test_client.get("/products", headers={"X-Request-ID": "abc123"})

        assert response.headers["X-Request-ID"] == "abc123"

    @pytest.mark.asyncio
    async def test_request_id_generated(self, test_client):
        response = await test_client.get("/products")

        assert len(response.headers["X-Request-ID"]) == 8


class TestDocumentation:
    @pytest.mark.asyncio
    async def test_openapi_describes_products(self, test_client):
        response = await test_client.get("/openapi.json")

        assert response.status_code == 200
        spec = response.json()
        assert spec["info"]["title"] == "CRUD API Documentation"
        assert set(spec["paths"]["/products"]) == {"get", "post"}
        assert set(spec["paths"]["/products/{product_id}"]) == {"get", "put", "delete"}
        assert "Product" in spec["components"]["schemas"]
        post_body = spec["paths"]["/products"]["post"]["requestBody"]
        assert post_body["content"]["application/json"]["schema"]["required"] == [
            "name", "brand", "ram", "camera", "network", "fingerprint", "price",
        ]

    @pytest.mark.asyncio
    async def test_swagger_ui_served(self, test_client):
        response = await test_client.get("/api-docs")

        assert response.status_code == 200
        assert "swagger" in response.text.lower()
