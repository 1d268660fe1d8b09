"""Integration tests for Cart API endpoints via TestClient."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from shopping.api.routes import cart_router, checkout_router
from shopping.cart.session import CartSession

TIERS = [
    {"min_quantity": 5, "discount_percent": 10},
    {"min_quantity": 10, "discount_percent": 20},
]


@pytest.fixture()
def client(storage, backend):
    app = FastAPI()
    app.include_router(cart_router)
    app.include_router(checkout_router)
    return TestClient(app)


def _add_item(client, session_id="sess-001", variant_id="var-001", quantity=1, **overrides):
    """Helper: POST /carts/{session_id}/items."""
    body = {
        "product_id": "prod-001",
        "variant_id": variant_id,
        "name": "Ankara Shirt",
        "price": 15000,
        "quantity": quantity,
    }
    body.update(overrides)
    response = client.post(f"/carts/{session_id}/items", json=body)
    assert response.status_code == 200
    return response


class TestGetCartEndpoint:
    def test_empty_cart(self, client):
        response = client.get("/carts/sess-new")
        assert response.status_code == 200
        data = response.json()
        assert data["items"] == []
        assert data["item_count"] == 0
        assert data["total"] == 0
        assert data["display_total"] == "₦0"


class TestCartItemEndpoints:
    def test_add_item(self, client, storage):
        response = _add_item(client, quantity=2, size="M", color="Black")
        data = response.json()
        assert data["item_count"] == 2
        assert data["total"] == 30000.0
        assert data["items"][0]["size"] == "M"

        assert CartSession.open(storage, "sess-001").item_count() == 2

    def test_add_item_with_tiers(self, client):
        _add_item(client, "sess-001", "var-s", 6, bulk_pricing_tiers=TIERS)
        data = _add_item(client, "sess-001", "var-m", 5, bulk_pricing_tiers=TIERS).json()

        assert data["item_count"] == 11
        assert data["subtotal"] == 165000.0
        assert data["total"] == 132000.0
        assert data["savings"] == 33000.0
        assert data["display_total"] == "₦132,000"
        assert all(line["discount_percent"] == 20 for line in data["items"])
        assert all(line["effective_unit_price"] == 12000.0 for line in data["items"])

    def test_add_item_rejects_zero_quantity(self, client):
        response = client.post(
            "/carts/sess-001/items",
            json={"product_id": "p", "variant_id": "v", "name": "Cap", "price": 100, "quantity": 0},
        )
        assert response.status_code == 422

    def test_update_quantity(self, client):
        _add_item(client)
        response = client.put("/carts/sess-001/items/var-001", json={"quantity": 5})
        assert response.status_code == 200
        assert response.json()["items"][0]["quantity"] == 5

    def test_update_quantity_below_one_rejected(self, client):
        _add_item(client, quantity=2)
        response = client.put("/carts/sess-001/items/var-001", json={"quantity": 0})
        assert response.status_code == 422
        assert client.get("/carts/sess-001").json()["item_count"] == 2

    def test_update_unknown_variant_is_ignored(self, client):
        _add_item(client)
        response = client.put("/carts/sess-001/items/var-999", json={"quantity": 5})
        assert response.status_code == 200
        assert response.json()["item_count"] == 1

    def test_remove_item(self, client):
        _add_item(client, variant_id="var-001")
        _add_item(client, variant_id="var-002")
        response = client.delete("/carts/sess-001/items/var-001")
        assert response.status_code == 200
        assert [line["variant_id"] for line in response.json()["items"]] == ["var-002"]

    def test_clear_cart(self, client):
        _add_item(client, variant_id="var-001")
        _add_item(client, variant_id="var-002")
        response = client.delete("/carts/sess-001")
        assert response.status_code == 200
        assert response.json() == {"status": "cleared"}
        assert client.get("/carts/sess-001").json()["items"] == []
