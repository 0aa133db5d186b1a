"""Tests for the FastAPI API."""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from farmfresh.errors import CatalogStoreError
from farmfresh.services.catalog_service import CatalogService
from farmfresh.services.order_placement import OrderPlacementEngine
from farmfresh.services.order_service import OrderService
from farmfresh.services.user_service import UserService

CUSTOMER = {"X-User-ID": "user_001"}
FARMER = {"X-User-ID": "farmer_001"}
OTHER_FARMER = {"X-User-ID": "farmer_002"}


@pytest.fixture
def api_client(monkeypatch, catalog, ledger, users):
    """Create a test client whose services run on the in-memory stores."""
    from farmfresh.api import routes
    from farmfresh.main import app

    engine = OrderPlacementEngine(catalog, ledger, delivery_fee=Decimal("50"), reserve_stock_before_commit=False)
    monkeypatch.setattr(routes, "user_service", UserService(users))
    monkeypatch.setattr(routes, "catalog_service", CatalogService(catalog))
    monkeypatch.setattr(routes, "order_service", OrderService(catalog, ledger, engine))

    return TestClient(app)


def place(api_client, items, headers=CUSTOMER, **body):
    return api_client.post("/api/orders", json={"items": items, **body}, headers=headers)


class TestHealth:
    def test_degraded_without_database(self, api_client):
        response = api_client.get("/api/health")

        assert response.status_code == 200
        assert response.json()["status"] == "degraded"
        assert response.json()["services"]["mongodb"] == "disconnected"

    def test_request_id_echoed(self, api_client):
        response = api_client.get("/api/health", headers={"X-Request-ID": "req-42"})

        assert response.headers["X-Request-ID"] == "req-42"
        assert "X-Process-Time" in response.headers


class TestUsers:
    def test_create_and_fetch(self, api_client):
        payload = {
            "userId": "user_777",
            "name": "Meera Nair",
            "email": "meera@example.com",
            "phone": "+919811111111",
            "role": "customer",
        }

        created = api_client.post("/api/users", json=payload)
        fetched = api_client.get("/api/users/user_777")

        assert created.status_code == 201
        assert fetched.status_code == 200
        assert fetched.json()["email"] == "meera@example.com"

    def test_duplicate_user(self, api_client):
        payload = {
            "userId": "user_001",
            "name": "Someone Else",
            "email": "else@example.com",
            "phone": "+919811111111",
        }

        response = api_client.post("/api/users", json=payload)

        assert response.status_code == 400

    def test_unknown_user(self, api_client):
        assert api_client.get("/api/users/nobody").status_code == 404


class TestProducts:
    def test_farmer_adds_product(self, api_client, catalog):
        response = api_client.post(
            "/api/products",
            json={"name": " Okra ", "description": "Tender okra", "price": 40, "quantity": 20},
            headers=FARMER,
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["name"] == "Okra"
        assert data["farmer"] == "farmer_001"
        assert data["price"] == 40.0
        assert data["inStock"] is True
        assert data["id"] in catalog.products

    def test_customer_cannot_add_product(self, api_client):
        response = api_client.post(
            "/api/products",
            json={"name": "Okra", "description": "Tender okra", "price": 40, "quantity": 20},
            headers=CUSTOMER,
        )

        assert response.status_code == 403

    def test_missing_identity_header(self, api_client):
        response = api_client.post(
            "/api/products", json={"name": "Okra", "description": "Tender okra", "price": 40, "quantity": 20}
        )

        assert response.status_code == 422

    def test_list_and_get(self, api_client, tomatoes):
        listing = api_client.get("/api/products").json()
        single = api_client.get(f"/api/products/{tomatoes.id}")

        assert listing["count"] == 1
        assert single.json()["data"]["name"] == "Tomatoes"
        assert api_client.get("/api/products/665f00000000000000000000").status_code == 404

    def test_catalog_outage(self, api_client, monkeypatch, catalog):
        async def unreachable():
            raise CatalogStoreError("Product listing failed: no primary available")

        monkeypatch.setattr(catalog, "list_all", unreachable)

        response = api_client.get("/api/products")

        assert response.status_code == 503
        assert response.json()["success"] is False

    def test_trending_excludes_sold_out(self, api_client, catalog, tomatoes):
        catalog.add("Spinach", 30, 0)

        response = api_client.get("/api/recommendations/trending", params={"limit": 5})

        assert [p["name"] for p in response.json()["trendingProducts"]] == ["Tomatoes"]


class TestPlaceOrder:
    def test_success(self, api_client, catalog, tomatoes):
        response = place(
            api_client,
            [{"productId": tomatoes.id, "quantity": 5, "price": 1}],
            deliveryAddress={"street": "12 MG Road", "city": "Pune", "pincode": "411001"},
            totalAmount=5,
        )

        assert response.status_code == 201
        order = response.json()["order"]
        assert response.json()["success"] is True
        assert order["totalAmount"] == 100.0
        assert order["grandTotal"] == 150.0
        assert order["status"] == "pending"
        assert order["paymentStatus"] == "pending"
        assert order["items"][0]["productName"] == "Tomatoes"
        assert order["orderNumber"].startswith("ORD")
        assert catalog.quantity_of(tomatoes.id) == 5

    def test_validation_report(self, api_client, ledger, tomatoes):
        response = place(
            api_client,
            [{"productName": "Durian", "quantity": 1}, {"productId": tomatoes.id, "quantity": 15}],
        )

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Product validation failed"
        assert len(body["errors"]) == 2
        assert [f["kind"] for f in body["failures"]] == ["ProductNotFound", "InsufficientStock"]
        assert body["failures"][1]["available"] == 10
        assert body["availableProducts"] == [
            {"_id": tomatoes.id, "name": "Tomatoes", "stock": 10, "price": 20.0, "category": "vegetables"}
        ]
        assert ledger.orders == {}

    def test_only_customers_order(self, api_client, tomatoes):
        response = place(api_client, [{"productId": tomatoes.id, "quantity": 1}], headers=FARMER)

        assert response.status_code == 403

    def test_empty_cart(self, api_client):
        assert place(api_client, []).status_code == 422

    def test_line_without_reference(self, api_client):
        assert place(api_client, [{"quantity": 1}]).status_code == 422

    def test_persistence_failure(self, api_client, ledger, tomatoes):
        ledger.fail_writes = True

        response = place(api_client, [{"productId": tomatoes.id, "quantity": 1}])

        assert response.status_code == 500
        assert response.json()["detail"] == "Internal server error during order creation"


class TestOrderViews:
    @pytest.fixture
    def order_id(self, api_client, catalog):
        spinach = catalog.add("Spinach", 30, 10, farmer="farmer_001")
        mangoes = catalog.add("Mangoes", 600, 5, farmer="farmer_002")
        response = place(
            api_client,
            [{"productId": spinach.id, "quantity": 2}, {"productId": mangoes.id, "quantity": 1}],
        )
        return response.json()["order"]["id"]

    def test_my_orders(self, api_client, order_id):
        response = api_client.get("/api/orders/my-orders", headers=CUSTOMER)

        assert [o["id"] for o in response.json()] == [order_id]

    def test_farmer_orders_filtered(self, api_client, order_id):
        response = api_client.get("/api/orders/farmer-orders", headers=OTHER_FARMER)

        [order] = response.json()
        assert [item["productName"] for item in order["items"]] == ["Mangoes"]

    def test_update_status(self, api_client, order_id):
        response = api_client.patch(
            f"/api/orders/{order_id}/status", json={"status": "confirmed"}, headers=FARMER
        )

        assert response.status_code == 200
        assert response.json()["order"]["status"] == "confirmed"

    def test_invalid_transition(self, api_client, order_id):
        response = api_client.patch(
            f"/api/orders/{order_id}/status", json={"status": "delivered"}, headers=FARMER
        )

        assert response.status_code == 400

    def test_unknown_status_value(self, api_client, order_id):
        response = api_client.patch(
            f"/api/orders/{order_id}/status", json={"status": "shipped"}, headers=FARMER
        )

        assert response.status_code == 422

    def test_customer_cannot_update(self, api_client, order_id):
        response = api_client.patch(
            f"/api/orders/{order_id}/status", json={"status": "confirmed"}, headers=CUSTOMER
        )

        assert response.status_code == 403

    def test_unknown_order(self, api_client):
        response = api_client.patch(
            "/api/orders/665f00000000000000000000/status", json={"status": "confirmed"}, headers=FARMER
        )

        assert response.status_code == 404


class TestUnhandledErrors:
    def test_generic_error_body(self, api_client, monkeypatch, catalog):
        async def broken(product_id):
            raise RuntimeError("boom")

        monkeypatch.setattr(catalog, "find_by_id", broken)
        client = TestClient(api_client.app, raise_server_exceptions=False)

        response = client.get("/api/products/665f00000000000000000000")

        assert response.status_code == 500
        assert response.json() == {"error": "Internal Server Error", "detail": "An unexpected error occurred"}
