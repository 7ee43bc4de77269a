"""
Tests for the shop API endpoints.

Drives every route through FastAPI's TestClient against in-memory
SQLite, including the end-to-end customer and operator journeys.
"""

import pytest
from fastapi.testclient import TestClient

WIDGET = {"name": "Widget", "wholesalePrice": 4.0, "retailPrice": 10.0, "quantity": 5}


@pytest.fixture
def admin(make_user, login) -> dict[str, str]:
    make_user("root", is_admin=True)
    return login("root")


@pytest.fixture
def alice(client: TestClient) -> dict[str, str]:
    response = client.post(
        "/signup", json={"username": "alice", "email": "a@x", "password": "p"}
    )
    assert response.status_code == 201
    token = client.post("/login", json={"username": "alice", "password": "p"})
    return {"Authorization": f"Bearer {token.json()['accessToken']}"}


@pytest.fixture
def bob(make_user, login) -> dict[str, str]:
    make_user("bob")
    return login("bob")


@pytest.fixture
def widget(client: TestClient, admin) -> dict:
    response = client.post("/products", json=WIDGET, headers=admin)
    assert response.status_code == 201
    return response.json()


def _order(client: TestClient, headers, product_id: int, quantity: int):
    return client.post(
        "/orders",
        json={"items": [{"productId": product_id, "quantity": quantity}]},
        headers=headers,
    )


def _quantity(client: TestClient, admin, product_id: int) -> int:
    return client.get(f"/products/{product_id}", headers=admin).json()["quantity"]


class TestSignupAndLogin:
    """Tests for POST /signup and POST /login."""

    def test_signup_then_login(self, client: TestClient) -> None:
        """Scenario: signup 201, good login 200 with a token, bad login 401."""
        response = client.post(
            "/signup", json={"username": "alice", "email": "a@x", "password": "p"}
        )
        assert response.status_code == 201
        body = response.json()
        assert body["username"] == "alice"
        assert body["isAdmin"] is False
        assert "password" not in body and "passwordHash" not in body

        ok = client.post("/login", json={"username": "alice", "password": "p"})
        assert ok.status_code == 200
        assert ok.json()["accessToken"]
        assert ok.json()["tokenType"] == "Bearer"

        bad = client.post("/login", json={"username": "alice", "password": "wrong"})
        assert bad.status_code == 401

    def test_signup_ignores_admin_flag(self, client: TestClient) -> None:
        response = client.post(
            "/signup",
            json={"username": "mallory", "email": "m@x", "password": "p", "isAdmin": True},
        )
        assert response.json()["isAdmin"] is False

    def test_duplicate_username_conflicts(self, client: TestClient, alice) -> None:
        response = client.post(
            "/signup", json={"username": "alice", "email": "b@x", "password": "p"}
        )
        assert response.status_code == 409
        assert response.json()["status"] == 409

    @pytest.mark.parametrize(
        "payload",
        [
            {"username": "", "email": "a@x", "password": "p"},
            {"username": "carol", "email": "not-an-email", "password": "p"},
            {"username": "carol", "email": "c@x"},
        ],
    )
    def test_invalid_signup_rejected(self, client: TestClient, payload: dict) -> None:
        """Request validation failures map to 400, not 422."""
        assert client.post("/signup", json=payload).status_code == 400


class TestProductEndpoints:
    """Tests for catalog routes and role-specific views."""

    def test_admin_creates_and_sees_every_field(self, client: TestClient, widget) -> None:
        assert widget == {
            "id": widget["id"],
            "name": "Widget",
            "description": None,
            "wholesalePrice": 4.0,
            "retailPrice": 10.0,
            "quantity": 5,
        }

    def test_customer_view_hides_cost_and_stock(self, client: TestClient, widget, alice) -> None:
        body = client.get(f"/products/{widget['id']}", headers=alice).json()
        assert body == {
            "id": widget["id"],
            "name": "Widget",
            "description": None,
            "retailPrice": 10.0,
        }
        listing = client.get("/products/all", headers=alice).json()
        assert [p["id"] for p in listing] == [widget["id"]]
        assert "wholesalePrice" not in listing[0]

    def test_customer_cannot_create(self, client: TestClient, alice) -> None:
        assert client.post("/products", json=WIDGET, headers=alice).status_code == 403

    @pytest.mark.parametrize(
        "override",
        [{"quantity": 0}, {"retailPrice": -1}, {"name": ""}],
    )
    def test_invalid_product_rejected(self, client: TestClient, admin, override: dict) -> None:
        response = client.post("/products", json={**WIDGET, **override}, headers=admin)
        assert response.status_code == 400

    def test_patch_changes_only_sent_fields(self, client: TestClient, admin, widget) -> None:
        response = client.patch(
            f"/products/{widget['id']}", json={"retailPrice": 12.5}, headers=admin
        )
        assert response.status_code == 200
        assert response.json() == {**widget, "retailPrice": 12.5}

    def test_empty_patch_is_identity(self, client: TestClient, admin, widget) -> None:
        response = client.patch(f"/products/{widget['id']}", json={}, headers=admin)
        assert response.json() == widget

    def test_invalid_patch_leaves_product(self, client: TestClient, admin, widget) -> None:
        response = client.patch(
            f"/products/{widget['id']}", json={"quantity": -3}, headers=admin
        )
        assert response.status_code == 400
        assert _quantity(client, admin, widget["id"]) == 5

    def test_patch_missing_product(self, client: TestClient, admin) -> None:
        assert client.patch("/products/999", json={"name": "x"}, headers=admin).status_code == 404

    def test_out_of_stock_hidden_from_customers(self, client: TestClient, admin, widget, alice) -> None:
        client.patch(f"/products/{widget['id']}", json={"quantity": 0}, headers=admin)
        assert client.get("/products/all", headers=alice).json() == []
        assert client.get(f"/products/{widget['id']}", headers=alice).status_code == 404
        assert _quantity(client, admin, widget["id"]) == 0


class TestOrderEndpoints:
    """Tests for placement, reads and the order state machine."""

    def test_placement_and_cancellation(self, client: TestClient, admin, widget, alice) -> None:
        """Scenario: place 3 of 5, stock drops to 2; cancel restores 5."""
        placed = _order(client, alice, widget["id"], 3)
        assert placed.status_code == 201
        order = placed.json()
        assert order["status"] == "PROCESSING"
        assert _quantity(client, admin, widget["id"]) == 2

        canceled = client.patch(f"/orders/{order['id']}/cancel", headers=alice)
        assert canceled.status_code == 200
        assert canceled.json()["status"] == "CANCELED"
        assert _quantity(client, admin, widget["id"]) == 5

    def test_oversell_rejected(self, client: TestClient, admin, widget, alice) -> None:
        """Scenario: asking for 3 of 2 answers 409 and changes nothing."""
        client.patch(f"/products/{widget['id']}", json={"quantity": 2}, headers=admin)
        response = _order(client, alice, widget["id"], 3)
        assert response.status_code == 409
        assert _quantity(client, admin, widget["id"]) == 2
        assert client.get("/orders/all", headers=admin).json() == []

    def test_completion_is_terminal(self, client: TestClient, admin, widget, alice) -> None:
        """Scenario: a completed order cannot be canceled and keeps its stock."""
        order = _order(client, alice, widget["id"], 3).json()
        completed = client.patch(f"/orders/{order['id']}/complete", headers=admin)
        assert completed.status_code == 200
        assert completed.json()["status"] == "COMPLETED"

        response = client.patch(f"/orders/{order['id']}/cancel", headers=alice)
        assert response.status_code == 403
        assert _quantity(client, admin, widget["id"]) == 2

    def test_customer_cannot_complete(self, client: TestClient, widget, alice) -> None:
        order = _order(client, alice, widget["id"], 1).json()
        assert client.patch(f"/orders/{order['id']}/complete", headers=alice).status_code == 403

    def test_cross_user_read_forbidden(self, client: TestClient, admin, widget, alice, bob) -> None:
        """Scenario: Bob cannot read Alice's order; the admin can."""
        order = _order(client, alice, widget["id"], 3).json()
        assert client.get(f"/orders/{order['id']}", headers=bob).status_code == 403
        assert client.patch(f"/orders/{order['id']}/cancel", headers=bob).status_code == 403

        detail = client.get(f"/orders/{order['id']}", headers=admin)
        assert detail.status_code == 200
        body = detail.json()
        assert body["placedByUsername"] == "alice"
        assert body["items"] == [
            {
                "productId": widget["id"],
                "productName": "Widget",
                "quantity": 3,
                "retailPriceAtOrder": 10.0,
            }
        ]

    def test_placed_at_is_stable_across_reads(self, client: TestClient, widget, alice) -> None:
        """The timestamp returned on placement is the one every later read shows."""
        placed = _order(client, alice, widget["id"], 1).json()
        detail = client.get(f"/orders/{placed['id']}", headers=alice).json()
        [listed] = client.get("/orders/all", headers=alice).json()
        assert detail["placedAt"] == placed["placedAt"]
        assert listed["placedAt"] == placed["placedAt"]

    def test_listing_scope(self, client: TestClient, admin, widget, alice, bob) -> None:
        mine = _order(client, alice, widget["id"], 1).json()
        _order(client, bob, widget["id"], 1)
        assert [o["id"] for o in client.get("/orders/all", headers=alice).json()] == [mine["id"]]
        assert len(client.get("/orders/all", headers=admin).json()) == 2

    def test_admin_cancel_restores_stock(self, client: TestClient, admin, widget, alice) -> None:
        order = _order(client, alice, widget["id"], 4).json()
        assert client.patch(f"/orders/{order['id']}/cancel", headers=admin).status_code == 200
        assert _quantity(client, admin, widget["id"]) == 5

    def test_unknown_product_and_order(self, client: TestClient, alice) -> None:
        assert _order(client, alice, 999, 1).status_code == 404
        assert client.get("/orders/999", headers=alice).status_code == 404
        assert client.patch("/orders/999/cancel", headers=alice).status_code == 404

    @pytest.mark.parametrize(
        "payload",
        [{"items": []}, {"items": [{"productId": 1, "quantity": 0}]}, {}],
    )
    def test_invalid_cart_rejected(self, client: TestClient, alice, payload: dict) -> None:
        assert client.post("/orders", json=payload, headers=alice).status_code == 400


class TestWatchlistEndpoints:
    """Tests for the per-user watchlist."""

    def test_add_then_remove_round_trip(self, client: TestClient, widget, alice) -> None:
        before = client.get("/watchlist", headers=alice).json()
        assert client.post(f"/watchlist/{widget['id']}", headers=alice).status_code == 201
        assert client.post(f"/watchlist/{widget['id']}", headers=alice).status_code == 201
        assert [p["id"] for p in client.get("/watchlist", headers=alice).json()] == [widget["id"]]

        assert client.delete(f"/watchlist/{widget['id']}", headers=alice).status_code == 204
        assert client.delete(f"/watchlist/{widget['id']}", headers=alice).status_code == 204
        assert client.get("/watchlist", headers=alice).json() == before

    def test_unknown_product(self, client: TestClient, alice) -> None:
        assert client.post("/watchlist/999", headers=alice).status_code == 404

    def test_out_of_stock_hidden(self, client: TestClient, admin, widget, alice) -> None:
        client.post(f"/watchlist/{widget['id']}", headers=alice)
        client.patch(f"/products/{widget['id']}", json={"quantity": 0}, headers=admin)
        assert client.get("/watchlist", headers=alice).json() == []


class TestReportEndpoints:
    """Tests for the sales reports."""

    def test_profit_uses_historical_prices(self, client: TestClient, admin, widget, alice) -> None:
        """Scenario: repricing after a sale does not change the reported profit."""
        _order(client, alice, widget["id"], 3)
        client.patch(
            f"/products/{widget['id']}",
            json={"retailPrice": 20.0, "wholesalePrice": 5.0},
            headers=admin,
        )
        response = client.get("/products/profit/1", headers=admin)
        assert response.status_code == 200
        [row] = response.json()
        assert row["totalProfit"] == 18.0
        assert row["product"]["retailPrice"] == 20.0

    def test_customer_reports(self, client: TestClient, widget, alice) -> None:
        _order(client, alice, widget["id"], 2)
        [frequent] = client.get("/products/frequent/5", headers=alice).json()
        assert frequent["totalBought"] == 2
        assert "wholesalePrice" not in frequent["product"]
        [recent] = client.get("/products/recent/5", headers=alice).json()
        assert recent["product"]["id"] == widget["id"]
        assert recent["lastPurchasedAt"]

    def test_admin_reports_skip_canceled(self, client: TestClient, admin, widget, alice) -> None:
        _order(client, alice, widget["id"], 1)
        canceled = _order(client, alice, widget["id"], 2).json()
        client.patch(f"/orders/{canceled['id']}/cancel", headers=alice)

        assert client.get("/products/sold/total", headers=admin).json() == 1
        [popular] = client.get("/products/popular/3", headers=admin).json()
        assert popular["totalSold"] == 1
        assert popular["product"]["quantity"] == 4

    def test_total_sold_is_zero_initially(self, client: TestClient, admin) -> None:
        assert client.get("/products/sold/total", headers=admin).json() == 0

    @pytest.mark.parametrize("path", ["/products/popular/3", "/products/profit/3", "/products/sold/total"])
    def test_admin_reports_forbidden_to_customers(self, client: TestClient, alice, path: str) -> None:
        assert client.get(path, headers=alice).status_code == 403

    @pytest.mark.parametrize("n", ["0", "101", "abc"])
    def test_bad_limit_rejected(self, client: TestClient, alice, n: str) -> None:
        assert client.get(f"/products/frequent/{n}", headers=alice).status_code == 400
