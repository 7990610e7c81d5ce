"""
HTTP tests for the cart and order endpoints.
"""

from unittest.mock import patch

from canteen.services.notification_service import send_order_placed_notification

from conftest import auth_headers


class TestAuth:

    def test_cart_requires_token(self, client, users):
        response = client.get("/cart")
        assert response.status_code == 401
        assert response.json()["detail"] == "Access token required"

    def test_invalid_token_rejected(self, client, users):
        response = client.get("/cart", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    def test_expired_token_rejected(self, client, users):
        from canteen.api.auth import create_access_token

        token = create_access_token(2, ttl_seconds=-10)
        response = client.get("/cart", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
        assert "expired" in response.json()["detail"].lower()

    def test_admin_routes_reject_customers(self, client, customer_headers):
        assert client.get("/admin/orders", headers=customer_headers).status_code == 403
        response = client.put(
            "/admin/orders/1/status",
            json={"order_status": "Ready"},
            headers=customer_headers,
        )
        assert response.status_code == 403
        assert response.json()["detail"] == "Admin privileges required"


class TestCartEndpoints:

    def test_get_cart_creates_empty_cart(self, client, customer_headers):
        response = client.get("/cart", headers=customer_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["items"] == []
        assert data["total"] == "0.00"
        assert isinstance(data["cart_id"], int)

    def test_add_then_merge(self, client, customer_headers, products):
        created = client.post(
            "/cart", json={"item_id": products["burger"], "quantity": 2}, headers=customer_headers
        )
        assert created.status_code == 201
        assert created.json()["quantity"] == 2
        assert created.json()["success"] is True

        merged = client.post("/cart", json={"item_id": products["burger"]}, headers=customer_headers)
        assert merged.status_code == 200
        assert merged.json()["cart_item_id"] == created.json()["cart_item_id"]
        assert merged.json()["quantity"] == 3

    def test_add_requires_item_id(self, client, customer_headers):
        response = client.post("/cart", json={"quantity": 1}, headers=customer_headers)
        assert response.status_code == 400

    def test_add_unavailable_product(self, client, customer_headers, products):
        response = client.post("/cart", json={"item_id": products["sold_out"]}, headers=customer_headers)
        assert response.status_code == 404
        assert response.json()["detail"] == "Product not found or unavailable"

    def test_update_quantity(self, client, customer_headers, products):
        line = client.post("/cart", json={"item_id": products["pasta"]}, headers=customer_headers).json()

        response = client.put(f"/cart/{line['cart_item_id']}", json={"quantity": "4"}, headers=customer_headers)
        assert response.status_code == 200
        assert response.json() == {"success": True, "quantity": 4}

        cart = client.get("/cart", headers=customer_headers).json()
        assert cart["items"][0]["quantity"] == 4
        assert cart["total"] == "320.00"

    def test_update_to_zero_deletes(self, client, customer_headers, products):
        line = client.post("/cart", json={"item_id": products["pasta"]}, headers=customer_headers).json()

        response = client.put(f"/cart/{line['cart_item_id']}", json={"quantity": 0}, headers=customer_headers)
        assert response.status_code == 200
        assert response.json() == {"success": True, "deleted": True}
        assert client.get("/cart", headers=customer_headers).json()["items"] == []

    def test_update_rejects_non_numeric_quantity(self, client, customer_headers, products):
        line = client.post("/cart", json={"item_id": products["pasta"]}, headers=customer_headers).json()

        for body in ({"quantity": "lots"}, {}):
            response = client.put(f"/cart/{line['cart_item_id']}", json=body, headers=customer_headers)
            assert response.status_code == 400

    def test_update_truncates_fractional_quantity(self, client, customer_headers, products):
        line = client.post("/cart", json={"item_id": products["pasta"]}, headers=customer_headers).json()

        for value in ("2.5", 2.5, " 2 portions"):
            response = client.put(f"/cart/{line['cart_item_id']}", json={"quantity": value}, headers=customer_headers)
            assert response.status_code == 200
            assert response.json()["quantity"] == 2

    def test_add_with_unreadable_quantity_adds_one(self, client, customer_headers, products):
        response = client.post(
            "/cart", json={"item_id": products["pasta"], "quantity": "lots"}, headers=customer_headers
        )
        assert response.status_code == 201
        assert response.json()["quantity"] == 1

    def test_oversized_quantity_rejected(self, client, customer_headers, products):
        added = client.post(
            "/cart", json={"item_id": products["pasta"], "quantity": 10**20}, headers=customer_headers
        )
        assert added.status_code == 400

        line = client.post("/cart", json={"item_id": products["pasta"]}, headers=customer_headers).json()
        updated = client.put(
            f"/cart/{line['cart_item_id']}", json={"quantity": 10**20}, headers=customer_headers
        )
        assert updated.status_code == 400

        assert client.get("/cart", headers=customer_headers).json()["items"][0]["quantity"] == 1

    def test_foreign_line_is_not_found(self, client, customer_headers, other_headers, products):
        line = client.post("/cart", json={"item_id": products["pasta"]}, headers=other_headers).json()

        assert client.put(
            f"/cart/{line['cart_item_id']}", json={"quantity": 3}, headers=customer_headers
        ).status_code == 404
        assert client.delete(f"/cart/{line['cart_item_id']}", headers=customer_headers).status_code == 404

    def test_remove_and_clear(self, client, customer_headers, products):
        burger = client.post("/cart", json={"item_id": products["burger"]}, headers=customer_headers).json()
        client.post("/cart", json={"item_id": products["pasta"]}, headers=customer_headers)

        assert client.delete(f"/cart/{burger['cart_item_id']}", headers=customer_headers).status_code == 200
        assert len(client.get("/cart", headers=customer_headers).json()["items"]) == 1

        cleared = client.delete("/cart", headers=customer_headers)
        assert cleared.status_code == 200
        assert cleared.json()["success"] is True
        assert client.delete("/cart", headers=customer_headers).status_code == 200
        assert client.get("/cart", headers=customer_headers).json()["items"] == []


class TestOrderEndpoints:

    def test_full_scenario(self, client, customer_headers, admin_headers, products):
        client.post("/cart", json={"item_id": products["burger"], "quantity": 2}, headers=customer_headers)
        client.post("/cart", json={"item_id": products["pasta"], "quantity": 1}, headers=customer_headers)

        cart = client.get("/cart", headers=customer_headers).json()
        assert cart["total"] == "170.00"

        placed = client.post("/order", headers=customer_headers)
        assert placed.status_code == 201
        order_id = placed.json()["order_id"]
        assert placed.json()["total"] == "170.00"

        assert client.get("/cart", headers=customer_headers).json()["items"] == []

        for status in ("Preparing", "Delivered"):
            response = client.put(
                f"/admin/orders/{order_id}/status",
                json={"order_status": status},
                headers=admin_headers,
            )
            assert response.status_code == 200
            assert response.json()["success"] is True

        orders = client.get("/orders", headers=customer_headers).json()
        assert len(orders) == 1
        assert orders[0]["order_id"] == order_id
        assert orders[0]["order_status"] == "Delivered"
        assert orders[0]["total_amount"] == "170.00"
        assert {i["title"] for i in orders[0]["items"]} == {"Double Cheese Potato Burger", "Red Sauce Pasta"}
        assert orders[0]["formatted_datetime"]
        assert orders[0]["timezone"] == "IST (UTC+5:30)"

    def test_empty_cart_checkout(self, client, customer_headers):
        response = client.post("/order", headers=customer_headers)
        assert response.status_code == 400
        assert response.json()["detail"] == "Cart is empty"

    def test_checkout_runs_notification_task(self, client, customer_headers, products):
        client.post("/cart", json={"item_id": products["burger"]}, headers=customer_headers)

        with patch.object(send_order_placed_notification, "delay") as delay:
            order_id = client.post("/order", headers=customer_headers).json()["order_id"]

        delay.assert_called_once_with(2, order_id, "45.00")

    def test_broker_outage_does_not_fail_checkout(self, client, customer_headers, products):
        client.post("/cart", json={"item_id": products["burger"]}, headers=customer_headers)

        with patch.object(send_order_placed_notification, "delay", side_effect=ConnectionError("broker down")):
            response = client.post("/order", headers=customer_headers)

        assert response.status_code == 201

    def test_orders_are_per_user(self, client, customer_headers, other_headers, products):
        client.post("/cart", json={"item_id": products["burger"]}, headers=customer_headers)
        client.post("/order", headers=customer_headers)

        assert client.get("/orders", headers=other_headers).json() == []

    def test_admin_sees_all_orders_with_user_info(self, client, customer_headers, other_headers, admin_headers, products):
        client.post("/cart", json={"item_id": products["burger"]}, headers=customer_headers)
        client.post("/order", headers=customer_headers)
        client.post("/cart", json={"item_id": products["pasta"]}, headers=other_headers)
        client.post("/order", headers=other_headers)

        response = client.get("/admin/orders", headers=admin_headers)
        assert response.status_code == 200
        emails = {o["user_email"] for o in response.json()}
        assert emails == {"john@example.com", "jane@example.com"}

    def test_invalid_status_value(self, client, customer_headers, admin_headers, products):
        client.post("/cart", json={"item_id": products["burger"]}, headers=customer_headers)
        order_id = client.post("/order", headers=customer_headers).json()["order_id"]

        response = client.put(
            f"/admin/orders/{order_id}/status",
            json={"order_status": "Shipped"},
            headers=admin_headers,
        )
        assert response.status_code == 400

        missing = client.put(f"/admin/orders/{order_id}/status", json={}, headers=admin_headers)
        assert missing.status_code == 400

    def test_status_of_missing_order(self, client, admin_headers):
        response = client.put("/admin/orders/999/status", json={"order_status": "Ready"}, headers=admin_headers)
        assert response.status_code == 404
        assert response.json()["detail"] == "Order not found"

    def test_stats(self, client, customer_headers, admin_headers, products):
        client.post("/cart", json={"item_id": products["burger"], "quantity": 2}, headers=customer_headers)
        order_id = client.post("/order", headers=customer_headers).json()["order_id"]
        client.put(f"/admin/orders/{order_id}/status", json={"order_status": "Ready"}, headers=admin_headers)

        response = client.get("/orders/stats", headers=admin_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["total_orders"] == 1
        assert data["ready"] == 1
        assert data["total_income"] == "90.00"

        filtered = client.get("/orders/stats?from=2000-01-01&to=2000-01-31", headers=admin_headers).json()
        assert filtered["total_orders"] == 0
        assert filtered["message"] == "Statistics for 2000-01-01 to 2000-01-31"

        assert client.get("/orders/stats", headers=customer_headers).status_code == 403


class TestNotificationTasks:

    def test_order_placed_task_message(self):
        result = send_order_placed_notification(2, 7, "170.00")
        assert result["status"] == "sent"
        assert "#7" in result["message"]
        assert "170.00" in result["message"]

    def test_status_task_message(self):
        from canteen.services.notification_service import send_order_status_notification

        result = send_order_status_notification(2, 7, "Ready")
        assert result["message"] == "Your order #7 is ready for pickup."


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "database": "ok"}


def test_token_for_unknown_user_cannot_create_cart(client, users):
    response = client.get("/cart", headers=auth_headers(404))
    assert response.status_code == 500
