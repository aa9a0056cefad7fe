"""Integration tests for the /cart endpoints via TestClient."""

from protean import current_domain
from storefront.cart.cart import ShoppingCart

CUSTOMER = {"X-User-Id": "cust-001", "X-User-Role": "CUSTOMER", "X-User-Email": "ada@example.com"}
ADMIN = {"X-User-Id": "admin-001", "X-User-Role": "ADMIN"}


def _add(client, product_id, quantity=1, headers=CUSTOMER):
    return client.post("/cart", json={"productId": product_id, "quantity": quantity}, headers=headers)


class TestGetCart:
    def test_get_opens_empty_cart(self, client):
        response = client.get("/cart", headers=CUSTOMER)

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Cart fetched successfully"
        assert body["data"]["id"] is not None
        assert body["data"]["items"] == []
        assert body["data"]["subtotal"] == 0

    def test_get_cart_twice_returns_same_cart(self, client):
        first = client.get("/cart", headers=CUSTOMER).json()["data"]["id"]
        second = client.get("/cart", headers=CUSTOMER).json()["data"]["id"]
        assert first == second


class TestAddToCart:
    def test_add(self, client, create_product):
        product_id = create_product(price=100.0, stock=5)

        response = _add(client, product_id, 3)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["itemCount"] == 1
        assert data["subtotal"] == 300.0
        assert data["items"][0]["productId"] == product_id
        assert data["items"][0]["product"]["name"] == "Desk Lamp"

    def test_snake_case_body_is_accepted(self, client, create_product):
        product_id = create_product()
        response = client.post("/cart", json={"product_id": product_id, "quantity": 1}, headers=CUSTOMER)
        assert response.status_code == 200

    def test_insufficient_stock(self, client, create_product):
        product_id = create_product(stock=2)

        response = _add(client, product_id, 3)

        assert response.status_code == 400
        body = response.json()
        assert body["errorMessage"] == "Only 2 items available in stock"
        assert body["available"] == 2

    def test_unknown_product(self, client):
        response = _add(client, "no-such-product")
        assert response.status_code == 400
        assert response.json()["errorMessage"] == "Product not found or not available"

    def test_quantity_must_be_positive(self, client, create_product):
        response = _add(client, create_product(), 0)
        assert response.status_code == 400
        assert response.json()["errorMessage"].startswith("quantity")


class TestCartItems:
    def test_update_quantity(self, client, create_product):
        product_id = create_product(stock=10)
        item_id = _add(client, product_id).json()["data"]["items"][0]["id"]

        response = client.put(f"/cart/{item_id}", json={"quantity": 4}, headers=CUSTOMER)

        assert response.status_code == 200
        assert response.json()["data"]["items"][0]["quantity"] == 4

    def test_update_unknown_item(self, client, create_product):
        _add(client, create_product())
        response = client.put("/cart/missing", json={"quantity": 2}, headers=CUSTOMER)
        assert response.status_code == 404
        assert response.json()["errorMessage"] == "Cart item not found"

    def test_remove_item(self, client, create_product):
        item_id = _add(client, create_product()).json()["data"]["items"][0]["id"]

        response = client.delete(f"/cart/{item_id}", headers=CUSTOMER)

        assert response.status_code == 200
        assert response.json()["data"]["items"] == []

    def test_clear(self, client, create_product):
        _add(client, create_product(name="Lamp"))
        _add(client, create_product(name="Chair"))

        response = client.delete("/cart", headers=CUSTOMER)

        assert response.status_code == 200
        assert response.json()["data"]["itemCount"] == 0

    def test_count(self, client, create_product):
        _add(client, create_product(), 3)
        response = client.get("/cart/count", headers=CUSTOMER)
        assert response.json()["data"] == {"count": 1}

    def test_carts_are_per_customer(self, client, create_product):
        _add(client, create_product())
        response = client.get("/cart/count", headers={"X-User-Id": "cust-002"})
        assert response.json()["data"] == {"count": 0}


class TestSyncCart:
    def test_up_to_date(self, client, create_product):
        _add(client, create_product())

        response = client.post("/cart/sync", headers=CUSTOMER)

        body = response.json()
        assert body["message"] == "Cart is up to date"
        assert body["data"]["changes"] == {"updated": [], "removed": [], "priceChanged": []}

    def test_clamp_and_reprice(self, client, create_product):
        product_id = create_product(price=100.0, stock=5)
        _add(client, product_id, 3)
        client.patch(
            f"/products/{product_id}/offering",
            json={"regularPrice": 120.0, "stock": 2},
            headers=ADMIN,
        )

        response = client.post("/cart/sync", headers=CUSTOMER)

        body = response.json()
        assert body["message"] == "Cart synchronized with latest product data"
        changes = body["data"]["changes"]
        assert changes["updated"][0]["newQuantity"] == 2
        assert changes["priceChanged"][0]["newPrice"] == 120.0
        assert body["data"]["cart"]["subtotal"] == 240.0

        cart = current_domain.repository_for(ShoppingCart).find_active_for("cust-001")
        assert cart.live_items[0].quantity == 2
