import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from storefront.api import cart_router, order_router, product_router, register_error_handlers

CUSTOMER = {"X-User-Id": "cust-001", "X-User-Role": "CUSTOMER", "X-User-Email": "ada@example.com"}
ADMIN = {"X-User-Id": "admin-001", "X-User-Role": "ADMIN"}

ADDRESS = {
    "street": "12 Market Street",
    "city": "Springfield",
    "state": "IL",
    "postalCode": "62701",
    "country": "US",
}


def build_app() -> FastAPI:
    app = FastAPI()
    app.include_router(cart_router)
    app.include_router(order_router)
    app.include_router(product_router)
    register_error_handlers(app)
    return app


@pytest.fixture()
def app():
    return build_app()


@pytest.fixture()
def client(app):
    return TestClient(app)


@pytest.fixture()
def create_product(client):
    """Helper: POST /products as admin and return the product id."""

    def _create(name="Desk Lamp", price=100.0, stock=5, product_type="SIMPLE", **offering):
        response = client.post(
            "/products",
            json={
                "name": name,
                "productType": product_type,
                "offerings": [{"regularPrice": price, "stock": stock, **offering}],
            },
            headers=ADMIN,
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]["productId"]

    return _create


@pytest.fixture()
def checkout(client, create_product):
    """Helper: add a product to the customer's cart and place an order."""

    def _checkout(quantity=2, price=100.0, stock=5, headers=CUSTOMER):
        product_id = create_product(price=price, stock=stock)
        client.post("/cart", json={"productId": product_id, "quantity": quantity}, headers=headers)
        response = client.post("/orders", json={"shippingAddress": ADDRESS}, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()["data"]["id"], product_id

    return _checkout
