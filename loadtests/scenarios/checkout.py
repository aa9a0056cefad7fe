"""Checkout load test scenarios.

Stateful SequentialTaskSet journeys: a shopper fills a cart, reconciles it
against the catalogue and places an order, optionally cancelling it again.
Products are seeded by the journey itself through the admin API.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import customer_id, email, offering_patch, place_order_data, product_data
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import ADMIN_HEADERS, ShopperState


class CheckoutJourney(SequentialTaskSet):
    """Seed products -> Add to cart -> Update line -> Sync -> Place order.

    Between adding and checking out, one product's price or stock is
    changed by an admin so the sync step has something to reconcile.
    """

    cancel_after_placing = False

    def on_start(self):
        self.state = ShopperState(customer_id=customer_id(), email=email())

    @task
    def seed_products(self):
        for _ in range(random.randint(1, 3)):
            with self.client.post(
                "/products",
                json=product_data(),
                headers=ADMIN_HEADERS,
                catch_response=True,
                name="POST /products",
            ) as resp:
                if resp.status_code == 201:
                    self.state.product_ids.append(resp.json()["data"]["productId"])
                else:
                    resp.failure(f"Create product failed: {resp.status_code} {extract_error_detail(resp)}")
        if not self.state.product_ids:
            self.interrupt()

    @task
    def add_to_cart(self):
        for product_id in self.state.product_ids:
            with self.client.post(
                "/cart",
                json={"productId": product_id, "quantity": random.randint(1, 3)},
                headers=self.state.headers,
                catch_response=True,
                name="POST /cart",
            ) as resp:
                if resp.status_code == 200:
                    self.state.cart_item_ids = [item["id"] for item in resp.json()["data"]["items"]]
                else:
                    resp.failure(f"Add to cart failed: {resp.status_code} {extract_error_detail(resp)}")

    @task
    def update_first_line(self):
        if not self.state.cart_item_ids:
            return
        with self.client.put(
            f"/cart/{self.state.cart_item_ids[0]}",
            json={"quantity": random.randint(1, 4)},
            headers=self.state.headers,
            catch_response=True,
            name="PUT /cart/{id}",
        ) as resp:
            # Insufficient stock is an expected business outcome here
            if resp.status_code in (200, 400):
                resp.success()
            else:
                resp.failure(f"Update cart item failed: {resp.status_code} {extract_error_detail(resp)}")

    @task
    def change_catalogue(self):
        product_id = random.choice(self.state.product_ids)
        with self.client.patch(
            f"/products/{product_id}/offering",
            json=offering_patch(),
            headers=ADMIN_HEADERS,
            catch_response=True,
            name="PATCH /products/{id}/offering",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Update offering failed: {resp.status_code} {extract_error_detail(resp)}")

    @task
    def view_cart(self):
        self.client.get("/cart", headers=self.state.headers, name="GET /cart")
        self.client.get("/cart/count", headers=self.state.headers, name="GET /cart/count")

    @task
    def sync_cart(self):
        with self.client.post(
            "/cart/sync",
            headers=self.state.headers,
            catch_response=True,
            name="POST /cart/sync",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Sync cart failed: {resp.status_code} {extract_error_detail(resp)}")

    @task
    def place_order(self):
        with self.client.post(
            "/orders",
            json=place_order_data(),
            headers=self.state.headers,
            catch_response=True,
            name="POST /orders",
        ) as resp:
            if resp.status_code == 201:
                self.state.order_id = resp.json()["data"]["id"]
            elif resp.status_code == 400:
                # Cart emptied by the sync, or stock taken by another shopper
                resp.success()
                self.interrupt()
            else:
                resp.failure(f"Place order failed: {resp.status_code} {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def review_orders(self):
        self.client.get("/orders/my-orders", headers=self.state.headers, name="GET /orders/my-orders")
        self.client.get(
            f"/orders/{self.state.order_id}",
            headers=self.state.headers,
            name="GET /orders/{id}",
        )

    @task
    def maybe_cancel(self):
        if not self.cancel_after_placing:
            return
        with self.client.patch(
            f"/orders/{self.state.order_id}/cancel",
            headers=self.state.headers,
            catch_response=True,
            name="PATCH /orders/{id}/cancel",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Cancel order failed: {resp.status_code} {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class CancellationJourney(CheckoutJourney):
    """The checkout journey, followed by the customer cancelling the order."""

    cancel_after_placing = True


class CheckoutUser(HttpUser):
    """Locust user simulating shoppers.

    Weighted distribution:
    - 75% Checkout (happy path with catalogue drift)
    - 25% Checkout followed by cancellation
    """

    wait_time = between(0.5, 2.0)
    tasks = {
        CheckoutJourney: 3,
        CancellationJourney: 1,
    }
