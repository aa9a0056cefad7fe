"""Order administration load test scenarios: listings, stats and status moves."""

import random

from locust import HttpUser, between, task

from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import ADMIN_HEADERS

STATUS_FLOW = ["PROCESSING", "SHIPPED", "DELIVERED", "COMPLETED"]


class OrderAdminUser(HttpUser):
    """Locust user simulating back-office staff working the order queue."""

    wait_time = between(1.0, 3.0)

    @task(3)
    def list_orders(self):
        params = {"page": 1, "limit": 20, "sort": random.choice(["createdAt", "totalAmount"])}
        if random.random() < 0.5:
            params["status"] = "PENDING"
        self.client.get("/orders", params=params, headers=ADMIN_HEADERS, name="GET /orders")

    @task(1)
    def stats(self):
        period = random.choice(["day", "week", "month", "year"])
        self.client.get("/orders/stats", params={"period": period}, headers=ADMIN_HEADERS, name="GET /orders/stats")

    @task(2)
    def advance_pending_order(self):
        resp = self.client.get(
            "/orders",
            params={"status": "PENDING", "limit": 5},
            headers=ADMIN_HEADERS,
            name="GET /orders?status=PENDING",
        )
        if resp.status_code != 200 or not resp.json()["data"]:
            return

        order_id = random.choice(resp.json()["data"])["id"]
        for status in STATUS_FLOW[: random.randint(1, len(STATUS_FLOW))]:
            with self.client.patch(
                f"/orders/{order_id}/status",
                json={"orderStatus": status},
                headers=ADMIN_HEADERS,
                catch_response=True,
                name="PATCH /orders/{id}/status",
            ) as patch:
                # The shopper may have cancelled or the order moved on meanwhile
                if patch.status_code in (200, 400, 404):
                    patch.success()
                else:
                    patch.failure(f"Status update failed: {patch.status_code} {extract_error_detail(patch)}")
