"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance keeps its own state; nothing is shared across
users. State tracks ids returned by the API so follow-up requests can use
them.
"""

from dataclasses import dataclass, field


@dataclass
class ShopperState:
    """One simulated customer working through a checkout."""

    customer_id: str
    email: str
    product_ids: list[str] = field(default_factory=list)
    cart_item_ids: list[str] = field(default_factory=list)
    order_id: str | None = None

    @property
    def headers(self) -> dict:
        return {"X-User-Id": self.customer_id, "X-User-Role": "CUSTOMER", "X-User-Email": self.email}


ADMIN_HEADERS = {"X-User-Id": "admin-loadtest", "X-User-Role": "ADMIN"}
