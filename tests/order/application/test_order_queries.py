"""Tests for order lookups, listings and statistics."""

from datetime import UTC, date, datetime, timedelta

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from storefront.order.cancellation import CancelOrder
from storefront.order.lifecycle import AddTrackingNumber, DeleteOrder, UpdateOrderStatus, UpdatePaymentStatus
from storefront.order.order import Order
from storefront.order.repository import OrderPage, period_start
from storefront.shared.errors import NotFound


@pytest.fixture()
def checkout(make_product, add_to_cart, place_order):
    """Place an order for ``quantity`` units at ``price`` and return its id."""

    def _checkout(customer_id="cust-001", price=100.0, quantity=1, **overrides):
        add_to_cart(make_product(price=price, stock=None), quantity, customer_id=customer_id)
        return place_order(customer_id=customer_id, **overrides)

    return _checkout


def _repo():
    return current_domain.repository_for(Order)


class TestVisibility:
    def test_owner_sees_order(self, checkout):
        order_id = checkout()
        assert str(_repo().get_visible_to(order_id, "cust-001").id) == order_id

    def test_other_customer_does_not(self, checkout):
        order_id = checkout()
        with pytest.raises(NotFound):
            _repo().get_visible_to(order_id, "cust-002")

    def test_admin_sees_any_order(self, checkout):
        order_id = checkout()
        assert _repo().get_visible_to(order_id, "admin-001", is_admin=True) is not None


class TestListings:
    def test_pagination(self, checkout):
        for _ in range(5):
            checkout()

        page = _repo().list_orders(page=2, limit=2)

        assert len(page.orders) == 2
        assert page.pagination() == {
            "totalOrders": 5,
            "totalPages": 3,
            "currentPage": 2,
            "limit": 2,
            "hasNextPage": True,
            "hasPrevPage": True,
        }

    def test_empty_listing(self):
        page = _repo().list_orders()
        assert page.orders == []
        assert page.pagination()["totalPages"] == 0
        assert page.pagination()["hasNextPage"] is False

    def test_filter_by_status(self, checkout):
        shipped = checkout()
        checkout()
        current_domain.process(UpdateOrderStatus(order_id=shipped, order_status="SHIPPED"), asynchronous=False)

        page = _repo().list_orders(status="SHIPPED")

        assert [str(order.id) for order in page.orders] == [shipped]

    def test_filter_by_payment_method(self, checkout):
        checkout(payment_method="PAYPAL")
        checkout()
        assert _repo().list_orders(payment_method="PAYPAL").total == 1

    def test_filter_by_date_range(self, checkout):
        checkout()
        today = datetime.now(UTC).date()
        assert _repo().list_orders(start_date=today, end_date=today).total == 1
        assert _repo().list_orders(end_date=today - timedelta(days=1)).total == 0

    def test_sort_by_total(self, checkout):
        checkout(price=30.0)
        checkout(price=10.0)
        checkout(price=20.0)

        page = _repo().list_orders(sort="total_amount", order="asc")

        assert [order.total_amount for order in page.orders] == [10.0, 20.0, 30.0]

    def test_trashed_orders_are_hidden(self, checkout):
        order_id = checkout()
        current_domain.process(DeleteOrder(order_id=order_id), asynchronous=False)
        assert _repo().list_orders().total == 0

    def test_customer_listing_is_scoped(self, checkout):
        checkout(customer_id="cust-001")
        checkout(customer_id="cust-002")
        page = _repo().list_for_customer("cust-001")
        assert page.total == 1
        assert str(page.orders[0].customer_id) == "cust-001"

    def test_customer_listing_sorts(self, checkout):
        checkout(price=30.0)
        checkout(price=10.0)
        checkout(customer_id="cust-002", price=20.0)

        page = _repo().list_for_customer("cust-001", sort="total_amount", order="asc")

        assert [order.total_amount for order in page.orders] == [10.0, 30.0]

    def test_customer_listing_rejects_unknown_sort(self):
        with pytest.raises(ValidationError):
            _repo().list_for_customer("cust-001", sort="customer_email")

    def test_search_by_customer_email(self, checkout):
        checkout(customer_email="ada@example.com")
        checkout(customer_id="cust-002", customer_email="grace@example.com")

        page = _repo().list_orders(search="ADA@")

        assert [order.customer_email for order in page.orders] == ["ada@example.com"]

    def test_search_by_tracking_number(self, checkout):
        shipped = checkout()
        checkout()
        current_domain.process(
            AddTrackingNumber(order_id=shipped, tracking_number="1Z999AA10123456784"),
            asynchronous=False,
        )

        page = _repo().list_orders(search="1z999")

        assert [str(order.id) for order in page.orders] == [shipped]

    def test_search_by_order_id_fragment(self, checkout):
        order_id = checkout()
        checkout()
        assert [str(order.id) for order in _repo().list_orders(search=order_id).orders] == [order_id]

    def test_blank_search_is_ignored(self, checkout):
        checkout()
        checkout()
        assert _repo().list_orders(search="  ").total == 2

    @pytest.mark.parametrize(
        "kwargs",
        [{"page": 0}, {"limit": 0}, {"limit": 101}, {"sort": "customer_email"}, {"order": "up"}, {"status": "LOST"}],
    )
    def test_invalid_arguments(self, kwargs):
        with pytest.raises(ValidationError):
            _repo().list_orders(**kwargs)


class TestOrderPage:
    def test_last_page(self):
        page = OrderPage(orders=[], total=10, page=5, limit=2)
        assert page.pagination()["hasNextPage"] is False
        assert page.pagination()["hasPrevPage"] is True


class TestStats:
    def test_counts_and_revenue(self, checkout):
        paid = checkout(price=120.0)
        checkout(price=80.0)
        cancelled = checkout(price=50.0)
        current_domain.process(UpdatePaymentStatus(order_id=paid, payment_status="COMPLETED"), asynchronous=False)
        current_domain.process(
            CancelOrder(order_id=cancelled, actor_id="cust-001", actor_role="CUSTOMER"),
            asynchronous=False,
        )

        stats = _repo().stats("month")

        assert stats["totalOrders"] == 3
        assert stats["ordersInPeriod"] == 3
        assert stats["totalRevenue"] == 120.0
        assert stats["revenueInPeriod"] == 120.0
        assert stats["orderStatusCounts"]["PENDING"] == 2
        assert stats["orderStatusCounts"]["CANCELLED"] == 1
        assert stats["paymentStatusCounts"]["COMPLETED"] == 1
        assert stats["paymentStatusCounts"]["CANCELLED"] == 1

    def test_orders_before_period_are_excluded(self, checkout):
        checkout()
        tomorrow = datetime.now(UTC) + timedelta(days=1)

        stats = _repo().stats("day", now=tomorrow)

        assert stats["totalOrders"] == 1
        assert stats["ordersInPeriod"] == 0

    def test_unknown_period_reports_on_the_month(self):
        now = datetime(2026, 10, 14, 15, 30, tzinfo=UTC)
        stats = _repo().stats("decade", now=now)
        assert stats["period"] == "month"
        assert stats["periodStart"] == datetime(2026, 10, 1, tzinfo=UTC).isoformat()

    def test_revenue_adds_up_across_batches(self, checkout, monkeypatch):
        monkeypatch.setattr("storefront.order.repository.MAX_PAGE_SIZE", 2)
        for price in (10.0, 20.0, 30.0, 40.0, 50.0):
            order_id = checkout(price=price)
            current_domain.process(
                UpdatePaymentStatus(order_id=order_id, payment_status="COMPLETED"), asynchronous=False
            )

        assert _repo().stats()["totalRevenue"] == 150.0


class TestPeriodStart:
    # 2026-10-14 is a Wednesday
    NOW = datetime(2026, 10, 14, 15, 30, tzinfo=UTC)

    def test_day(self):
        assert period_start("day", self.NOW) == datetime(2026, 10, 14, tzinfo=UTC)

    def test_week_starts_on_sunday(self):
        assert period_start("week", self.NOW) == datetime(2026, 10, 11, tzinfo=UTC)

    def test_week_on_a_sunday(self):
        sunday = datetime(2026, 10, 11, 9, 0, tzinfo=UTC)
        assert period_start("week", sunday).date() == date(2026, 10, 11)

    def test_month(self):
        assert period_start("month", self.NOW) == datetime(2026, 10, 1, tzinfo=UTC)

    def test_year(self):
        assert period_start("year", self.NOW) == datetime(2026, 1, 1, tzinfo=UTC)

    def test_unknown_period_falls_back_to_month(self):
        assert period_start("fortnight", self.NOW) == datetime(2026, 10, 1, tzinfo=UTC)
