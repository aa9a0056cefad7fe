"""Repository for the Order aggregate: lookups, paginated listings and stats."""

import math
from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.query import Q

from storefront.domain import storefront
from storefront.order.order import Order, OrderStatus, PaymentMethod, PaymentStatus
from storefront.shared.choices import coerce_choice
from storefront.shared.errors import NotFound
from storefront.shared.lifecycle import RecordState, is_live

SORTABLE_FIELDS = ("created_at", "updated_at", "total_amount", "order_status", "payment_status")
STATS_PERIODS = ("day", "week", "month", "year")
MAX_PAGE_SIZE = 100


@dataclass
class OrderPage:
    orders: list
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.total else 0

    def pagination(self) -> dict:
        return {
            "totalOrders": self.total,
            "totalPages": self.total_pages,
            "currentPage": self.page,
            "limit": self.limit,
            "hasNextPage": self.page < self.total_pages,
            "hasPrevPage": self.page > 1,
        }


def validate_paging(page: int, limit: int):
    if page < 1:
        raise ValidationError({"page": ["Page must be at least 1"]})
    if limit < 1 or limit > MAX_PAGE_SIZE:
        raise ValidationError({"limit": [f"Limit must be between 1 and {MAX_PAGE_SIZE}"]})


DEFAULT_STATS_PERIOD = "month"


def resolve_period(period: str | None) -> str:
    """Known periods pass through; anything else reports on the month."""
    return period if period in STATS_PERIODS else DEFAULT_STATS_PERIOD


def period_start(period: str, now: datetime) -> datetime:
    """Start of the current day, week (Sunday), month or year."""
    period = resolve_period(period)
    today = datetime.combine(now.date(), time.min, tzinfo=UTC)
    if period == "day":
        return today
    if period == "week":
        # Python weeks start on Monday (weekday() == 0)
        return today - timedelta(days=(now.weekday() + 1) % 7)
    if period == "month":
        return today.replace(day=1)
    return today.replace(month=1, day=1)


def _day_start(value: date) -> datetime:
    return datetime.combine(value, time.min, tzinfo=UTC)


def _day_end(value: date) -> datetime:
    return datetime.combine(value, time.max, tzinfo=UTC)


@storefront.repository(part_of=Order)
class OrderRepository:
    def get_live(self, order_id) -> Order:
        try:
            order = self.get(str(order_id))
        except ObjectNotFoundError:
            raise NotFound("Order not found") from None

        if not is_live(order):
            raise NotFound("Order not found")
        return order

    def get_visible_to(self, order_id, customer_id, is_admin: bool = False) -> Order:
        """A live order the caller may see; others' orders look missing."""
        order = self.get_live(order_id)
        if not is_admin and not order.belongs_to(customer_id):
            raise NotFound("Order not found")
        return order

    # -------------------------------------------------------------------
    # Listings
    # -------------------------------------------------------------------
    def _live(self):
        return self._dao.query.filter(record_state=RecordState.ACTIVE.value)

    def _page(self, query, page, limit, sort="created_at", order="desc") -> OrderPage:
        validate_paging(page, limit)
        if sort not in SORTABLE_FIELDS:
            raise ValidationError({"sort": [f"Sort must be one of {', '.join(SORTABLE_FIELDS)}"]})
        if order not in ("asc", "desc"):
            raise ValidationError({"order": ["Order must be asc or desc"]})

        ordering = sort if order == "asc" else f"-{sort}"
        result = query.order_by(ordering).offset((page - 1) * limit).limit(limit).all()
        return OrderPage(orders=result.items, total=result.total, page=page, limit=limit)

    def list_orders(
        self,
        page=1,
        limit=10,
        status=None,
        payment_status=None,
        payment_method=None,
        start_date: date | None = None,
        end_date: date | None = None,
        search: str | None = None,
        sort="created_at",
        order="desc",
    ) -> OrderPage:
        """Admin listing across every customer."""
        query = self._live()
        if status:
            query = query.filter(order_status=coerce_choice(OrderStatus, status, "status").value)
        if payment_status:
            query = query.filter(
                payment_status=coerce_choice(PaymentStatus, payment_status, "payment_status").value
            )
        if payment_method:
            query = query.filter(
                payment_method=coerce_choice(PaymentMethod, payment_method, "payment_method").value
            )
        if start_date:
            query = query.filter(created_at__gte=_day_start(start_date))
        if end_date:
            query = query.filter(created_at__lte=_day_end(end_date))
        if search and search.strip():
            term = search.strip()
            query = query.filter(
                Q(id__icontains=term) | Q(tracking_number__icontains=term) | Q(customer_email__icontains=term)
            )

        return self._page(query, page, limit, sort, order)

    def list_for_customer(
        self, customer_id, page=1, limit=10, status=None, sort="created_at", order="desc"
    ) -> OrderPage:
        query = self._live().filter(customer_id=str(customer_id))
        if status:
            query = query.filter(order_status=coerce_choice(OrderStatus, status, "status").value)
        return self._page(query, page, limit, sort, order)

    # -------------------------------------------------------------------
    # Stats
    # -------------------------------------------------------------------
    def _count(self, **filters) -> int:
        return self._live().filter(**filters).all().total

    def _revenue(self, **filters) -> float:
        query = self._live().filter(payment_status=PaymentStatus.COMPLETED.value, **filters)
        revenue, offset = 0.0, 0
        while True:
            batch = query.order_by("id").offset(offset).limit(MAX_PAGE_SIZE).all().items
            revenue += sum(order.total_amount for order in batch)
            if len(batch) < MAX_PAGE_SIZE:
                return round(revenue, 2)
            offset += MAX_PAGE_SIZE

    def stats(self, period="month", now: datetime | None = None) -> dict:
        period = resolve_period(period)
        start = period_start(period, now or datetime.now(UTC))
        return {
            "period": period,
            "periodStart": start.isoformat(),
            "totalOrders": self._count(),
            "ordersInPeriod": self._count(created_at__gte=start),
            "totalRevenue": self._revenue(),
            "revenueInPeriod": self._revenue(created_at__gte=start),
            "orderStatusCounts": {s.value: self._count(order_status=s.value) for s in OrderStatus},
            "paymentStatusCounts": {s.value: self._count(payment_status=s.value) for s in PaymentStatus},
        }
