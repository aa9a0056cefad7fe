"""Order aggregate: an immutable snapshot of a checked-out cart.

Line items capture the product name, unit price and image at placement time
and never change afterwards. Only the status fields, the tracking number and
the record state move once an order exists.

Status flow:
    PENDING -> PROCESSING -> SHIPPED -> DELIVERED -> COMPLETED
    PENDING/PROCESSING -> CANCELLED (customer)
    any state but CANCELLED -> CANCELLED (admin)

Admin status and payment writes are direct; only cancellation is guarded.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from storefront.domain import storefront
from storefront.order.events import (
    OrderCancelled,
    OrderPlaced,
    OrderStatusUpdated,
    OrderTrashed,
    PaymentStatusUpdated,
    TrackingNumberAdded,
)
from storefront.shared.choices import coerce_choice
from storefront.shared.lifecycle import RecordState, assert_live


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class PaymentStatus(Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"
    CANCELLED = "CANCELLED"


class PaymentMethod(Enum):
    CASH_ON_DELIVERY = "CASH_ON_DELIVERY"
    CREDIT_CARD = "CREDIT_CARD"
    PAYPAL = "PAYPAL"
    BANK_TRANSFER = "BANK_TRANSFER"


# States in which the customer may still cancel
CUSTOMER_CANCELLABLE_STATES = {OrderStatus.PENDING, OrderStatus.PROCESSING}


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="Order")
class Address:
    """A shipping or billing address captured at checkout time."""

    street = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(max_length=100)
    postal_code = String(required=True, max_length=20)
    country = String(required=True, max_length=100)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderItem:
    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    product_price = Float(required=True, min_value=0.0)
    product_image = String(max_length=1000)
    quantity = Integer(required=True, min_value=1)
    price = Float(required=True, min_value=0.0)  # line total

    def snapshot(self):
        return {
            "id": str(self.id),
            "product_id": str(self.product_id),
            "product_name": self.product_name,
            "product_price": self.product_price,
            "product_image": self.product_image,
            "quantity": self.quantity,
            "price": self.price,
        }


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    customer_id = Identifier(required=True)
    customer_email = String(max_length=255)
    items = HasMany(OrderItem)
    total_amount = Float(required=True, min_value=0.0)
    shipping_address = ValueObject(Address, required=True)
    billing_address = ValueObject(Address)
    payment_method = String(choices=PaymentMethod, default=PaymentMethod.CASH_ON_DELIVERY.value)
    notes = Text()
    order_status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    tracking_number = String(max_length=100)
    record_state = String(choices=RecordState, default=RecordState.ACTIVE.value)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        customer_id,
        lines,
        shipping_address,
        billing_address=None,
        payment_method=None,
        notes=None,
        customer_email=None,
    ):
        """Create a PENDING order from priced lines.

        Args:
            customer_id: Owner of the order.
            lines: Dicts with ``product_id``, ``product_name``,
                ``product_price`` (unit), ``quantity`` and optionally
                ``product_image``.
            shipping_address: Dict of Address fields.
            billing_address: Dict of Address fields; defaults to shipping.
            payment_method: PaymentMethod value; defaults to cash on delivery.
        """
        if not lines:
            raise ValidationError({"items": ["An order needs at least one item"]})

        method = coerce_choice(PaymentMethod, payment_method, "payment_method") if payment_method else None
        items = [
            OrderItem(
                product_id=line["product_id"],
                product_name=line["product_name"],
                product_price=line["product_price"],
                product_image=line.get("product_image"),
                quantity=line["quantity"],
                price=round(line["product_price"] * line["quantity"], 2),
            )
            for line in lines
        ]
        total_amount = round(sum(item.price for item in items), 2)

        now = datetime.now(UTC)
        order = cls(
            customer_id=customer_id,
            customer_email=customer_email,
            items=items,
            total_amount=total_amount,
            shipping_address=Address(**shipping_address),
            billing_address=Address(**(billing_address or shipping_address)),
            payment_method=(method or PaymentMethod.CASH_ON_DELIVERY).value,
            notes=notes,
            order_status=OrderStatus.PENDING.value,
            payment_status=PaymentStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                customer_id=str(customer_id),
                customer_email=customer_email,
                total_amount=total_amount,
                payment_method=order.payment_method,
                items=json.dumps([item.snapshot() for item in items]),
                item_count=len(items),
                placed_at=now,
            )
        )
        return order

    @property
    def item_count(self) -> int:
        return len(self.items or [])

    def belongs_to(self, customer_id) -> bool:
        return str(self.customer_id) == str(customer_id)

    def _touch(self):
        self.updated_at = datetime.now(UTC)

    # -------------------------------------------------------------------
    # Admin writes
    # -------------------------------------------------------------------
    def update_status(self, new_status):
        assert_live(self, "Order")
        new_status = coerce_choice(OrderStatus, new_status, "order_status")
        previous_status = self.order_status
        self.order_status = new_status.value
        self._touch()

        self.raise_(
            OrderStatusUpdated(
                order_id=str(self.id),
                previous_status=previous_status,
                new_status=new_status.value,
            )
        )

    def update_payment_status(self, new_status):
        assert_live(self, "Order")
        new_status = coerce_choice(PaymentStatus, new_status, "payment_status")
        previous_status = self.payment_status
        self.payment_status = new_status.value
        self._touch()

        self.raise_(
            PaymentStatusUpdated(
                order_id=str(self.id),
                previous_status=previous_status,
                new_status=new_status.value,
            )
        )

    def add_tracking_number(self, tracking_number):
        assert_live(self, "Order")
        if not tracking_number or not tracking_number.strip():
            raise ValidationError({"tracking_number": ["Tracking number is required"]})

        self.tracking_number = tracking_number.strip()
        self._touch()

        self.raise_(TrackingNumberAdded(order_id=str(self.id), tracking_number=self.tracking_number))

    def trash(self):
        assert_live(self, "Order")
        now = datetime.now(UTC)
        self.record_state = RecordState.TRASHED.value
        self.updated_at = now

        self.raise_(OrderTrashed(order_id=str(self.id), trashed_at=now))

    # -------------------------------------------------------------------
    # Cancellation
    # -------------------------------------------------------------------
    def can_be_cancelled_by(self, is_admin: bool) -> bool:
        current = OrderStatus(self.order_status)
        if is_admin:
            return current != OrderStatus.CANCELLED
        return current in CUSTOMER_CANCELLABLE_STATES

    def cancel(self, cancelled_by: str, is_admin: bool = False):
        """Cancel the order and settle its payment status.

        A completed payment becomes REFUNDED, any other becomes CANCELLED.
        Stock is not touched here; the caller restores it per line.
        """
        assert_live(self, "Order")
        if not self.can_be_cancelled_by(is_admin):
            if OrderStatus(self.order_status) == OrderStatus.CANCELLED:
                message = "Order is already cancelled"
            else:
                message = "Order cannot be cancelled in its current status"
            raise ValidationError({"order_status": [message]})

        previous_status = self.order_status
        if self.payment_status == PaymentStatus.COMPLETED.value:
            self.payment_status = PaymentStatus.REFUNDED.value
        else:
            self.payment_status = PaymentStatus.CANCELLED.value
        self.order_status = OrderStatus.CANCELLED.value
        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                customer_id=str(self.customer_id),
                customer_email=self.customer_email,
                previous_status=previous_status,
                payment_status=self.payment_status,
                cancelled_by=cancelled_by,
                total_amount=self.total_amount,
                cancelled_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Presentation
    # -------------------------------------------------------------------
    def to_summary(self) -> dict:
        return {
            "id": str(self.id),
            "customerId": str(self.customer_id),
            "customerEmail": self.customer_email,
            "totalAmount": self.total_amount,
            "paymentMethod": self.payment_method,
            "orderStatus": self.order_status,
            "paymentStatus": self.payment_status,
            "trackingNumber": self.tracking_number,
            "itemCount": self.item_count,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

    def to_detail(self) -> dict:
        detail = self.to_summary()
        detail.update(
            {
                "shippingAddress": _address_view(self.shipping_address),
                "billingAddress": _address_view(self.billing_address),
                "notes": self.notes,
                "items": [
                    {
                        "id": str(item.id),
                        "productId": str(item.product_id),
                        "productName": item.product_name,
                        "productPrice": item.product_price,
                        "productImage": item.product_image,
                        "quantity": item.quantity,
                        "price": item.price,
                    }
                    for item in self.items
                ],
            }
        )
        return detail


def _address_view(address) -> dict | None:
    if address is None:
        return None
    return {
        "street": address.street,
        "city": address.city,
        "state": address.state,
        "postalCode": address.postal_code,
        "country": address.country,
    }
