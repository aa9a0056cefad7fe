"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    customer_email = String(max_length=255)
    total_amount = Float(required=True)
    payment_method = String(required=True, max_length=30)
    items = Text(required=True)  # JSON: list of order item snapshots
    item_count = Integer(required=True)
    placed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderStatusUpdated:
    order_id = Identifier(required=True)
    previous_status = String(required=True, max_length=20)
    new_status = String(required=True, max_length=20)


@storefront.event(part_of="Order")
class PaymentStatusUpdated:
    order_id = Identifier(required=True)
    previous_status = String(required=True, max_length=20)
    new_status = String(required=True, max_length=20)


@storefront.event(part_of="Order")
class TrackingNumberAdded:
    order_id = Identifier(required=True)
    tracking_number = String(required=True, max_length=100)


@storefront.event(part_of="Order")
class OrderCancelled:
    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    customer_email = String(max_length=255)
    previous_status = String(required=True, max_length=20)
    payment_status = String(required=True, max_length=20)
    cancelled_by = String(required=True, max_length=20)
    total_amount = Float(required=True)
    cancelled_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderTrashed:
    order_id = Identifier(required=True)
    trashed_at = DateTime(required=True)
