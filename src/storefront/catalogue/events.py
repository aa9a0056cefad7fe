"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Identifier, Integer, String, Text

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductCreated:
    product_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    product_type = String(required=True, max_length=20)
    status = String(required=True, max_length=20)
    created_at = DateTime(required=True)


@storefront.event(part_of="Product")
class ProductStatusChanged:
    product_id = Identifier(required=True)
    previous_status = String(required=True, max_length=20)
    new_status = String(required=True, max_length=20)


@storefront.event(part_of="Product")
class OfferingUpdated:
    product_id = Identifier(required=True)
    changes = Text(required=True)  # JSON: {field: new_value}


@storefront.event(part_of="Product")
class ProductStockChanged:
    product_id = Identifier(required=True)
    previous_stock = Integer(required=True)
    new_stock = Integer(required=True)
    reason = String(required=True, max_length=50)


@storefront.event(part_of="Product")
class ProductTrashed:
    product_id = Identifier(required=True)
    trashed_at = DateTime(required=True)
