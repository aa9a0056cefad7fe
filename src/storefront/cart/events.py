"""Domain events for the ShoppingCart aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="ShoppingCart")
class CartOpened:
    cart_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    opened_at = DateTime(required=True)


@storefront.event(part_of="ShoppingCart")
class CartItemAdded:
    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    price = Float(required=True)


@storefront.event(part_of="ShoppingCart")
class CartQuantityUpdated:
    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@storefront.event(part_of="ShoppingCart")
class CartItemRepriced:
    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    previous_price = Float(required=True)
    new_price = Float(required=True)


@storefront.event(part_of="ShoppingCart")
class CartItemRemoved:
    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    reason = String(max_length=255)


@storefront.event(part_of="ShoppingCart")
class CartCleared:
    cart_id = Identifier(required=True)
    items_removed = Integer(required=True)
