"""Order placement: turn the customer's cart into an order.

The handler runs inside a single Unit of Work, so the order insert, every
stock decrement and the cart clear commit together or not at all. Each
decrement re-checks stock on the Product aggregate, and the repository's
version check rejects a concurrent writer that saved the same product first.
"""

import json

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.catalogue.product import Product
from storefront.catalogue.reader import CatalogReader
from storefront.domain import storefront
from storefront.order.order import Order
from storefront.shared.errors import EmptyCart, ItemsUnavailable
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Order")
class PlaceOrder:
    customer_id = Identifier(required=True)
    customer_email = String(max_length=255)
    shipping_address = Text(required=True)  # JSON: address dict
    billing_address = Text()  # JSON: address dict, defaults to shipping
    payment_method = String(max_length=30)
    notes = Text()


def _load(value):
    return json.loads(value) if isinstance(value, str) else value


def _check_lines(cart, reader):
    """Split live cart lines into purchasable ones and a list of problems."""
    purchasable, unavailable = [], []
    for item in cart.live_items:
        entry = reader.lookup(item.product_id)
        problem = entry.checkout_reason
        if problem is None and entry.shortfall(item.quantity):
            problem = (
                "Product is out of stock" if entry.stock == 0 else f"Only {entry.stock} items available in stock"
            )

        if problem:
            unavailable.append(
                {
                    "productId": entry.product_id,
                    "name": entry.name or "Unknown product",
                    "reason": problem,
                }
            )
        else:
            purchasable.append((item, entry))
    return purchasable, unavailable


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        carts = current_domain.repository_for(ShoppingCart)
        products = current_domain.repository_for(Product)

        cart = carts.find_active_for(command.customer_id)
        if cart is None or not cart.live_items:
            raise EmptyCart()

        purchasable, unavailable = _check_lines(cart, CatalogReader(products))
        if unavailable:
            logger.info(
                "Order rejected, cart has unavailable items",
                customer_id=str(command.customer_id),
                unavailable=len(unavailable),
            )
            raise ItemsUnavailable(unavailable)

        order = Order.place(
            customer_id=command.customer_id,
            customer_email=command.customer_email,
            lines=[
                {
                    "product_id": entry.product_id,
                    "product_name": entry.name,
                    "product_price": entry.unit_price,
                    "product_image": entry.image,
                    "quantity": item.quantity,
                }
                for item, entry in purchasable
            ],
            shipping_address=_load(command.shipping_address),
            billing_address=_load(command.billing_address),
            payment_method=command.payment_method,
            notes=command.notes,
        )
        current_domain.repository_for(Order).add(order)

        for item, entry in purchasable:
            entry.product.decrement_stock(item.quantity)
            products.add(entry.product)

        cart.clear()
        carts.add(cart)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            customer_id=str(command.customer_id),
            total_amount=order.total_amount,
            item_count=order.item_count,
        )
        return str(order.id)
