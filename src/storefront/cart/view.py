"""Read side of the cart: the customer-facing cart view and line count."""

from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.catalogue.product import Product
from storefront.catalogue.reader import CatalogReader


def _line_view(item, entry) -> dict:
    current_price = entry.unit_price if entry.available else item.price
    return {
        "id": str(item.id),
        "productId": str(item.product_id),
        "quantity": item.quantity,
        "price": item.price,
        "itemTotal": item.price * item.quantity,
        "currentPrice": current_price,
        "priceChanged": current_price != item.price,
        "product": {
            "id": str(item.product_id),
            "name": entry.name,
            "productType": entry.product_type,
            "status": entry.status,
            "productPhoto": entry.image,
        },
    }


def cart_view(cart: ShoppingCart | None, reader: CatalogReader) -> dict:
    if cart is None:
        return {"id": None, "items": [], "itemCount": 0, "subtotal": 0}

    return {
        "id": str(cart.id),
        "items": [_line_view(item, reader.lookup(item.product_id)) for item in cart.live_items],
        "itemCount": cart.item_count,
        "subtotal": cart.subtotal,
    }


def load_cart_view(customer_id) -> dict:
    cart = current_domain.repository_for(ShoppingCart).find_active_for(customer_id)
    return cart_view(cart, CatalogReader(current_domain.repository_for(Product)))


def cart_count(customer_id) -> int:
    """Number of live lines in the customer's cart, 0 when there is none."""
    cart = current_domain.repository_for(ShoppingCart).find_active_for(customer_id)
    return cart.item_count if cart else 0
