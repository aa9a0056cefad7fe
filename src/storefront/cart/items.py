"""Cart item management: commands and handler.

Quantities are always validated against what the catalogue says right now,
and a line's stored price is refreshed from the catalogue whenever it is
added to.
"""

from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.catalogue.product import Product
from storefront.catalogue.reader import NO_PRICE, CatalogReader
from storefront.domain import storefront
from storefront.shared.errors import InsufficientStock, NotFound, ProductUnavailable
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="ShoppingCart")
class AddToCart:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@storefront.command(part_of="ShoppingCart")
class UpdateCartItem:
    customer_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@storefront.command(part_of="ShoppingCart")
class RemoveFromCart:
    customer_id = Identifier(required=True)
    item_id = Identifier(required=True)


@storefront.command(part_of="ShoppingCart")
class ClearCart:
    customer_id = Identifier(required=True)


def _addable_entry(product_id, quantity):
    """Catalogue entry for a product that can go in a cart in ``quantity`` units."""
    entry = CatalogReader(current_domain.repository_for(Product)).lookup(product_id)
    if not entry.available:
        raise ProductUnavailable(product_id, entry.reason)
    if not entry.addable:
        raise ProductUnavailable(product_id, NO_PRICE)
    if entry.shortfall(quantity):
        raise InsufficientStock(product_id, available=entry.stock, requested=quantity)
    return entry


@storefront.command_handler(part_of=ShoppingCart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        entry = _addable_entry(command.product_id, command.quantity)

        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get_or_open(command.customer_id)
        item = cart.add_item(
            product_id=entry.product_id,
            quantity=command.quantity,
            price=entry.unit_price,
        )
        repo.add(cart)

        logger.info(
            "Item added to cart",
            cart_id=str(cart.id),
            product_id=entry.product_id,
            quantity=command.quantity,
        )
        return str(item.id)

    @handle(UpdateCartItem)
    def update_cart_item(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get_active_for(command.customer_id)
        item = cart.live_item(command.item_id)
        if item is None:
            raise NotFound("Cart item not found", itemId=str(command.item_id))

        _addable_entry(item.product_id, command.quantity)

        cart.update_item_quantity(item_id=item.id, new_quantity=command.quantity)
        repo.add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get_active_for(command.customer_id)
        cart.remove_item(item_id=command.item_id)
        repo.add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.find_active_for(command.customer_id)
        if cart is None:
            return 0

        removed = cart.clear()
        if removed:
            repo.add(cart)
        return removed
