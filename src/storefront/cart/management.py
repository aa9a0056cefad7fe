"""Cart management: opening a customer's cart."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.domain import storefront


@storefront.command(part_of="ShoppingCart")
class OpenCart:
    """Return the customer's live cart, opening an empty one if needed."""

    customer_id = Identifier(required=True)


@storefront.command_handler(part_of=ShoppingCart)
class ManageCartHandler:
    @handle(OpenCart)
    def open_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.find_active_for(command.customer_id)
        if cart is None:
            cart = ShoppingCart.open(command.customer_id)
            repo.add(cart)
        return str(cart.id)
