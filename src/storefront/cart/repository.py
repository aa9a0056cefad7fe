"""Repository for the ShoppingCart aggregate."""

from storefront.cart.cart import ShoppingCart
from storefront.domain import storefront
from storefront.shared.errors import NotFound
from storefront.shared.lifecycle import RecordState


@storefront.repository(part_of=ShoppingCart)
class ShoppingCartRepository:
    def find_active_for(self, customer_id) -> ShoppingCart | None:
        """The customer's live cart, or None when none has been opened yet."""
        carts = (
            self._dao.query.filter(
                customer_id=str(customer_id),
                record_state=RecordState.ACTIVE.value,
            )
            .all()
            .items
        )
        if not carts:
            return None
        return self.get(carts[0].id)

    def get_active_for(self, customer_id) -> ShoppingCart:
        cart = self.find_active_for(customer_id)
        if cart is None:
            raise NotFound("Cart not found")
        return cart

    def get_or_open(self, customer_id) -> ShoppingCart:
        return self.find_active_for(customer_id) or ShoppingCart.open(customer_id)
