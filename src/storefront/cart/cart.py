"""Shopping Cart aggregate: a customer's pending line items.

Each customer has one live cart, opened lazily. Lines are never deleted;
removing or clearing trashes them, and only live lines count towards the
cart's totals. The price stored on a line is the catalogue price when the
line was last added or reconciled.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from storefront.cart.events import (
    CartCleared,
    CartItemAdded,
    CartItemRemoved,
    CartItemRepriced,
    CartOpened,
    CartQuantityUpdated,
)
from storefront.domain import storefront
from storefront.shared.errors import NotFound
from storefront.shared.lifecycle import RecordState, is_live


@storefront.entity(part_of="ShoppingCart")
class CartItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    price = Float(required=True, min_value=0.0)
    record_state = String(choices=RecordState, default=RecordState.ACTIVE.value)
    added_at = DateTime()


@storefront.aggregate
class ShoppingCart:
    customer_id = Identifier(required=True)
    items = HasMany(CartItem)
    record_state = String(choices=RecordState, default=RecordState.ACTIVE.value)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def one_live_line_per_product(self):
        product_ids = [str(item.product_id) for item in self.live_items]
        if len(product_ids) != len(set(product_ids)):
            raise ValidationError({"items": ["A product can appear only once in the cart"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def open(cls, customer_id):
        now = datetime.now(UTC)
        cart = cls(
            customer_id=customer_id,
            record_state=RecordState.ACTIVE.value,
            created_at=now,
            updated_at=now,
        )
        cart.raise_(
            CartOpened(
                cart_id=str(cart.id),
                customer_id=str(customer_id),
                opened_at=now,
            )
        )
        return cart

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def live_items(self):
        return [item for item in self.items if is_live(item)]

    @property
    def subtotal(self) -> float:
        return sum(item.price * item.quantity for item in self.live_items)

    @property
    def item_count(self) -> int:
        """Number of live lines, not the summed quantity."""
        return len(self.live_items)

    def live_item(self, item_id):
        return next((i for i in self.live_items if str(i.id) == str(item_id)), None)

    def live_item_for_product(self, product_id):
        return next((i for i in self.live_items if str(i.product_id) == str(product_id)), None)

    def _require_live_item(self, item_id):
        item = self.live_item(item_id)
        if item is None:
            raise NotFound("Cart item not found", itemId=str(item_id))
        return item

    def _touch(self):
        self.updated_at = datetime.now(UTC)

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, product_id, quantity, price):
        """Add a product, or top up the existing line and refresh its price."""
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        existing = self.live_item_for_product(product_id)
        now = datetime.now(UTC)

        if existing:
            existing.quantity += quantity
            existing.price = price
            item = existing
        else:
            item = CartItem(
                product_id=product_id,
                quantity=quantity,
                price=price,
                added_at=now,
            )
            self.add_items(item)

        self._touch()

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                item_id=str(item.id),
                product_id=str(product_id),
                quantity=quantity,
                price=price,
            )
        )
        return item

    def update_item_quantity(self, item_id, new_quantity):
        if new_quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        item = self._require_live_item(item_id)
        previous_quantity = item.quantity
        item.quantity = new_quantity
        self._touch()

        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                item_id=str(item.id),
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
            )
        )
        return item

    def reprice_item(self, item_id, new_price):
        item = self._require_live_item(item_id)
        previous_price = item.price
        item.price = new_price
        self._touch()

        self.raise_(
            CartItemRepriced(
                cart_id=str(self.id),
                item_id=str(item.id),
                previous_price=previous_price,
                new_price=new_price,
            )
        )
        return item

    def remove_item(self, item_id, reason=None):
        item = self._require_live_item(item_id)
        item.record_state = RecordState.TRASHED.value
        self._touch()

        self.raise_(
            CartItemRemoved(
                cart_id=str(self.id),
                item_id=str(item.id),
                reason=reason,
            )
        )
        return item

    def clear(self):
        """Trash every live line. Returns how many lines were removed."""
        lines = self.live_items
        if not lines:
            return 0

        for item in lines:
            item.record_state = RecordState.TRASHED.value
        self._touch()

        self.raise_(CartCleared(cart_id=str(self.id), items_removed=len(lines)))
        return len(lines)
