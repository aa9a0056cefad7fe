"""Tests for the ShoppingCart aggregate."""

import pytest
from protean.exceptions import ValidationError
from storefront.cart.cart import CartItem, ShoppingCart
from storefront.cart.events import (
    CartCleared,
    CartItemAdded,
    CartItemRemoved,
    CartItemRepriced,
    CartOpened,
    CartQuantityUpdated,
)
from storefront.shared.errors import NotFound
from storefront.shared.lifecycle import RecordState


def _cart():
    return ShoppingCart.open(customer_id="cust-001")


class TestOpen:
    def test_open_empty_cart(self):
        cart = _cart()
        assert cart.live_items == []
        assert cart.subtotal == 0
        assert cart.item_count == 0

    def test_open_raises_event(self):
        cart = _cart()
        assert any(isinstance(e, CartOpened) for e in cart._events)


class TestAddItem:
    def test_add_item(self):
        cart = _cart()
        cart.add_item("prod-001", 3, 100.0)
        assert cart.item_count == 1
        assert cart.subtotal == 300.0

    def test_add_item_raises_event(self):
        cart = _cart()
        cart.add_item("prod-001", 2, 10.0)
        events = [e for e in cart._events if isinstance(e, CartItemAdded)]
        assert len(events) == 1
        assert events[0].product_id == "prod-001"
        assert events[0].quantity == 2

    def test_same_product_tops_up_the_line_and_refreshes_price(self):
        cart = _cart()
        cart.add_item("prod-001", 1, 100.0)
        cart.add_item("prod-001", 2, 90.0)
        assert cart.item_count == 1
        line = cart.live_items[0]
        assert line.quantity == 3
        assert line.price == 90.0

    def test_different_products_get_their_own_lines(self):
        cart = _cart()
        cart.add_item("prod-001", 1, 100.0)
        cart.add_item("prod-002", 1, 50.0)
        assert cart.item_count == 2

    def test_quantity_must_be_positive(self):
        with pytest.raises(ValidationError):
            _cart().add_item("prod-001", 0, 10.0)

    def test_trashed_line_does_not_block_a_new_one(self):
        cart = _cart()
        item = cart.add_item("prod-001", 1, 10.0)
        cart.remove_item(item.id)
        cart.add_item("prod-001", 2, 10.0)
        assert cart.item_count == 1
        assert cart.live_items[0].quantity == 2


class TestInvariant:
    def test_two_live_lines_for_one_product_are_rejected(self):
        with pytest.raises(ValidationError):
            ShoppingCart(
                customer_id="cust-001",
                items=[
                    CartItem(product_id="prod-001", quantity=1, price=10.0),
                    CartItem(product_id="prod-001", quantity=2, price=10.0),
                ],
            )

    def test_trashed_duplicates_are_allowed(self):
        cart = ShoppingCart(
            customer_id="cust-001",
            items=[
                CartItem(product_id="prod-001", quantity=1, price=10.0, record_state=RecordState.TRASHED.value),
                CartItem(product_id="prod-001", quantity=2, price=10.0),
            ],
        )
        assert cart.item_count == 1


class TestTotals:
    def test_subtotal_counts_live_lines_only(self):
        cart = _cart()
        cart.add_item("prod-001", 2, 100.0)
        gone = cart.add_item("prod-002", 1, 50.0)
        cart.add_item("prod-003", 3, 10.0)
        cart.remove_item(gone.id)
        assert cart.subtotal == 230.0

    def test_item_count_is_lines_not_units(self):
        cart = _cart()
        cart.add_item("prod-001", 5, 1.0)
        cart.add_item("prod-002", 4, 1.0)
        assert cart.item_count == 2


class TestLineChanges:
    def test_update_quantity(self):
        cart = _cart()
        item = cart.add_item("prod-001", 1, 10.0)
        cart.update_item_quantity(item.id, 4)
        assert cart.live_item(item.id).quantity == 4
        events = [e for e in cart._events if isinstance(e, CartQuantityUpdated)]
        assert events[-1].previous_quantity == 1
        assert events[-1].new_quantity == 4

    def test_update_unknown_line(self):
        with pytest.raises(NotFound):
            _cart().update_item_quantity("missing", 2)

    def test_update_to_zero_is_rejected(self):
        cart = _cart()
        item = cart.add_item("prod-001", 1, 10.0)
        with pytest.raises(ValidationError):
            cart.update_item_quantity(item.id, 0)

    def test_reprice(self):
        cart = _cart()
        item = cart.add_item("prod-001", 2, 10.0)
        cart.reprice_item(item.id, 12.5)
        assert cart.subtotal == 25.0
        assert any(isinstance(e, CartItemRepriced) for e in cart._events)

    def test_remove_soft_deletes(self):
        cart = _cart()
        item = cart.add_item("prod-001", 1, 10.0)
        cart.remove_item(item.id)
        assert cart.item_count == 0
        assert len(cart.items) == 1
        assert cart.items[0].record_state == RecordState.TRASHED.value
        assert any(isinstance(e, CartItemRemoved) for e in cart._events)

    def test_removed_line_cannot_be_removed_again(self):
        cart = _cart()
        item = cart.add_item("prod-001", 1, 10.0)
        cart.remove_item(item.id)
        with pytest.raises(NotFound):
            cart.remove_item(item.id)


class TestClear:
    def test_clear_trashes_every_line(self):
        cart = _cart()
        cart.add_item("prod-001", 1, 10.0)
        cart.add_item("prod-002", 1, 10.0)
        assert cart.clear() == 2
        assert cart.item_count == 0
        events = [e for e in cart._events if isinstance(e, CartCleared)]
        assert events[-1].items_removed == 2

    def test_clearing_an_empty_cart_is_a_no_op(self):
        cart = _cart()
        assert cart.clear() == 0
        assert not any(isinstance(e, CartCleared) for e in cart._events)
