"""Tests for the domain events raised by the ShoppingCart aggregate."""

from ordering.cart.cart import ShoppingCart
from ordering.cart.events import CartCleared, CartItemAdded, CartItemRemoved, CartQuantityUpdated


def _cart_with(make_item, *item_ids):
    cart = ShoppingCart.create()
    for item_id in item_ids:
        cart.add_item(make_item(item_id))
    cart._events.clear()
    return cart


class TestCartItemAddedEvent:
    def test_raised_on_first_add(self, make_item):
        cart = ShoppingCart.create()
        cart.add_item(make_item("pizza", "10.00"))

        assert len(cart._events) == 1
        event = cart._events[0]
        assert isinstance(event, CartItemAdded)
        assert event.cart_id == str(cart.id)
        assert event.item_id == "pizza"
        assert event.name == "Pizza"
        assert event.unit_price == 10.0
        assert event.quantity == 1

    def test_repeat_add_reports_new_quantity(self, make_item):
        cart = _cart_with(make_item, "pizza")
        cart.add_item(make_item("pizza"))

        assert cart._events[0].quantity == 2


class TestCartQuantityUpdatedEvent:
    def test_raised_on_set_quantity(self, make_item):
        cart = _cart_with(make_item, "pizza")
        cart.set_quantity("pizza", 4)

        event = cart._events[0]
        assert isinstance(event, CartQuantityUpdated)
        assert event.previous_quantity == 1
        assert event.new_quantity == 4

    def test_not_raised_when_quantity_unchanged(self, make_item):
        cart = _cart_with(make_item, "pizza")
        cart.set_quantity("pizza", 1)
        assert cart._events == []

    def test_raised_on_increment_and_decrement(self, make_item):
        cart = _cart_with(make_item, "pizza")
        cart.increment_quantity("pizza")
        cart.decrement_quantity("pizza")

        assert [type(e) for e in cart._events] == [CartQuantityUpdated, CartQuantityUpdated]
        assert [e.new_quantity for e in cart._events] == [2, 1]


class TestCartItemRemovedEvent:
    def test_raised_on_remove(self, make_item):
        cart = _cart_with(make_item, "pizza")
        cart.remove_item("pizza")

        event = cart._events[0]
        assert isinstance(event, CartItemRemoved)
        assert event.item_id == "pizza"
        assert event.previous_quantity == 1

    def test_raised_when_decrement_removes_line(self, make_item):
        cart = _cart_with(make_item, "pizza")
        cart.decrement_quantity("pizza")
        assert isinstance(cart._events[0], CartItemRemoved)

    def test_raised_when_set_to_zero(self, make_item):
        cart = _cart_with(make_item, "pizza")
        cart.set_quantity("pizza", 0)
        assert isinstance(cart._events[0], CartItemRemoved)

    def test_no_event_for_absent_item(self, make_item):
        cart = _cart_with(make_item, "pizza")
        cart.remove_item("salad")
        cart.increment_quantity("salad")
        cart.decrement_quantity("salad")
        cart.set_quantity("salad", 2)
        assert cart._events == []


class TestCartClearedEvent:
    def test_raised_with_line_count(self, make_item):
        cart = _cart_with(make_item, "pizza", "salad")
        cart.clear()

        event = cart._events[0]
        assert isinstance(event, CartCleared)
        assert event.lines_removed == 2
