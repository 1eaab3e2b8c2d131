"""Tests for adding, changing and removing cart lines."""

from decimal import Decimal

import pytest

from ordering.cart.cart import ShoppingCart
from ordering.errors import InvalidQuantity, ItemUnavailable


@pytest.fixture()
def cart():
    return ShoppingCart.create(session_id="sess-001")


class TestAddItem:
    def test_first_add_creates_line_with_quantity_one(self, cart, make_item):
        cart.add_item(make_item("pizza", "10.00"))

        line = cart.line_for("pizza")
        assert line.quantity == 1
        assert line.name == "Pizza"
        assert line.unit_price == 10.0
        assert line.image_ref == "https://images.example.com/pizza.jpg"

    def test_adding_again_increments(self, cart, make_item):
        cart.add_item(make_item("pizza"))
        cart.add_item(make_item("pizza"))

        assert len(cart.lines) == 1
        assert cart.line_for("pizza").quantity == 2

    def test_unavailable_item_rejected(self, cart, make_item):
        with pytest.raises(ItemUnavailable):
            cart.add_item(make_item("pizza", available=False))
        assert cart.is_empty

    def test_unavailable_item_rejected_even_when_already_in_cart(self, cart, make_item):
        cart.add_item(make_item("pizza"))
        with pytest.raises(ItemUnavailable):
            cart.add_item(make_item("pizza", available=False))
        assert cart.line_for("pizza").quantity == 1

    def test_readding_keeps_original_price(self, cart, make_item):
        cart.add_item(make_item("pizza", "10.00"))
        cart.add_item(make_item("pizza", "12.00"))

        assert cart.line_for("pizza").unit_price == 10.0
        assert cart.total_amount() == Decimal("20.00")

    def test_lines_keep_insertion_order(self, cart, make_item):
        for item_id in ("salad", "pizza", "soda"):
            cart.add_item(make_item(item_id))
        cart.add_item(make_item("salad"))

        assert [str(line.item_id) for line in cart.ordered_lines()] == ["salad", "pizza", "soda"]

    def test_line_order_survives_removal(self, cart, make_item):
        for item_id in ("salad", "pizza", "soda"):
            cart.add_item(make_item(item_id))
        cart.remove_item("pizza")
        cart.add_item(make_item("pizza"))

        assert [str(line.item_id) for line in cart.ordered_lines()] == ["salad", "soda", "pizza"]


class TestSetQuantity:
    def test_sets_quantity(self, cart, make_item):
        cart.add_item(make_item("pizza"))
        cart.set_quantity("pizza", 5)
        assert cart.line_for("pizza").quantity == 5

    def test_zero_removes_line(self, cart, make_item):
        cart.add_item(make_item("pizza"))
        cart.set_quantity("pizza", 0)
        assert cart.line_for("pizza") is None
        assert cart.is_empty

    def test_negative_rejected(self, cart, make_item):
        cart.add_item(make_item("pizza"))
        with pytest.raises(InvalidQuantity):
            cart.set_quantity("pizza", -1)
        assert cart.line_for("pizza").quantity == 1

    @pytest.mark.parametrize("quantity", [1.5, "2", True, None])
    def test_non_integer_rejected(self, cart, make_item, quantity):
        cart.add_item(make_item("pizza"))
        with pytest.raises(InvalidQuantity):
            cart.set_quantity("pizza", quantity)

    def test_absent_item_is_a_no_op(self, cart, make_item):
        cart.add_item(make_item("pizza"))
        cart.set_quantity("salad", 3)
        assert cart.line_for("salad") is None
        assert cart.total_item_count() == 1

    def test_negative_rejected_even_for_absent_item(self, cart):
        with pytest.raises(InvalidQuantity):
            cart.set_quantity("salad", -2)


class TestIncrementDecrement:
    def test_increment(self, cart, make_item):
        cart.add_item(make_item("pizza"))
        cart.increment_quantity("pizza")
        assert cart.line_for("pizza").quantity == 2

    def test_increment_absent_is_a_no_op(self, cart):
        cart.increment_quantity("pizza")
        assert cart.is_empty

    def test_decrement(self, cart, make_item):
        cart.add_item(make_item("pizza"))
        cart.add_item(make_item("pizza"))
        cart.decrement_quantity("pizza")
        assert cart.line_for("pizza").quantity == 1

    def test_decrement_at_one_removes_line(self, cart, make_item):
        cart.add_item(make_item("pizza"))
        cart.decrement_quantity("pizza")
        assert cart.line_for("pizza") is None

    def test_decrement_absent_is_a_no_op(self, cart):
        cart.decrement_quantity("pizza")
        assert cart.is_empty


class TestRemoveAndClear:
    def test_remove_item(self, cart, make_item):
        cart.add_item(make_item("pizza"))
        cart.add_item(make_item("salad"))
        cart.remove_item("pizza")
        assert [str(line.item_id) for line in cart.lines] == ["salad"]

    def test_remove_absent_is_a_no_op(self, cart, make_item):
        cart.add_item(make_item("pizza"))
        cart.remove_item("salad")
        assert len(cart.lines) == 1

    def test_clear(self, cart, make_item):
        cart.add_item(make_item("pizza"))
        cart.add_item(make_item("salad"))
        cart.clear()
        assert cart.is_empty
        assert cart.total_amount() == Decimal("0.00")

    def test_clear_empty_cart(self, cart):
        cart.clear()
        assert cart.is_empty
        assert cart._events == []


class TestCartScenarios:
    def test_add_twice_then_decrement_twice(self, cart, make_item):
        item = make_item("a", "10.00")

        cart.add_item(item)
        cart.add_item(item)
        assert cart.line_for("a").quantity == 2
        assert cart.total_amount() == Decimal("20.00")

        cart.decrement_quantity("a")
        cart.decrement_quantity("a")
        assert cart.is_empty
        assert cart.total_amount() == Decimal("0.00")

    def test_count_and_amount_across_lines(self, cart, make_item):
        cart.add_item(make_item("a", "5.00"))
        cart.set_quantity("a", 2)
        cart.add_item(make_item("b", "7.50"))

        assert cart.total_item_count() == 3
        assert cart.total_amount() == Decimal("17.50")

    def test_no_line_ever_has_zero_quantity(self, cart, make_item):
        cart.add_item(make_item("a"))
        cart.add_item(make_item("b"))
        cart.decrement_quantity("a")
        cart.set_quantity("b", 0)
        cart.add_item(make_item("c"))
        cart.increment_quantity("c")

        assert all(line.quantity >= 1 for line in cart.lines)
        assert len({str(line.item_id) for line in cart.lines}) == len(cart.lines)
