"""Domain events for the ShoppingCart aggregate."""

from protean.fields import Float, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="ShoppingCart")
class CartItemAdded:
    """A catalog item was added to the cart, or its quantity bumped by an add."""

    __version__ = 1

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    name = String(max_length=255)
    unit_price = Float(required=True)
    quantity = Integer(required=True)  # Line quantity after the add


@ordering.event(part_of="ShoppingCart")
class CartQuantityUpdated:
    """The quantity of a cart line was changed."""

    __version__ = 1

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@ordering.event(part_of="ShoppingCart")
class CartItemRemoved:
    """A line was removed from the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    previous_quantity = Integer(required=True)


@ordering.event(part_of="ShoppingCart")
class CartCleared:
    """Every line was removed from the cart, by the customer or after checkout."""

    __version__ = 1

    cart_id = Identifier(required=True)
    lines_removed = Integer(required=True)
