"""Cart item management: commands and handler.

``AddToCart`` carries the catalog snapshot itself (resolved by the caller from
the catalog mirror), so the ordering domain never reads the live catalog.
"""

from protean import handle
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from ordering.cart.cart import ShoppingCart
from ordering.domain import ordering


@ordering.command(part_of="ShoppingCart")
class AddToCart:
    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    name = String(max_length=255)
    description = Text()
    unit_price = Float(required=True, min_value=0.0)
    image_ref = String(max_length=2048)
    available = Boolean(default=True)


@ordering.command(part_of="ShoppingCart")
class SetCartQuantity:
    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity = Integer(required=True)


@ordering.command(part_of="ShoppingCart")
class IncrementCartQuantity:
    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)


@ordering.command(part_of="ShoppingCart")
class DecrementCartQuantity:
    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)


@ordering.command(part_of="ShoppingCart")
class RemoveFromCart:
    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)


@ordering.command_handler(part_of=ShoppingCart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        # The command exposes the same attributes as a catalog snapshot
        cart.add_item(command)
        repo.add(cart)

    @handle(SetCartQuantity)
    def set_cart_quantity(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        cart.set_quantity(command.item_id, command.quantity)
        repo.add(cart)

    @handle(IncrementCartQuantity)
    def increment_cart_quantity(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        cart.increment_quantity(command.item_id)
        repo.add(cart)

    @handle(DecrementCartQuantity)
    def decrement_cart_quantity(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        cart.decrement_quantity(command.item_id)
        repo.add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        cart.remove_item(command.item_id)
        repo.add(cart)
