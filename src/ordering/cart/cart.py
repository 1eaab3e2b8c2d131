"""Shopping Cart aggregate (CQRS): the lines a customer intends to order.

Each line is a frozen copy of the catalog item taken when it was first added.
Later catalog edits (price changes, items going unavailable or disappearing)
never reach an existing line, which keeps an in-progress cart price-stable
without locking it during catalog refreshes.

Line lifecycle, per item id:
    absent → present(1)          add_item
    present(n) → present(n ± 1)  increment / decrement / set_quantity
    present(1) → absent          decrement / remove_item / set_quantity(0)

There is no present(0) state. Operations on an absent item are silent no-ops;
only invalid input (an unavailable item, a negative quantity) raises.
"""

from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text

from ordering.cart.events import CartCleared, CartItemAdded, CartItemRemoved, CartQuantityUpdated
from ordering.domain import ordering
from ordering.errors import InvalidQuantity, ItemUnavailable

CENTS = Decimal("0.01")


def to_money(value) -> Decimal:
    """Decimal from a stored float, via its shortest string form."""
    return Decimal(str(value))


@ordering.entity(part_of="ShoppingCart")
class CartLine:
    """One distinct catalog item in the cart and its requested quantity."""

    item_id = Identifier(required=True)
    name = String(max_length=255)
    description = Text()
    unit_price = Float(required=True, min_value=0.0)  # Snapshot, never updated
    image_ref = String(max_length=2048)
    quantity = Integer(required=True, min_value=1)
    position = Integer(default=0)  # Insertion order, for stable display

    @property
    def line_total(self) -> Decimal:
        return (to_money(self.unit_price) * self.quantity).quantize(CENTS, rounding=ROUND_HALF_UP)

    def to_payload(self) -> dict:
        return {
            "item_id": str(self.item_id),
            "name": self.name or "",
            "description": self.description or "",
            "unit_price": to_money(self.unit_price),
            "image_ref": self.image_ref or "",
            "quantity": self.quantity,
            "line_total": self.line_total,
        }


@ordering.aggregate
class ShoppingCart:
    session_id = String(max_length=255)
    lines = HasMany(CartLine)
    line_sequence = Integer(default=0)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def one_line_per_item(self):
        item_ids = [str(line.item_id) for line in self.lines]
        if len(item_ids) != len(set(item_ids)):
            raise ValidationError({"lines": ["A cart holds at most one line per item"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, session_id=None):
        now = datetime.now(UTC)
        return cls(
            session_id=session_id,
            line_sequence=0,
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    def line_for(self, item_id):
        return next((line for line in self.lines if str(line.item_id) == str(item_id)), None)

    def ordered_lines(self):
        """Lines in the order they were first added."""
        return sorted(self.lines, key=lambda line: line.position or 0)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def total_item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    def total_amount(self) -> Decimal:
        total = sum((to_money(line.unit_price) * line.quantity for line in self.lines), Decimal("0"))
        return total.quantize(CENTS, rounding=ROUND_HALF_UP)

    def checkout_snapshot(self) -> dict:
        """Read-only serialization of the lines and totals, for order submission."""
        return {
            "cart_id": str(self.id),
            "items": [line.to_payload() for line in self.ordered_lines()],
            "total_items": self.total_item_count(),
            "total_amount": self.total_amount(),
        }

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, catalog_item):
        """Add one unit of a catalog item.

        ``catalog_item`` is any snapshot exposing ``item_id``, ``name``,
        ``description``, ``unit_price``, ``image_ref`` and ``available``. Its
        values are copied; the cart keeps no reference to it.
        """
        item_id = str(catalog_item.item_id)
        if not catalog_item.available:
            raise ItemUnavailable({"item_id": [f"Item {item_id} is not available"]})

        line = self.line_for(item_id)
        if line is not None:
            line.quantity += 1
        else:
            self.line_sequence = (self.line_sequence or 0) + 1
            line = CartLine(
                item_id=item_id,
                name=catalog_item.name,
                description=catalog_item.description,
                unit_price=float(catalog_item.unit_price),
                image_ref=catalog_item.image_ref,
                quantity=1,
                position=self.line_sequence,
            )
            self.add_lines(line)

        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                item_id=item_id,
                name=line.name,
                unit_price=line.unit_price,
                quantity=line.quantity,
            )
        )

    def set_quantity(self, item_id, quantity):
        """Set a line's quantity; zero removes the line."""
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 0:
            raise InvalidQuantity({"quantity": [f"Quantity must be a whole number of zero or more, got {quantity!r}"]})

        line = self.line_for(item_id)
        if line is None:
            return
        if quantity == 0:
            self._remove_line(line)
        elif quantity != line.quantity:
            self._change_quantity(line, quantity)

    def increment_quantity(self, item_id):
        line = self.line_for(item_id)
        if line is None:
            return
        self._change_quantity(line, line.quantity + 1)

    def decrement_quantity(self, item_id):
        """Take one unit off a line, removing the line when it reaches zero."""
        line = self.line_for(item_id)
        if line is None:
            return
        if line.quantity <= 1:
            self._remove_line(line)
        else:
            self._change_quantity(line, line.quantity - 1)

    def remove_item(self, item_id):
        line = self.line_for(item_id)
        if line is None:
            return
        self._remove_line(line)

    def clear(self):
        """Remove every line. Clearing an empty cart does nothing."""
        lines = list(self.lines)
        if not lines:
            return

        for line in lines:
            self.remove_lines(line)
        self.updated_at = datetime.now(UTC)

        self.raise_(CartCleared(cart_id=str(self.id), lines_removed=len(lines)))

    # -------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------
    def _change_quantity(self, line, new_quantity):
        previous_quantity = line.quantity
        line.quantity = new_quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                item_id=str(line.item_id),
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
            )
        )

    def _remove_line(self, line):
        previous_quantity = line.quantity
        self.remove_lines(line)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemRemoved(
                cart_id=str(self.id),
                item_id=str(line.item_id),
                previous_quantity=previous_quantity,
            )
        )
