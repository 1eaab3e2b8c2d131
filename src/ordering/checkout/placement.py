"""Order placement: hand a cart to the order sink, at most once at a time.

Flow:
    1. Reject an empty cart before the sink is contacted.
    2. Reject a second submission for a cart whose first one is outstanding.
    3. Serialize the cart and the customer's details into an OrderRecord.
    4. Submit to the sink. A failure leaves the cart exactly as it was.
    5. Hand the confirmation to the caller's ``on_accepted`` hook, which
       clears the cart, before the cart is released for another submission.

This module only reads the cart; clearing it is the caller's step.
"""

import asyncio
import re
import threading
from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal

import structlog
from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import String, Text

from ordering.checkout.port import OrderRecord, OrderSink
from ordering.domain import ordering
from ordering.errors import EmptyCart, SinkUnreachable, SubmissionInFlight

logger = structlog.get_logger(__name__)

_PHONE_PATTERN = re.compile(r"^\+?[\d\s\-()]+$")


@ordering.value_object
class CustomerInfo:
    """Contact details captured at checkout."""

    name = String(required=True, max_length=255)
    phone = String(required=True, max_length=30)
    address = Text(required=True)

    @invariant.post
    def details_must_not_be_blank(self):
        missing = {
            field_name: ["Please fill in all customer details"]
            for field_name in ("name", "phone", "address")
            if not (getattr(self, field_name) or "").strip()
        }
        if missing:
            raise ValidationError(missing)

    @invariant.post
    def phone_must_be_dialable(self):
        phone = (self.phone or "").strip()
        if not phone:
            return
        if not re.search(r"\d", phone) or not _PHONE_PATTERN.match(phone):
            raise ValidationError({"phone": [f"Invalid phone number: {phone!r}"]})

    def contact_details(self) -> dict[str, str]:
        return {
            "name": self.name.strip(),
            "phone": self.phone.strip(),
            "address": self.address.strip(),
        }


@dataclass(frozen=True)
class OrderConfirmation:
    """What the customer is told once the sink has accepted the order."""

    order_id: str
    total_amount: Decimal
    total_items: int


AcceptedCallback = Callable[[OrderConfirmation], None]


class OrderPlacement:
    """Submits carts to an order sink, one submission per cart at a time.

    A cart stays marked in flight until ``on_accepted`` has returned, so a
    caller that clears the cart there leaves no window in which the same
    lines can be submitted twice.
    """

    def __init__(self, sink: OrderSink) -> None:
        self.sink = sink
        self._lock = threading.Lock()
        self._in_flight: set[str] = set()

    def is_in_flight(self, cart_id) -> bool:
        with self._lock:
            return str(cart_id) in self._in_flight

    def submit(self, cart, customer: CustomerInfo, on_accepted: AcceptedCallback | None = None) -> OrderConfirmation:
        cart_id, record = self._reserve(cart, customer)
        try:
            confirmation = self._send(cart_id, record)
            if on_accepted is not None:
                on_accepted(confirmation)
        finally:
            self._release(cart_id)
        return confirmation

    async def submit_async(
        self,
        cart,
        customer: CustomerInfo,
        on_accepted: AcceptedCallback | None = None,
    ) -> OrderConfirmation:
        """Like ``submit``, with the sink call moved to a worker thread.

        The cart is read and ``on_accepted`` runs on the calling thread, so
        both keep the caller's domain context.
        """
        cart_id, record = self._reserve(cart, customer)
        try:
            confirmation = await asyncio.to_thread(self._send, cart_id, record)
            if on_accepted is not None:
                on_accepted(confirmation)
        finally:
            self._release(cart_id)
        return confirmation

    def _reserve(self, cart, customer: CustomerInfo) -> tuple[str, OrderRecord]:
        snapshot = cart.checkout_snapshot()
        cart_id = snapshot["cart_id"]

        if not snapshot["items"]:
            raise EmptyCart({"cart": ["No items in cart to place order"]})

        with self._lock:
            if cart_id in self._in_flight:
                raise SubmissionInFlight(f"An order for cart {cart_id} is already being placed")
            self._in_flight.add(cart_id)

        record = OrderRecord(
            customer_info=customer.contact_details(),
            items=snapshot["items"],
            total_amount=snapshot["total_amount"],
            total_items=snapshot["total_items"],
        )
        return cart_id, record

    def _release(self, cart_id: str) -> None:
        with self._lock:
            self._in_flight.discard(cart_id)

    def _send(self, cart_id: str, record: OrderRecord) -> OrderConfirmation:
        try:
            order_id = self.sink.place_order(record)
        except SinkUnreachable as exc:
            logger.warning("Order placement failed, cart left intact", cart_id=cart_id, error=str(exc))
            raise

        logger.info(
            "Order placed",
            cart_id=cart_id,
            order_id=order_id,
            total_items=record.total_items,
            total_amount=str(record.total_amount),
        )
        return OrderConfirmation(
            order_id=order_id,
            total_amount=record.total_amount,
            total_items=record.total_items,
        )
