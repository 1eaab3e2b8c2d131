"""Configurable in-memory order sink for development and testing.

Stores accepted orders in process memory and can be configured at runtime to
fail, to exercise the retry-safe checkout path without a backend.
"""

from datetime import UTC, datetime
from uuid import uuid4

from ordering.checkout.port import OrderRecord, OrderSink
from ordering.errors import SinkUnreachable


class InMemoryOrderSink(OrderSink):
    """Configurable in-memory order sink."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Order service unavailable"
        self.calls: list[dict] = []
        self.orders: dict[str, dict] = {}

    def configure(self, should_succeed: bool, failure_reason: str = "Order service unavailable") -> None:
        """Configure sink behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def place_order(self, record: OrderRecord) -> str:
        document = record.to_document()
        self.calls.append({"method": "place_order", "document": document})

        if not self.should_succeed:
            raise SinkUnreachable(self.failure_reason)

        order_id = uuid4().hex[:20]
        self.orders[order_id] = {**document, "orderDate": datetime.now(UTC)}
        return order_id
