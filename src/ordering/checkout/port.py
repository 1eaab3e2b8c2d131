"""Order sink port (abstract interface).

The order sink durably records a finalized order and returns its id. It is
append-only and not guaranteed idempotent, so callers must not retry a
submission that may still be in flight.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(frozen=True)
class OrderRecord:
    """A finalized cart plus the customer's contact details."""

    customer_info: dict[str, str]
    items: list[dict] = field(default_factory=list)
    total_amount: Decimal = Decimal("0.00")
    total_items: int = 0
    status: str = "pending"

    def to_document(self) -> dict:
        """Wire shape of the order; the sink adds ``orderDate`` itself."""
        return {
            "customerInfo": dict(self.customer_info),
            "items": [
                {
                    "id": item["item_id"],
                    "name": item["name"],
                    "description": item["description"],
                    "price": float(item["unit_price"]),
                    "imageUrl": item["image_ref"],
                    "quantity": item["quantity"],
                }
                for item in self.items
            ],
            "totalAmount": float(self.total_amount),
            "totalItems": self.total_items,
            "status": self.status,
        }


class OrderSink(ABC):
    """Abstract order sink interface."""

    @abstractmethod
    def place_order(self, record: OrderRecord) -> str:
        """Record the order and return its sink-assigned id.

        Raises ``SinkUnreachable`` when the order could not be recorded.
        """
        ...
