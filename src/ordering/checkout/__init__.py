"""Order sink factory.

Provides get_order_sink() / set_order_sink() to swap implementations:
- InMemoryOrderSink for development and testing
- FirestoreOrderSink for production (STOREFRONT_ORDER_SINK=firestore)
"""

from ordering.checkout.fake_adapter import InMemoryOrderSink
from ordering.checkout.port import OrderSink
from shared.settings import get_settings

_current_sink: OrderSink | None = None


def get_order_sink() -> OrderSink:
    """Return the current order sink, built from settings on first use."""
    global _current_sink
    if _current_sink is None:
        settings = get_settings()
        if settings.order_sink == "firestore":
            from ordering.checkout.firestore_adapter import FirestoreOrderSink

            _current_sink = FirestoreOrderSink(collection=settings.orders_collection, timeout=settings.io_timeout)
        else:
            _current_sink = InMemoryOrderSink()
    return _current_sink


def set_order_sink(sink: OrderSink) -> None:
    """Override the active order sink (useful for tests)."""
    global _current_sink
    _current_sink = sink


def reset_order_sink() -> None:
    """Reset to the default sink."""
    global _current_sink
    _current_sink = None
