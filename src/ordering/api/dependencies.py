"""Order placement dependency for the cart router.

One coordinator serves every cart in the process, so its in-flight guard
covers concurrent checkout requests for the same cart.
"""

from ordering.checkout import get_order_sink
from ordering.checkout.placement import OrderPlacement

_order_placement: OrderPlacement | None = None


def get_order_placement() -> OrderPlacement:
    """Return the process-wide order placement, bound to the active sink."""
    global _order_placement
    if _order_placement is None:
        _order_placement = OrderPlacement(get_order_sink())
    return _order_placement


def reset_order_placement() -> None:
    """Drop the coordinator so the next request binds to the current sink."""
    global _order_placement
    _order_placement = None
