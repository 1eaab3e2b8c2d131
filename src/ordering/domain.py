"""Ordering bounded context: the customer's shopping cart and checkout.

The cart is a standard CQRS aggregate (not event sourced) that copies item
snapshots from the catalogue at add-time. Checkout hands a serialized cart to
an external order sink and clears the cart once the sink accepts it.
"""

import structlog
from protean.domain import Domain

from shared.logging import configure_logging

configure_logging(log_file_prefix="storefront")

ordering = Domain(name="ordering")

logger = structlog.get_logger(__name__)
