"""Catalogue bounded context: the local mirror of the live menu catalog.

The catalog itself is owned by an external real-time source. This context
keeps a read-only copy of it and offers the admin path that appends new
items to the source.
"""

from protean.domain import Domain

from shared.logging import configure_logging, get_logger

configure_logging(log_file_prefix="storefront")

logger = get_logger(__name__)

# Domain Composition Root
catalogue = Domain(name="catalogue")
