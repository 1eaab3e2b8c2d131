"""Storefront session: one customer's cart, wired to the catalog and checkout.

The session is the cart's single owner. It creates the cart when opened,
routes every mutation through the aggregate, and drops it when closed, so no
cart state outlives the session or is shared between sessions. The catalog
mirror and the order placement coordinator are injected; several sessions can
share them.

Catalog updates arrive on the source's threads. The session only records that
they happened (and passes them on to an optional listener); cart lines are
never touched from a catalog callback.
"""

from collections.abc import Callable

import structlog

from catalogue.errors import SourceUnreachable
from catalogue.mirror import CatalogMirror, CatalogSubscription, CatalogUpdate
from ordering.cart.cart import ShoppingCart
from ordering.checkout.placement import CustomerInfo, OrderConfirmation, OrderPlacement
from ordering.errors import ItemUnavailable, SessionClosed

logger = structlog.get_logger(__name__)


class StorefrontSession:
    def __init__(
        self,
        mirror: CatalogMirror,
        placement: OrderPlacement,
        session_id: str | None = None,
        on_catalog_update: Callable[[CatalogUpdate], None] | None = None,
    ) -> None:
        self.session_id = session_id
        self._mirror = mirror
        self._placement = placement
        self._on_catalog_update = on_catalog_update
        self._subscription: CatalogSubscription | None = None
        self._cart: ShoppingCart | None = None
        self._opened = False
        self._closed = False

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def open(self) -> "StorefrontSession":
        """Create the empty cart and start following the catalog."""
        if self._closed:
            raise SessionClosed("A closed session cannot be reopened")
        if self._opened:
            return self

        self._cart = ShoppingCart.create(session_id=self.session_id)
        self._opened = True

        try:
            self._mirror.fetch_snapshot()
        except SourceUnreachable:
            logger.warning("Initial catalog load failed, starting from last-known items", session_id=self.session_id)

        self._subscription = self._mirror.subscribe(self._catalog_updated)
        logger.info("Storefront session opened", session_id=self.session_id, cart_id=str(self._cart.id))
        return self

    def close(self) -> None:
        """Stop following the catalog and release the cart. Idempotent."""
        if self._closed:
            return
        self._closed = True
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
        logger.info("Storefront session closed", session_id=self.session_id)

    def __enter__(self) -> "StorefrontSession":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def cart(self) -> ShoppingCart:
        return self._active_cart()

    @property
    def catalog(self):
        return self._mirror.items

    # -------------------------------------------------------------------
    # Cart operations
    # -------------------------------------------------------------------
    def add_to_cart(self, item_id: str) -> None:
        """Copy the catalog's current snapshot of ``item_id`` into the cart."""
        cart = self._active_cart()
        item = self._mirror.get(item_id)
        if item is None:
            raise ItemUnavailable({"item_id": [f"Item {item_id} is not on the menu"]})
        cart.add_item(item)

    def set_quantity(self, item_id: str, quantity: int) -> None:
        self._active_cart().set_quantity(item_id, quantity)

    def increment_quantity(self, item_id: str) -> None:
        self._active_cart().increment_quantity(item_id)

    def decrement_quantity(self, item_id: str) -> None:
        self._active_cart().decrement_quantity(item_id)

    def remove_item(self, item_id: str) -> None:
        self._active_cart().remove_item(item_id)

    def clear_cart(self) -> None:
        self._active_cart().clear()

    def unavailable_lines(self) -> list[str]:
        """Ids of cart lines whose catalog entry is now gone or unavailable.

        Informational only: such lines keep their add-time snapshot and do not
        block checkout.
        """
        catalog = self._mirror.items
        stale = []
        for line in self._active_cart().ordered_lines():
            entry = catalog.get(str(line.item_id))
            if entry is None or not entry.available:
                stale.append(str(line.item_id))
        return stale

    # -------------------------------------------------------------------
    # Checkout
    # -------------------------------------------------------------------
    def place_order(self, customer: CustomerInfo) -> OrderConfirmation:
        """Submit the cart and clear it once the sink has accepted it.

        If the session is closed while the submission is in flight, the
        confirmation is still returned but the released cart is left alone.
        """
        cart = self._active_cart()

        def clear_cart(confirmation: OrderConfirmation) -> None:
            if self._closed:
                logger.warning(
                    "Order placed after session closed, cart not cleared",
                    session_id=self.session_id,
                    order_id=confirmation.order_id,
                )
                return
            cart.clear()

        return self._placement.submit(cart, customer, on_accepted=clear_cart)

    # -------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------
    def _active_cart(self) -> ShoppingCart:
        if self._closed:
            raise SessionClosed("The storefront session is closed")
        if self._cart is None:
            raise SessionClosed("The storefront session has not been opened")
        return self._cart

    def _catalog_updated(self, update: CatalogUpdate) -> None:
        if self._closed:
            return
        if update.ok:
            logger.debug("Catalog updated", session_id=self.session_id, item_count=len(update.items))
        else:
            logger.warning(
                "Catalog unavailable, showing last-known items",
                session_id=self.session_id,
                item_count=len(update.items),
                error=str(update.error),
            )
        if self._on_catalog_update is not None:
            self._on_catalog_update(update)
