"""Catalog Mirror: a local, continuously updated copy of the live catalog.

The mirror keeps one read-only mapping of item id → CatalogItem. Every source
delivery (a one-shot pull or a live-watch notification) carries the complete
record set and replaces the mapping wholesale; deliveries are applied in
arrival order, so the last one to arrive wins.

Subscribers receive a ``CatalogUpdate`` on every delivery. Source failures
travel the same way, as an update carrying the error together with the
last-known mapping, so a subscriber never has to guard against exceptions
from the feed.
"""

import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from types import MappingProxyType

import structlog

from catalogue.errors import SourceUnreachable
from catalogue.item.item import CatalogItem
from catalogue.source.port import CatalogSource, SourceRecord, SourceWatch

logger = structlog.get_logger(__name__)

EMPTY_CATALOG: Mapping[str, CatalogItem] = MappingProxyType({})


@dataclass(frozen=True)
class CatalogUpdate:
    """One delivery from the mirror to a subscriber."""

    items: Mapping[str, CatalogItem]
    error: Exception | None = None
    received_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def ok(self) -> bool:
        return self.error is None


UpdateCallback = Callable[[CatalogUpdate], None]


class CatalogSubscription:
    """Handle returned by ``CatalogMirror.subscribe``.

    Once ``unsubscribe()`` returns, the callback is never invoked again: a
    delivery in progress on another thread finishes first, later ones are
    dropped.
    """

    def __init__(self, mirror: "CatalogMirror", on_update: UpdateCallback) -> None:
        self._mirror = mirror
        self._on_update = on_update
        self._lock = threading.RLock()
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def unsubscribe(self) -> None:
        with self._lock:
            if not self._active:
                return
            self._active = False
        self._mirror._detach(self)

    def _deliver(self, update: CatalogUpdate) -> None:
        with self._lock:
            if not self._active:
                return
            try:
                self._on_update(update)
            except Exception:
                # A faulty subscriber must not break delivery to the others
                logger.exception("Catalog subscriber raised during update")


class CatalogMirror:
    """Local mirror of one catalog collection."""

    def __init__(self, source: CatalogSource, collection: str = "menuItems") -> None:
        self._source = source
        self._collection = collection
        self._lock = threading.RLock()
        # Held across replace and notify so subscribers see updates in the
        # order the mapping was replaced
        self._delivery_lock = threading.RLock()
        self._items: Mapping[str, CatalogItem] = EMPTY_CATALOG
        self._subscriptions: list[CatalogSubscription] = []
        self._watch: SourceWatch | None = None
        self._watching = False
        self._closed = False
        self.last_error: Exception | None = None
        self.last_updated_at: datetime | None = None

    @property
    def source(self) -> CatalogSource:
        return self._source

    @property
    def collection(self) -> str:
        return self._collection

    @property
    def items(self) -> Mapping[str, CatalogItem]:
        """Current read-only mapping; replaced, never edited, on each update."""
        return self._items

    @property
    def closed(self) -> bool:
        return self._closed

    def get(self, item_id: str) -> CatalogItem | None:
        return self._items.get(str(item_id))

    def available_items(self) -> list[CatalogItem]:
        """Items that can be ordered, oldest first (the menu's display order)."""
        items = [item for item in self._items.values() if item.available]
        return sorted(
            items,
            key=lambda item: (item.created_at is None, item.created_at or datetime.min.replace(tzinfo=UTC), item.name),
        )

    # -------------------------------------------------------------------
    # Reads from the source
    # -------------------------------------------------------------------
    def fetch_snapshot(self) -> Mapping[str, CatalogItem]:
        """Pull the whole collection once and replace the local mapping.

        Raises ``SourceUnreachable`` on failure; the last-known mapping is
        kept as it was. A successful pull also reopens the live watch if an
        earlier attempt to open it failed.
        """
        try:
            records = self._source.list_records(self._collection)
        except SourceUnreachable as exc:
            self.last_error = exc
            logger.warning(
                "Catalog snapshot failed, keeping last-known items",
                collection=self._collection,
                item_count=len(self._items),
                error=str(exc),
            )
            raise

        with self._delivery_lock:
            items = self._replace(records)
            self._notify(CatalogUpdate(items=items))
        self._ensure_watch()
        return items

    def subscribe(self, on_update: UpdateCallback) -> CatalogSubscription:
        """Register ``on_update`` for every future catalog delivery.

        The first subscriber opens the live watch on the source. Later
        subscribers immediately receive the current mapping so they never wait
        for the next change to render.
        """
        subscription = CatalogSubscription(self, on_update)

        with self._lock:
            if self._closed:
                subscription._active = False
                return subscription
            self._subscriptions.append(subscription)

        if not self._ensure_watch():
            with self._delivery_lock:
                subscription._deliver(CatalogUpdate(items=self._items, error=self.last_error))

        return subscription

    def close(self) -> None:
        """Cancel the live watch and every subscription."""
        with self._lock:
            self._closed = True
            subscriptions, self._subscriptions = self._subscriptions, []
            watch, self._watch = self._watch, None
            self._watching = False

        for subscription in subscriptions:
            subscription.unsubscribe()
        if watch is not None:
            watch.cancel()
        logger.debug("Catalog mirror closed", collection=self._collection)

    # -------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------
    def _ensure_watch(self) -> bool:
        """Open the live watch when subscribers exist and none is open.

        Returns True if this call attempted to open it.
        """
        with self._lock:
            if self._closed or self._watching or not self._subscriptions:
                return False
            self._watching = True
        self._start_watch()
        return True

    def _start_watch(self) -> None:
        try:
            watch = self._source.watch(self._collection, self._on_records, self._on_error)
        except SourceUnreachable as exc:
            watch = None
            self._on_error(exc)

        with self._lock:
            if watch is None or not watch.active:
                # The next successful snapshot or new subscriber tries again
                self._watching = False
                return
            if self._closed or not self._subscriptions:
                self._watching = False
                cancel_now = True
            else:
                self._watch = watch
                cancel_now = False
        if cancel_now:
            watch.cancel()

    def _on_records(self, records: list[SourceRecord]) -> None:
        if self._closed:
            return
        with self._delivery_lock:
            items = self._replace(records)
            self._notify(CatalogUpdate(items=items))

    def _on_error(self, error: Exception) -> None:
        if self._closed:
            return
        with self._delivery_lock:
            self.last_error = error
            logger.warning(
                "Catalog feed reported an error, operating on last-known items",
                collection=self._collection,
                item_count=len(self._items),
                error=str(error),
            )
            self._notify(CatalogUpdate(items=self._items, error=error))

    def _replace(self, records: list[SourceRecord]) -> Mapping[str, CatalogItem]:
        parsed: dict[str, CatalogItem] = {}
        for record in records:
            try:
                parsed[record.record_id] = CatalogItem.from_record(record.record_id, record.data)
            except ValueError as exc:
                logger.warning("Skipping malformed catalog record", record_id=record.record_id, error=str(exc))

        items = MappingProxyType(parsed)
        with self._lock:
            if self._closed:
                return self._items
            self._items = items
            self.last_error = None
            self.last_updated_at = datetime.now(UTC)
        logger.debug("Catalog mirror updated", collection=self._collection, item_count=len(items))
        return items

    def _notify(self, update: CatalogUpdate) -> None:
        with self._lock:
            subscriptions = list(self._subscriptions)
        for subscription in subscriptions:
            subscription._deliver(update)

    def _detach(self, subscription: CatalogSubscription) -> None:
        with self._lock:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)
            watch = None
            if not self._subscriptions and self._watching:
                watch, self._watch = self._watch, None
                self._watching = False
        if watch is not None:
            watch.cancel()
