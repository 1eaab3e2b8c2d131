"""In-memory catalog source for development and testing.

Holds collections in process memory and pushes the full record set to every
active watch whenever a record is added, replaced or deleted, the same way a
real-time document store re-delivers a query snapshot. It can be configured
at runtime to fail, to exercise the mirror's degraded mode.
"""

import threading
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from catalogue.errors import SourceUnreachable
from catalogue.source.port import CatalogSource, ErrorCallback, RecordsCallback, SourceRecord, SourceWatch


class InMemoryWatch(SourceWatch):
    def __init__(self, source: "InMemoryCatalogSource", collection: str, on_records: RecordsCallback, on_error: ErrorCallback):
        self.source = source
        self.collection = collection
        self.on_records = on_records
        self.on_error = on_error
        self.active = True

    def cancel(self) -> None:
        self.active = False
        self.source._detach(self)


class InMemoryCatalogSource(CatalogSource):
    """Configurable in-memory catalog source."""

    def __init__(self) -> None:
        self.should_fail: bool = False
        self.failure_reason: str = "Catalog source unavailable"
        self.calls: list[dict] = []
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}
        self._watches: list[InMemoryWatch] = []
        self._lock = threading.RLock()

    def configure(self, should_fail: bool, failure_reason: str = "Catalog source unavailable") -> None:
        """Configure source behavior at runtime."""
        self.should_fail = should_fail
        self.failure_reason = failure_reason

    # -------------------------------------------------------------------
    # CatalogSource
    # -------------------------------------------------------------------
    def list_records(self, collection: str) -> list[SourceRecord]:
        self.calls.append({"method": "list_records", "collection": collection})
        if self.should_fail:
            raise SourceUnreachable(self.failure_reason)
        return self._records(collection)

    def watch(self, collection: str, on_records: RecordsCallback, on_error: ErrorCallback) -> SourceWatch:
        self.calls.append({"method": "watch", "collection": collection})
        watch = InMemoryWatch(self, collection, on_records, on_error)
        if self.should_fail:
            watch.active = False
            on_error(SourceUnreachable(self.failure_reason))
            return watch

        with self._lock:
            self._watches.append(watch)
        on_records(self._records(collection))
        return watch

    def add_record(self, collection: str, record: dict[str, Any]) -> str:
        self.calls.append({"method": "add_record", "collection": collection, "record": dict(record)})
        if self.should_fail:
            raise SourceUnreachable(self.failure_reason)
        record_id = uuid4().hex[:20]
        self.put_record(collection, record_id, record)
        return record_id

    # -------------------------------------------------------------------
    # Test and seeding helpers
    # -------------------------------------------------------------------
    def put_record(self, collection: str, record_id: str, record: dict[str, Any]) -> None:
        """Create or replace a record and notify watchers."""
        data = dict(record)
        data.setdefault("createdAt", datetime.now(UTC))
        with self._lock:
            self._collections.setdefault(collection, {})[record_id] = data
        self._publish(collection)

    def update_record(self, collection: str, record_id: str, **changes: Any) -> None:
        """Merge field changes into an existing record and notify watchers."""
        with self._lock:
            self._collections[collection][record_id].update(changes)
        self._publish(collection)

    def delete_record(self, collection: str, record_id: str) -> None:
        with self._lock:
            self._collections.get(collection, {}).pop(record_id, None)
        self._publish(collection)

    def interrupt(self, collection: str, reason: str | None = None) -> None:
        """Report a connection failure to every active watch on the collection."""
        error = SourceUnreachable(reason or self.failure_reason)
        for watch in self._active_watches(collection):
            watch.on_error(error)

    def watch_count(self, collection: str) -> int:
        return len(self._active_watches(collection))

    # -------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------
    def _records(self, collection: str) -> list[SourceRecord]:
        with self._lock:
            documents = self._collections.get(collection, {})
            return [SourceRecord(record_id=key, data=dict(value)) for key, value in documents.items()]

    def _active_watches(self, collection: str) -> list[InMemoryWatch]:
        with self._lock:
            return [w for w in self._watches if w.active and w.collection == collection]

    def _publish(self, collection: str) -> None:
        records = self._records(collection)
        for watch in self._active_watches(collection):
            watch.on_records(records)

    def _detach(self, watch: InMemoryWatch) -> None:
        with self._lock:
            if watch in self._watches:
                self._watches.remove(watch)
