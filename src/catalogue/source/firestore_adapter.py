"""Firestore catalog source adapter.

Reads the menu collection with ``stream()`` for one-shot pulls and
``on_snapshot()`` for the live feed. Firestore re-delivers the full query
snapshot on every change, which is exactly the replace-the-world contract the
mirror relies on.
"""

from typing import Any

import structlog
from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import DefaultCredentialsError

from catalogue.errors import SourceUnreachable
from catalogue.source.port import CatalogSource, ErrorCallback, RecordsCallback, SourceRecord, SourceWatch
from shared.firebase import get_firestore_client

logger = structlog.get_logger(__name__)

_IO_ERRORS = (GoogleAPIError, DefaultCredentialsError)


def _to_records(documents) -> list[SourceRecord]:
    return [SourceRecord(record_id=doc.id, data=doc.to_dict() or {}) for doc in documents]


class FirestoreWatch(SourceWatch):
    def __init__(self, watch) -> None:
        self._watch = watch

    def cancel(self) -> None:
        if self._watch is not None:
            self._watch.unsubscribe()
            self._watch = None

    @property
    def active(self) -> bool:
        return self._watch is not None


class InactiveWatch(SourceWatch):
    """Returned when the watch could not be established."""

    active = False

    def cancel(self) -> None:
        pass


class FirestoreCatalogSource(CatalogSource):
    """Catalog source backed by a Firestore collection."""

    def __init__(self, client=None, timeout: float = 10.0) -> None:
        self._client = client
        self.timeout = timeout

    @property
    def client(self):
        if self._client is None:
            self._client = get_firestore_client()
        return self._client

    def list_records(self, collection: str) -> list[SourceRecord]:
        try:
            documents = self.client.collection(collection).stream(timeout=self.timeout)
            return _to_records(documents)
        except _IO_ERRORS as exc:
            raise SourceUnreachable(f"Failed to read '{collection}': {exc}") from exc

    def watch(self, collection: str, on_records: RecordsCallback, on_error: ErrorCallback) -> SourceWatch:
        def _on_snapshot(documents, changes, read_time):  # noqa: ARG001
            on_records(_to_records(documents))

        try:
            watch = self.client.collection(collection).on_snapshot(_on_snapshot)
        except _IO_ERRORS as exc:
            logger.warning("Catalog watch could not be established", collection=collection, error=str(exc))
            on_error(SourceUnreachable(f"Failed to watch '{collection}': {exc}"))
            return InactiveWatch()
        return FirestoreWatch(watch)

    def add_record(self, collection: str, record: dict[str, Any]) -> str:
        try:
            _, reference = self.client.collection(collection).add(record, timeout=self.timeout)
        except _IO_ERRORS as exc:
            raise SourceUnreachable(f"Failed to write to '{collection}': {exc}") from exc
        return reference.id
