"""Catalog source port (abstract interface).

Defines the contract every catalog backend adapter implements, so the mirror
can run against InMemoryCatalogSource (dev/test) or FirestoreCatalogSource
(production) without code changes.

Adapters never raise from ``watch``: connection failures are handed to the
``on_error`` callback so the subscriber can keep its last-known data.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class SourceRecord:
    """One raw document from the catalog collection."""

    record_id: str
    data: dict[str, Any] = field(default_factory=dict)


RecordsCallback = Callable[[list[SourceRecord]], None]
ErrorCallback = Callable[[Exception], None]


class SourceWatch(ABC):
    """Handle for a live watch on a collection.

    ``active`` is False once the watch is cancelled, or when it could not be
    established in the first place.
    """

    active: bool = True

    @abstractmethod
    def cancel(self) -> None:
        """Stop delivering updates. Safe to call more than once."""
        ...


class CatalogSource(ABC):
    """Abstract catalog source interface."""

    @abstractmethod
    def list_records(self, collection: str) -> list[SourceRecord]:
        """Read every record in the collection once."""
        ...

    @abstractmethod
    def watch(
        self,
        collection: str,
        on_records: RecordsCallback,
        on_error: ErrorCallback,
    ) -> SourceWatch:
        """Stream the full record set of a collection.

        ``on_records`` receives the complete current record list on the first
        delivery and again after every addition, modification or deletion.
        """
        ...

    @abstractmethod
    def add_record(self, collection: str, record: dict[str, Any]) -> str:
        """Append a record and return its source-assigned id."""
        ...
