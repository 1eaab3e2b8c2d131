"""Catalog item snapshot as delivered by the external catalog source."""

from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

import structlog

logger = structlog.get_logger(__name__)


def parse_price(value: Any) -> Decimal:
    """Convert a source ``price`` value into a non-negative Decimal.

    Floats go through their string form so 7.5 becomes Decimal("7.5"), not
    the binary expansion of 7.5.
    """
    if value is None or isinstance(value, bool):
        raise ValueError(f"Invalid price: {value!r}")
    try:
        price = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(f"Invalid price: {value!r}") from None
    if not price.is_finite() or price < 0:
        raise ValueError(f"Invalid price: {value!r}")
    return price


def parse_available(item_id: str, value: Any) -> bool:
    """Only a real boolean decides availability; an absent flag means available.

    Anything else (``"false"``, ``0``, ``"yes"``) is logged and the item is
    hidden until the record is corrected.
    """
    if value is None:
        return True
    if isinstance(value, bool):
        return value
    logger.warning("Catalog record has a non-boolean available flag, hiding it", item_id=item_id, available=repr(value))
    return False


@dataclass(frozen=True)
class CatalogItem:
    """Immutable copy of one catalog entry.

    The mirror never edits an item; every source notification produces new
    instances that replace the old ones wholesale.
    """

    item_id: str
    name: str
    description: str
    unit_price: Decimal
    image_ref: str
    category: str | None = None
    available: bool = True
    created_at: datetime | None = None

    @classmethod
    def from_record(cls, item_id: str, record: dict[str, Any]) -> "CatalogItem":
        """Build a snapshot from a raw source record.

        Raises ``ValueError`` when the record has no usable price.
        """
        created_at = record.get("createdAt")
        if isinstance(created_at, str):
            try:
                created_at = datetime.fromisoformat(created_at)
            except ValueError:
                created_at = None
        elif not isinstance(created_at, datetime):
            created_at = None
        if created_at is not None and created_at.tzinfo is None:
            # Timestamps without an offset are taken as UTC
            created_at = created_at.replace(tzinfo=UTC)

        category = record.get("category")

        return cls(
            item_id=str(item_id),
            name=str(record.get("name") or ""),
            description=str(record.get("description") or ""),
            unit_price=parse_price(record.get("price")),
            image_ref=str(record.get("imageUrl") or ""),
            category=str(category) if category else None,
            available=parse_available(str(item_id), record.get("available")),
            created_at=created_at,
        )
