"""Admin item entry: validate a new menu item and append it to the catalog source.

The source is append-only from here; the new item reaches every mirror
through the normal live feed, not through this module.
"""

from datetime import UTC, datetime

import structlog
from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Float, String, Text

from catalogue.domain import catalogue
from catalogue.errors import SourceUnreachable
from catalogue.source.port import CatalogSource

logger = structlog.get_logger(__name__)

MENU_CATEGORIES = ("Pizza", "Burgers", "Salads", "Pasta", "Desserts", "Beverages", "Tacos", "Wraps")
DEFAULT_CATEGORY = "Other"


def menu_category(value: str | None) -> str:
    """Match ``value`` against the known menu categories, ignoring case.

    Blank or unknown categories file the item under ``DEFAULT_CATEGORY``.
    """
    label = (value or "").strip()
    for category in MENU_CATEGORIES:
        if category.lower() == label.lower():
            return category
    if label:
        logger.info("Unknown menu category, filing under default", category=label, default=DEFAULT_CATEGORY)
    return DEFAULT_CATEGORY


@catalogue.value_object
class NewCatalogItem:
    """Value object for an item submitted through the admin path."""

    name: String(required=True, max_length=255)
    description: Text(required=True)
    price: Float(required=True)
    category: String(max_length=100)
    image_url: String(required=True, max_length=2048)

    @invariant.post
    def text_fields_must_not_be_blank(self):
        errors = {}
        for field_name in ("name", "description", "image_url"):
            value = getattr(self, field_name)
            if value is None or not str(value).strip():
                errors[field_name] = [f"{field_name.replace('_', ' ').capitalize()} is required"]
        if errors:
            raise ValidationError(errors)

    @invariant.post
    def price_must_be_positive(self):
        if self.price is None or self.price <= 0:
            raise ValidationError({"price": ["Please enter a valid price"]})

    def to_record(self, created_at: datetime | None = None) -> dict:
        """Shape the item the way the catalog collection stores it."""
        return {
            "name": self.name.strip(),
            "description": self.description.strip(),
            "price": float(self.price),
            "category": menu_category(self.category),
            "imageUrl": self.image_url.strip(),
            "createdAt": created_at or datetime.now(UTC),
            "available": True,
        }


def publish_item(source: CatalogSource, draft: NewCatalogItem, collection: str = "menuItems") -> str:
    """Append ``draft`` to the catalog collection and return the new item id."""
    record = draft.to_record()
    try:
        item_id = source.add_record(collection, record)
    except SourceUnreachable:
        logger.error("Failed to add menu item", collection=collection, name=record["name"])
        raise

    logger.info("Menu item added", collection=collection, item_id=item_id, name=record["name"])
    return item_id
