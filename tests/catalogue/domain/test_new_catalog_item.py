"""Tests for the NewCatalogItem value object used by admin item entry."""

from datetime import UTC, datetime

import pytest
from protean.exceptions import ValidationError

from catalogue.item.authoring import DEFAULT_CATEGORY, NewCatalogItem


def _draft(**overrides):
    values = {
        "name": "Caesar Salad",
        "description": "Romaine, croutons, parmesan",
        "price": 9.25,
        "category": "Salads",
        "image_url": "https://images.example.com/caesar.jpg",
    }
    values.update(overrides)
    return NewCatalogItem(**values)


class TestNewCatalogItemValidation:
    def test_valid_draft(self):
        draft = _draft()
        assert draft.name == "Caesar Salad"
        assert draft.price == 9.25

    def test_zero_price_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _draft(price=0)
        assert "price" in exc.value.messages

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _draft(price=-4.0)
        assert "price" in exc.value.messages

    def test_missing_name_rejected(self):
        with pytest.raises(ValidationError):
            _draft(name=None)

    def test_blank_description_rejected(self):
        with pytest.raises(ValidationError):
            _draft(description="   ")

    def test_missing_image_rejected(self):
        with pytest.raises(ValidationError):
            _draft(image_url=None)

    def test_category_is_optional(self):
        draft = _draft(category=None)
        assert draft.category is None


class TestNewCatalogItemRecord:
    def test_record_shape(self):
        created = datetime(2024, 6, 1, tzinfo=UTC)
        record = _draft().to_record(created_at=created)
        assert record == {
            "name": "Caesar Salad",
            "description": "Romaine, croutons, parmesan",
            "price": 9.25,
            "category": "Salads",
            "imageUrl": "https://images.example.com/caesar.jpg",
            "createdAt": created,
            "available": True,
        }

    def test_missing_category_defaults(self):
        record = _draft(category=None).to_record()
        assert record["category"] == DEFAULT_CATEGORY

    def test_unknown_category_is_filed_under_default(self):
        record = _draft(category="Sushi").to_record()
        assert record["category"] == DEFAULT_CATEGORY

    def test_known_category_is_matched_ignoring_case(self):
        record = _draft(category="  desserts ").to_record()
        assert record["category"] == "Desserts"

    def test_text_is_trimmed(self):
        record = _draft(name="  Caesar Salad  ").to_record()
        assert record["name"] == "Caesar Salad"

    def test_created_at_defaults_to_now(self):
        record = _draft().to_record()
        assert record["createdAt"].tzinfo is not None
