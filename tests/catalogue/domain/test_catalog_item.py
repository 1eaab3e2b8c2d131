"""Tests for CatalogItem snapshots built from raw source records."""

from datetime import UTC, datetime
from decimal import Decimal

import pytest

from catalogue.item.item import CatalogItem, parse_price


class TestParsePrice:
    def test_float_uses_its_shortest_form(self):
        assert parse_price(7.5) == Decimal("7.5")
        assert parse_price(0.1) == Decimal("0.1")

    def test_integer_price(self):
        assert parse_price(10) == Decimal("10")

    def test_numeric_string(self):
        assert parse_price(" 12.50 ") == Decimal("12.50")

    def test_zero_is_allowed(self):
        assert parse_price(0) == Decimal("0")

    @pytest.mark.parametrize("value", [None, True, "abc", "", -1, "-0.01", float("nan"), float("inf")])
    def test_rejects_unusable_values(self, value):
        with pytest.raises(ValueError):
            parse_price(value)


class TestCatalogItemFromRecord:
    def test_maps_source_fields(self):
        created = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)
        item = CatalogItem.from_record(
            "item-1",
            {
                "name": "Margherita",
                "description": "Tomato and mozzarella",
                "price": 12.5,
                "imageUrl": "https://images.example.com/m.jpg",
                "category": "Pizza",
                "available": True,
                "createdAt": created,
            },
        )
        assert item.item_id == "item-1"
        assert item.name == "Margherita"
        assert item.description == "Tomato and mozzarella"
        assert item.unit_price == Decimal("12.5")
        assert item.image_ref == "https://images.example.com/m.jpg"
        assert item.category == "Pizza"
        assert item.available is True
        assert item.created_at == created

    def test_missing_optional_fields_get_defaults(self):
        item = CatalogItem.from_record("item-2", {"price": 3})
        assert item.name == ""
        assert item.description == ""
        assert item.image_ref == ""
        assert item.category is None
        assert item.created_at is None

    def test_available_defaults_to_true(self):
        item = CatalogItem.from_record("item-3", {"name": "Soda", "price": 2})
        assert item.available is True

    def test_unavailable_flag_is_kept(self):
        item = CatalogItem.from_record("item-4", {"name": "Soda", "price": 2, "available": False})
        assert item.available is False

    @pytest.mark.parametrize("value", ["false", "yes", 0, 1])
    def test_non_boolean_available_flag_hides_the_item(self, value):
        item = CatalogItem.from_record("item-7", {"name": "Soda", "price": 2, "available": value})
        assert item.available is False

    def test_null_available_flag_counts_as_missing(self):
        item = CatalogItem.from_record("item-7", {"name": "Soda", "price": 2, "available": None})
        assert item.available is True

    def test_iso_created_at_is_parsed(self):
        item = CatalogItem.from_record("item-5", {"price": 1, "createdAt": "2024-05-01T12:00:00+00:00"})
        assert item.created_at == datetime(2024, 5, 1, 12, 0, tzinfo=UTC)

    def test_created_at_without_offset_is_taken_as_utc(self):
        item = CatalogItem.from_record("item-8", {"price": 1, "createdAt": "2024-01-01T10:00:00"})
        assert item.created_at == datetime(2024, 1, 1, 10, 0, tzinfo=UTC)

    def test_naive_datetime_created_at_is_taken_as_utc(self):
        item = CatalogItem.from_record("item-9", {"price": 1, "createdAt": datetime(2024, 1, 1, 10, 0)})
        assert item.created_at.tzinfo is UTC

    def test_unparseable_created_at_is_dropped(self):
        item = CatalogItem.from_record("item-6", {"price": 1, "createdAt": "yesterday"})
        assert item.created_at is None

    def test_missing_price_is_rejected(self):
        with pytest.raises(ValueError):
            CatalogItem.from_record("item-7", {"name": "Mystery"})

    def test_item_is_immutable(self):
        item = CatalogItem.from_record("item-8", {"name": "Soda", "price": 2})
        with pytest.raises(AttributeError):
            item.name = "Cola"
