"""Catalog source factory.

Provides get_catalog_source() / set_catalog_source() to swap implementations:
- InMemoryCatalogSource for development and testing
- FirestoreCatalogSource for production (STOREFRONT_CATALOG_SOURCE=firestore)
"""

from catalogue.source.fake_adapter import InMemoryCatalogSource
from catalogue.source.port import CatalogSource
from shared.settings import get_settings

_current_source: CatalogSource | None = None


def get_catalog_source() -> CatalogSource:
    """Return the current catalog source, built from settings on first use."""
    global _current_source
    if _current_source is None:
        settings = get_settings()
        if settings.catalog_source == "firestore":
            from catalogue.source.firestore_adapter import FirestoreCatalogSource

            _current_source = FirestoreCatalogSource(timeout=settings.io_timeout)
        else:
            _current_source = InMemoryCatalogSource()
    return _current_source


def set_catalog_source(source: CatalogSource) -> None:
    """Override the active catalog source (useful for tests)."""
    global _current_source
    _current_source = source


def reset_catalog_source() -> None:
    """Reset to the default source."""
    global _current_source
    _current_source = None
