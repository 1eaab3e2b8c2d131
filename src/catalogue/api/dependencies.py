"""Shared dependencies for the menu and cart routers.

The application sets the mirror once at startup; routers receive it through
FastAPI's dependency injection.
"""

from catalogue.mirror import CatalogMirror

_catalog_mirror: CatalogMirror | None = None


def set_catalog_mirror(mirror: CatalogMirror | None) -> None:
    """Set the process-wide catalog mirror. Called by the app during startup."""
    global _catalog_mirror
    _catalog_mirror = mirror


def get_catalog_mirror() -> CatalogMirror:
    """Catalog mirror for dependency injection."""
    if _catalog_mirror is None:
        raise RuntimeError("Catalog mirror not initialized")
    return _catalog_mirror
