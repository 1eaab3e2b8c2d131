"""Catalogue errors."""


class CatalogError(Exception):
    """Base class for catalog failures."""


class SourceUnreachable(CatalogError):
    """The external catalog source could not be read from or written to."""
