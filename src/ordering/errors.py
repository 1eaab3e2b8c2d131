"""Ordering errors.

Input problems a customer can correct (an unavailable item, a negative
quantity, an empty cart) are ``ValidationError`` subclasses, so they carry
field-keyed messages and map to HTTP 400 through Protean's FastAPI handlers.
The remaining errors describe conflicts and I/O failures.
"""

from protean.exceptions import ValidationError


class ItemUnavailable(ValidationError):
    """The item cannot be added: it is unknown or marked unavailable."""


class InvalidQuantity(ValidationError):
    """A quantity was negative or not an integer."""


class EmptyCart(ValidationError):
    """Checkout was attempted with no lines in the cart."""


class StorefrontError(Exception):
    """Base class for non-validation ordering failures."""


class SubmissionInFlight(StorefrontError):
    """A checkout for this cart is already being submitted."""


class SinkUnreachable(StorefrontError):
    """The order sink could not accept the order."""


class SessionClosed(StorefrontError):
    """The storefront session was used after it was closed."""
