"""Runtime settings for the storefront, read from the environment."""

import os
from dataclasses import dataclass

SOURCE_BACKENDS = frozenset({"memory", "firestore"})


def _get_env(*keys: str, default: str | None = None) -> str | None:
    for key in keys:
        value = os.getenv(key)
        if value is not None and value.strip() != "":
            return value.strip()
    return default


def _get_backend(key: str) -> str:
    backend = (_get_env(key, default="memory") or "memory").lower()
    if backend not in SOURCE_BACKENDS:
        raise ValueError(f"{key} must be one of {sorted(SOURCE_BACKENDS)}, got {backend!r}")
    return backend


@dataclass(frozen=True)
class Settings:
    """Storefront configuration.

    ``catalog_source`` and ``order_sink`` select the adapter behind each port:
    ``memory`` for development and tests, ``firestore`` for the hosted backend.
    """

    environment: str = "development"
    catalog_source: str = "memory"
    order_sink: str = "memory"
    catalog_collection: str = "menuItems"
    orders_collection: str = "orders"
    firebase_credentials_path: str | None = None
    io_timeout: float = 10.0

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            environment=(_get_env("ENV", "ENVIRONMENT", "PROTEAN_ENV", default="development") or "development").lower(),
            catalog_source=_get_backend("STOREFRONT_CATALOG_SOURCE"),
            order_sink=_get_backend("STOREFRONT_ORDER_SINK"),
            catalog_collection=_get_env("STOREFRONT_CATALOG_COLLECTION", default="menuItems"),
            orders_collection=_get_env("STOREFRONT_ORDERS_COLLECTION", default="orders"),
            firebase_credentials_path=_get_env("FIREBASE_CREDENTIALS_PATH"),
            io_timeout=float(_get_env("STOREFRONT_IO_TIMEOUT", default="10")),
        )


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return the process settings, loading them from the environment on first use."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def reset_settings() -> None:
    """Forget cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
