"""Storefront FastAPI application.

Serves the menu (catalogue domain) and customer carts with checkout
(ordering domain). Each request is wrapped in the correct domain context based
on URL prefix.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from contextlib import asynccontextmanager

import structlog

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# Domains are initialized at module level so uvicorn workers share them.
from catalogue.domain import catalogue  # noqa: E402
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from ordering.domain import ordering  # noqa: E402
from protean.integrations.fastapi import register_exception_handlers

from catalogue.api.dependencies import set_catalog_mirror
from catalogue.errors import SourceUnreachable
from catalogue.mirror import CatalogMirror
from catalogue.source import get_catalog_source
from shared.settings import get_settings

catalogue.init()
ordering.init()

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Route-to-domain mapping
# ---------------------------------------------------------------------------
_ROUTE_DOMAIN_MAP = {
    "/menu": catalogue,
    "/carts": ordering,
}


def _resolve_domain(path: str):
    """Return the domain for the given request path, or None."""
    for prefix, domain in _ROUTE_DOMAIN_MAP.items():
        if path.startswith(prefix):
            return domain
    return None


# ---------------------------------------------------------------------------
# Catalog mirror lifecycle
# ---------------------------------------------------------------------------
def _log_catalog_update(update) -> None:
    if update.ok:
        logger.info("Menu updated", item_count=len(update.items))
    else:
        logger.warning("Menu feed interrupted, serving last-known items", error=str(update.error))


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    mirror = CatalogMirror(get_catalog_source(), collection=settings.catalog_collection)
    try:
        mirror.fetch_snapshot()
    except SourceUnreachable:
        logger.warning("Menu unavailable at startup, serving an empty menu until the feed recovers")
    subscription = mirror.subscribe(_log_catalog_update)
    set_catalog_mirror(mirror)

    yield

    subscription.unsubscribe()
    mirror.close()
    set_catalog_mirror(None)


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Storefront API",
    description="Mobile storefront: menu catalog mirror, carts and checkout",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the correct Protean domain context for each request."""
    domain = _resolve_domain(request.url.path)
    if domain is not None:
        with domain.domain_context():
            response = await call_next(request)
        return response
    # No domain match, pass through (health check, docs, etc.)
    return await call_next(request)


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from catalogue.api import menu_router  # noqa: E402
from ordering.api.routes import cart_router  # noqa: E402

app.include_router(menu_router)
app.include_router(cart_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {
                "catalogue": {"name": catalogue.name},
                "ordering": {"name": ordering.name},
            },
        }
    )
