"""FastAPI endpoints for the Catalogue domain: the menu and admin item entry."""

import asyncio

from fastapi import APIRouter, Depends, HTTPException

from catalogue.api.dependencies import get_catalog_mirror
from catalogue.api.schemas import AddMenuItemRequest, MenuItemIdResponse, MenuItemResponse, MenuResponse
from catalogue.errors import SourceUnreachable
from catalogue.item.authoring import NewCatalogItem, publish_item
from catalogue.item.item import CatalogItem
from catalogue.mirror import CatalogMirror

menu_router = APIRouter(prefix="/menu", tags=["menu"])


def _menu_item(item: CatalogItem) -> MenuItemResponse:
    return MenuItemResponse(
        item_id=item.item_id,
        name=item.name,
        description=item.description,
        price=float(item.unit_price),
        category=item.category,
        image_url=item.image_ref,
        available=item.available,
    )


def _menu(mirror: CatalogMirror) -> MenuResponse:
    return MenuResponse(
        items=[_menu_item(item) for item in mirror.available_items()],
        last_updated_at=mirror.last_updated_at,
        stale=mirror.last_error is not None,
    )


@menu_router.get("", response_model=MenuResponse)
async def list_menu(mirror: CatalogMirror = Depends(get_catalog_mirror)) -> MenuResponse:
    return _menu(mirror)


@menu_router.post("/refresh", response_model=MenuResponse)
async def refresh_menu(mirror: CatalogMirror = Depends(get_catalog_mirror)) -> MenuResponse:
    try:
        await asyncio.to_thread(mirror.fetch_snapshot)
    except SourceUnreachable as exc:
        raise HTTPException(status_code=503, detail=f"Failed to fetch menu items: {exc}") from exc
    return _menu(mirror)


@menu_router.post("", status_code=201, response_model=MenuItemIdResponse)
async def add_menu_item(
    body: AddMenuItemRequest,
    mirror: CatalogMirror = Depends(get_catalog_mirror),
) -> MenuItemIdResponse:
    draft = NewCatalogItem(
        name=body.name,
        description=body.description,
        price=body.price,
        category=body.category,
        image_url=body.image_url,
    )
    try:
        item_id = await asyncio.to_thread(publish_item, mirror.source, draft, collection=mirror.collection)
    except SourceUnreachable as exc:
        raise HTTPException(status_code=503, detail=f"Failed to add menu item: {exc}") from exc
    return MenuItemIdResponse(item_id=item_id)
