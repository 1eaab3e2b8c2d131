"""Pydantic request/response schemas for the Catalogue (menu) API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


# --- Request Schemas ---


class AddMenuItemRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Margherita Pizza",
                    "description": "Tomato, mozzarella and fresh basil.",
                    "price": 12.5,
                    "category": "Pizza",
                    "image_url": "https://images.example.com/margherita.jpg",
                }
            ]
        }
    }

    name: str = Field(..., max_length=255)
    description: str
    price: float
    category: str | None = Field(None, max_length=100)
    image_url: str = Field(..., max_length=2048)


# --- Response Schemas ---


class MenuItemResponse(BaseModel):
    item_id: str
    name: str
    description: str
    price: float
    category: str | None = None
    image_url: str
    available: bool


class MenuResponse(BaseModel):
    items: list[MenuItemResponse]
    last_updated_at: datetime | None = None
    stale: bool = False


class MenuItemIdResponse(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"item_id": "Xb81kq0cWm3pA2Lr9dTe"}]}}

    item_id: str
