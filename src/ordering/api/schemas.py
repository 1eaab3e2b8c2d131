"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer), separate from
internal Protean commands.
"""

from decimal import Decimal

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class CustomerInfoSchema(BaseModel):
    name: str
    phone: str
    address: str


class CartLineSchema(BaseModel):
    item_id: str
    name: str
    description: str
    unit_price: float
    image_ref: str
    quantity: int
    line_total: float


# ---------------------------------------------------------------------------
# Cart Request Schemas
# ---------------------------------------------------------------------------
class CreateCartRequest(BaseModel):
    session_id: str | None = None

    model_config = {"json_schema_extra": {"examples": [{"session_id": "sess-001"}]}}


class AddToCartRequest(BaseModel):
    item_id: str

    model_config = {"json_schema_extra": {"examples": [{"item_id": "Xb81kq0cWm3pA2Lr9dTe"}]}}


class SetQuantityRequest(BaseModel):
    # Range is checked by the cart so negative values get its error message
    quantity: int


class CheckoutRequest(BaseModel):
    customer: CustomerInfoSchema

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "customer": {
                        "name": "Jane Doe",
                        "phone": "+1 (555) 123-4567",
                        "address": "123 Main St, Springfield",
                    }
                }
            ]
        }
    }


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class CartIdResponse(BaseModel):
    cart_id: str


class CartResponse(BaseModel):
    cart_id: str
    items: list[CartLineSchema] = Field(default_factory=list)
    total_items: int = 0
    total_amount: float = 0.0


class OrderConfirmationResponse(BaseModel):
    order_id: str
    total_amount: float
    total_items: int

    @classmethod
    def from_amount(cls, order_id: str, total_amount: Decimal, total_items: int) -> "OrderConfirmationResponse":
        return cls(order_id=order_id, total_amount=float(total_amount), total_items=total_items)
