"""FastAPI routes for the Ordering domain: carts and checkout."""

from fastapi import APIRouter, Depends, HTTPException
from protean.utils.globals import current_domain

from catalogue.api.dependencies import get_catalog_mirror
from catalogue.mirror import CatalogMirror
from ordering.api.dependencies import get_order_placement
from ordering.api.schemas import (
    AddToCartRequest,
    CartIdResponse,
    CartLineSchema,
    CartResponse,
    CheckoutRequest,
    CreateCartRequest,
    OrderConfirmationResponse,
    SetQuantityRequest,
)
from ordering.cart.cart import ShoppingCart
from ordering.cart.items import (
    AddToCart,
    DecrementCartQuantity,
    IncrementCartQuantity,
    RemoveFromCart,
    SetCartQuantity,
)
from ordering.cart.management import ClearCart, CreateCart
from ordering.checkout.placement import CustomerInfo, OrderPlacement
from ordering.errors import ItemUnavailable, SinkUnreachable, SubmissionInFlight

cart_router = APIRouter(prefix="/carts", tags=["carts"])


def _cart_response(cart_id: str) -> CartResponse:
    cart = current_domain.repository_for(ShoppingCart).get(cart_id)
    snapshot = cart.checkout_snapshot()
    return CartResponse(
        cart_id=snapshot["cart_id"],
        items=[
            CartLineSchema(
                item_id=line["item_id"],
                name=line["name"],
                description=line["description"],
                unit_price=float(line["unit_price"]),
                image_ref=line["image_ref"],
                quantity=line["quantity"],
                line_total=float(line["line_total"]),
            )
            for line in snapshot["items"]
        ],
        total_items=snapshot["total_items"],
        total_amount=float(snapshot["total_amount"]),
    )


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
@cart_router.post("", status_code=201, response_model=CartIdResponse)
async def create_cart(body: CreateCartRequest) -> CartIdResponse:
    command = CreateCart(session_id=body.session_id)
    result = current_domain.process(command, asynchronous=False)
    return CartIdResponse(cart_id=result)


@cart_router.get("/{cart_id}", response_model=CartResponse)
async def get_cart(cart_id: str) -> CartResponse:
    return _cart_response(cart_id)


@cart_router.post("/{cart_id}/items", response_model=CartResponse)
async def add_cart_item(
    cart_id: str,
    body: AddToCartRequest,
    mirror: CatalogMirror = Depends(get_catalog_mirror),
) -> CartResponse:
    item = mirror.get(body.item_id)
    if item is None:
        raise ItemUnavailable({"item_id": [f"Item {body.item_id} is not on the menu"]})

    command = AddToCart(
        cart_id=cart_id,
        item_id=item.item_id,
        name=item.name,
        description=item.description,
        unit_price=float(item.unit_price),
        image_ref=item.image_ref,
        available=item.available,
    )
    current_domain.process(command, asynchronous=False)
    return _cart_response(cart_id)


@cart_router.put("/{cart_id}/items/{item_id}", response_model=CartResponse)
async def set_cart_item_quantity(cart_id: str, item_id: str, body: SetQuantityRequest) -> CartResponse:
    command = SetCartQuantity(cart_id=cart_id, item_id=item_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return _cart_response(cart_id)


@cart_router.post("/{cart_id}/items/{item_id}/increment", response_model=CartResponse)
async def increment_cart_item(cart_id: str, item_id: str) -> CartResponse:
    current_domain.process(IncrementCartQuantity(cart_id=cart_id, item_id=item_id), asynchronous=False)
    return _cart_response(cart_id)


@cart_router.post("/{cart_id}/items/{item_id}/decrement", response_model=CartResponse)
async def decrement_cart_item(cart_id: str, item_id: str) -> CartResponse:
    current_domain.process(DecrementCartQuantity(cart_id=cart_id, item_id=item_id), asynchronous=False)
    return _cart_response(cart_id)


@cart_router.delete("/{cart_id}/items/{item_id}", response_model=CartResponse)
async def remove_cart_item(cart_id: str, item_id: str) -> CartResponse:
    current_domain.process(RemoveFromCart(cart_id=cart_id, item_id=item_id), asynchronous=False)
    return _cart_response(cart_id)


@cart_router.delete("/{cart_id}/items", response_model=CartResponse)
async def clear_cart(cart_id: str) -> CartResponse:
    current_domain.process(ClearCart(cart_id=cart_id), asynchronous=False)
    return _cart_response(cart_id)


@cart_router.post("/{cart_id}/checkout", status_code=201, response_model=OrderConfirmationResponse)
async def checkout_cart(
    cart_id: str,
    body: CheckoutRequest,
    placement: OrderPlacement = Depends(get_order_placement),
) -> OrderConfirmationResponse:
    """Place the order, then clear the cart.

    1. Load the cart and validate the customer's details
    2. Submit the cart to the order sink on a worker thread
    3. Clear the cart once the sink has returned an order id, before the
       cart is released for another submission
    """
    cart = current_domain.repository_for(ShoppingCart).get(cart_id)
    customer = CustomerInfo(
        name=body.customer.name,
        phone=body.customer.phone,
        address=body.customer.address,
    )

    def clear_submitted_cart(confirmation) -> None:
        current_domain.process(ClearCart(cart_id=cart_id), asynchronous=False)

    try:
        confirmation = await placement.submit_async(cart, customer, on_accepted=clear_submitted_cart)
    except SubmissionInFlight as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except SinkUnreachable as exc:
        raise HTTPException(status_code=503, detail=f"Failed to place order. Please try again. ({exc})") from exc

    return OrderConfirmationResponse.from_amount(
        confirmation.order_id,
        confirmation.total_amount,
        confirmation.total_items,
    )
