"""Cart API endpoints."""
import logging
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from foodmood.api.auth import require_customer
from foodmood.api.orders import OrderResponse, submit_or_raise, to_order_response
from foodmood.core.dependencies import get_cart, get_catalog_repository
from foodmood.core.exceptions import CatalogItemNotFound, CrossRestaurantConflict
from foodmood.db.database import get_db
from foodmood.services.cart.models import Cart, CartLine
from foodmood.services.catalog.repository import CatalogRepository
from foodmood.services.ordering.models import DeliveryInfo, Identity, PaymentMethod
from foodmood.services.ordering.submission import OrderSubmissionService

router = APIRouter()
logger = logging.getLogger(__name__)


class CartResponse(BaseModel):
    """Cart contents with derived prices."""
    lines: List[CartLine]
    current_restaurant_id: Optional[int] = None
    is_open: bool
    subtotal: Decimal
    delivery_fee: Decimal
    tax: Decimal
    total: Decimal


class AddItemRequest(BaseModel):
    """Add one unit of a menu item."""
    menu_item_id: int
    replace: bool = False


class InstructionsRequest(BaseModel):
    """Special instructions for a line."""
    instructions: str


class CheckoutRequest(BaseModel):
    """Checkout request model."""
    delivery: DeliveryInfo
    payment_method: PaymentMethod = PaymentMethod.COD


def to_cart_response(cart: Cart) -> CartResponse:
    return CartResponse(
        lines=cart.lines,
        current_restaurant_id=cart.current_restaurant_id,
        is_open=cart.is_open,
        subtotal=cart.compute_subtotal(),
        delivery_fee=cart.compute_delivery_fee(),
        tax=cart.compute_tax(),
        total=cart.compute_total(),
    )


@router.get("/api/cart", response_model=CartResponse)
async def get_cart_contents(cart: Cart = Depends(get_cart)):
    """Get the cart with subtotal, fee, tax and total."""
    return to_cart_response(cart)


@router.post("/api/cart/items", response_model=CartResponse)
async def add_cart_item(
    add_req: AddItemRequest,
    cart: Cart = Depends(get_cart),
    catalog_repository: CatalogRepository = Depends(get_catalog_repository),
):
    """
    Add a menu item to the cart.

    Adding from another restaurant is refused with 409 unless ``replace``
    is set, which empties the cart first.
    """
    try:
        candidate = await catalog_repository.get_cart_candidate(add_req.menu_item_id)
    except CatalogItemNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))

    try:
        line = cart.add_item(candidate, replace=add_req.replace)
    except CrossRestaurantConflict as e:
        logger.info(f"[CART] Cross-restaurant add refused: {e}")
        raise HTTPException(
            status_code=409,
            detail={
                "message": "Your cart contains items from another restaurant",
                "current_restaurant_id": e.current_restaurant_id,
                "requested_restaurant_id": e.requested_restaurant_id,
            },
        )

    logger.info(
        f"[CART] Added menu item {candidate.menu_item_id} - line {line.id}, qty {line.quantity}"
    )
    return to_cart_response(cart)


@router.delete("/api/cart/items/{line_id}", response_model=CartResponse)
async def remove_cart_item(line_id: int, cart: Cart = Depends(get_cart)):
    """Remove a line from the cart."""
    cart.remove_item(line_id)
    return to_cart_response(cart)


@router.post("/api/cart/items/{line_id}/increment", response_model=CartResponse)
async def increment_cart_item(line_id: int, cart: Cart = Depends(get_cart)):
    cart.increment_quantity(line_id)
    return to_cart_response(cart)


@router.post("/api/cart/items/{line_id}/decrement", response_model=CartResponse)
async def decrement_cart_item(line_id: int, cart: Cart = Depends(get_cart)):
    cart.decrement_quantity(line_id)
    return to_cart_response(cart)


@router.put("/api/cart/items/{line_id}/instructions", response_model=CartResponse)
async def set_cart_item_instructions(
    line_id: int,
    instructions_req: InstructionsRequest,
    cart: Cart = Depends(get_cart),
):
    """Attach special instructions to a line."""
    if cart.get_line(line_id) is None:
        raise HTTPException(status_code=404, detail=f"Cart line {line_id} not found")
    cart.set_instructions(line_id, instructions_req.instructions)
    return to_cart_response(cart)


@router.delete("/api/cart", response_model=CartResponse)
async def clear_cart(cart: Cart = Depends(get_cart)):
    cart.clear()
    return to_cart_response(cart)


@router.post("/api/cart/toggle", response_model=CartResponse)
async def toggle_cart(cart: Cart = Depends(get_cart)):
    cart.toggle()
    return to_cart_response(cart)


@router.post("/api/cart/close", response_model=CartResponse)
async def close_cart(cart: Cart = Depends(get_cart)):
    cart.close()
    return to_cart_response(cart)


@router.post("/api/cart/checkout", status_code=201, response_model=OrderResponse)
async def checkout(
    checkout_req: CheckoutRequest,
    cart: Cart = Depends(get_cart),
    identity: Identity = Depends(require_customer),
    db: AsyncSession = Depends(get_db),
):
    """
    Submit the cart as an order.

    The cart is cleared only once the order is committed; on failure it
    is kept so the user can retry.
    """
    order = await submit_or_raise(
        OrderSubmissionService(db),
        cart,
        checkout_req.delivery,
        checkout_req.payment_method,
        identity,
    )
    cart.clear()
    cart.close()
    logger.info(f"[CART] Checked out into order {order.id}, cart cleared")
    return to_order_response(order)
