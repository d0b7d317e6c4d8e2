"""Order API endpoints."""
import logging
from decimal import Decimal
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from foodmood.api.auth import require_auth, require_customer
from foodmood.core.dependencies import get_catalog_repository
from foodmood.core.exceptions import (
    EmptyCart,
    OrderValidationError,
    PersistenceFailure,
    SubmissionInProgress,
    Unauthenticated,
)
from foodmood.db.database import get_db
from foodmood.db.models import Order
from foodmood.services.cart.pricing import PricingPolicy
from foodmood.services.catalog.repository import CatalogRepository
from foodmood.services.ordering.models import Identity, OrderRequest
from foodmood.services.ordering.reconciliation import build_cart_from_request
from foodmood.services.ordering.submission import OrderSubmissionService, user_submission_guard
from foodmood.services.persistence.orders import OrderPersistenceService


router = APIRouter()
logger = logging.getLogger(__name__)


class OrderLineResponse(BaseModel):
    """Order line response model."""
    id: int
    menu_item_id: int
    quantity: int
    price: Decimal

    class Config:
        from_attributes = True


class OrderResponse(BaseModel):
    """Order response model."""
    id: int
    user_id: int
    restaurant_id: int
    status: str
    total: Decimal
    delivery_address: str
    payment_method: str
    created_at: str
    lines: List[OrderLineResponse] = []


def to_order_response(order: Order) -> OrderResponse:
    """Convert an Order with loaded lines to its response model."""
    return OrderResponse(
        id=order.id,
        user_id=order.user_id,
        restaurant_id=order.restaurant_id,
        status=order.status,
        total=order.total,
        delivery_address=order.delivery_address,
        payment_method=order.payment_method,
        created_at=order.created_at.isoformat() if order.created_at else "",
        lines=[OrderLineResponse.model_validate(line) for line in order.lines],
    )


async def submit_or_raise(
    service: OrderSubmissionService, cart, delivery, payment_method, identity: Identity
) -> Order:
    """Run a submission, translating domain errors into HTTP errors."""
    try:
        return await service.submit_order(cart, delivery, payment_method, identity)
    except Unauthenticated as e:
        raise HTTPException(status_code=401, detail=str(e))
    except EmptyCart as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SubmissionInProgress as e:
        raise HTTPException(status_code=409, detail=str(e))
    except PersistenceFailure as e:
        raise HTTPException(status_code=500, detail=f"{e}. Please try again.")


@router.post("/api/orders", status_code=201, response_model=OrderResponse)
async def create_order(
    order_request: OrderRequest,
    request: Request,
    identity: Identity = Depends(require_customer),
    catalog_repository: CatalogRepository = Depends(get_catalog_repository),
    db: AsyncSession = Depends(get_db),
):
    """
    Create an order from a client-built item list.

    Only one such order per user is processed at a time; a concurrent
    request gets 409.
    """
    logger.info(
        f"[ORDERS] Create request - restaurant: {order_request.restaurant_id}, "
        f"items: {len(order_request.items)}, "
        f"Client: {request.client.host if request.client else 'unknown'}"
    )
    try:
        with user_submission_guard(identity.user_id):
            try:
                cart = await build_cart_from_request(
                    order_request, catalog_repository, PricingPolicy.from_settings()
                )
            except (EmptyCart, OrderValidationError) as e:
                logger.info(f"[ORDERS] Rejected order request: {e}")
                raise HTTPException(status_code=400, detail=str(e))

            order = await submit_or_raise(
                OrderSubmissionService(db),
                cart,
                order_request.delivery_address,
                order_request.payment_method,
                identity,
            )
    except SubmissionInProgress as e:
        logger.info(f"[ORDERS] Concurrent order refused for user {identity.user_id}")
        raise HTTPException(status_code=409, detail=str(e))
    return to_order_response(order)


@router.get("/api/orders", response_model=List[OrderResponse])
async def get_orders(
    limit: int = 100,
    identity: Identity = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    """Get the current user's orders, newest first."""
    orders = await OrderPersistenceService(db).get_orders_by_user(identity.user_id, limit=limit)
    logger.info(f"[ORDERS] Found {len(orders)} orders for user {identity.user_id}")
    return [to_order_response(order) for order in orders]


@router.get("/api/orders/latest", response_model=OrderResponse)
async def get_latest_order(
    identity: Identity = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    """Get the current user's most recent order."""
    order = await OrderPersistenceService(db).get_latest_order_by_user(identity.user_id)
    if order is None:
        raise HTTPException(status_code=404, detail="No orders found")
    return to_order_response(order)


@router.get("/api/orders/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: int,
    identity: Identity = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    """Get one of the current user's orders."""
    order = await OrderPersistenceService(db).get_order_by_id(order_id)
    if order is None:
        raise HTTPException(status_code=404, detail="Order not found")
    if order.user_id != identity.user_id:
        logger.warning(
            f"[ORDERS] User {identity.user_id} tried to read order {order_id} of user {order.user_id}"
        )
        raise HTTPException(status_code=403, detail="Not authorized to view this order")
    return to_order_response(order)
