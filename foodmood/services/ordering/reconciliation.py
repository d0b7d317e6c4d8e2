"""Check a client-built order against the catalog and rebuild it as a cart."""
import logging

from foodmood.core.exceptions import (
    CatalogItemNotFound,
    EmptyCart,
    OrderValidationError,
)
from foodmood.services.cart.models import Cart
from foodmood.services.cart.pricing import PricingPolicy
from foodmood.services.catalog.repository import CatalogRepository
from foodmood.services.ordering.models import OrderRequest

logger = logging.getLogger(__name__)


async def build_cart_from_request(
    order_request: OrderRequest,
    catalog_repository: CatalogRepository,
    pricing: PricingPolicy,
) -> Cart:
    """
    Rebuild a submitted order as a server-side cart.

    Every item must exist in the catalog, belong to ``restaurant_id`` and
    carry the catalog price. The client total must equal the total the
    server computes from those items.

    Raises:
        EmptyCart: if the request has no items
        OrderValidationError: on any mismatch
    """
    if not order_request.items:
        raise EmptyCart()

    cart = Cart(pricing=pricing)
    for item in order_request.items:
        try:
            candidate = await catalog_repository.get_cart_candidate(item.menu_item_id)
        except CatalogItemNotFound as e:
            raise OrderValidationError(str(e)) from e

        if candidate.restaurant_id != order_request.restaurant_id:
            raise OrderValidationError(
                f"Menu item {item.menu_item_id} does not belong to restaurant "
                f"{order_request.restaurant_id}"
            )
        if candidate.price != item.price:
            raise OrderValidationError(
                f"Price of menu item {item.menu_item_id} changed: "
                f"submitted {item.price}, current {candidate.price}"
            )

        line = cart.add_item(candidate)
        for _ in range(item.quantity - 1):
            cart.increment_quantity(line.id)

    expected_total = cart.compute_total()
    if expected_total != order_request.total:
        logger.warning(
            f"[ORDERS] Total mismatch - submitted: {order_request.total}, computed: {expected_total}"
        )
        raise OrderValidationError(
            f"Order total {order_request.total} does not match computed total {expected_total}"
        )
    return cart
