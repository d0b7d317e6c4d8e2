"""Order submission service."""
import asyncio
import logging
from contextlib import contextmanager
from typing import Iterator, Optional, Set, Union
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from foodmood.core import config
from foodmood.core.exceptions import (
    EmptyCart,
    PersistenceFailure,
    SubmissionInProgress,
    Unauthenticated,
)
from foodmood.db.models import Order
from foodmood.services.cart.models import Cart, CartLine
from foodmood.services.ordering.models import (
    DeliveryInfo,
    Identity,
    OrderStatus,
    PaymentMethod,
)
from foodmood.services.persistence.orders import OrderPersistenceService

logger = logging.getLogger(__name__)

# Users with a client-built order submission outstanding
_users_submitting: Set[int] = set()


@contextmanager
def user_submission_guard(user_id: int) -> Iterator[None]:
    """
    Allow one client-built order per user at a time.

    Must be entered before the first await of the request so the check and
    the claim happen together.

    Raises:
        SubmissionInProgress: if the user already has one outstanding
    """
    if user_id in _users_submitting:
        raise SubmissionInProgress()
    _users_submitting.add(user_id)
    try:
        yield
    finally:
        _users_submitting.discard(user_id)


class OrderSubmissionService:
    """Turns a cart into a persisted order."""

    def __init__(self, db: AsyncSession, timeout: Optional[float] = None):
        self.db = db
        self.order_persistence = OrderPersistenceService(db)
        self.timeout = timeout if timeout is not None else config.settings.order_submission_timeout

    async def submit_order(
        self,
        cart: Cart,
        delivery_info: Union[DeliveryInfo, str],
        payment_method: PaymentMethod,
        identity: Identity,
    ) -> Order:
        """
        Persist the cart as a pending order.

        The order and all of its lines are written in one transaction. The
        cart is left untouched; clearing it after success is up to the caller.

        Args:
            cart: Cart to submit
            delivery_info: Delivery details, or an already formatted address
            payment_method: cod or online
            identity: Caller identity

        Returns:
            The created order with its lines loaded

        Raises:
            Unauthenticated: if the identity has no user
            EmptyCart: if the cart has no lines
            SubmissionInProgress: if this cart is already being submitted
            PersistenceFailure: if the transaction failed or timed out
        """
        if not identity.is_authenticated:
            raise Unauthenticated()
        if cart.is_empty:
            raise EmptyCart()
        if cart.submission_in_flight:
            raise SubmissionInProgress()

        cart.begin_submission()
        try:
            # Snapshot before the first await so later cart edits cannot leak in
            lines = [line.model_copy() for line in cart.lines]
            restaurant_id = cart.current_restaurant_id
            total = cart.compute_total()
            if isinstance(delivery_info, DeliveryInfo):
                delivery_address = delivery_info.format_address()
            else:
                delivery_address = delivery_info

            logger.info(
                f"[ORDERS] Submitting order - user: {identity.user_id}, "
                f"restaurant: {restaurant_id}, lines: {len(lines)}, total: {total}"
            )

            try:
                order = await asyncio.wait_for(
                    self._persist(
                        identity.user_id,
                        restaurant_id,
                        total,
                        delivery_address,
                        payment_method,
                        lines,
                    ),
                    timeout=self.timeout,
                )
            except asyncio.TimeoutError as e:
                await self.db.rollback()
                logger.error(
                    f"[ORDERS] Submission timed out after {self.timeout}s - user: {identity.user_id}"
                )
                raise PersistenceFailure("Order submission timed out", cause=e) from e
            except SQLAlchemyError as e:
                await self.db.rollback()
                logger.error(
                    f"[ORDERS] Submission failed - user: {identity.user_id}, "
                    f"Error: {type(e).__name__}: {str(e)}",
                    exc_info=True,
                )
                raise PersistenceFailure("Failed to create order", cause=e) from e

            logger.info(f"[ORDERS] Order {order.id} committed with {len(lines)} lines")
            return order
        finally:
            cart.end_submission()

    async def _persist(
        self,
        user_id: int,
        restaurant_id: int,
        total,
        delivery_address: str,
        payment_method: PaymentMethod,
        lines: list[CartLine],
    ) -> Order:
        """
        Write the order and its lines, then commit.

        The returned order already carries its lines. Nothing is read back
        after the commit.
        """
        order = await self.order_persistence.create_order(
            user_id=user_id,
            restaurant_id=restaurant_id,
            total=total,
            delivery_address=delivery_address,
            payment_method=PaymentMethod(payment_method).value,
            status=OrderStatus.PENDING.value,
        )
        order_lines = []
        for line in lines:
            order_line = await self.order_persistence.add_order_line(
                order_id=order.id,
                menu_item_id=line.menu_item_id,
                quantity=line.quantity,
                price=line.price,
            )
            order_lines.append(order_line)
        await self.db.commit()
        set_committed_value(order, "lines", order_lines)
        return order
