"""Order persistence service."""
from decimal import Decimal
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc
from sqlalchemy.orm import selectinload

from foodmood.core.exceptions import InvalidStatusTransition
from foodmood.db.models import Order, OrderLine
from foodmood.services.ordering.models import ALLOWED_STATUS_TRANSITIONS, OrderStatus


class OrderPersistenceService:
    """
    Service for persisting order data.

    ``create_order`` and ``add_order_line`` only flush, so an order and its
    lines land in the same transaction. The caller commits or rolls back.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_order(
        self,
        user_id: int,
        restaurant_id: int,
        total: Decimal,
        delivery_address: str,
        payment_method: str,
        status: str = OrderStatus.PENDING.value,
    ) -> Order:
        """Stage a new order and assign its id."""
        order = Order(
            user_id=user_id,
            restaurant_id=restaurant_id,
            status=status,
            total=total,
            delivery_address=delivery_address,
            payment_method=payment_method,
        )
        self.db.add(order)
        await self.db.flush()
        return order

    async def add_order_line(
        self, order_id: int, menu_item_id: int, quantity: int, price: Decimal
    ) -> OrderLine:
        """Stage a line for an order."""
        line = OrderLine(
            order_id=order_id,
            menu_item_id=menu_item_id,
            quantity=quantity,
            price=price,
        )
        self.db.add(line)
        await self.db.flush()
        return line

    async def get_order_by_id(self, order_id: int) -> Optional[Order]:
        """Get order by ID with lines."""
        result = await self.db.execute(
            select(Order)
            .where(Order.id == order_id)
            .options(selectinload(Order.lines))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_orders_by_user(self, user_id: int, limit: int = 100) -> List[Order]:
        """Get a user's orders, newest first."""
        result = await self.db.execute(
            select(Order)
            .where(Order.user_id == user_id)
            .options(selectinload(Order.lines))
            .order_by(desc(Order.created_at), desc(Order.id))
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def get_latest_order_by_user(self, user_id: int) -> Optional[Order]:
        """Get a user's most recent order."""
        orders = await self.get_orders_by_user(user_id, limit=1)
        return orders[0] if orders else None

    async def update_status(self, order_id: int, status: OrderStatus) -> Optional[Order]:
        """
        Move an order to a new status and commit.

        Raises:
            InvalidStatusTransition: if the lifecycle does not allow the move
        """
        order = await self.get_order_by_id(order_id)
        if order:
            current = OrderStatus(order.status)
            if status not in ALLOWED_STATUS_TRANSITIONS[current]:
                raise InvalidStatusTransition(current.value, status.value)
            order.status = status.value
            await self.db.commit()
            await self.db.refresh(order)
        return order
