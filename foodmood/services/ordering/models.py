"""Order models."""
from decimal import Decimal
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from foodmood.core.exceptions import InvalidDecimal
from foodmood.core.money import parse_decimal


def _request_decimal(value):
    # Bad client input is a validation error, not a data-integrity failure
    try:
        return parse_decimal(value)
    except InvalidDecimal as e:
        raise ValueError(str(e)) from None


class OrderStatus(str, Enum):
    """Order lifecycle status."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# pending -> processing -> completed | cancelled
ALLOWED_STATUS_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING},
    OrderStatus.PROCESSING: {OrderStatus.COMPLETED, OrderStatus.CANCELLED},
    OrderStatus.COMPLETED: set(),
    OrderStatus.CANCELLED: set(),
}


class PaymentMethod(str, Enum):
    """How the customer pays."""

    COD = "cod"
    ONLINE = "online"


class Identity(BaseModel):
    """Resolved caller identity."""

    user_id: Optional[int] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None


class DeliveryInfo(BaseModel):
    """Delivery details entered at checkout."""

    name: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    address: str = Field(min_length=1)
    city: str = Field(min_length=1)
    state: str = Field(min_length=1)
    zip: str = Field(min_length=1)
    instructions: Optional[str] = None

    def format_address(self) -> str:
        """Single-line address stored on the order."""
        return f"{self.address}, {self.city}, {self.state} {self.zip}"


class OrderItemRequest(BaseModel):
    """Line of a client-built order."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    menu_item_id: int
    quantity: int = Field(ge=1, le=100)
    price: Decimal

    @field_validator("price", mode="before")
    @classmethod
    def _parse_price(cls, value):
        return _request_decimal(value)


class OrderRequest(BaseModel):
    """
    Client-built order, as sent to POST /api/orders.

    Accepts camelCase keys (``restaurantId``, ``menuItemId``...) as well as
    snake_case.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    restaurant_id: int
    total: Decimal
    delivery_address: str = Field(min_length=1)
    payment_method: PaymentMethod
    items: List[OrderItemRequest]

    @field_validator("total", mode="before")
    @classmethod
    def _parse_total(cls, value):
        return _request_decimal(value)
