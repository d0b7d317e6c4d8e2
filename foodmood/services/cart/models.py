"""Cart state and the operations that mutate it."""
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field, PrivateAttr, field_validator

from foodmood.core.exceptions import CrossRestaurantConflict
from foodmood.core.money import parse_decimal, round_money
from foodmood.services.cart.pricing import PricingPolicy

ZERO = Decimal("0.00")


class CartCandidate(BaseModel):
    """Menu item selected by the user, about to be added to the cart."""

    menu_item_id: int
    name: str
    description: str = ""
    price: Decimal
    restaurant_id: int
    restaurant_name: str

    @field_validator("price", mode="before")
    @classmethod
    def _parse_price(cls, value):
        return parse_decimal(value)


class CartLine(BaseModel):
    """One cart entry for a distinct menu item."""

    id: int
    menu_item_id: int
    name: str
    description: str = ""
    price: Decimal
    quantity: int = 1
    restaurant_id: int
    restaurant_name: str
    special_instructions: Optional[str] = None


class Cart(BaseModel):
    """
    Shopping cart for a single restaurant.

    All lines share ``current_restaurant_id``, which is None exactly when
    the cart is empty. Totals are recomputed from the lines on every call.
    """

    lines: List[CartLine] = []
    current_restaurant_id: Optional[int] = None
    is_open: bool = False  # UI visibility only
    pricing: PricingPolicy = Field(default_factory=PricingPolicy.from_settings)

    _submission_in_flight: bool = PrivateAttr(default=False)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def submission_in_flight(self) -> bool:
        return self._submission_in_flight

    def begin_submission(self) -> None:
        self._submission_in_flight = True

    def end_submission(self) -> None:
        self._submission_in_flight = False

    def get_line(self, line_id: int) -> Optional[CartLine]:
        """Get a line by its local id."""
        for line in self.lines:
            if line.id == line_id:
                return line
        return None

    def add_item(self, candidate: CartCandidate, replace: bool = False) -> CartLine:
        """
        Add one unit of a menu item.

        Args:
            candidate: The selected menu item
            replace: Drop the current lines first when they belong to
                another restaurant

        Returns:
            The line that now holds the item

        Raises:
            CrossRestaurantConflict: if the cart holds another restaurant's
                items and ``replace`` is False
        """
        if self.lines and candidate.restaurant_id != self.current_restaurant_id:
            if not replace:
                raise CrossRestaurantConflict(
                    self.current_restaurant_id, candidate.restaurant_id
                )
            self.clear()

        self.is_open = True

        for line in self.lines:
            if line.menu_item_id == candidate.menu_item_id:
                line.quantity += 1
                return line

        line = CartLine(
            id=max((existing.id for existing in self.lines), default=0) + 1,
            menu_item_id=candidate.menu_item_id,
            name=candidate.name,
            description=candidate.description,
            price=candidate.price,
            quantity=1,
            restaurant_id=candidate.restaurant_id,
            restaurant_name=candidate.restaurant_name,
        )
        if not self.lines:
            self.current_restaurant_id = candidate.restaurant_id
        self.lines.append(line)
        return line

    def remove_item(self, line_id: int) -> None:
        """Remove a line. Unknown ids are ignored."""
        self.lines = [line for line in self.lines if line.id != line_id]
        if not self.lines:
            self.current_restaurant_id = None

    def increment_quantity(self, line_id: int) -> None:
        line = self.get_line(line_id)
        if line is not None:
            line.quantity += 1

    def decrement_quantity(self, line_id: int) -> None:
        """Decrease quantity by one, removing the line instead of reaching zero."""
        line = self.get_line(line_id)
        if line is None:
            return
        if line.quantity <= 1:
            self.remove_item(line_id)
        else:
            line.quantity -= 1

    def set_instructions(self, line_id: int, instructions: str) -> None:
        """Attach special instructions to a line."""
        if instructions is None:
            raise ValueError("instructions must not be None")
        line = self.get_line(line_id)
        if line is not None:
            line.special_instructions = instructions

    def clear(self) -> None:
        """Empty the cart."""
        self.lines = []
        self.current_restaurant_id = None

    def toggle(self) -> None:
        self.is_open = not self.is_open

    def close(self) -> None:
        self.is_open = False

    def compute_subtotal(self) -> Decimal:
        """Sum of price * quantity over all lines."""
        return round_money(
            sum((line.price * line.quantity for line in self.lines), ZERO)
        )

    def compute_delivery_fee(self) -> Decimal:
        return self.pricing.delivery_fee_for(self.is_empty)

    def compute_tax(self) -> Decimal:
        return self.pricing.tax_on(self.compute_subtotal())

    def compute_total(self) -> Decimal:
        return round_money(
            self.compute_subtotal() + self.compute_delivery_fee() + self.compute_tax()
        )
