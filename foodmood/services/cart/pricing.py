"""Tax and delivery fee policy."""
from decimal import Decimal
from pydantic import BaseModel, field_validator

from foodmood.core import config
from foodmood.core.money import parse_decimal, round_money


class PricingPolicy(BaseModel):
    """
    Flat delivery fee plus a fixed tax rate.

    The delivery fee is charged on every non-empty cart regardless of the
    subtotal. An empty cart costs nothing.
    """

    tax_rate: Decimal = Decimal("0.08")
    delivery_fee: Decimal = Decimal("2.99")

    @field_validator("tax_rate", "delivery_fee", mode="before")
    @classmethod
    def _parse_amount(cls, value):
        return parse_decimal(value)

    @classmethod
    def from_settings(cls) -> "PricingPolicy":
        """Build the policy from the current application settings."""
        return cls(
            tax_rate=config.settings.tax_rate,
            delivery_fee=config.settings.delivery_fee,
        )

    def delivery_fee_for(self, cart_is_empty: bool) -> Decimal:
        if cart_is_empty:
            return Decimal("0.00")
        return round_money(self.delivery_fee)

    def tax_on(self, subtotal: Decimal) -> Decimal:
        return round_money(subtotal * self.tax_rate)
