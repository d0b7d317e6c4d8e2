"""Decimal helpers for currency amounts."""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Union

from foodmood.core.exceptions import InvalidDecimal

CENT = Decimal("0.01")

Amount = Union[Decimal, str, int, float]


def parse_decimal(value: Amount) -> Decimal:
    """
    Parse a currency amount into a Decimal.

    Strings such as "12.99" are the canonical input. Floats are converted
    through their shortest repr so that a YAML ``12.99`` becomes
    ``Decimal("12.99")`` and not its binary approximation.

    Raises:
        InvalidDecimal: if the value is not a finite number
    """
    if isinstance(value, bool) or value is None:
        raise InvalidDecimal(value)
    if isinstance(value, Decimal):
        result = value
    else:
        text = repr(value) if isinstance(value, float) else str(value).strip()
        try:
            result = Decimal(text)
        except (InvalidOperation, ValueError):
            raise InvalidDecimal(value) from None
    if not result.is_finite():
        raise InvalidDecimal(value)
    return result


def round_money(value: Decimal) -> Decimal:
    """Round to cents, half up."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)
