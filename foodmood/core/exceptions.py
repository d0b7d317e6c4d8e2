"""Domain errors raised by the cart, catalog and ordering services."""
from typing import Optional


class FoodMoodError(Exception):
    """Base class for all domain errors."""


class InvalidDecimal(FoodMoodError):
    """A price or amount could not be parsed as a decimal value."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Invalid decimal value: {value!r}")


class CrossRestaurantConflict(FoodMoodError):
    """An item from a different restaurant was added to a non-empty cart."""

    def __init__(self, current_restaurant_id: int, requested_restaurant_id: int):
        self.current_restaurant_id = current_restaurant_id
        self.requested_restaurant_id = requested_restaurant_id
        super().__init__(
            f"Cart holds items from restaurant {current_restaurant_id}, "
            f"cannot add item from restaurant {requested_restaurant_id}"
        )


class EmptyCart(FoodMoodError):
    """Checkout was attempted with no items in the cart."""

    def __init__(self):
        super().__init__("Cart is empty")


class Unauthenticated(FoodMoodError):
    """The caller has no authenticated identity."""

    def __init__(self, message: str = "You must be logged in to place an order"):
        super().__init__(message)


class SubmissionInProgress(FoodMoodError):
    """Another submission for the same cart has not finished yet."""

    def __init__(self):
        super().__init__("An order submission for this cart is already in progress")


class PersistenceFailure(FoodMoodError):
    """The order transaction could not be committed. Safe to retry."""

    retryable = True

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message)


class CatalogItemNotFound(FoodMoodError):
    """A referenced catalog record does not exist."""

    def __init__(self, kind: str, item_id: int):
        self.kind = kind
        self.item_id = item_id
        super().__init__(f"{kind.capitalize()} {item_id} not found")


class InvalidStatusTransition(FoodMoodError):
    """An order status change is not allowed from its current status."""

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot move order from '{current}' to '{requested}'")


class OrderValidationError(FoodMoodError):
    """A client-built order does not match the catalog or server-side totals."""
