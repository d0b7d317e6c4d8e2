"""Catalog provider interface."""
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, field_validator

from foodmood.core.money import parse_decimal


class Mood(BaseModel):
    """Mood a user can pick to get food recommendations."""

    id: int
    name: str
    icon: str = ""
    color: str = ""


class Food(BaseModel):
    """Recommended dish, linked to a mood."""

    id: int
    name: str
    description: str = ""
    image_url: str = ""
    mood_id: int


class Restaurant(BaseModel):
    """Restaurant model."""

    id: int
    name: str
    description: str = ""
    image_url: str = ""
    rating: int = 0
    review_count: int = 0
    delivery_time: str = ""
    delivery_fee: str = ""  # display text only, cart pricing uses settings
    cuisines: List[str] = []
    food_ids: List[int] = []  # foods this restaurant serves


class MenuItem(BaseModel):
    """Menu item model."""

    id: int
    restaurant_id: int
    name: str
    description: str = ""
    price: Decimal
    image_url: str = ""

    @field_validator("price", mode="before")
    @classmethod
    def _parse_price(cls, value):
        return parse_decimal(value)


class Catalog(BaseModel):
    """Full catalog snapshot."""

    moods: List[Mood] = []
    foods: List[Food] = []
    restaurants: List[Restaurant] = []
    menu_items: List[MenuItem] = []


class CatalogProvider(ABC):
    """Abstract base class for catalog providers."""

    @abstractmethod
    async def get_catalog(self) -> Catalog:
        """Get the full catalog."""
        pass

    @abstractmethod
    async def get_restaurant(self, restaurant_id: int) -> Optional[Restaurant]:
        """Get a restaurant by id."""
        pass

    @abstractmethod
    async def get_menu_item(self, menu_item_id: int) -> Optional[MenuItem]:
        """Get a menu item by id."""
        pass
