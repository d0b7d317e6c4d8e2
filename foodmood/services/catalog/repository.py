"""Catalog repository."""
from typing import List, Optional

from foodmood.core.exceptions import CatalogItemNotFound
from foodmood.services.cart.models import CartCandidate
from foodmood.services.catalog.base import (
    CatalogProvider,
    Food,
    MenuItem,
    Mood,
    Restaurant,
)


class CatalogRepository:
    """Repository for read-only catalog queries."""

    def __init__(self, provider: CatalogProvider):
        self.provider = provider

    async def get_moods(self) -> List[Mood]:
        """Get all moods."""
        catalog = await self.provider.get_catalog()
        return list(catalog.moods)

    async def get_foods(self, mood_id: Optional[int] = None) -> List[Food]:
        """Get foods, optionally only those recommended for a mood."""
        catalog = await self.provider.get_catalog()
        if mood_id is None:
            return list(catalog.foods)
        return [food for food in catalog.foods if food.mood_id == mood_id]

    async def get_restaurants(self, food_id: Optional[int] = None) -> List[Restaurant]:
        """Get restaurants, optionally only those serving a food."""
        catalog = await self.provider.get_catalog()
        if food_id is None:
            return list(catalog.restaurants)
        return [r for r in catalog.restaurants if food_id in r.food_ids]

    async def get_restaurant(self, restaurant_id: int) -> Optional[Restaurant]:
        """Get restaurant by id."""
        return await self.provider.get_restaurant(restaurant_id)

    async def get_menu_items(self, restaurant_id: int) -> List[MenuItem]:
        """Get the menu of a restaurant."""
        catalog = await self.provider.get_catalog()
        return [item for item in catalog.menu_items if item.restaurant_id == restaurant_id]

    async def get_menu_item(self, menu_item_id: int) -> Optional[MenuItem]:
        """Get menu item by id."""
        return await self.provider.get_menu_item(menu_item_id)

    async def get_cart_candidate(self, menu_item_id: int) -> CartCandidate:
        """
        Build a cart candidate from a menu item and its restaurant.

        Raises:
            CatalogItemNotFound: if the item or its restaurant is unknown
        """
        item = await self.provider.get_menu_item(menu_item_id)
        if item is None:
            raise CatalogItemNotFound("menu item", menu_item_id)
        restaurant = await self.provider.get_restaurant(item.restaurant_id)
        if restaurant is None:
            raise CatalogItemNotFound("restaurant", item.restaurant_id)
        return CartCandidate(
            menu_item_id=item.id,
            name=item.name,
            description=item.description,
            price=item.price,
            restaurant_id=restaurant.id,
            restaurant_name=restaurant.name,
        )
