"""Catalog API endpoints: moods, food recommendations, restaurants and menus."""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request

from foodmood.core.dependencies import get_catalog_repository
from foodmood.services.catalog.base import Food, MenuItem, Mood, Restaurant
from foodmood.services.catalog.repository import CatalogRepository

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/api/moods", response_model=List[Mood])
async def get_moods(
    catalog_repository: CatalogRepository = Depends(get_catalog_repository),
):
    """Get all moods."""
    return await catalog_repository.get_moods()


@router.get("/api/foods", response_model=List[Food])
async def get_foods(
    mood_id: Optional[int] = None,
    catalog_repository: CatalogRepository = Depends(get_catalog_repository),
):
    """Get all foods, or the recommendations for one mood."""
    return await catalog_repository.get_foods(mood_id)


@router.get("/api/foods/{mood_id}", response_model=List[Food])
async def get_food_recommendations(
    mood_id: int,
    request: Request,
    catalog_repository: CatalogRepository = Depends(get_catalog_repository),
):
    """Get food recommendations for a mood."""
    foods = await catalog_repository.get_foods(mood_id)
    logger.info(
        f"[CATALOG] Recommendations for mood {mood_id}: {len(foods)} foods - "
        f"Client: {request.client.host if request.client else 'unknown'}"
    )
    return foods


@router.get("/api/restaurants", response_model=List[Restaurant])
async def get_restaurants(
    food_id: Optional[int] = None,
    catalog_repository: CatalogRepository = Depends(get_catalog_repository),
):
    """Get all restaurants, or those serving a food."""
    return await catalog_repository.get_restaurants(food_id)


@router.get("/api/restaurants/{restaurant_id}", response_model=Restaurant)
async def get_restaurant(
    restaurant_id: int,
    catalog_repository: CatalogRepository = Depends(get_catalog_repository),
):
    """Get a restaurant."""
    restaurant = await catalog_repository.get_restaurant(restaurant_id)
    if restaurant is None:
        raise HTTPException(status_code=404, detail="Restaurant not found")
    return restaurant


@router.get("/api/restaurants/{restaurant_id}/menu", response_model=List[MenuItem])
async def get_restaurant_menu(
    restaurant_id: int,
    catalog_repository: CatalogRepository = Depends(get_catalog_repository),
):
    """Get the menu of a restaurant."""
    logger.debug(f"[CATALOG] Fetching menu for restaurant {restaurant_id}")
    return await catalog_repository.get_menu_items(restaurant_id)
