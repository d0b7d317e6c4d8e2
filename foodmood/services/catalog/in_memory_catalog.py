"""In-memory catalog provider."""
import logging
import yaml
from pathlib import Path
from typing import Optional
from foodmood.services.catalog.base import (
    Catalog,
    CatalogProvider,
    Food,
    MenuItem,
    Mood,
    Restaurant,
)

logger = logging.getLogger(__name__)


class InMemoryCatalogProvider(CatalogProvider):
    """In-memory catalog provider using YAML configuration."""

    def __init__(self, catalog_file: Optional[str] = None):
        """Initialize with optional catalog file path."""
        if catalog_file is None:
            catalog_file = Path(__file__).parent / "data" / "catalog.yaml"
        self.catalog_file = Path(catalog_file)
        self._catalog: Optional[Catalog] = None

    async def _load_catalog(self) -> Catalog:
        """Load catalog from YAML file."""
        if self._catalog is None:
            if not self.catalog_file.exists():
                logger.warning(f"[CATALOG] File not found: {self.catalog_file}, using empty catalog")
                self._catalog = Catalog()
            else:
                with open(self.catalog_file, "r") as f:
                    data = yaml.safe_load(f) or {}
                # Bad prices raise InvalidDecimal here rather than loading as zero
                self._catalog = Catalog(
                    moods=[Mood(**mood) for mood in data.get("moods", [])],
                    foods=[Food(**food) for food in data.get("foods", [])],
                    restaurants=[
                        Restaurant(**restaurant) for restaurant in data.get("restaurants", [])
                    ],
                    menu_items=[MenuItem(**item) for item in data.get("menu_items", [])],
                )
                logger.info(
                    f"[CATALOG] Loaded {len(self._catalog.restaurants)} restaurants, "
                    f"{len(self._catalog.menu_items)} menu items from {self.catalog_file}"
                )
        return self._catalog

    async def get_catalog(self) -> Catalog:
        """Get the full catalog."""
        return await self._load_catalog()

    async def get_restaurant(self, restaurant_id: int) -> Optional[Restaurant]:
        """Get a restaurant by id."""
        catalog = await self._load_catalog()
        for restaurant in catalog.restaurants:
            if restaurant.id == restaurant_id:
                return restaurant
        return None

    async def get_menu_item(self, menu_item_id: int) -> Optional[MenuItem]:
        """Get a menu item by id."""
        catalog = await self._load_catalog()
        for item in catalog.menu_items:
            if item.id == menu_item_id:
                return item
        return None
