"""Unit tests for catalog API endpoints."""
import pytest


class TestCatalogAPI:
    """Test mood, food, restaurant and menu endpoints."""

    @pytest.mark.asyncio
    async def test_get_moods(self, test_client):
        """Test GET /api/moods lists every mood."""
        response = await test_client.get("/api/moods")

        assert response.status_code == 200
        assert [m["name"] for m in response.json()] == ["Happy", "Sad"]

    @pytest.mark.asyncio
    async def test_food_recommendations_for_mood(self, test_client):
        """Test both recommendation routes filter by mood."""
        by_path = await test_client.get("/api/foods/1")
        by_query = await test_client.get("/api/foods", params={"mood_id": 1})

        assert by_path.status_code == 200
        assert sorted(f["name"] for f in by_path.json()) == ["Pizza", "Tacos"]
        assert by_query.json() == by_path.json()

    @pytest.mark.asyncio
    async def test_unknown_mood_has_no_recommendations(self, test_client):
        """Test an unknown mood yields an empty list."""
        response = await test_client.get("/api/foods/99")

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_restaurants_for_food(self, test_client):
        """Test restaurants are filtered by food."""
        response = await test_client.get("/api/restaurants", params={"food_id": 1})

        assert response.status_code == 200
        assert [r["id"] for r in response.json()] == [7]

    @pytest.mark.asyncio
    async def test_get_restaurant(self, test_client):
        """Test fetching one restaurant."""
        response = await test_client.get("/api/restaurants/8")

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Other Diner"
        assert data["food_ids"] == [2, 3]

    @pytest.mark.asyncio
    async def test_get_restaurant_not_found(self, test_client):
        """Test unknown restaurants return 404."""
        response = await test_client.get("/api/restaurants/999")

        assert response.status_code == 404
        assert response.json()["detail"] == "Restaurant not found"

    @pytest.mark.asyncio
    async def test_get_restaurant_menu(self, test_client):
        """Test a menu lists its items with exact prices."""
        response = await test_client.get("/api/restaurants/7/menu")

        assert response.status_code == 200
        items = response.json()
        assert [i["name"] for i in items] == ["Margherita Pizza", "Lasagna", "Garlic Bread"]
        assert items[0]["price"] == "12.99"


class TestServiceEndpoints:
    """Test root and health endpoints."""

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_root(self, test_client):
        response = await test_client.get("/")

        assert response.status_code == 200
        assert response.json()["version"] == "0.1.0"
