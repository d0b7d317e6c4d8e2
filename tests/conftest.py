"""Shared test fixtures and configuration."""
import pytest
import os
from pathlib import Path
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

# Set test environment variables before importing app
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("APP_NAME", "FoodMood Test")

from foodmood.main import app
from foodmood.db.database import get_db
from foodmood.db.models import Base
from foodmood.core.dependencies import get_catalog_repository
from foodmood.api.auth import hash_password
from foodmood.services.cart.models import CartCandidate
from foodmood.services.catalog.repository import CatalogRepository
from foodmood.services.catalog.in_memory_catalog import InMemoryCatalogProvider
from foodmood.services.ordering.models import DeliveryInfo, Identity
from foodmood.services.persistence.users import UserPersistenceService


# Test database URL (in-memory SQLite)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_PASSWORD = "s3cret-pass"


@pytest.fixture
async def test_db_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Drop all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def test_db(test_db_engine):
    """Create test database session."""
    async_session = async_sessionmaker(
        test_db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session


@pytest.fixture
def test_catalog_path():
    """Return path to test catalog YAML file."""
    return Path(__file__).parent / "fixtures" / "test_catalog.yaml"


@pytest.fixture
def test_catalog_repository(test_catalog_path):
    """Create catalog repository with test data."""
    provider = InMemoryCatalogProvider(catalog_file=str(test_catalog_path))
    return CatalogRepository(provider)


@pytest.fixture
async def test_user(test_db):
    """Persist a user to own orders."""
    return await UserPersistenceService(test_db).create_user(
        username="alice",
        password_hash=hash_password(TEST_PASSWORD),
        name="Alice",
        email="alice@example.com",
    )


@pytest.fixture
def identity(test_user):
    """Authenticated identity for the test user."""
    return Identity(user_id=test_user.id)


@pytest.fixture
def delivery_info():
    """Valid delivery details."""
    return DeliveryInfo(
        name="Alice",
        phone="555-0100",
        address="1 Main St",
        city="Springfield",
        state="IL",
        zip="62701",
    )


@pytest.fixture
def make_candidate():
    """Factory for cart candidates."""
    def _make_candidate(menu_item_id=1, price="12.99", restaurant_id=7, name=None):
        return CartCandidate(
            menu_item_id=menu_item_id,
            name=name or f"Item {menu_item_id}",
            description="",
            price=price,
            restaurant_id=restaurant_id,
            restaurant_name=f"Restaurant {restaurant_id}",
        )
    return _make_candidate


@pytest.fixture
def override_get_db(test_db):
    """Override get_db dependency with test database."""
    async def _override_get_db():
        yield test_db
    return _override_get_db


@pytest.fixture
def override_get_catalog_repository(test_catalog_repository):
    """Override get_catalog_repository dependency with test catalog."""
    def _override_get_catalog_repository():
        return test_catalog_repository
    return _override_get_catalog_repository


@pytest.fixture
async def test_client(override_get_db, override_get_catalog_repository):
    """Create HTTP test client with overrides."""
    # Override dependencies
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_catalog_repository] = override_get_catalog_repository

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    # Clear overrides
    app.dependency_overrides.clear()


@pytest.fixture
async def authenticated_client(test_client, test_user):
    """Create test client with valid session cookie."""
    response = await test_client.post(
        "/api/auth/login",
        json={"username": test_user.username, "password": TEST_PASSWORD},
    )
    assert response.status_code == 200

    # Session cookie is automatically stored in test_client
    return test_client


@pytest.fixture(autouse=True)
def clean_sessions():
    """Clean up auth, cart and submission state before and after tests."""
    from foodmood.api import auth
    from foodmood.services.cart import sessions
    from foodmood.services.ordering import submission
    auth._sessions.clear()
    sessions._carts.clear()
    submission._users_submitting.clear()
    yield
    auth._sessions.clear()
    sessions._carts.clear()
    submission._users_submitting.clear()


@pytest.fixture
def checkout_payload():
    """Checkout body for the cart API."""
    return {
        "delivery": {
            "name": "Alice",
            "phone": "555-0100",
            "address": "1 Main St",
            "city": "Springfield",
            "state": "IL",
            "zip": "62701",
        },
        "payment_method": "cod",
    }

