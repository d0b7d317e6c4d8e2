"""FastAPI dependencies."""
from functools import lru_cache

from fastapi import Request, Response

from foodmood.core import config
from foodmood.services.cart.models import Cart
from foodmood.services.cart.sessions import (
    CART_COOKIE,
    create_cart_session,
    get_cart_session,
)
from foodmood.services.catalog.repository import CatalogRepository
from foodmood.services.catalog.in_memory_catalog import InMemoryCatalogProvider


@lru_cache(maxsize=1)
def _catalog_provider() -> InMemoryCatalogProvider:
    return InMemoryCatalogProvider(catalog_file=config.settings.catalog_file)


def get_catalog_repository() -> CatalogRepository:
    """Get catalog repository instance."""
    return CatalogRepository(provider=_catalog_provider())


def get_cart(request: Request, response: Response) -> Cart:
    """Get the caller's cart, starting a new cart session if needed."""
    session = get_cart_session(request.cookies.get(CART_COOKIE))
    if session is None:
        session = create_cart_session()
        response.set_cookie(
            key=CART_COOKIE,
            value=session.token,
            httponly=True,
            max_age=config.settings.session_ttl_hours * 3600,
            samesite="lax",
        )
    return session.cart
