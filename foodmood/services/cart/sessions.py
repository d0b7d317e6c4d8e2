"""Per-browser cart sessions."""
import logging
import secrets
from datetime import datetime, timedelta
from typing import Dict, Optional

from foodmood.core import config
from foodmood.services.cart.models import Cart

logger = logging.getLogger(__name__)

CART_COOKIE = "cart_token"

# Module-level cart storage (persists across requests)
# In production, use Redis or similar
_carts: Dict[str, "CartSession"] = {}


class CartSession:
    """Cart owned by one browser session."""

    def __init__(self, token: str, cart: Optional[Cart] = None):
        self.token = token
        self.cart = cart if cart is not None else Cart()
        self.expires_at = datetime.utcnow() + timedelta(hours=config.settings.session_ttl_hours)

    @property
    def is_expired(self) -> bool:
        return datetime.utcnow() > self.expires_at


def purge_expired_cart_sessions() -> int:
    """Drop every expired cart session. Returns how many were dropped."""
    expired = [token for token, session in _carts.items() if session.is_expired]
    for token in expired:
        del _carts[token]
    if expired:
        logger.debug(f"[CART] Purged {len(expired)} expired cart sessions")
    return len(expired)


def create_cart_session() -> CartSession:
    """Create an empty cart session under a fresh token, purging expired ones first."""
    purge_expired_cart_sessions()
    token = secrets.token_urlsafe(32)
    session = CartSession(token)
    _carts[token] = session
    logger.debug(f"[CART] Created cart session {token[:8]}...")
    return session


def get_cart_session(token: Optional[str]) -> Optional[CartSession]:
    """Look up a live cart session, dropping it if expired."""
    if not token:
        return None
    session = _carts.get(token)
    if session is None:
        return None
    if session.is_expired:
        del _carts[token]
        return None
    return session
