"""Authentication endpoints and utilities."""
import hashlib
import hmac
import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from foodmood.core import config
from foodmood.core.exceptions import Unauthenticated
from foodmood.db.database import get_db
from foodmood.services.ordering.models import Identity
from foodmood.services.persistence.users import UserPersistenceService

router = APIRouter()
logger = logging.getLogger(__name__)

SESSION_COOKIE = "session_token"

# In-memory session storage (use Redis in production)
_sessions: dict[str, dict] = {}


class RegisterRequest(BaseModel):
    """Registration request model."""
    username: str = Field(min_length=3)
    password: str = Field(min_length=6)
    name: str = Field(min_length=1)
    email: str = Field(min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")


class LoginRequest(BaseModel):
    """Login request model."""
    username: str
    password: str


class UserResponse(BaseModel):
    """Public user fields."""
    id: int
    username: str
    name: str
    email: str

    class Config:
        from_attributes = True


class SessionInfo(BaseModel):
    """Session information response."""
    authenticated: bool
    user: Optional[UserResponse] = None
    expires_at: Optional[str] = None


def create_session_token() -> str:
    """Generate a secure session token."""
    return secrets.token_urlsafe(32)


def hash_password(password: str, salt: Optional[str] = None) -> str:
    """Hash password with scrypt. Returns ``<hash hex>.<salt hex>``."""
    if salt is None:
        salt = secrets.token_hex(16)
    digest = hashlib.scrypt(password.encode(), salt=bytes.fromhex(salt), n=16384, r=8, p=1, dklen=64)
    return f"{digest.hex()}.{salt}"


def verify_password(password: str, stored: str) -> bool:
    """Check a password against a stored hash in constant time."""
    try:
        _, salt = stored.split(".", 1)
        candidate = hash_password(password, salt)
    except ValueError:
        return False
    return hmac.compare_digest(candidate, stored)


def create_session(response: Response, user_id: int) -> str:
    """Create a new session for a user and set cookie."""
    session_token = create_session_token()
    expires_at = datetime.utcnow() + timedelta(hours=config.settings.session_ttl_hours)

    _sessions[session_token] = {
        "user_id": user_id,
        "expires_at": expires_at,
        "created_at": datetime.utcnow()
    }

    # Set HTTP-only cookie
    response.set_cookie(
        key=SESSION_COOKIE,
        value=session_token,
        httponly=True,
        max_age=config.settings.session_ttl_hours * 3600,
        samesite="lax"
    )

    return session_token


def get_session_token(request: Request) -> Optional[str]:
    """Extract session token from cookie."""
    return request.cookies.get(SESSION_COOKIE)


def verify_session(session_token: Optional[str]) -> Optional[int]:
    """Return the user id of a valid, unexpired session."""
    if not session_token:
        return None

    session = _sessions.get(session_token)
    if not session:
        return None

    # Check expiration
    if datetime.utcnow() > session["expires_at"]:
        del _sessions[session_token]
        return None

    return session.get("user_id")


async def get_identity(request: Request) -> Identity:
    """Dependency resolving the caller's identity. Never fails."""
    return Identity(user_id=verify_session(get_session_token(request)))


async def require_auth(identity: Identity = Depends(get_identity)) -> Identity:
    """Dependency to require authentication."""
    if not identity.is_authenticated:
        raise HTTPException(status_code=401, detail="Authentication required")
    return identity


async def require_customer(identity: Identity = Depends(get_identity)) -> Identity:
    """
    Dependency for placing orders.

    Rejects anonymous callers with 401 before the request body is validated.
    """
    if not identity.is_authenticated:
        raise HTTPException(status_code=401, detail=str(Unauthenticated()))
    return identity


@router.post("/api/auth/register", status_code=201, response_model=UserResponse)
async def register(
    register_req: RegisterRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    """Register a new user and log them in."""
    users = UserPersistenceService(db)
    if await users.find_conflicting_user(register_req.username, register_req.email):
        logger.info(f"[AUTH] Registration rejected - username or email taken: {register_req.username}")
        raise HTTPException(status_code=400, detail="Username or email already registered")

    user = await users.create_user(
        username=register_req.username,
        password_hash=hash_password(register_req.password),
        name=register_req.name,
        email=register_req.email,
    )
    create_session(response, user.id)
    logger.info(f"[AUTH] Registered user {user.id}")
    return UserResponse.model_validate(user)


@router.post("/api/auth/login")
async def login(
    login_req: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    """Login endpoint."""
    user = await UserPersistenceService(db).get_user_by_username(login_req.username)
    if not user or not verify_password(login_req.password, user.password):
        logger.info(f"[AUTH] Failed login for username: {login_req.username}")
        raise HTTPException(status_code=401, detail="Invalid credentials")

    session_token = create_session(response, user.id)

    return {
        "success": True,
        "message": "Login successful",
        "user": UserResponse.model_validate(user).model_dump(),
        "expires_at": _sessions[session_token]["expires_at"].isoformat()
    }


@router.post("/api/auth/logout")
async def logout(request: Request, response: Response):
    """Logout endpoint."""
    session_token = get_session_token(request)
    if session_token and session_token in _sessions:
        del _sessions[session_token]

    # Clear cookie
    response.delete_cookie(SESSION_COOKIE)

    return {"success": True, "message": "Logged out"}


@router.get("/api/auth/session")
async def get_session_info(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> SessionInfo:
    """Get current session information."""
    session_token = get_session_token(request)
    user_id = verify_session(session_token)

    if user_id is not None:
        user = await UserPersistenceService(db).get_user(user_id)
        if user:
            return SessionInfo(
                authenticated=True,
                user=UserResponse.model_validate(user),
                expires_at=_sessions[session_token]["expires_at"].isoformat()
            )

    return SessionInfo(authenticated=False)
