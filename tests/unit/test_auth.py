"""Unit tests for authentication system."""
import pytest
from datetime import datetime, timedelta
from unittest.mock import Mock

from fastapi import Response

from foodmood.api import auth
from tests.conftest import TEST_PASSWORD


class TestPasswordHashing:
    """Test password hashing functions."""

    def test_hash_has_digest_and_salt(self):
        """Test that the stored form is <hash>.<salt>."""
        hashed = auth.hash_password("testpassword123")

        digest, salt = hashed.split(".")
        # scrypt dklen=64 -> 128 hex chars, 16 byte salt -> 32 hex chars
        assert len(digest) == 128
        assert len(salt) == 32

    def test_same_password_different_salts(self):
        """Test that each hash gets its own salt."""
        hash1 = auth.hash_password("testpassword123")
        hash2 = auth.hash_password("testpassword123")

        assert hash1 != hash2

    def test_verify_password(self):
        """Test verification accepts the right password only."""
        stored = auth.hash_password("testpassword123")

        assert auth.verify_password("testpassword123", stored) is True
        assert auth.verify_password("wrongpassword", stored) is False

    def test_verify_malformed_hash(self):
        """Test a malformed stored hash never verifies."""
        assert auth.verify_password("anything", "not-a-hash") is False


class TestSessionToken:
    """Test session token generation."""

    def test_create_session_token(self):
        """Test that session token is generated correctly."""
        token = auth.create_session_token()

        # token_urlsafe(32) generates ~43 character URL-safe base64 string
        assert len(token) >= 40
        import string
        url_safe_chars = string.ascii_letters + string.digits + '-_'
        assert all(c in url_safe_chars for c in token)

    def test_unique_tokens(self):
        """Test that each call generates unique token."""
        tokens = {auth.create_session_token() for _ in range(3)}

        assert len(tokens) == 3


class TestSessionManagement:
    """Test session creation and verification."""

    def _create(self, user_id=5):
        response = Mock(spec=Response)
        response.set_cookie = Mock()
        return auth.create_session(response, user_id), response

    def test_create_session(self):
        """Test that session is stored for the user and the cookie is set."""
        token, response = self._create(user_id=5)

        assert token in auth._sessions
        session = auth._sessions[token]
        assert session["user_id"] == 5
        assert "created_at" in session

        # Should be close to 24 hours (within 1 minute tolerance)
        time_diff = session["expires_at"] - datetime.utcnow()
        assert timedelta(hours=23, minutes=59) < time_diff < timedelta(hours=24, minutes=1)

        response.set_cookie.assert_called_once()
        assert response.set_cookie.call_args.kwargs["key"] == auth.SESSION_COOKIE
        assert response.set_cookie.call_args.kwargs["httponly"] is True

    def test_verify_session_valid(self):
        """Test that a valid session resolves to its user."""
        token, _ = self._create(user_id=5)

        assert auth.verify_session(token) == 5

    def test_verify_session_invalid_token(self):
        """Test that unknown or missing tokens resolve to no user."""
        assert auth.verify_session("invalid_token_12345") is None
        assert auth.verify_session(None) is None

    def test_verify_session_expired(self):
        """Test that expired session is rejected and cleaned up."""
        token, _ = self._create()
        auth._sessions[token]["expires_at"] = datetime.utcnow() - timedelta(hours=1)

        assert auth.verify_session(token) is None
        assert token not in auth._sessions


class TestAuthAPIEndpoints:
    """Test authentication API endpoints."""

    @pytest.mark.asyncio
    async def test_register_logs_user_in(self, test_client):
        """Test registration creates the user and a session."""
        response = await test_client.post(
            "/api/auth/register",
            json={
                "username": "bob",
                "password": "hunter22",
                "name": "Bob",
                "email": "bob@example.com",
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["username"] == "bob"
        assert "password" not in data
        assert "session_token" in response.cookies

        session = await test_client.get("/api/auth/session")
        assert session.json()["authenticated"] is True
        assert session.json()["user"]["username"] == "bob"

    @pytest.mark.asyncio
    async def test_register_duplicate(self, test_client, test_user):
        """Test a taken username or email is refused."""
        response = await test_client.post(
            "/api/auth/register",
            json={
                "username": "alice",
                "password": "hunter22",
                "name": "Other Alice",
                "email": "other@example.com",
            },
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Username or email already registered"

    @pytest.mark.asyncio
    async def test_register_validation(self, test_client):
        """Test short passwords are rejected as bad requests."""
        response = await test_client.post(
            "/api/auth/register",
            json={"username": "bob", "password": "x", "name": "Bob", "email": "bob@example.com"},
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_login_success(self, test_client, test_user):
        """Test successful login with correct password."""
        response = await test_client.post(
            "/api/auth/login",
            json={"username": "alice", "password": TEST_PASSWORD},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Login successful"
        assert data["user"]["email"] == "alice@example.com"

        token = response.cookies["session_token"]
        assert token in auth._sessions

    @pytest.mark.asyncio
    async def test_login_failure(self, test_client, test_user):
        """Test login failure with wrong password."""
        response = await test_client.post(
            "/api/auth/login",
            json={"username": "alice", "password": "wrongpassword"},
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid credentials"
        assert len(auth._sessions) == 0

    @pytest.mark.asyncio
    async def test_login_unknown_user(self, test_client):
        """Test login with an unknown username."""
        response = await test_client.post(
            "/api/auth/login",
            json={"username": "nobody", "password": "whatever"},
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_logout(self, authenticated_client):
        """Test logout clears session."""
        response = await authenticated_client.post("/api/auth/logout")

        assert response.status_code == 200
        assert response.json()["message"] == "Logged out"
        assert len(auth._sessions) == 0

        set_cookie = response.headers.get("set-cookie", "")
        assert "max-age=0" in set_cookie.lower()

    @pytest.mark.asyncio
    async def test_get_session_status_authenticated(self, authenticated_client):
        """Test session status endpoint with valid session."""
        response = await authenticated_client.get("/api/auth/session")

        assert response.status_code == 200
        data = response.json()
        assert data["authenticated"] is True
        assert data["user"]["username"] == "alice"
        assert data["expires_at"] is not None

    @pytest.mark.asyncio
    async def test_get_session_status_unauthenticated(self, test_client):
        """Test session status endpoint without session."""
        response = await test_client.get("/api/auth/session")

        assert response.status_code == 200
        assert response.json()["authenticated"] is False


class TestRequireAuthDependency:
    """Test require_auth FastAPI dependency."""

    @pytest.mark.asyncio
    async def test_require_auth_authenticated(self, authenticated_client):
        """Test that authenticated requests are allowed."""
        response = await authenticated_client.get("/api/orders")

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_require_auth_unauthenticated(self, test_client):
        """Test that unauthenticated requests are blocked."""
        response = await test_client.get("/api/orders")

        assert response.status_code == 401
        assert response.json()["detail"] == "Authentication required"
