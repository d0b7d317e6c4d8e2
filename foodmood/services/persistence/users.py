"""User persistence service."""
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_

from foodmood.db.models import User


class UserPersistenceService:
    """Service for persisting user accounts."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_user(
        self, username: str, password_hash: str, name: str, email: str
    ) -> User:
        """Create a new user. The password must already be hashed."""
        user = User(
            username=username,
            password=password_hash,
            name=name,
            email=email,
        )
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)
        return user

    async def get_user(self, user_id: int) -> Optional[User]:
        """Get user by id."""
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_user_by_username(self, username: str) -> Optional[User]:
        """Get user by username."""
        result = await self.db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def find_conflicting_user(self, username: str, email: str) -> Optional[User]:
        """Find an existing user holding the username or the email."""
        result = await self.db.execute(
            select(User).where(or_(User.username == username, User.email == email)).limit(1)
        )
        return result.scalar_one_or_none()
