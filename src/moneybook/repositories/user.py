"""User repository for user-specific database operations."""

from sqlalchemy import select

from moneybook.models.user import User
from moneybook.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for User model with lookups by email and username.

    Example:
        >>> repo = UserRepository(User, db)
        >>> user = await repo.get_by_email("test@example.com")
    """

    async def get_by_email(self, email: str) -> User | None:
        """Get user by email address."""
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> User | None:
        """Get user by username."""
        result = await self.db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def get_by_username_or_email(self, identifier: str) -> User | None:
        """Get user by username, falling back to email.

        Login accepts either, so the form's ``username`` field is looked up
        both ways.
        """
        user = await self.get_by_username(identifier)
        if not user:
            user = await self.get_by_email(identifier)
        return user

    async def exists_by_email(self, email: str) -> bool:
        """Check if email address is already registered."""
        return await self.get_by_email(email) is not None

    async def exists_by_username(self, username: str) -> bool:
        """Check if username is already registered."""
        return await self.get_by_username(username) is not None
