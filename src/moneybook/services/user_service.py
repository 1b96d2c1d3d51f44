"""Service layer for user-related operations.

Registration and login are the only places users are written or
authenticated; every other service receives an already-verified user.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from moneybook.core.exceptions import AuthenticationError, ConflictError, ValidationError
from moneybook.core.security import create_access_token, get_password_hash, verify_password
from moneybook.db.session import transactional
from moneybook.models.user import User
from moneybook.repositories.user import UserRepository
from moneybook.schemas.auth import UserRegister

logger = logging.getLogger(__name__)


async def register_user(db: AsyncSession, user_in: UserRegister) -> User:
    """Create a new user account.

    Args:
        db: Async database session
        user_in: Registration data

    Returns:
        The created user

    Raises:
        ConflictError: If the email or username is already registered
    """
    repo = UserRepository(User, db)
    if await repo.exists_by_email(user_in.email):
        raise ConflictError("Email already registered")
    if await repo.exists_by_username(user_in.username):
        raise ConflictError("Username already taken")

    async with transactional(db):
        user = await repo.create(
            obj_in={
                "email": user_in.email,
                "username": user_in.username,
                "hashed_password": get_password_hash(user_in.password),
            }
        )

    logger.info(f"Registered user {user.username}")
    return user


async def authenticate_user(
    db: AsyncSession,
    username_or_email: str,
    password: str,
) -> User:
    """Authenticate a user by username/email and password.

    Args:
        db: Async database session
        username_or_email: Username or email address
        password: Plain text password to verify

    Returns:
        User: Authenticated user instance

    Raises:
        AuthenticationError: If the credentials are invalid
        ValidationError: If the user is inactive
    """
    user = await UserRepository(User, db).get_by_username_or_email(username_or_email)

    if not user or not verify_password(password, user.hashed_password):
        raise AuthenticationError("Incorrect username or password")

    if not user.is_active:
        raise ValidationError("Inactive user")

    return user


async def create_user_token(
    db: AsyncSession,
    username_or_email: str,
    password: str,
) -> str:
    """Authenticate a user and issue an access token.

    Raises:
        AuthenticationError: If the credentials are invalid
    """
    user = await authenticate_user(db, username_or_email, password)
    return create_access_token(user.username)
