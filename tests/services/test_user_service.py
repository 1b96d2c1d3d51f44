"""Tests for user service functions."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from moneybook.core.exceptions import AuthenticationError, ConflictError, ValidationError
from moneybook.core.security import decode_token, verify_password
from moneybook.models.user import User
from moneybook.schemas.auth import UserRegister
from moneybook.services.user_service import (
    authenticate_user,
    create_user_token,
    register_user,
)


@pytest.mark.integration
async def test_register_user(test_db: AsyncSession) -> None:
    """A new user is stored with a hashed password and is active."""
    user = await register_user(
        test_db,
        UserRegister(email="new@example.com", username="newuser", password="NewPass123"),
    )

    assert user.id is not None
    assert user.username == "newuser"
    assert user.email == "new@example.com"
    assert user.is_active is True
    assert user.hashed_password != "NewPass123"
    assert verify_password("NewPass123", user.hashed_password)


@pytest.mark.integration
async def test_register_duplicate_email(test_db: AsyncSession, test_user: User) -> None:
    """Test registration with an email that is already taken."""
    with pytest.raises(ConflictError, match="Email already registered"):
        await register_user(
            test_db,
            UserRegister(email=test_user.email, username="someoneelse", password="Password123"),
        )


@pytest.mark.integration
async def test_register_duplicate_username(test_db: AsyncSession, test_user: User) -> None:
    """Test registration with a username that is already taken."""
    with pytest.raises(ConflictError, match="Username already taken"):
        await register_user(
            test_db,
            UserRegister(email="fresh@example.com", username="testuser", password="Password123"),
        )


@pytest.mark.integration
async def test_authenticate_user_success_with_username(
    test_db: AsyncSession, test_user: User
) -> None:
    """Test successful authentication using username."""
    authenticated_user = await authenticate_user(test_db, "testuser", "TestPass123")

    assert authenticated_user.id == test_user.id
    assert authenticated_user.username == test_user.username


@pytest.mark.integration
async def test_authenticate_user_success_with_email(
    test_db: AsyncSession, test_user: User
) -> None:
    """Test successful authentication using email."""
    authenticated_user = await authenticate_user(test_db, "testuser@example.com", "TestPass123")

    assert authenticated_user.id == test_user.id


@pytest.mark.integration
async def test_authenticate_user_invalid_username(test_db: AsyncSession) -> None:
    """Test authentication with non-existent username."""
    with pytest.raises(AuthenticationError) as exc_info:
        await authenticate_user(test_db, "nonexistent", "password")

    assert exc_info.value.status_code == 401
    assert exc_info.value.detail == "Incorrect username or password"


@pytest.mark.integration
async def test_authenticate_user_invalid_password(
    test_db: AsyncSession, test_user: User
) -> None:
    """Test authentication with incorrect password."""
    with pytest.raises(AuthenticationError) as exc_info:
        await authenticate_user(test_db, "testuser", "WrongPassword")

    assert exc_info.value.detail == "Incorrect username or password"


@pytest.mark.integration
async def test_authenticate_user_inactive_user(
    test_db: AsyncSession, test_inactive_user: User
) -> None:
    """Test authentication with inactive user."""
    with pytest.raises(ValidationError) as exc_info:
        await authenticate_user(test_db, "inactiveuser", "InactivePass123")

    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == "Inactive user"


@pytest.mark.integration
async def test_create_user_token(test_db: AsyncSession, test_user: User) -> None:
    """The issued token names the user by username, whichever identifier logged in."""
    token = await create_user_token(test_db, "testuser@example.com", "TestPass123")

    payload = decode_token(token)
    assert payload["sub"] == "testuser"
    assert "exp" in payload


@pytest.mark.integration
async def test_create_user_token_bad_password(test_db: AsyncSession, test_user: User) -> None:
    """No token is issued for a wrong password."""
    with pytest.raises(AuthenticationError):
        await create_user_token(test_db, "testuser", "nope")
