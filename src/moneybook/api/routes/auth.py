"""Authentication routes."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession

from moneybook.core.config import settings
from moneybook.core.deps import CurrentActiveUser
from moneybook.core.rate_limit import limiter
from moneybook.db.session import get_db
from moneybook.models.user import User
from moneybook.schemas.auth import Token, UserRegister
from moneybook.schemas.user import UserResponse
from moneybook.services import user_service

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.AUTH_RATE_LIMIT)
async def register(
    request: Request,
    user_data: UserRegister,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """
    Register a new user.

    Args:
        user_data: User registration data
        db: Database session

    Returns:
        The created user

    Raises:
        ConflictError: 409 if username or email already exists
    """
    return await user_service.register_user(db, user_data)


@router.post("/login", response_model=Token)
@limiter.limit(settings.AUTH_RATE_LIMIT)
async def login(
    request: Request,
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Token:
    """
    OAuth2 compatible token login.

    Get an access token for future requests using username (or email) and
    password.

    Raises:
        AuthenticationError: 401 if credentials are invalid
    """
    access_token = await user_service.create_user_token(db, form_data.username, form_data.password)
    return Token(access_token=access_token)


@router.get("/me", response_model=UserResponse)
async def read_users_me(current_user: CurrentActiveUser) -> User:
    """Get current authenticated user."""
    return current_user
