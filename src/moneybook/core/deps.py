"""Dependencies for FastAPI routes.

Every ledger resource is resolved through its owner: a book, pocket,
allocation, holding or transaction that exists but belongs to another user
is reported exactly like one that does not exist.
"""

from typing import Annotated
from uuid import UUID

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from moneybook.core.exceptions import NotFoundError
from moneybook.core.security import read_access_token
from moneybook.db.session import get_db
from moneybook.models.allocation import Allocation
from moneybook.models.holding import Holding
from moneybook.models.holding_transaction import HoldingTransaction
from moneybook.models.money_book import MoneyBook
from moneybook.models.pocket import Pocket
from moneybook.models.user import User
from moneybook.repositories.allocation import AllocationRepository
from moneybook.repositories.holding import HoldingRepository
from moneybook.repositories.holding_transaction import HoldingTransactionRepository
from moneybook.repositories.money_book import MoneyBookRepository
from moneybook.repositories.pocket import PocketRepository
from moneybook.repositories.user import UserRepository

# OAuth2 scheme for extracting token from Authorization header
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")


async def get_current_user(
    token: Annotated[str, Depends(oauth2_scheme)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """
    Get the current authenticated user from JWT token.

    Args:
        token: JWT token from Authorization header
        db: Database session

    Returns:
        The authenticated user

    Raises:
        HTTPException: If credentials are invalid or user not found
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        token_data = read_access_token(token)
    except jwt.InvalidTokenError:
        raise credentials_exception from None

    user = await UserRepository(User, db).get_by_username(token_data.username)

    if user is None:
        raise credentials_exception

    return user


async def get_current_active_user(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """
    Get the current authenticated and active user.

    Raises:
        HTTPException: If the user is inactive
    """
    if not current_user.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Inactive user",
        )

    return current_user


async def verify_money_book_access(
    book_id: UUID,
    current_user: Annotated[User, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MoneyBook:
    """
    Verify that a money book exists and belongs to the current user.

    Use it in route handlers that take a ``book_id`` path parameter.

    Raises:
        NotFoundError: If the book does not exist or belongs to another user

    Example:
        @router.get("/{book_id}/allocations")
        async def list_allocations(
            book: Annotated[MoneyBook, Depends(verify_money_book_access)],
        ) -> list[AllocationWithSummary]:
            # book is already verified
            ...
    """
    book = await MoneyBookRepository(MoneyBook, db).get_by_id_and_user(book_id, current_user.id)
    if book is None:
        raise NotFoundError("Money book not found")
    return book


async def verify_pocket_access(
    pocket_id: UUID,
    current_user: Annotated[User, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Pocket:
    """Resolve a pocket through its book's owner."""
    pocket = await PocketRepository(Pocket, db).get_by_id_and_user(pocket_id, current_user.id)
    if pocket is None:
        raise NotFoundError("Pocket not found")
    return pocket


async def verify_allocation_access(
    allocation_id: UUID,
    current_user: Annotated[User, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Allocation:
    """Resolve an allocation through its book's owner."""
    allocation = await AllocationRepository(Allocation, db).get_by_id_and_user(
        allocation_id, current_user.id
    )
    if allocation is None:
        raise NotFoundError("Allocation not found")
    return allocation


async def verify_holding_access(
    holding_id: UUID,
    current_user: Annotated[User, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Holding:
    """Resolve a holding (with its asset loaded) through its book's owner."""
    holding = await HoldingRepository(Holding, db).get_by_id_and_user(holding_id, current_user.id)
    if holding is None:
        raise NotFoundError("Holding not found")
    return holding


async def verify_transaction_access(
    transaction_id: UUID,
    current_user: Annotated[User, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> HoldingTransaction:
    """Resolve a holding transaction through its book's owner."""
    transaction = await HoldingTransactionRepository(HoldingTransaction, db).get_by_id_and_user(
        transaction_id, current_user.id
    )
    if transaction is None:
        raise NotFoundError("Transaction not found")
    return transaction


# Type aliases for cleaner dependency injection
CurrentUser = Annotated[User, Depends(get_current_user)]
CurrentActiveUser = Annotated[User, Depends(get_current_active_user)]
OwnedMoneyBook = Annotated[MoneyBook, Depends(verify_money_book_access)]
OwnedPocket = Annotated[Pocket, Depends(verify_pocket_access)]
OwnedAllocation = Annotated[Allocation, Depends(verify_allocation_access)]
OwnedHolding = Annotated[Holding, Depends(verify_holding_access)]
OwnedTransaction = Annotated[HoldingTransaction, Depends(verify_transaction_access)]
