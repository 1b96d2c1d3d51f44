"""Allocation endpoints.

``router`` is mounted under a money book; ``allocation_router`` addresses
allocations directly by ID.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from moneybook.core.deps import OwnedAllocation, OwnedMoneyBook
from moneybook.db.session import get_db
from moneybook.models.allocation import Allocation
from moneybook.schemas.allocation import (
    AllocationCreate,
    AllocationResponse,
    AllocationTransactionsResponse,
    AllocationWithSummary,
)
from moneybook.services import allocation_service

router = APIRouter()
allocation_router = APIRouter()


@router.get("/", response_model=list[AllocationWithSummary])
async def get_allocations(
    book: OwnedMoneyBook,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[AllocationWithSummary]:
    """
    Get all allocations of a money book, newest first.

    Each allocation carries its per-pocket items and the count and total of
    the investment transactions it funded.

    Args:
        book: The verified money book (from dependency)
        db: Database session

    Returns:
        List of allocations with summaries
    """
    return await allocation_service.list_allocations(db, book)


@router.post("/", response_model=AllocationResponse, status_code=status.HTTP_201_CREATED)
async def create_allocation(
    book: OwnedMoneyBook,
    allocation_in: AllocationCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Allocation:
    """
    Record a deposit and split it across pockets.

    When ``pockets`` is omitted the book's current pockets are used.

    Args:
        book: The verified money book (from dependency)
        allocation_in: Deposit amount, date, notes and optional weights
        db: Database session

    Returns:
        The created allocation with its items

    Raises:
        ValidationError: 400 if the amount or weights are invalid
        NotFoundError: 404 if a pocket is not in this book
    """
    return await allocation_service.create_allocation(db, book, allocation_in)


@allocation_router.delete("/{allocation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_allocation(
    allocation: OwnedAllocation,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    """
    Delete an allocation.

    Transactions it funded are kept and lose only their link.
    """
    await allocation_service.delete_allocation(db, allocation)


@allocation_router.get(
    "/{allocation_id}/transactions", response_model=AllocationTransactionsResponse
)
async def get_allocation_transactions(
    allocation: OwnedAllocation,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AllocationTransactionsResponse:
    """Get the investment transactions funded by an allocation."""
    return await allocation_service.get_allocation_transactions(db, allocation)
