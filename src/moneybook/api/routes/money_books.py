"""Money book and pocket endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from moneybook.core.deps import CurrentActiveUser, OwnedMoneyBook, OwnedPocket
from moneybook.db.session import get_db
from moneybook.models.money_book import MoneyBook
from moneybook.models.pocket import Pocket
from moneybook.models.portfolio import InvestmentPortfolio
from moneybook.repositories.money_book import MoneyBookRepository
from moneybook.repositories.pocket import PocketRepository
from moneybook.schemas.holding import PortfolioResponse
from moneybook.schemas.money_book import (
    MoneyBookCreate,
    MoneyBookResponse,
    MoneyBookUpdate,
    PocketCreate,
    PocketResponse,
    PocketUpdate,
)
from moneybook.services import holding_service, money_book_service

router = APIRouter()
pocket_router = APIRouter()


@router.get("/", response_model=list[MoneyBookResponse])
async def get_money_books(
    current_user: CurrentActiveUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[MoneyBook]:
    """
    Get all money books of the current user in display order.

    Args:
        current_user: The authenticated user (from dependency)
        db: Database session

    Returns:
        List of money books
    """
    return await MoneyBookRepository(MoneyBook, db).get_by_user_id(current_user.id)


@router.post("/", response_model=MoneyBookResponse, status_code=status.HTTP_201_CREATED)
async def create_money_book(
    book_in: MoneyBookCreate,
    current_user: CurrentActiveUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MoneyBook:
    """
    Create a new money book at the top of the user's list.

    Args:
        book_in: Money book data (validated Pydantic model)
        current_user: The authenticated user (from dependency)
        db: Database session

    Returns:
        The created money book
    """
    return await money_book_service.create_money_book(db, current_user, book_in)


@router.get("/{book_id}", response_model=MoneyBookResponse)
async def get_money_book(book: OwnedMoneyBook) -> MoneyBook:
    """
    Get a specific money book.

    Raises:
        NotFoundError: If the book does not exist or belongs to another user
    """
    return book


@router.patch("/{book_id}", response_model=MoneyBookResponse)
async def update_money_book(
    book: OwnedMoneyBook,
    book_update: MoneyBookUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MoneyBook:
    """
    Rename a money book or toggle its investment flag.

    Args:
        book: The verified money book (from dependency)
        book_update: Fields to change
        db: Database session

    Returns:
        The updated money book
    """
    return await money_book_service.update_money_book(db, book, book_update)


@router.delete("/{book_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_money_book(
    book: OwnedMoneyBook,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    """
    Delete a money book with its pockets, allocations and portfolio.

    Args:
        book: The verified money book (from dependency)
        db: Database session
    """
    await money_book_service.delete_money_book(db, book)


@router.get("/{book_id}/pockets", response_model=list[PocketResponse])
async def get_pockets(
    book: OwnedMoneyBook,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[Pocket]:
    """Get the pockets of a money book ordered by ``order_index``."""
    return await PocketRepository(Pocket, db).get_by_money_book_id(book.id)


@router.post(
    "/{book_id}/pockets",
    response_model=PocketResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_pocket(
    book: OwnedMoneyBook,
    pocket_in: PocketCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Pocket:
    """
    Add a pocket to a money book.

    Args:
        book: The verified money book (from dependency)
        pocket_in: Pocket name, percentage and position
        db: Database session

    Returns:
        The created pocket
    """
    return await money_book_service.create_pocket(db, book, pocket_in)


@router.get("/{book_id}/portfolio", response_model=PortfolioResponse)
async def get_portfolio(
    book: OwnedMoneyBook,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> InvestmentPortfolio:
    """
    Get the money book's investment portfolio, creating it on first access.

    Args:
        book: The verified money book (from dependency)
        db: Database session

    Returns:
        The book's portfolio
    """
    return await holding_service.get_portfolio(db, book)


@pocket_router.patch("/{pocket_id}", response_model=PocketResponse)
async def update_pocket(
    pocket: OwnedPocket,
    pocket_update: PocketUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Pocket:
    """
    Rename, reweight or reorder a pocket.

    Allocations already recorded keep the name and percentage they were
    split with.
    """
    return await money_book_service.update_pocket(db, pocket, pocket_update)


@pocket_router.delete("/{pocket_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_pocket(
    pocket: OwnedPocket,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    """
    Delete a pocket.

    Allocation items and budget sources that referenced it keep their name
    and percentage snapshot and lose only the link.
    """
    await money_book_service.delete_pocket(db, pocket)
