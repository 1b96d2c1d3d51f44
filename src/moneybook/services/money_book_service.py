"""Service layer for money books and their pockets."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from moneybook.db.session import transactional
from moneybook.models.money_book import MoneyBook
from moneybook.models.pocket import Pocket
from moneybook.models.user import User
from moneybook.repositories.money_book import MoneyBookRepository
from moneybook.repositories.pocket import PocketRepository
from moneybook.schemas.money_book import (
    MoneyBookCreate,
    MoneyBookUpdate,
    PocketCreate,
    PocketUpdate,
)

logger = logging.getLogger(__name__)


async def create_money_book(db: AsyncSession, user: User, data: MoneyBookCreate) -> MoneyBook:
    """Create a book at the top of the user's list.

    Existing books move one place down so the new book gets order index 0.
    """
    repo = MoneyBookRepository(MoneyBook, db)
    async with transactional(db):
        await repo.shift_order_indexes(user.id)
        book = await repo.create(
            obj_in={
                "user_id": user.id,
                "name": data.name,
                "has_investment_portfolio": data.has_investment_portfolio,
                "order_index": 0,
            }
        )
    logger.info(f"Created money book {book.id} for user {user.id}")
    return book


async def update_money_book(db: AsyncSession, book: MoneyBook, data: MoneyBookUpdate) -> MoneyBook:
    """Rename a book or toggle its investment flag."""
    async with transactional(db):
        book = await MoneyBookRepository(MoneyBook, db).update(db_obj=book, obj_in=data)
    return book


async def delete_money_book(db: AsyncSession, book: MoneyBook) -> None:
    """Delete a book with its pockets, allocations and portfolio."""
    book_id = book.id
    async with transactional(db):
        await MoneyBookRepository(MoneyBook, db).delete_cascade(book_id)
    logger.info(f"Deleted money book {book_id}")


async def create_pocket(db: AsyncSession, book: MoneyBook, data: PocketCreate) -> Pocket:
    """Add a pocket to a book."""
    async with transactional(db):
        pocket = await PocketRepository(Pocket, db).create(
            obj_in={"money_book_id": book.id, **data.model_dump()}
        )
    return pocket


async def update_pocket(db: AsyncSession, pocket: Pocket, data: PocketUpdate) -> Pocket:
    """Rename, reweight or reorder a pocket.

    Allocations already recorded keep the name and percentage they were
    split with.
    """
    async with transactional(db):
        pocket = await PocketRepository(Pocket, db).update(db_obj=pocket, obj_in=data)
    return pocket


async def delete_pocket(db: AsyncSession, pocket: Pocket) -> None:
    """Delete a pocket; allocation history and budget sources keep their snapshot."""
    pocket_id = pocket.id
    async with transactional(db):
        await PocketRepository(Pocket, db).delete_pocket(pocket_id)
    logger.info(f"Deleted pocket {pocket_id}")
