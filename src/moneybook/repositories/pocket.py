"""Pocket repository."""

from uuid import UUID

from sqlalchemy import delete, select, update

from moneybook.models.allocation import AllocationItem
from moneybook.models.holding_budget_source import HoldingBudgetSource
from moneybook.models.money_book import MoneyBook
from moneybook.models.pocket import Pocket
from moneybook.repositories.base import BaseRepository


class PocketRepository(BaseRepository[Pocket]):
    """Repository for Pocket model.

    Example:
        >>> repo = PocketRepository(Pocket, db)
        >>> pockets = await repo.get_by_money_book_id(book.id)
    """

    async def get_by_money_book_id(self, money_book_id: UUID) -> list[Pocket]:
        """Get the live pockets of a book ordered by ``order_index``.

        This is the default weight list a deposit is split with.
        """
        result = await self.db.execute(
            select(Pocket)
            .where(Pocket.money_book_id == money_book_id)
            .order_by(Pocket.order_index, Pocket.created_at)
        )
        return list(result.scalars().all())

    async def get_by_id_and_user(self, pocket_id: UUID, user_id: int) -> Pocket | None:
        """Get a pocket by ID through its book's owner."""
        result = await self.db.execute(
            select(Pocket)
            .join(MoneyBook, MoneyBook.id == Pocket.money_book_id)
            .where(Pocket.id == pocket_id, MoneyBook.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_ids_in_book(self, money_book_id: UUID, pocket_ids: list[UUID]) -> set[UUID]:
        """Return which of ``pocket_ids`` belong to the given book."""
        if not pocket_ids:
            return set()
        result = await self.db.execute(
            select(Pocket.id).where(
                Pocket.money_book_id == money_book_id, Pocket.id.in_(pocket_ids)
            )
        )
        return set(result.scalars().all())

    async def delete_pocket(self, pocket_id: UUID) -> None:
        """Delete a pocket, detaching the history that references it.

        Allocation items and budget sources keep their name/percentage
        snapshot; only their ``pocket_id`` is cleared.
        """
        await self.db.execute(
            update(AllocationItem)
            .where(AllocationItem.pocket_id == pocket_id)
            .values(pocket_id=None)
            .execution_options(synchronize_session="fetch")
        )
        await self.db.execute(
            update(HoldingBudgetSource)
            .where(HoldingBudgetSource.pocket_id == pocket_id)
            .values(pocket_id=None)
            .execution_options(synchronize_session="fetch")
        )
        await self.db.execute(
            delete(Pocket)
            .where(Pocket.id == pocket_id)
            .execution_options(synchronize_session="fetch")
        )
