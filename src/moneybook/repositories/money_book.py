"""Money book repository."""

from uuid import UUID

from sqlalchemy import delete, select, update

from moneybook.models.allocation import Allocation, AllocationItem
from moneybook.models.asset import Asset
from moneybook.models.holding import Holding
from moneybook.models.holding_budget_source import HoldingBudgetSource
from moneybook.models.holding_transaction import HoldingTransaction
from moneybook.models.money_book import MoneyBook
from moneybook.models.pocket import Pocket
from moneybook.models.portfolio import InvestmentPortfolio
from moneybook.repositories.base import BaseRepository


class MoneyBookRepository(BaseRepository[MoneyBook]):
    """Repository for MoneyBook model.

    Example:
        >>> repo = MoneyBookRepository(MoneyBook, db)
        >>> book = await repo.get_by_id_and_user(book_id, user.id)
    """

    async def get_by_id_and_user(self, book_id: UUID, user_id: int) -> MoneyBook | None:
        """Get a money book by ID, ensuring it belongs to the user.

        Args:
            book_id: Money book ID
            user_id: Owner's user ID

        Returns:
            MoneyBook if found and owned by the user, None otherwise
        """
        result = await self.db.execute(
            select(MoneyBook).where(MoneyBook.id == book_id, MoneyBook.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_by_user_id(self, user_id: int) -> list[MoneyBook]:
        """Get all money books of a user in display order."""
        result = await self.db.execute(
            select(MoneyBook)
            .where(MoneyBook.user_id == user_id)
            .order_by(MoneyBook.order_index, MoneyBook.created_at)
        )
        return list(result.scalars().all())

    async def shift_order_indexes(self, user_id: int) -> None:
        """Move every book of the user one place down to make room at the top."""
        await self.db.execute(
            update(MoneyBook)
            .where(MoneyBook.user_id == user_id)
            .values(order_index=MoneyBook.order_index + 1)
            .execution_options(synchronize_session="fetch")
        )

    async def delete_cascade(self, book_id: UUID) -> None:
        """Delete a money book and everything that hangs off it.

        Children are removed explicitly, deepest first, so the result does
        not depend on the store enforcing ``ON DELETE CASCADE``.
        """
        portfolio_ids = select(InvestmentPortfolio.id).where(
            InvestmentPortfolio.money_book_id == book_id
        )
        asset_ids = select(Asset.id).where(Asset.portfolio_id.in_(portfolio_ids))
        holding_ids = select(Holding.id).where(Holding.asset_id.in_(asset_ids))
        allocation_ids = select(Allocation.id).where(Allocation.money_book_id == book_id)
        pocket_ids = select(Pocket.id).where(Pocket.money_book_id == book_id)

        statements = [
            delete(HoldingBudgetSource).where(HoldingBudgetSource.holding_id.in_(holding_ids)),
            delete(HoldingTransaction).where(HoldingTransaction.holding_id.in_(holding_ids)),
            delete(Holding).where(Holding.asset_id.in_(asset_ids)),
            delete(Asset).where(Asset.portfolio_id.in_(portfolio_ids)),
            delete(InvestmentPortfolio).where(InvestmentPortfolio.money_book_id == book_id),
            update(HoldingTransaction)
            .where(HoldingTransaction.linked_allocation_id.in_(allocation_ids))
            .values(linked_allocation_id=None),
            delete(AllocationItem).where(AllocationItem.allocation_id.in_(allocation_ids)),
            delete(Allocation).where(Allocation.money_book_id == book_id),
            update(HoldingBudgetSource)
            .where(HoldingBudgetSource.pocket_id.in_(pocket_ids))
            .values(pocket_id=None),
            delete(Pocket).where(Pocket.money_book_id == book_id),
            delete(MoneyBook).where(MoneyBook.id == book_id),
        ]
        for statement in statements:
            await self.db.execute(statement.execution_options(synchronize_session="fetch"))
