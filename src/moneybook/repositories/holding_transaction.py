"""Holding transaction repository."""

from uuid import UUID

from sqlalchemy import select

from moneybook.models.allocation import Allocation
from moneybook.models.asset import Asset
from moneybook.models.holding import Holding
from moneybook.models.holding_transaction import HoldingTransaction
from moneybook.models.money_book import MoneyBook
from moneybook.models.portfolio import InvestmentPortfolio
from moneybook.repositories.base import BaseRepository


class HoldingTransactionRepository(BaseRepository[HoldingTransaction]):
    """Repository for a holding's transaction log."""

    async def get_by_id_and_user(
        self, transaction_id: UUID, user_id: int
    ) -> HoldingTransaction | None:
        """Get a transaction by ID through the owner of its holding's book."""
        result = await self.db.execute(
            select(HoldingTransaction)
            .join(Holding, Holding.id == HoldingTransaction.holding_id)
            .join(Asset, Asset.id == Holding.asset_id)
            .join(InvestmentPortfolio, InvestmentPortfolio.id == Asset.portfolio_id)
            .join(MoneyBook, MoneyBook.id == InvestmentPortfolio.money_book_id)
            .where(HoldingTransaction.id == transaction_id, MoneyBook.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_with_allocations(
        self, holding_id: UUID
    ) -> list[tuple[HoldingTransaction, Allocation | None]]:
        """Get a holding's transactions with the allocation that funded each.

        Ordered by purchase date descending (undated last), then by
        creation time descending.
        """
        result = await self.db.execute(
            select(HoldingTransaction, Allocation)
            .outerjoin(Allocation, Allocation.id == HoldingTransaction.linked_allocation_id)
            .where(HoldingTransaction.holding_id == holding_id)
            .order_by(
                HoldingTransaction.purchase_date.desc().nulls_last(),
                HoldingTransaction.created_at.desc(),
            )
        )
        return [tuple(row) for row in result.all()]  # type: ignore[misc]

    async def get_linked(self, holding_id: UUID) -> list[HoldingTransaction]:
        """Get a holding's allocation-funded transactions in the order they were recorded."""
        result = await self.db.execute(
            select(HoldingTransaction)
            .where(
                HoldingTransaction.holding_id == holding_id,
                HoldingTransaction.linked_allocation_id.is_not(None),
            )
            .order_by(HoldingTransaction.created_at)
        )
        return list(result.scalars().all())
