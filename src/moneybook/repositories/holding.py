"""Holding repository for holding-specific database operations."""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import String, cast, delete, func, select
from sqlalchemy.orm import joinedload

from moneybook.models.asset import Asset
from moneybook.models.holding import Holding
from moneybook.models.holding_budget_source import HoldingBudgetSource
from moneybook.models.holding_transaction import HoldingTransaction
from moneybook.models.money_book import MoneyBook
from moneybook.models.portfolio import InvestmentPortfolio
from moneybook.repositories.base import BaseRepository


class HoldingRepository(BaseRepository[Holding]):
    """Repository for Holding model with holding-specific queries.

    Ownership runs holding -> asset -> portfolio -> money book -> user, so
    every user-scoped lookup joins through that chain.

    Example:
        >>> repo = HoldingRepository(Holding, db)
        >>> rows = await repo.get_by_money_book_id(book.id)
    """

    async def get_by_id_and_user(self, holding_id: UUID, user_id: int) -> Holding | None:
        """Get holding by ID, ensuring it belongs to one of the user's books.

        Args:
            holding_id: Holding ID
            user_id: Owner's user ID

        Returns:
            Holding with its asset loaded if found and owned, None otherwise
        """
        result = await self.db.execute(
            select(Holding)
            .options(joinedload(Holding.asset))
            .join(Asset, Asset.id == Holding.asset_id)
            .join(InvestmentPortfolio, InvestmentPortfolio.id == Asset.portfolio_id)
            .join(MoneyBook, MoneyBook.id == InvestmentPortfolio.money_book_id)
            .where(Holding.id == holding_id, MoneyBook.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_by_natural_key(
        self,
        asset_id: UUID,
        platform: str,
        instrument_name: str,
        *,
        for_update: bool = False,
    ) -> Holding | None:
        """Get the holding for an (asset, platform, instrument) combination.

        Args:
            asset_id: Asset the holding belongs to
            platform: Platform name
            instrument_name: Instrument name
            for_update: Lock the row so concurrent transactions against the
                same holding are serialized

        Returns:
            Holding if found, None otherwise
        """
        query = select(Holding).where(
            Holding.asset_id == asset_id,
            Holding.platform == platform,
            Holding.instrument_name == instrument_name,
        )
        if for_update:
            query = query.with_for_update()
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_by_money_book_id(self, money_book_id: UUID) -> list[tuple[Holding, Asset]]:
        """Get every holding of a book's portfolio together with its asset.

        Ordered by asset type (as text, not enum declaration order) and
        platform, newest holding first within those.
        """
        result = await self.db.execute(
            select(Holding, Asset)
            .join(Asset, Asset.id == Holding.asset_id)
            .join(InvestmentPortfolio, InvestmentPortfolio.id == Asset.portfolio_id)
            .where(InvestmentPortfolio.money_book_id == money_book_id)
            .order_by(cast(Asset.type, String), Holding.platform, Holding.created_at.desc())
        )
        return [tuple(row) for row in result.all()]  # type: ignore[misc]

    async def aggregate_transactions(self, holding_id: UUID) -> tuple[int, Decimal, Decimal]:
        """Recompute a holding's totals from its transaction log.

        Returns:
            Tuple of (transaction count, sum of amounts, sum of quantities)
        """
        result = await self.db.execute(
            select(
                func.count(HoldingTransaction.id),
                func.coalesce(func.sum(HoldingTransaction.amount), 0),
                func.coalesce(func.sum(HoldingTransaction.quantity), 0),
            ).where(HoldingTransaction.holding_id == holding_id)
        )
        count, total_investment, total_quantity = result.one()
        return count, Decimal(str(total_investment)), Decimal(str(total_quantity))

    async def delete_cascade(self, holding_id: UUID) -> None:
        """Delete a holding with its transactions and budget sources."""
        for statement in (
            delete(HoldingBudgetSource).where(HoldingBudgetSource.holding_id == holding_id),
            delete(HoldingTransaction).where(HoldingTransaction.holding_id == holding_id),
            delete(Holding).where(Holding.id == holding_id),
        ):
            await self.db.execute(statement.execution_options(synchronize_session="fetch"))
