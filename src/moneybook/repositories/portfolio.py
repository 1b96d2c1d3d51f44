"""Investment portfolio and asset repositories."""

from uuid import UUID

from sqlalchemy import select

from moneybook.models.asset import Asset, AssetType
from moneybook.models.portfolio import InvestmentPortfolio
from moneybook.repositories.base import BaseRepository


class PortfolioRepository(BaseRepository[InvestmentPortfolio]):
    """Repository for InvestmentPortfolio model (one per money book)."""

    async def get_by_money_book_id(self, money_book_id: UUID) -> InvestmentPortfolio | None:
        """Get the portfolio of a book, if it has been created yet."""
        result = await self.db.execute(
            select(InvestmentPortfolio).where(InvestmentPortfolio.money_book_id == money_book_id)
        )
        return result.scalar_one_or_none()


class AssetRepository(BaseRepository[Asset]):
    """Repository for Asset model."""

    async def get_by_type_and_name(
        self,
        portfolio_id: UUID,
        asset_type: AssetType,
        name: str,
    ) -> Asset | None:
        """Get an asset by its natural key within a portfolio."""
        result = await self.db.execute(
            select(Asset).where(
                Asset.portfolio_id == portfolio_id,
                Asset.type == asset_type,
                Asset.name == name,
            )
        )
        return result.scalar_one_or_none()
