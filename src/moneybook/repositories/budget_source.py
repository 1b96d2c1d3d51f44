"""Budget-source repository."""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import delete, select

from moneybook.models.holding_budget_source import HoldingBudgetSource
from moneybook.models.pocket import Pocket
from moneybook.repositories.base import BaseRepository


class BudgetSourceRepository(BaseRepository[HoldingBudgetSource]):
    """Repository for HoldingBudgetSource rows."""

    async def get_for_update(self, holding_id: UUID, pocket_name: str) -> HoldingBudgetSource | None:
        """Get and lock the budget-source row of one pocket name of a holding."""
        result = await self.db.execute(
            select(HoldingBudgetSource)
            .where(
                HoldingBudgetSource.holding_id == holding_id,
                HoldingBudgetSource.pocket_name == pocket_name,
            )
            .with_for_update()
        )
        return result.scalar_one_or_none()

    async def get_with_current_percentage(
        self, holding_id: UUID
    ) -> list[tuple[HoldingBudgetSource, Decimal | None]]:
        """Get a holding's budget sources with the live pocket's current percentage.

        The percentage is None when the pocket has since been deleted.
        Ordered by accumulated amount descending.
        """
        result = await self.db.execute(
            select(HoldingBudgetSource, Pocket.percentage)
            .outerjoin(Pocket, Pocket.id == HoldingBudgetSource.pocket_id)
            .where(HoldingBudgetSource.holding_id == holding_id)
            .order_by(
                HoldingBudgetSource.accumulated_amount.desc(),
                HoldingBudgetSource.pocket_name,
            )
        )
        return [tuple(row) for row in result.all()]  # type: ignore[misc]

    async def delete_for_holding(self, holding_id: UUID) -> None:
        """Remove every budget-source row of a holding."""
        await self.db.execute(
            delete(HoldingBudgetSource)
            .where(HoldingBudgetSource.holding_id == holding_id)
            .execution_options(synchronize_session="fetch")
        )
