"""Service layer for budget sources: which pockets funded a holding.

A transaction linked to an allocation is fanned out across that
allocation's item snapshots, each pocket getting
``transaction amount * item percentage / 100``. The read side computes this
directly from the transaction log; the ``holding_budget_sources`` table
stores the same sums per pocket name and is kept in step with the log.
"""

import logging
from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from moneybook.core.constants import PERCENT_BASE
from moneybook.db.base import utcnow
from moneybook.models.allocation import Allocation, AllocationItem
from moneybook.models.holding import Holding
from moneybook.models.holding_budget_source import HoldingBudgetSource
from moneybook.models.holding_transaction import HoldingTransaction
from moneybook.repositories.allocation import AllocationRepository
from moneybook.repositories.budget_source import BudgetSourceRepository
from moneybook.repositories.holding_transaction import HoldingTransactionRepository
from moneybook.schemas.budget_source import (
    BudgetSourceResponse,
    HoldingTransactionsResponse,
    HoldingTransactionsSummary,
    PocketSourceSummary,
    TransactionPocketSource,
    TransactionWithSources,
)

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def pocket_share(amount: Decimal, percentage: Decimal) -> Decimal:
    """A pocket's share of a transaction amount, rounded to the cent."""
    return (Decimal(amount) * Decimal(percentage) / PERCENT_BASE).quantize(
        CENT, rounding=ROUND_HALF_UP
    )


async def attribute_transaction(
    db: AsyncSession,
    holding_id: UUID,
    transaction_amount: Decimal,
    items: Iterable[AllocationItem],
) -> None:
    """Add one linked transaction's pocket shares to a holding's budget sources.

    For every allocation item the row keyed by (holding, pocket name) is
    created, or locked and incremented: percentage by the item's
    percentage, amount by the pocket's share, count by one.

    Must run inside the caller's transaction.
    """
    repo = BudgetSourceRepository(HoldingBudgetSource, db)
    now = utcnow()

    for item in items:
        share = pocket_share(transaction_amount, item.pocket_percentage)
        source = await repo.get_for_update(holding_id, item.pocket_name)

        if source is None:
            db.add(
                HoldingBudgetSource(
                    holding_id=holding_id,
                    pocket_name=item.pocket_name,
                    pocket_id=item.pocket_id,
                    accumulated_percentage=item.pocket_percentage,
                    accumulated_amount=share,
                    transaction_count=1,
                    last_updated=now,
                )
            )
        else:
            source.accumulated_percentage += item.pocket_percentage
            source.accumulated_amount += share
            source.transaction_count += 1
            source.last_updated = now
            if item.pocket_id is not None:
                source.pocket_id = item.pocket_id

        # Flush per item so a second item with the same pocket name finds the row
        await db.flush()


async def rebuild_budget_sources(db: AsyncSession, holding_id: UUID) -> None:
    """Recompute a holding's budget sources from its linked transactions.

    Must run inside the caller's transaction.
    """
    await BudgetSourceRepository(HoldingBudgetSource, db).delete_for_holding(holding_id)

    linked = await HoldingTransactionRepository(HoldingTransaction, db).get_linked(holding_id)
    items_by_allocation = await AllocationRepository(Allocation, db).get_items_by_allocation(
        {transaction.linked_allocation_id for transaction in linked}
    )
    for transaction in linked:
        await attribute_transaction(
            db,
            holding_id,
            transaction.amount,
            items_by_allocation.get(transaction.linked_allocation_id, []),
        )

    logger.debug(f"Rebuilt budget sources of holding {holding_id} from {len(linked)} transactions")


async def query_budget_sources(db: AsyncSession, holding: Holding) -> HoldingTransactionsResponse:
    """A holding's transactions with the pockets that funded each of them.

    Pocket totals are grouped by the pocket name snapshotted on the
    allocation items, so renamed or deleted pockets keep their history.
    Each total is expressed as a percentage of the sum of all of the
    holding's transaction amounts, linked or not.
    """
    rows = await HoldingTransactionRepository(HoldingTransaction, db).get_with_allocations(
        holding.id
    )
    items_by_allocation = await AllocationRepository(Allocation, db).get_items_by_allocation(
        {allocation.id for _, allocation in rows if allocation is not None}
    )

    transactions: list[TransactionWithSources] = []
    pocket_totals: dict[str, Decimal] = {}
    total_allocated = Decimal(0)
    total_quantity = Decimal(0)

    for transaction, allocation in rows:
        total_allocated += transaction.amount
        total_quantity += transaction.quantity

        sources = []
        if allocation is not None:
            for item in items_by_allocation.get(allocation.id, []):
                share = pocket_share(transaction.amount, item.pocket_percentage)
                sources.append(
                    TransactionPocketSource(
                        pocket_id=item.pocket_id,
                        pocket_name=item.pocket_name,
                        pocket_amount=share,
                        percentage=item.pocket_percentage,
                    )
                )
                pocket_totals[item.pocket_name] = (
                    pocket_totals.get(item.pocket_name, Decimal(0)) + share
                )
            sources.sort(key=lambda source: source.percentage, reverse=True)

        transactions.append(
            TransactionWithSources.model_validate(transaction).model_copy(
                update={
                    "allocation_source_amount": allocation.source_amount if allocation else None,
                    "allocation_date": allocation.date if allocation else None,
                    "allocation_notes": allocation.notes if allocation else None,
                    "pocket_sources": sources,
                }
            )
        )

    pocket_sources = [
        PocketSourceSummary(
            pocket_name=name,
            pocket_amount=amount,
            percentage=(
                (amount / total_allocated * PERCENT_BASE).quantize(CENT, rounding=ROUND_HALF_UP)
                if total_allocated > 0
                else Decimal(0)
            ),
        )
        for name, amount in pocket_totals.items()
    ]
    pocket_sources.sort(key=lambda source: source.pocket_amount, reverse=True)

    return HoldingTransactionsResponse(
        transactions=transactions,
        summary=HoldingTransactionsSummary(
            total_count=len(transactions),
            total_allocated=total_allocated,
            total_quantity=total_quantity,
            pocket_sources=pocket_sources,
        ),
    )


async def list_budget_sources(db: AsyncSession, holding: Holding) -> list[BudgetSourceResponse]:
    """The stored budget sources of a holding, largest first."""
    rows = await BudgetSourceRepository(HoldingBudgetSource, db).get_with_current_percentage(
        holding.id
    )
    return [
        BudgetSourceResponse(
            id=source.id,
            holding_id=source.holding_id,
            pocket_id=source.pocket_id,
            pocket_name=source.pocket_name,
            accumulated_percentage=source.accumulated_percentage,
            accumulated_amount=source.accumulated_amount,
            transaction_count=source.transaction_count,
            last_updated=source.last_updated,
            current_pocket_percentage=current_percentage,
        )
        for source, current_percentage in rows
    ]
