"""Service layer for allocations (deposits split across pockets).

Splits a deposit across a weight list with an exact-sum integer split,
records the split as an immutable allocation with per-pocket snapshots,
and deletes allocations without touching the transactions they funded.
"""

import logging
from collections.abc import Hashable, Sequence
from decimal import Decimal
from typing import TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from moneybook.core.constants import AllocationConstants
from moneybook.core.exceptions import ConsistencyError, NotFoundError, ValidationError
from moneybook.db.session import transactional
from moneybook.models.allocation import Allocation, AllocationItem
from moneybook.models.money_book import MoneyBook
from moneybook.models.pocket import Pocket
from moneybook.repositories.allocation import AllocationRepository
from moneybook.repositories.pocket import PocketRepository
from moneybook.schemas.allocation import (
    AllocationCreate,
    AllocationTransactionsResponse,
    AllocationWithSummary,
    LinkedTransactionResponse,
    LinkedTransactionsSummary,
    PocketWeight,
)
from moneybook.services import budget_source_service

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)


def calculate_allocation_amounts(
    source_amount: int,
    weights: Sequence[tuple[K, Decimal | int | float]],
) -> list[tuple[K, int]]:
    """Split an integer amount across percentage weights, summing exactly.

    Each entry first gets ``floor(source_amount * percentage / 100)``. The
    units lost to flooring are then handed out one at a time in input
    order, wrapping around to the first entry again if there are more units
    left than entries. Ties are therefore broken by input order, never by
    percentage size, and the result always sums to ``source_amount``.

    Percentages do not have to add up to 100; whatever they add up to, the
    whole amount is distributed.

    Args:
        source_amount: Positive integer amount in minor units
        weights: ``(key, percentage)`` pairs, percentage in [0, 100]

    Returns:
        ``(key, amount)`` pairs in the same order as ``weights``

    Raises:
        ValidationError: On an empty weight list, a non-positive amount, a
            percentage outside [0, 100], duplicate keys, or percentages
            adding up to more than 100

    Example:
        >>> calculate_allocation_amounts(10, [("a", 33), ("b", 33), ("c", 34)])
        [('a', 4), ('b', 3), ('c', 3)]
    """
    if isinstance(source_amount, bool) or not isinstance(source_amount, int):
        raise ValidationError("Source amount must be an integer")
    if source_amount <= 0:
        raise ValidationError("Source amount must be positive")
    if not weights:
        raise ValidationError("At least one pocket is required")

    keys: list[K] = []
    amounts: list[int] = []
    for key, raw_percentage in weights:
        if key in keys:
            raise ValidationError(f"Duplicate pocket in weight list: {key}")
        # str() first so floats like 33.3 stay 33.3 instead of their binary expansion
        percentage = Decimal(str(raw_percentage))
        if not percentage.is_finite() or not (
            AllocationConstants.MIN_PERCENTAGE <= percentage <= AllocationConstants.MAX_PERCENTAGE
        ):
            raise ValidationError(f"Pocket percentage must be between 0 and 100, got {percentage}")
        keys.append(key)
        # Integer arithmetic keeps the floor exact for amounts of any size
        numerator, denominator = percentage.as_integer_ratio()
        base = denominator * int(AllocationConstants.PERCENT_BASE)
        amounts.append(source_amount * numerator // base)

    remainder = source_amount - sum(amounts)
    if remainder < 0:
        raise ValidationError("Pocket percentages exceed 100%")

    count = len(amounts)
    for index in range(count):
        amounts[index] += remainder // count + (1 if index < remainder % count else 0)

    return list(zip(keys, amounts, strict=True))


async def _resolve_weights(
    db: AsyncSession,
    book: MoneyBook,
    pockets: list[PocketWeight] | None,
) -> list[PocketWeight]:
    """Weight list for a deposit: the request's, or the book's live pockets."""
    pocket_repo = PocketRepository(Pocket, db)

    if pockets is None:
        return [
            PocketWeight(id=pocket.id, name=pocket.name, percentage=pocket.percentage)
            for pocket in await pocket_repo.get_by_money_book_id(book.id)
        ]

    requested = [weight.id for weight in pockets]
    owned = await pocket_repo.get_ids_in_book(book.id, requested)
    if any(pocket_id not in owned for pocket_id in requested):
        raise NotFoundError("Pocket not found")
    return pockets


async def create_allocation(
    db: AsyncSession,
    book: MoneyBook,
    data: AllocationCreate,
) -> Allocation:
    """Record a deposit and its split across the book's pockets.

    The allocation and all of its items are written in one transaction.
    Each item snapshots the pocket's name and percentage as they are now.

    Args:
        db: Async database session
        book: Money book the deposit goes into (ownership already verified)
        data: Deposit amount, date, notes and optional explicit weights

    Returns:
        The allocation with its items

    Raises:
        ValidationError: If the amount or weights are invalid
        NotFoundError: If a requested pocket is not in this book
        ConsistencyError: If the split did not produce an amount for a pocket
    """
    weights = await _resolve_weights(db, book, data.pockets)
    amounts = dict(
        calculate_allocation_amounts(
            data.source_amount,
            [(weight.id, weight.percentage) for weight in weights],
        )
    )

    async with transactional(db):
        items = []
        for position, weight in enumerate(weights):
            amount = amounts.get(weight.id)
            if amount is None:
                raise ConsistencyError(f"No allocation amount computed for pocket {weight.id}")
            items.append(
                AllocationItem(
                    pocket_id=weight.id,
                    pocket_name=weight.name,
                    pocket_percentage=weight.percentage,
                    amount=amount,
                    position=position,
                )
            )

        allocation = Allocation(
            money_book_id=book.id,
            source_amount=data.source_amount,
            date=data.date,
            notes=data.notes,
            items=items,
        )
        db.add(allocation)
        await db.flush()

    logger.info(
        f"Created allocation {allocation.id} of {data.source_amount} "
        f"across {len(items)} pockets in book {book.id}"
    )
    return allocation


async def delete_allocation(db: AsyncSession, allocation: Allocation) -> None:
    """Delete an allocation and its items.

    Transactions it funded are kept and only lose their link; holding
    totals do not change. The budget sources of the affected holdings are
    rebuilt from the remaining links.
    """
    repo = AllocationRepository(Allocation, db)
    allocation_id = allocation.id

    async with transactional(db):
        holding_ids = await repo.get_linked_holding_ids(allocation_id)
        await repo.unlink_transactions(allocation_id)
        await repo.delete_with_items(allocation_id)
        for holding_id in holding_ids:
            await budget_source_service.rebuild_budget_sources(db, holding_id)

    logger.info(
        f"Deleted allocation {allocation_id}, unlinked transactions in "
        f"{len(holding_ids)} holdings"
    )


async def list_allocations(db: AsyncSession, book: MoneyBook) -> list[AllocationWithSummary]:
    """List a book's allocations, newest first, with what they funded."""
    repo = AllocationRepository(Allocation, db)
    allocations = await repo.get_by_money_book_id(book.id)
    summaries = await repo.get_transaction_summaries([allocation.id for allocation in allocations])

    results = []
    for allocation in allocations:
        count, total = summaries.get(allocation.id, (0, Decimal(0)))
        summary = AllocationWithSummary.model_validate(allocation)
        summary.transaction_count = count
        summary.total_allocated = total
        results.append(summary)
    return results


async def get_allocation_transactions(
    db: AsyncSession, allocation: Allocation
) -> AllocationTransactionsResponse:
    """Transactions funded by one allocation with their holding details."""
    rows = await AllocationRepository(Allocation, db).get_linked_transactions(allocation.id)

    transactions = [
        LinkedTransactionResponse(
            id=transaction.id,
            holding_id=transaction.holding_id,
            transaction_type=transaction.transaction_type.value,
            amount=transaction.amount,
            quantity=transaction.quantity,
            average_price=transaction.average_price,
            purchase_date=transaction.purchase_date,
            notes=transaction.notes,
            created_at=transaction.created_at,
            platform=holding.platform,
            instrument_name=holding.instrument_name,
            asset_type=asset.type.value,
            asset_name=asset.name,
        )
        for transaction, holding, asset in rows
    ]
    return AllocationTransactionsResponse(
        transactions=transactions,
        summary=LinkedTransactionsSummary(
            total_count=len(transactions),
            total_allocated=sum((t.amount for t in transactions), Decimal(0)),
        ),
    )
