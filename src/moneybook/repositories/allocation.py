"""Allocation repository for deposits and their per-pocket items."""

from collections import defaultdict
from decimal import Decimal
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import selectinload

from moneybook.models.allocation import Allocation, AllocationItem
from moneybook.models.asset import Asset
from moneybook.models.holding import Holding
from moneybook.models.holding_transaction import HoldingTransaction
from moneybook.models.money_book import MoneyBook
from moneybook.repositories.base import BaseRepository


class AllocationRepository(BaseRepository[Allocation]):
    """Repository for Allocation model and its items.

    Allocations are immutable once written; this repository only reads
    them and deletes them.

    Example:
        >>> repo = AllocationRepository(Allocation, db)
        >>> allocations = await repo.get_by_money_book_id(book.id)
    """

    async def get_by_id_and_user(self, allocation_id: UUID, user_id: int) -> Allocation | None:
        """Get an allocation by ID through its book's owner."""
        result = await self.db.execute(
            select(Allocation)
            .join(MoneyBook, MoneyBook.id == Allocation.money_book_id)
            .where(Allocation.id == allocation_id, MoneyBook.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_by_id_and_book(self, allocation_id: UUID, money_book_id: UUID) -> Allocation | None:
        """Get an allocation by ID, ensuring it belongs to the given book."""
        result = await self.db.execute(
            select(Allocation).where(
                Allocation.id == allocation_id, Allocation.money_book_id == money_book_id
            )
        )
        return result.scalar_one_or_none()

    async def get_by_money_book_id(self, money_book_id: UUID) -> list[Allocation]:
        """Get a book's allocations with items, newest first.

        Ordered by date descending, then by creation time descending.
        """
        result = await self.db.execute(
            select(Allocation)
            .options(selectinload(Allocation.items))
            .where(Allocation.money_book_id == money_book_id)
            .order_by(Allocation.date.desc(), Allocation.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_items_by_allocation(
        self, allocation_ids: set[UUID]
    ) -> dict[UUID, list[AllocationItem]]:
        """Load the items of several allocations, grouped by allocation ID.

        Items keep the order of the weight list they were split with.
        """
        if not allocation_ids:
            return {}
        result = await self.db.execute(
            select(AllocationItem)
            .where(AllocationItem.allocation_id.in_(allocation_ids))
            .order_by(AllocationItem.allocation_id, AllocationItem.position)
        )
        items: dict[UUID, list[AllocationItem]] = defaultdict(list)
        for item in result.scalars().all():
            items[item.allocation_id].append(item)
        return dict(items)

    async def get_transaction_summaries(
        self, allocation_ids: list[UUID]
    ) -> dict[UUID, tuple[int, Decimal]]:
        """Count and sum the transactions linked to each allocation.

        Returns:
            Mapping of allocation ID to (transaction count, total amount).
            Allocations with no linked transactions are absent.
        """
        if not allocation_ids:
            return {}
        result = await self.db.execute(
            select(
                HoldingTransaction.linked_allocation_id,
                func.count(HoldingTransaction.id),
                func.coalesce(func.sum(HoldingTransaction.amount), 0),
            )
            .where(HoldingTransaction.linked_allocation_id.in_(allocation_ids))
            .group_by(HoldingTransaction.linked_allocation_id)
        )
        return {
            allocation_id: (count, Decimal(str(total)))
            for allocation_id, count, total in result.all()
        }

    async def get_linked_transactions(
        self, allocation_id: UUID
    ) -> list[tuple[HoldingTransaction, Holding, Asset]]:
        """Get the transactions funded by an allocation with their holding and asset.

        Ordered by purchase date descending (undated last), then by
        creation time descending.
        """
        result = await self.db.execute(
            select(HoldingTransaction, Holding, Asset)
            .join(Holding, Holding.id == HoldingTransaction.holding_id)
            .join(Asset, Asset.id == Holding.asset_id)
            .where(HoldingTransaction.linked_allocation_id == allocation_id)
            .order_by(
                HoldingTransaction.purchase_date.desc().nulls_last(),
                HoldingTransaction.created_at.desc(),
            )
        )
        return [tuple(row) for row in result.all()]  # type: ignore[misc]

    async def get_linked_holding_ids(self, allocation_id: UUID) -> list[UUID]:
        """IDs of the holdings that have a transaction funded by this allocation."""
        result = await self.db.execute(
            select(HoldingTransaction.holding_id)
            .where(HoldingTransaction.linked_allocation_id == allocation_id)
            .distinct()
        )
        return list(result.scalars().all())

    async def unlink_transactions(self, allocation_id: UUID) -> None:
        """Clear the weak reference from every transaction funded by the allocation."""
        await self.db.execute(
            update(HoldingTransaction)
            .where(HoldingTransaction.linked_allocation_id == allocation_id)
            .values(linked_allocation_id=None)
            .execution_options(synchronize_session="fetch")
        )

    async def delete_with_items(self, allocation_id: UUID) -> None:
        """Delete an allocation and its items."""
        await self.db.execute(
            delete(AllocationItem)
            .where(AllocationItem.allocation_id == allocation_id)
            .execution_options(synchronize_session="fetch")
        )
        await self.db.execute(
            delete(Allocation)
            .where(Allocation.id == allocation_id)
            .execution_options(synchronize_session="fetch")
        )
