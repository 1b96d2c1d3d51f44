"""Tests for the allocation service."""

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from moneybook.core.exceptions import NotFoundError, StoreError, ValidationError
from moneybook.models.allocation import Allocation, AllocationItem
from moneybook.models.asset import AssetType
from moneybook.models.holding import Holding
from moneybook.models.holding_budget_source import HoldingBudgetSource
from moneybook.models.holding_transaction import HoldingTransaction
from moneybook.models.money_book import MoneyBook
from moneybook.models.pocket import Pocket
from moneybook.schemas.allocation import AllocationCreate, PocketWeight
from moneybook.schemas.holding import HoldingTransactionCreate
from moneybook.services import allocation_service, holding_service


async def _count(db: AsyncSession, model) -> int:
    return (await db.execute(select(func.count()).select_from(model))).scalar_one()


@pytest.mark.integration
class TestCreateAllocation:
    """Tests for recording deposits."""

    async def test_uses_book_pockets_by_default(
        self, test_db: AsyncSession, test_book: MoneyBook, test_pockets: list[Pocket]
    ):
        """Without explicit weights the book's pockets are used in display order."""
        allocation = await allocation_service.create_allocation(
            test_db,
            test_book,
            AllocationCreate(source_amount=1_000_000, date=date(2026, 10, 1), notes="Salary"),
        )

        assert allocation.money_book_id == test_book.id
        assert allocation.source_amount == 1_000_000
        assert allocation.notes == "Salary"
        assert [(i.pocket_name, i.amount) for i in allocation.items] == [
            ("Needs", 500_000),
            ("Wants", 300_000),
            ("Savings", 200_000),
        ]
        assert [i.position for i in allocation.items] == [0, 1, 2]
        assert [i.pocket_id for i in allocation.items] == [p.id for p in test_pockets]

    async def test_items_always_sum_to_source_amount(
        self, test_db: AsyncSession, test_book: MoneyBook
    ):
        """A 33/33/34 split of 10 hands the lost unit to the first pocket."""
        pockets = [
            Pocket(money_book_id=test_book.id, name=name, percentage=Decimal(pct), order_index=i)
            for i, (name, pct) in enumerate((("A", 33), ("B", 33), ("C", 34)))
        ]
        test_db.add_all(pockets)
        await test_db.commit()

        allocation = await allocation_service.create_allocation(
            test_db, test_book, AllocationCreate(source_amount=10, date=date(2026, 10, 1))
        )

        amounts = [item.amount for item in allocation.items]
        assert amounts == [4, 3, 3]
        assert sum(amounts) == allocation.source_amount

    async def test_explicit_weights_snapshot_request_values(
        self, test_db: AsyncSession, test_book: MoneyBook, test_pockets: list[Pocket]
    ):
        """Explicit weights are stored as given, not re-read from the pockets."""
        needs, _, savings = test_pockets
        allocation = await allocation_service.create_allocation(
            test_db,
            test_book,
            AllocationCreate(
                source_amount=1000,
                date=date(2026, 10, 2),
                pockets=[
                    PocketWeight(id=savings.id, name="Rainy Day", percentage=Decimal("75")),
                    PocketWeight(id=needs.id, name="Needs", percentage=Decimal("25")),
                ],
            ),
        )

        assert [(i.pocket_name, i.pocket_percentage, i.amount) for i in allocation.items] == [
            ("Rainy Day", Decimal("75"), 750),
            ("Needs", Decimal("25"), 250),
        ]

    async def test_pocket_from_another_book_is_not_found(
        self,
        test_db: AsyncSession,
        test_book: MoneyBook,
        other_book: MoneyBook,
        test_pockets: list[Pocket],
    ):
        """A weight pointing at someone else's pocket is rejected before any write."""
        foreign = Pocket(money_book_id=other_book.id, name="Theirs", percentage=Decimal(100))
        test_db.add(foreign)
        await test_db.commit()

        with pytest.raises(NotFoundError, match="Pocket not found"):
            await allocation_service.create_allocation(
                test_db,
                test_book,
                AllocationCreate(
                    source_amount=100,
                    date=date(2026, 10, 1),
                    pockets=[PocketWeight(id=foreign.id, name="Theirs", percentage=Decimal(100))],
                ),
            )

        assert await _count(test_db, Allocation) == 0

    async def test_book_without_pockets_rejected(self, test_db: AsyncSession, test_book: MoneyBook):
        """A deposit into a book with no pockets has nothing to split across."""
        with pytest.raises(ValidationError):
            await allocation_service.create_allocation(
                test_db, test_book, AllocationCreate(source_amount=100, date=date(2026, 10, 1))
            )

        assert await _count(test_db, Allocation) == 0
        assert await _count(test_db, AllocationItem) == 0

    async def test_non_positive_amount_rejected(
        self, test_db: AsyncSession, test_book: MoneyBook, test_pockets: list[Pocket]
    ):
        """Zero deposits are refused and nothing is written."""
        with pytest.raises(ValidationError, match="must be positive"):
            await allocation_service.create_allocation(
                test_db, test_book, AllocationCreate(source_amount=0, date=date(2026, 10, 1))
            )

        assert await _count(test_db, Allocation) == 0

    async def test_store_failure_leaves_no_partial_allocation(
        self, test_db: AsyncSession, test_book: MoneyBook, test_pockets: list[Pocket]
    ):
        """An item rejected by the store rolls back the allocation and earlier items."""
        needs, wants, _ = test_pockets
        # Bypasses schema validation so the second item violates NOT NULL on insert
        weights = [
            PocketWeight(id=needs.id, name="Needs", percentage=Decimal("50")),
            PocketWeight.model_construct(id=wants.id, name=None, percentage=Decimal("50")),
        ]

        with pytest.raises(StoreError):
            await allocation_service.create_allocation(
                test_db,
                test_book,
                AllocationCreate(source_amount=1000, date=date(2026, 10, 1), pockets=weights),
            )

        assert await _count(test_db, Allocation) == 0
        assert await _count(test_db, AllocationItem) == 0

    async def test_snapshot_matches_split(
        self, test_db: AsyncSession, test_book: MoneyBook, test_pockets: list[Pocket]
    ):
        """Stored percentages are exactly the ones the amounts were computed from."""
        needs, wants, _ = test_pockets
        allocation = await allocation_service.create_allocation(
            test_db,
            test_book,
            AllocationCreate(
                source_amount=1000,
                date=date(2026, 10, 1),
                pockets=[
                    PocketWeight(id=needs.id, name="A", percentage=Decimal("33.34")),
                    PocketWeight(id=wants.id, name="B", percentage=Decimal("66.66")),
                ],
            ),
        )
        allocation_id = allocation.id

        rows = await test_db.execute(
            select(
                AllocationItem.pocket_name,
                AllocationItem.pocket_percentage,
                AllocationItem.amount,
            )
            .where(AllocationItem.allocation_id == allocation_id)
            .order_by(AllocationItem.position)
        )
        snapshot = [(name, Decimal(str(pct)), amount) for name, pct, amount in rows.all()]
        assert snapshot == [("A", Decimal("33.34"), 334), ("B", Decimal("66.66"), 666)]
        assert sum(pct for _, pct, _ in snapshot) == Decimal("100")


@pytest.mark.integration
class TestListAndDeleteAllocations:
    """Tests for listing allocations and deleting them."""

    async def test_list_newest_first_with_summaries(
        self, test_db: AsyncSession, test_book: MoneyBook, test_pockets: list[Pocket]
    ):
        """Allocations come back by date descending with their funded totals."""
        older = await allocation_service.create_allocation(
            test_db, test_book, AllocationCreate(source_amount=1000, date=date(2026, 9, 1))
        )
        newer = await allocation_service.create_allocation(
            test_db, test_book, AllocationCreate(source_amount=2000, date=date(2026, 10, 1))
        )
        await holding_service.create_holding_transaction(
            test_db,
            test_book,
            HoldingTransactionCreate(
                asset_type=AssetType.STOCK,
                asset_name="Stocks",
                platform="Broker",
                instrument_name="ACME",
                amount=Decimal("400.00"),
                quantity=Decimal("4"),
                linked_allocation_id=older.id,
            ),
        )

        result = await allocation_service.list_allocations(test_db, test_book)

        assert [a.id for a in result] == [newer.id, older.id]
        assert result[0].transaction_count == 0
        assert result[0].total_allocated == Decimal(0)
        assert result[1].transaction_count == 1
        assert result[1].total_allocated == Decimal("400.00")
        assert [i.amount for i in result[1].allocation_items] == [500, 300, 200]

    async def test_delete_keeps_transactions_and_totals(
        self, test_db: AsyncSession, test_book: MoneyBook, test_pockets: list[Pocket]
    ):
        """Deleting an allocation unlinks what it funded but leaves holdings alone."""
        allocation = await allocation_service.create_allocation(
            test_db, test_book, AllocationCreate(source_amount=1_000_000, date=date(2026, 10, 1))
        )
        result = await holding_service.create_holding_transaction(
            test_db,
            test_book,
            HoldingTransactionCreate(
                asset_type=AssetType.GOLD,
                asset_name="Gold",
                platform="Bullion Shop",
                instrument_name="Antam 10g",
                amount=Decimal("200000.00"),
                quantity=Decimal("10"),
                linked_allocation_id=allocation.id,
            ),
        )
        assert await _count(test_db, HoldingBudgetSource) == 3

        await allocation_service.delete_allocation(test_db, allocation)

        assert await _count(test_db, Allocation) == 0
        assert await _count(test_db, AllocationItem) == 0
        assert await _count(test_db, HoldingBudgetSource) == 0

        linked = await test_db.execute(
            select(HoldingTransaction.linked_allocation_id).where(
                HoldingTransaction.id == result.transaction_id
            )
        )
        assert linked.scalar_one() is None

        totals = await test_db.execute(
            select(Holding.total_investment, Holding.transaction_count).where(
                Holding.id == result.id
            )
        )
        total_investment, transaction_count = totals.one()
        assert Decimal(str(total_investment)) == Decimal("200000.00")
        assert transaction_count == 1

    async def test_allocation_transactions(
        self, test_db: AsyncSession, test_book: MoneyBook, test_pockets: list[Pocket]
    ):
        """Linked transactions come back with their holding and asset details."""
        allocation = await allocation_service.create_allocation(
            test_db, test_book, AllocationCreate(source_amount=5000, date=date(2026, 10, 1))
        )
        for amount, purchase_date in ((Decimal("100.00"), date(2026, 10, 2)),
                                      (Decimal("250.00"), date(2026, 10, 5))):
            await holding_service.create_holding_transaction(
                test_db,
                test_book,
                HoldingTransactionCreate(
                    asset_type=AssetType.ETF,
                    asset_name="Index Funds",
                    platform="Broker",
                    instrument_name="WORLD",
                    amount=amount,
                    quantity=Decimal("1"),
                    purchase_date=purchase_date,
                    linked_allocation_id=allocation.id,
                ),
            )

        response = await allocation_service.get_allocation_transactions(test_db, allocation)

        assert response.summary.total_count == 2
        assert response.summary.total_allocated == Decimal("350.00")
        assert [t.amount for t in response.transactions] == [Decimal("250.00"), Decimal("100.00")]
        first = response.transactions[0]
        assert first.platform == "Broker"
        assert first.instrument_name == "WORLD"
        assert first.asset_type == "etf"
        assert first.asset_name == "Index Funds"
