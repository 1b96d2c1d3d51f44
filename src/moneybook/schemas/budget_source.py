"""Budget-source (pocket provenance) schemas."""

import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel

from moneybook.schemas.holding import HoldingTransactionResponse


class TransactionPocketSource(BaseModel):
    """One pocket's share of a single transaction."""

    pocket_id: UUID | None
    pocket_name: str
    pocket_amount: Decimal
    percentage: Decimal


class TransactionWithSources(HoldingTransactionResponse):
    """Holding transaction with the allocation and pockets that funded it."""

    allocation_source_amount: int | None = None
    allocation_date: datetime.date | None = None
    allocation_notes: str | None = None
    pocket_sources: list[TransactionPocketSource] = []


class PocketSourceSummary(BaseModel):
    """A pocket's total contribution to a holding, grouped by pocket name."""

    pocket_name: str
    pocket_amount: Decimal
    percentage: Decimal


class HoldingTransactionsSummary(BaseModel):
    """Totals over a holding's transaction log."""

    total_count: int
    total_allocated: Decimal
    total_quantity: Decimal
    pocket_sources: list[PocketSourceSummary]


class HoldingTransactionsResponse(BaseModel):
    """A holding's transactions with their pocket breakdown."""

    transactions: list[TransactionWithSources]
    summary: HoldingTransactionsSummary


class BudgetSourceResponse(BaseModel):
    """Stored budget-source row with the live pocket's current percentage."""

    id: UUID
    holding_id: UUID
    pocket_id: UUID | None
    pocket_name: str
    accumulated_percentage: Decimal
    accumulated_amount: Decimal
    transaction_count: int
    last_updated: datetime.datetime
    current_pocket_percentage: Decimal | None = None
