"""Allocation schemas."""

import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import AliasChoices, BaseModel, Field

from moneybook.core.constants import AllocationConstants


class PocketWeight(BaseModel):
    """One pocket of the weight list a deposit is split with."""

    id: UUID
    name: str = Field(..., min_length=1, max_length=255)
    # Snapshotted into AllocationItem.pocket_percentage, a Numeric(5, 2) column
    percentage: Decimal = Field(..., ge=0, le=100, decimal_places=2)


class AllocationCreate(BaseModel):
    """Schema for recording a deposit.

    When ``pockets`` is omitted the book's current pockets are used.
    """

    # Sign is checked by the splitter; only the store limit is enforced here
    source_amount: int = Field(..., le=AllocationConstants.MAX_SOURCE_AMOUNT)
    date: datetime.date
    notes: str | None = None
    pockets: list[PocketWeight] | None = None


class AllocationItemResponse(BaseModel):
    """Schema for one pocket's share of an allocation."""

    id: UUID
    allocation_id: UUID
    pocket_id: UUID | None
    pocket_name: str
    pocket_percentage: Decimal
    amount: int
    position: int

    model_config = {"from_attributes": True}


class AllocationResponse(BaseModel):
    """Schema for allocation response with its items."""

    id: UUID
    money_book_id: UUID
    source_amount: int
    date: datetime.date
    notes: str | None
    created_at: datetime.datetime
    allocation_items: list[AllocationItemResponse] = Field(
        default_factory=list,
        validation_alias=AliasChoices("allocation_items", "items"),
    )

    model_config = {"from_attributes": True}


class AllocationWithSummary(AllocationResponse):
    """Allocation with the investment transactions it funded."""

    transaction_count: int = 0
    total_allocated: Decimal = Decimal(0)


class LinkedTransactionResponse(BaseModel):
    """A holding transaction funded by an allocation."""

    id: UUID
    holding_id: UUID
    transaction_type: str
    amount: Decimal
    quantity: Decimal
    average_price: Decimal | None
    purchase_date: datetime.date | None
    notes: str | None
    created_at: datetime.datetime
    platform: str
    instrument_name: str
    asset_type: str
    asset_name: str


class LinkedTransactionsSummary(BaseModel):
    """Totals over an allocation's linked transactions."""

    total_count: int
    total_allocated: Decimal


class AllocationTransactionsResponse(BaseModel):
    """Transactions funded by one allocation."""

    transactions: list[LinkedTransactionResponse]
    summary: LinkedTransactionsSummary
