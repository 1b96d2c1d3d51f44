"""Holding and holding-transaction schemas."""

import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from moneybook.models.asset import AssetType
from moneybook.models.holding_transaction import TransactionType


class HoldingTransactionCreate(BaseModel):
    """Schema for recording a transaction against a (possibly new) holding.

    The holding is identified by asset type + asset name, platform and
    instrument name; it is created if it doesn't exist yet.
    """

    asset_type: AssetType
    asset_name: str = Field(..., min_length=1, max_length=255)
    platform: str = Field(..., min_length=1, max_length=255)
    instrument_name: str = Field(..., min_length=1, max_length=255)
    transaction_type: TransactionType = TransactionType.BUY
    amount: Decimal = Field(..., decimal_places=2)
    quantity: Decimal = Field(Decimal(0), decimal_places=6)
    average_price: Decimal | None = Field(None, gt=0, decimal_places=2)
    purchase_date: datetime.date | None = None
    notes: str | None = None
    linked_allocation_id: UUID | None = None

    @model_validator(mode="after")
    def validate_amounts(self) -> "HoldingTransactionCreate":
        """Check amount/quantity against the transaction type."""
        if self.transaction_type in (TransactionType.BUY, TransactionType.SELL):
            if self.amount < 0:
                raise ValueError("Investment amount must be positive")
            if self.quantity <= 0:
                raise ValueError("Quantity must be greater than 0")
        if self.linked_allocation_id is not None and self.transaction_type != TransactionType.BUY:
            raise ValueError("Only buy transactions can be linked to an allocation")
        return self


class HoldingTransactionUpdate(BaseModel):
    """Schema for editing a transaction. Omitted fields are left unchanged."""

    amount: Decimal | None = Field(None, gt=0, decimal_places=2)
    quantity: Decimal | None = Field(None, gt=0, decimal_places=6)
    average_price: Decimal | None = Field(None, gt=0, decimal_places=2)
    purchase_date: datetime.date | None = None
    notes: str | None = None


class HoldingTransactionResponse(BaseModel):
    """Schema for holding transaction response."""

    id: UUID
    holding_id: UUID
    transaction_type: TransactionType
    amount: Decimal
    quantity: Decimal
    average_price: Decimal | None
    purchase_date: datetime.date | None
    notes: str | None
    linked_allocation_id: UUID | None
    created_at: datetime.datetime

    model_config = {"from_attributes": True}


class HoldingUpdate(BaseModel):
    """Schema for manual corrections to a holding.

    Totals set here are overwritten the next time the holding is
    recalculated from its transactions.
    """

    platform: str | None = Field(None, min_length=1, max_length=255)
    instrument_name: str | None = Field(None, min_length=1, max_length=255)
    notes: str | None = None
    total_investment: Decimal | None = Field(None, ge=0, decimal_places=2)
    total_quantity: Decimal | None = Field(None, ge=0, decimal_places=6)


class HoldingResponse(BaseModel):
    """Schema for holding response, flattened with its asset."""

    id: UUID
    asset_id: UUID
    asset_type: AssetType
    asset_name: str
    platform: str
    instrument_name: str
    notes: str | None
    total_investment: Decimal
    total_quantity: Decimal
    transaction_count: int
    last_updated: datetime.datetime
    created_at: datetime.datetime


class HoldingTransactionResult(HoldingResponse):
    """Holding after a transaction was recorded against it."""

    transaction_id: UUID
    is_merged: bool  # True when the transaction joined an existing holding


class PortfolioResponse(BaseModel):
    """Schema for investment portfolio response."""

    id: UUID
    money_book_id: UUID
    name: str
    created_at: datetime.datetime

    model_config = {"from_attributes": True}


class TransactionDeleteResult(BaseModel):
    """Outcome of deleting a holding transaction."""

    holding_id: UUID
    holding_deleted: bool  # True when the deleted transaction was the holding's last
