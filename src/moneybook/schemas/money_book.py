"""Money book and pocket schemas."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


class MoneyBookCreate(BaseModel):
    """Schema for creating a money book."""

    name: str = Field(..., min_length=1, max_length=255)
    has_investment_portfolio: bool = False

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        """Reject names that are only whitespace."""
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v


class MoneyBookUpdate(BaseModel):
    """Schema for updating a money book."""

    name: str | None = Field(None, min_length=1, max_length=255)
    has_investment_portfolio: bool | None = None


class MoneyBookResponse(BaseModel):
    """Schema for money book response."""

    id: UUID
    user_id: int
    name: str
    order_index: int
    has_investment_portfolio: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class PocketCreate(BaseModel):
    """Schema for creating a pocket."""

    name: str = Field(..., min_length=1, max_length=255)
    percentage: Decimal = Field(..., ge=0, le=100, decimal_places=2)
    order_index: int = Field(0, ge=0)


class PocketUpdate(BaseModel):
    """Schema for renaming, reweighting or moving a pocket."""

    name: str | None = Field(None, min_length=1, max_length=255)
    percentage: Decimal | None = Field(None, ge=0, le=100, decimal_places=2)
    order_index: int | None = Field(None, ge=0)


class PocketResponse(BaseModel):
    """Schema for pocket response."""

    id: UUID
    money_book_id: UUID
    name: str
    percentage: Decimal
    order_index: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
