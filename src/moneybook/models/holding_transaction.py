"""Holding transaction model: one entry in a holding's transaction log."""

import enum
import uuid
from datetime import date
from decimal import Decimal

from sqlalchemy import Date, Enum, ForeignKey, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column

from moneybook.core.constants import MoneyConstants
from moneybook.db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class TransactionType(str, enum.Enum):
    """Kinds of events recorded against a holding."""

    BUY = "buy"
    SELL = "sell"
    DIVIDEND = "dividend"
    FEE = "fee"
    ADJUSTMENT = "adjustment"


class HoldingTransaction(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """A buy/sell/dividend/fee/adjustment against a holding.

    ``amount`` and ``quantity`` are stored as signed contributions to the
    holding's totals (sells are negative).

    ``linked_allocation_id`` records which deposit funded the transaction.
    It is a weak reference: deleting the allocation sets it to NULL and the
    transaction itself is kept.
    """

    __tablename__ = "holding_transactions"

    holding_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("holdings.id", ondelete="CASCADE"), index=True
    )
    transaction_type: Mapped[TransactionType] = mapped_column(
        Enum(
            TransactionType,
            name="transactiontype",
            values_callable=lambda members: [member.value for member in members],
        ),
        default=TransactionType.BUY,
    )
    amount: Mapped[Decimal] = mapped_column(
        Numeric(MoneyConstants.AMOUNT_PRECISION, MoneyConstants.AMOUNT_SCALE)
    )
    quantity: Mapped[Decimal] = mapped_column(
        Numeric(MoneyConstants.QUANTITY_PRECISION, MoneyConstants.QUANTITY_SCALE)
    )
    average_price: Mapped[Decimal | None] = mapped_column(
        Numeric(MoneyConstants.AMOUNT_PRECISION, MoneyConstants.AMOUNT_SCALE), nullable=True
    )
    purchase_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    linked_allocation_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("allocations.id", ondelete="SET NULL"), nullable=True, index=True
    )
