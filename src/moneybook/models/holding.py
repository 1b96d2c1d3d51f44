"""Holding model for tracking investment positions."""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from moneybook.core.constants import MoneyConstants
from moneybook.db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin, utcnow


class Holding(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Investment position rolled up from its transaction log.

    ``total_investment``, ``total_quantity`` and ``transaction_count`` always
    equal SUM(amount), SUM(quantity) and COUNT(*) over the holding's
    transactions; they are overwritten by a full recompute after every
    change to the log. A holding with no transactions is deleted.
    """

    __tablename__ = "holdings"

    asset_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("assets.id", ondelete="CASCADE"), index=True
    )
    platform: Mapped[str] = mapped_column(String(255))
    instrument_name: Mapped[str] = mapped_column(String(255))
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    total_investment: Mapped[Decimal] = mapped_column(
        Numeric(MoneyConstants.AMOUNT_PRECISION, MoneyConstants.AMOUNT_SCALE), default=Decimal(0)
    )
    total_quantity: Mapped[Decimal] = mapped_column(
        Numeric(MoneyConstants.QUANTITY_PRECISION, MoneyConstants.QUANTITY_SCALE),
        default=Decimal(0),
    )
    transaction_count: Mapped[int] = mapped_column(Integer, default=0)
    last_updated: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    asset: Mapped["Asset"] = relationship("Asset")

    __table_args__ = (
        UniqueConstraint(
            "asset_id", "platform", "instrument_name", name="uq_asset_platform_instrument"
        ),
    )
