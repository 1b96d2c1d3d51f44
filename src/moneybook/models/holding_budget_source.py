"""Budget-source model: how much of a holding was funded by each pocket."""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from moneybook.core.constants import AllocationConstants, MoneyConstants
from moneybook.db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin, utcnow


class HoldingBudgetSource(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Accumulated pocket attribution for a holding.

    Keyed by the pocket name snapshotted on the allocation items, so a pocket
    that is later renamed or deleted keeps its historical attribution.
    This table is a cache of the read-side aggregation over the holding's
    linked transactions and is rebuilt whenever that log changes.
    """

    __tablename__ = "holding_budget_sources"

    holding_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("holdings.id", ondelete="CASCADE"), index=True
    )
    pocket_name: Mapped[str] = mapped_column(String(255))
    pocket_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("pockets.id", ondelete="SET NULL"), nullable=True
    )
    accumulated_percentage: Mapped[Decimal] = mapped_column(
        Numeric(
            MoneyConstants.ACCUMULATED_PERCENTAGE_PRECISION,
            AllocationConstants.PERCENTAGE_SCALE,
        ),
        default=Decimal(0),
    )
    accumulated_amount: Mapped[Decimal] = mapped_column(
        Numeric(MoneyConstants.AMOUNT_PRECISION, MoneyConstants.AMOUNT_SCALE), default=Decimal(0)
    )
    transaction_count: Mapped[int] = mapped_column(Integer, default=0)
    last_updated: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    __table_args__ = (
        UniqueConstraint("holding_id", "pocket_name", name="uq_holding_pocket_name"),
    )
