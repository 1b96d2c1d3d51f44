"""Allocation models: one deposit event and its per-pocket line items."""

import datetime
import uuid
from decimal import Decimal

from sqlalchemy import BigInteger, Date, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from moneybook.core.constants import AllocationConstants
from moneybook.db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Allocation(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """A deposit split across the pockets of a money book.

    Immutable once created; the only mutation is deletion. The amounts of
    its items always sum to ``source_amount``.
    """

    __tablename__ = "allocations"

    money_book_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("money_books.id", ondelete="CASCADE"), index=True
    )
    source_amount: Mapped[int] = mapped_column(BigInteger)
    date: Mapped[datetime.date] = mapped_column(Date, index=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    items: Mapped[list["AllocationItem"]] = relationship(
        "AllocationItem",
        back_populates="allocation",
        order_by="AllocationItem.position",
        passive_deletes=True,
    )


class AllocationItem(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Snapshot of one pocket's share of one allocation.

    ``pocket_id`` is a weak reference: it is set to NULL when the pocket is
    deleted, while ``pocket_name`` and ``pocket_percentage`` keep the values
    captured when the allocation was recorded.
    """

    __tablename__ = "allocation_items"

    allocation_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("allocations.id", ondelete="CASCADE"), index=True
    )
    pocket_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("pockets.id", ondelete="SET NULL"), nullable=True, index=True
    )
    pocket_name: Mapped[str] = mapped_column(String(255))
    pocket_percentage: Mapped[Decimal] = mapped_column(
        Numeric(AllocationConstants.PERCENTAGE_PRECISION, AllocationConstants.PERCENTAGE_SCALE)
    )
    amount: Mapped[int] = mapped_column(BigInteger)
    # Index of the pocket in the weight list the allocation was split with
    position: Mapped[int] = mapped_column(Integer, default=0)

    allocation: Mapped["Allocation"] = relationship("Allocation", back_populates="items")
