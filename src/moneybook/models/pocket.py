"""Pocket (envelope) model."""

import uuid
from decimal import Decimal

from sqlalchemy import ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from moneybook.core.constants import AllocationConstants
from moneybook.db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Pocket(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Named, percentage-weighted envelope within a money book.

    Percentages of a book's pockets are not required to sum to 100.
    Allocation items keep their own snapshot of name and percentage, so
    renaming or deleting a pocket never rewrites allocation history.
    """

    __tablename__ = "pockets"

    money_book_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("money_books.id", ondelete="CASCADE"), index=True
    )
    name: Mapped[str] = mapped_column(String(255))
    percentage: Mapped[Decimal] = mapped_column(
        Numeric(AllocationConstants.PERCENTAGE_PRECISION, AllocationConstants.PERCENTAGE_SCALE)
    )
    order_index: Mapped[int] = mapped_column(Integer, default=0)

    money_book: Mapped["MoneyBook"] = relationship("MoneyBook", back_populates="pockets")
