"""Investment portfolio model."""

import uuid

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from moneybook.db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class InvestmentPortfolio(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """The single investment portfolio of a money book, created on first use."""

    __tablename__ = "investment_portfolios"

    money_book_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("money_books.id", ondelete="CASCADE"), unique=True, index=True
    )
    name: Mapped[str] = mapped_column(String(255))
