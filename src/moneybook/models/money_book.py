"""Money book model: a user's envelope-budget container."""

from sqlalchemy import Boolean, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from moneybook.db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class MoneyBook(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Envelope-budget book owned by a single user.

    Deleting a book removes its pockets, allocations and investment portfolio.
    """

    __tablename__ = "money_books"

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    name: Mapped[str] = mapped_column(String(255))
    order_index: Mapped[int] = mapped_column(Integer, default=0)
    has_investment_portfolio: Mapped[bool] = mapped_column(Boolean, default=False)

    pockets: Mapped[list["Pocket"]] = relationship(
        "Pocket",
        back_populates="money_book",
        order_by="Pocket.order_index",
        passive_deletes=True,
    )
