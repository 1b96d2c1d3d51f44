"""Asset model: an asset class entry (e.g. "gold / Emas Antam") in a portfolio."""

import enum
import uuid

from sqlalchemy import Enum, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from moneybook.db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class AssetType(str, enum.Enum):
    """Asset classifications."""

    GOLD = "gold"
    STOCK = "stock"
    ETF = "etf"
    MUTUAL_FUND = "mutual_fund"
    BOND = "bond"
    CRYPTO = "crypto"
    OTHER = "other"


class Asset(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Asset within a portfolio, unique per (portfolio, type, name)."""

    __tablename__ = "assets"

    portfolio_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("investment_portfolios.id", ondelete="CASCADE"), index=True
    )
    type: Mapped[AssetType] = mapped_column(
        Enum(
            AssetType,
            name="assettype",
            values_callable=lambda members: [member.value for member in members],
        )
    )
    name: Mapped[str] = mapped_column(String(255))

    __table_args__ = (
        UniqueConstraint("portfolio_id", "type", "name", name="uq_portfolio_asset_type_name"),
    )
