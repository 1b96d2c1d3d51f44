"""SQLAlchemy models.

Importing this package registers every table on ``Base.metadata`` so that
relationships resolve and ``create_all`` / Alembic autogenerate see the full
schema.
"""

from moneybook.models.allocation import Allocation, AllocationItem
from moneybook.models.asset import Asset, AssetType
from moneybook.models.holding import Holding
from moneybook.models.holding_budget_source import HoldingBudgetSource
from moneybook.models.holding_transaction import HoldingTransaction, TransactionType
from moneybook.models.money_book import MoneyBook
from moneybook.models.pocket import Pocket
from moneybook.models.portfolio import InvestmentPortfolio
from moneybook.models.user import User

__all__ = [
    "Allocation",
    "AllocationItem",
    "Asset",
    "AssetType",
    "Holding",
    "HoldingBudgetSource",
    "HoldingTransaction",
    "InvestmentPortfolio",
    "MoneyBook",
    "Pocket",
    "TransactionType",
    "User",
]
