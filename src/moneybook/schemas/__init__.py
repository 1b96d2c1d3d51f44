"""Schemas package."""

from moneybook.schemas.allocation import (
    AllocationCreate,
    AllocationItemResponse,
    AllocationResponse,
    AllocationTransactionsResponse,
    AllocationWithSummary,
    LinkedTransactionResponse,
    LinkedTransactionsSummary,
    PocketWeight,
)
from moneybook.schemas.auth import Token, TokenData, UserRegister
from moneybook.schemas.budget_source import (
    BudgetSourceResponse,
    HoldingTransactionsResponse,
    HoldingTransactionsSummary,
    PocketSourceSummary,
    TransactionPocketSource,
    TransactionWithSources,
)
from moneybook.schemas.holding import (
    HoldingResponse,
    HoldingTransactionCreate,
    HoldingTransactionResponse,
    HoldingTransactionResult,
    HoldingTransactionUpdate,
    HoldingUpdate,
    PortfolioResponse,
    TransactionDeleteResult,
)
from moneybook.schemas.money_book import (
    MoneyBookCreate,
    MoneyBookResponse,
    MoneyBookUpdate,
    PocketCreate,
    PocketResponse,
    PocketUpdate,
)
from moneybook.schemas.user import UserResponse

__all__ = [
    # Authentication schemas
    "Token",
    "TokenData",
    "UserRegister",
    "UserResponse",
    # Money book schemas
    "MoneyBookCreate",
    "MoneyBookResponse",
    "MoneyBookUpdate",
    "PocketCreate",
    "PocketResponse",
    "PocketUpdate",
    # Allocation schemas
    "AllocationCreate",
    "AllocationItemResponse",
    "AllocationResponse",
    "AllocationTransactionsResponse",
    "AllocationWithSummary",
    "LinkedTransactionResponse",
    "LinkedTransactionsSummary",
    "PocketWeight",
    # Holding schemas
    "HoldingResponse",
    "HoldingTransactionCreate",
    "HoldingTransactionResponse",
    "HoldingTransactionResult",
    "HoldingTransactionUpdate",
    "HoldingUpdate",
    "PortfolioResponse",
    "TransactionDeleteResult",
    # Budget-source schemas
    "BudgetSourceResponse",
    "HoldingTransactionsResponse",
    "HoldingTransactionsSummary",
    "PocketSourceSummary",
    "TransactionPocketSource",
    "TransactionWithSources",
]
