"""Repository layer for database operations.

This package provides the repository pattern implementation, centralizing
all database access logic and providing a clean separation of concerns
between data access and business logic.

Repositories:
    - BaseRepository: Generic CRUD operations for any model
    - UserRepository: User lookups by email and username
    - MoneyBookRepository: Books and their explicit cascade delete
    - PocketRepository: Pockets and weak-reference cleanup on delete
    - AllocationRepository: Deposits, their items and linked transactions
    - PortfolioRepository / AssetRepository: Lazily created investment side
    - HoldingRepository: Holdings and their aggregate recompute
    - HoldingTransactionRepository: A holding's transaction log
    - BudgetSourceRepository: Precomputed pocket attribution rows

Usage:
    >>> from moneybook.repositories import PocketRepository
    >>> from moneybook.models.pocket import Pocket
    >>>
    >>> # In a route or service
    >>> pocket_repo = PocketRepository(Pocket, db)
    >>> pockets = await pocket_repo.get_by_money_book_id(book.id)
"""

from moneybook.repositories.allocation import AllocationRepository
from moneybook.repositories.base import BaseRepository
from moneybook.repositories.budget_source import BudgetSourceRepository
from moneybook.repositories.holding import HoldingRepository
from moneybook.repositories.holding_transaction import HoldingTransactionRepository
from moneybook.repositories.money_book import MoneyBookRepository
from moneybook.repositories.pocket import PocketRepository
from moneybook.repositories.portfolio import AssetRepository, PortfolioRepository
from moneybook.repositories.user import UserRepository

__all__ = [
    "AllocationRepository",
    "AssetRepository",
    "BaseRepository",
    "BudgetSourceRepository",
    "HoldingRepository",
    "HoldingTransactionRepository",
    "MoneyBookRepository",
    "PocketRepository",
    "PortfolioRepository",
    "UserRepository",
]
