"""Holding endpoints.

``router`` is mounted under a money book; ``holding_router`` addresses
holdings and their transactions directly by ID.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from moneybook.core.deps import OwnedHolding, OwnedMoneyBook, OwnedTransaction
from moneybook.db.session import get_db
from moneybook.models.holding_transaction import HoldingTransaction
from moneybook.schemas.budget_source import BudgetSourceResponse, HoldingTransactionsResponse
from moneybook.schemas.holding import (
    HoldingResponse,
    HoldingTransactionCreate,
    HoldingTransactionResponse,
    HoldingTransactionResult,
    HoldingTransactionUpdate,
    HoldingUpdate,
    TransactionDeleteResult,
)
from moneybook.services import budget_source_service, holding_service

router = APIRouter()
holding_router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/", response_model=list[HoldingResponse])
async def get_holdings(
    book: OwnedMoneyBook,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[HoldingResponse]:
    """
    Get all holdings of a money book's portfolio.

    Args:
        book: The verified money book (from dependency)
        db: Database session

    Returns:
        List of holdings with their asset type and name
    """
    return await holding_service.list_holdings(db, book)


@router.post("/", response_model=HoldingTransactionResult, status_code=status.HTTP_201_CREATED)
async def create_holding_transaction(
    book: OwnedMoneyBook,
    transaction_in: HoldingTransactionCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> HoldingTransactionResult:
    """
    Record an investment transaction.

    The portfolio, asset and holding are created on first use; a
    transaction on an existing (asset, platform, instrument) is merged into
    that holding. When ``linked_allocation_id`` is set the transaction's
    amount is attributed to the allocation's pockets.

    Args:
        book: The verified money book (from dependency)
        transaction_in: Holding identity and transaction details
        db: Database session

    Returns:
        The holding after the transaction

    Raises:
        NotFoundError: 404 if the linked allocation is not in this book
    """
    return await holding_service.create_holding_transaction(db, book, transaction_in)


@holding_router.patch("/transactions/{transaction_id}", response_model=HoldingTransactionResponse)
async def update_holding_transaction(
    transaction: OwnedTransaction,
    transaction_update: HoldingTransactionUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> HoldingTransaction:
    """
    Edit a transaction; the holding's totals and budget sources are recomputed.

    Args:
        transaction: The verified transaction (from dependency)
        transaction_update: Fields to change
        db: Database session

    Returns:
        The updated transaction
    """
    return await holding_service.update_holding_transaction(db, transaction, transaction_update)


@holding_router.delete("/transactions/{transaction_id}", response_model=TransactionDeleteResult)
async def delete_holding_transaction(
    transaction: OwnedTransaction,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TransactionDeleteResult:
    """
    Delete a transaction; the holding is recomputed, or removed if it was its last.

    Args:
        transaction: The verified transaction (from dependency)
        db: Database session

    Returns:
        Whether the holding was removed
    """
    holding_id = transaction.holding_id
    holding_deleted = await holding_service.delete_holding_transaction(db, transaction)
    return TransactionDeleteResult(holding_id=holding_id, holding_deleted=holding_deleted)


@holding_router.patch("/{holding_id}", response_model=HoldingResponse)
async def update_holding(
    holding: OwnedHolding,
    holding_update: HoldingUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> HoldingResponse:
    """
    Manually correct a holding.

    Totals set here are overwritten the next time the holding is
    recalculated from its transactions.

    Raises:
        ConflictError: 409 if another holding already uses the platform and instrument
    """
    asset = holding.asset
    holding = await holding_service.update_holding(db, holding, holding_update)
    return holding_service.describe_holding(holding, asset)


@holding_router.delete("/{holding_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_holding(
    holding: OwnedHolding,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    """Delete a holding with all of its transactions and budget sources."""
    await holding_service.delete_holding(db, holding)


@holding_router.post("/{holding_id}/recalculate", response_model=HoldingResponse | None)
async def recalculate_holding(
    holding: OwnedHolding,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> HoldingResponse | None:
    """
    Recompute a holding's totals and budget sources from its transactions.

    Returns null if the holding had no transactions and was removed.
    """
    asset = holding.asset
    holding_id = holding.id
    result = await holding_service.reconcile_holding(db, holding)
    if result is None:
        logger.info(f"Holding {holding_id} had no transactions and was removed")
        return None
    return holding_service.describe_holding(result, asset)


@holding_router.get("/{holding_id}/transactions", response_model=HoldingTransactionsResponse)
async def get_holding_transactions(
    holding: OwnedHolding,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> HoldingTransactionsResponse:
    """
    Get a holding's transactions and which pockets funded them.

    Computed from the transaction log and the allocation snapshots.
    """
    return await budget_source_service.query_budget_sources(db, holding)


@holding_router.get("/{holding_id}/budget-sources", response_model=list[BudgetSourceResponse])
async def get_budget_sources(
    holding: OwnedHolding,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[BudgetSourceResponse]:
    """Get the stored per-pocket funding totals of a holding, largest first."""
    return await budget_source_service.list_budget_sources(db, holding)
