"""Service layer for the investment side of a money book.

Holdings are positions keyed by (asset, platform, instrument). Their totals
are never edited incrementally: after every change to a holding's
transaction log they are recomputed from the log, and a holding whose log
becomes empty is deleted.
"""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from moneybook.core.config import settings
from moneybook.core.exceptions import ConflictError, ConsistencyError, NotFoundError
from moneybook.db.base import utcnow
from moneybook.db.session import transactional
from moneybook.models.allocation import Allocation
from moneybook.models.asset import Asset
from moneybook.models.holding import Holding
from moneybook.models.holding_transaction import HoldingTransaction, TransactionType
from moneybook.models.money_book import MoneyBook
from moneybook.models.portfolio import InvestmentPortfolio
from moneybook.repositories.allocation import AllocationRepository
from moneybook.repositories.holding import HoldingRepository
from moneybook.repositories.holding_transaction import HoldingTransactionRepository
from moneybook.repositories.portfolio import AssetRepository, PortfolioRepository
from moneybook.schemas.holding import (
    HoldingResponse,
    HoldingTransactionCreate,
    HoldingTransactionResult,
    HoldingTransactionUpdate,
    HoldingUpdate,
)
from moneybook.services import budget_source_service

logger = logging.getLogger(__name__)


def describe_holding(holding: Holding, asset: Asset) -> HoldingResponse:
    """Flatten a holding and its asset into the API representation."""
    return HoldingResponse(
        id=holding.id,
        asset_id=holding.asset_id,
        asset_type=asset.type,
        asset_name=asset.name,
        platform=holding.platform,
        instrument_name=holding.instrument_name,
        notes=holding.notes,
        total_investment=holding.total_investment,
        total_quantity=holding.total_quantity,
        transaction_count=holding.transaction_count,
        last_updated=holding.last_updated,
        created_at=holding.created_at,
    )


async def get_or_create_portfolio(db: AsyncSession, book: MoneyBook) -> InvestmentPortfolio:
    """Return the book's portfolio, creating it on first use.

    Must run inside the caller's transaction. Creating the portfolio also
    flags the book as having one.
    """
    repo = PortfolioRepository(InvestmentPortfolio, db)
    portfolio = await repo.get_by_money_book_id(book.id)
    if portfolio is not None:
        return portfolio

    portfolio = await repo.create(
        obj_in={
            "money_book_id": book.id,
            "name": f"{book.name}{settings.PORTFOLIO_NAME_SUFFIX}",
        }
    )
    book.has_investment_portfolio = True
    await db.flush()
    logger.info(f"Created investment portfolio {portfolio.id} for book {book.id}")
    return portfolio


async def get_portfolio(db: AsyncSession, book: MoneyBook) -> InvestmentPortfolio:
    """Read the book's portfolio, creating it if it does not exist yet."""
    async with transactional(db):
        return await get_or_create_portfolio(db, book)


async def recalculate_holding(db: AsyncSession, holding: Holding) -> Holding | None:
    """Overwrite a holding's totals with COUNT/SUM over its transaction log.

    Deletes the holding (and its budget sources) when no transactions are
    left. Must run inside the caller's transaction.

    Returns:
        The updated holding, or None if it was deleted
    """
    repo = HoldingRepository(Holding, db)
    count, total_investment, total_quantity = await repo.aggregate_transactions(holding.id)

    if count == 0:
        holding_id = holding.id
        await repo.delete_cascade(holding_id)
        logger.info(f"Removed holding {holding_id}: no transactions left")
        return None

    logger.debug(
        f"Recalculated holding {holding.id}: {count} transactions, "
        f"investment {total_investment}, quantity {total_quantity}"
    )
    return await repo.update(
        db_obj=holding,
        obj_in={
            "transaction_count": count,
            "total_investment": total_investment,
            "total_quantity": total_quantity,
            "last_updated": utcnow(),
        },
    )


def _signed_values(
    transaction_type: TransactionType, values: dict[str, Any]
) -> dict[str, Any]:
    """Sells are entered as positive numbers and stored as negative deltas."""
    if transaction_type != TransactionType.SELL:
        return values
    signed = dict(values)
    for field in ("amount", "quantity"):
        if signed.get(field) is not None:
            signed[field] = -abs(signed[field])
    return signed


async def create_holding_transaction(
    db: AsyncSession,
    book: MoneyBook,
    data: HoldingTransactionCreate,
) -> HoldingTransactionResult:
    """Record a transaction, creating the portfolio, asset and holding as needed.

    Runs as one unit of work: the holding row is locked, the transaction is
    appended, totals are recomputed from the log, and if the transaction is
    funded by an allocation its pocket shares are added to the holding's
    budget sources.

    Args:
        db: Async database session
        book: Money book (ownership already verified)
        data: Asset, holding and transaction details

    Returns:
        The holding after the transaction, with ``is_merged`` set when the
        holding already existed

    Raises:
        NotFoundError: If the linked allocation is not in this book
    """
    allocation = None
    if data.linked_allocation_id is not None:
        allocation = await AllocationRepository(Allocation, db).get_by_id_and_book(
            data.linked_allocation_id, book.id
        )
        if allocation is None:
            raise NotFoundError("Allocation not found")

    holding_repo = HoldingRepository(Holding, db)
    async with transactional(db):
        portfolio = await get_or_create_portfolio(db, book)

        asset_repo = AssetRepository(Asset, db)
        asset = await asset_repo.get_by_type_and_name(portfolio.id, data.asset_type, data.asset_name)
        if asset is None:
            asset = await asset_repo.create(
                obj_in={"portfolio_id": portfolio.id, "type": data.asset_type, "name": data.asset_name}
            )

        holding = await holding_repo.get_by_natural_key(
            asset.id, data.platform, data.instrument_name, for_update=True
        )
        is_merged = holding is not None
        if holding is None:
            holding = await holding_repo.create(
                obj_in={
                    "asset_id": asset.id,
                    "platform": data.platform,
                    "instrument_name": data.instrument_name,
                }
            )

        values = _signed_values(
            data.transaction_type,
            {"amount": data.amount, "quantity": data.quantity},
        )
        transaction = await HoldingTransactionRepository(HoldingTransaction, db).create(
            obj_in={
                "holding_id": holding.id,
                "transaction_type": data.transaction_type,
                "amount": values["amount"],
                "quantity": values["quantity"],
                "average_price": data.average_price,
                "purchase_date": data.purchase_date,
                "notes": data.notes,
                "linked_allocation_id": data.linked_allocation_id,
            }
        )

        holding = await recalculate_holding(db, holding)
        if holding is None:
            raise ConsistencyError(f"Holding {transaction.holding_id} vanished after insert")

        if allocation is not None:
            items = await AllocationRepository(Allocation, db).get_items_by_allocation(
                {allocation.id}
            )
            await budget_source_service.attribute_transaction(
                db, holding.id, transaction.amount, items.get(allocation.id, [])
            )

    logger.info(
        f"Recorded {data.transaction_type.value} of {data.amount} on holding {holding.id} "
        f"({'merged' if is_merged else 'new'})"
    )
    return HoldingTransactionResult(
        **describe_holding(holding, asset).model_dump(),
        transaction_id=transaction.id,
        is_merged=is_merged,
    )


async def list_holdings(db: AsyncSession, book: MoneyBook) -> list[HoldingResponse]:
    """All holdings of a book's portfolio with their asset details."""
    rows = await HoldingRepository(Holding, db).get_by_money_book_id(book.id)
    return [describe_holding(holding, asset) for holding, asset in rows]


async def update_holding(db: AsyncSession, holding: Holding, data: HoldingUpdate) -> Holding:
    """Apply a manual correction to a holding.

    Totals set here are overwritten by the next recalculation.

    Raises:
        ConflictError: If the new platform/instrument collides with another holding
    """
    update_data = data.model_dump(exclude_unset=True)
    repo = HoldingRepository(Holding, db)

    platform = update_data.get("platform", holding.platform)
    instrument_name = update_data.get("instrument_name", holding.instrument_name)
    if (platform, instrument_name) != (holding.platform, holding.instrument_name):
        existing = await repo.get_by_natural_key(holding.asset_id, platform, instrument_name)
        if existing is not None and existing.id != holding.id:
            raise ConflictError("A holding for this platform and instrument already exists")

    async with transactional(db):
        holding = await repo.update(
            db_obj=holding, obj_in={**update_data, "last_updated": utcnow()}
        )
    return holding


async def delete_holding(db: AsyncSession, holding: Holding) -> None:
    """Delete a holding with its transactions and budget sources."""
    holding_id = holding.id
    async with transactional(db):
        await HoldingRepository(Holding, db).delete_cascade(holding_id)
    logger.info(f"Deleted holding {holding_id}")


async def reconcile_holding(db: AsyncSession, holding: Holding) -> Holding | None:
    """Recompute a holding's totals and budget sources from its log.

    Returns:
        The holding, or None if it had no transactions and was deleted
    """
    async with transactional(db):
        locked = await HoldingRepository(Holding, db).get(holding.id, for_update=True)
        if locked is None:
            raise NotFoundError("Holding not found")
        result = await recalculate_holding(db, locked)
        if result is not None:
            await budget_source_service.rebuild_budget_sources(db, result.id)
    return result


async def update_holding_transaction(
    db: AsyncSession,
    transaction: HoldingTransaction,
    data: HoldingTransactionUpdate,
) -> HoldingTransaction:
    """Edit a transaction, then recompute its holding's totals and budget sources.

    Amount and quantity are given as positive numbers; on a sell they are
    stored negated like when the sell was recorded.
    """
    update_data = _signed_values(
        transaction.transaction_type, data.model_dump(exclude_unset=True)
    )

    async with transactional(db):
        holding = await HoldingRepository(Holding, db).get(transaction.holding_id, for_update=True)
        if holding is None:
            raise NotFoundError("Holding not found")

        transaction = await HoldingTransactionRepository(HoldingTransaction, db).update(
            db_obj=transaction, obj_in=update_data
        )
        await recalculate_holding(db, holding)
        await budget_source_service.rebuild_budget_sources(db, holding.id)

    logger.info(f"Updated transaction {transaction.id} of holding {transaction.holding_id}")
    return transaction


async def delete_holding_transaction(db: AsyncSession, transaction: HoldingTransaction) -> bool:
    """Delete a transaction and recompute its holding.

    Returns:
        True if the holding was deleted because this was its last transaction
    """
    transaction_id = transaction.id
    holding_id = transaction.holding_id

    async with transactional(db):
        holding = await HoldingRepository(Holding, db).get(holding_id, for_update=True)
        if holding is None:
            raise NotFoundError("Holding not found")

        await HoldingTransactionRepository(HoldingTransaction, db).delete(id=transaction_id)
        remaining = await recalculate_holding(db, holding)
        if remaining is not None:
            await budget_source_service.rebuild_budget_sources(db, holding_id)

    logger.info(f"Deleted transaction {transaction_id} of holding {holding_id}")
    return remaining is None

