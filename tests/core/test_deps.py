"""Tests for core dependencies."""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest
from fastapi import HTTPException

from moneybook.core.deps import (
    get_current_active_user,
    get_current_user,
    verify_allocation_access,
    verify_holding_access,
    verify_money_book_access,
    verify_pocket_access,
    verify_transaction_access,
)
from moneybook.core.exceptions import NotFoundError
from moneybook.core.security import create_access_token
from moneybook.models.asset import AssetType
from moneybook.models.money_book import MoneyBook
from moneybook.schemas.allocation import AllocationCreate
from moneybook.schemas.holding import HoldingTransactionCreate
from moneybook.services import allocation_service, holding_service


@pytest.mark.integration
async def test_get_current_user(test_db, test_user):
    """A valid token resolves to its user."""
    user = await get_current_user(token=create_access_token("testuser"), db=test_db)
    assert user.id == test_user.id


@pytest.mark.integration
@pytest.mark.parametrize("token", ["garbage", create_access_token("ghost")])
async def test_get_current_user_rejects_bad_token(test_db, test_user, token):
    """Malformed tokens and tokens for unknown users are a 401."""
    with pytest.raises(HTTPException) as exc_info:
        await get_current_user(token=token, db=test_db)

    assert exc_info.value.status_code == 401
    assert exc_info.value.headers == {"WWW-Authenticate": "Bearer"}


@pytest.mark.integration
async def test_get_current_active_user_rejects_inactive(test_inactive_user):
    """Inactive users are refused with a 400."""
    with pytest.raises(HTTPException) as exc_info:
        await get_current_active_user(current_user=test_inactive_user)

    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == "Inactive user"


@pytest.mark.integration
async def test_verify_money_book_access_success(test_db, test_user, test_book):
    """Test successful money book access verification."""
    book = await verify_money_book_access(book_id=test_book.id, current_user=test_user, db=test_db)

    assert isinstance(book, MoneyBook)
    assert book.id == test_book.id
    assert book.user_id == test_user.id


@pytest.mark.integration
async def test_verify_money_book_access_not_found(test_db, test_user):
    """Test a missing money book raises 404."""
    with pytest.raises(NotFoundError) as exc_info:
        await verify_money_book_access(book_id=uuid4(), current_user=test_user, db=test_db)

    assert exc_info.value.status_code == 404
    assert exc_info.value.detail == "Money book not found"


@pytest.mark.integration
async def test_verify_money_book_access_other_user(test_db, test_user, other_user, other_book):
    """Another user's book looks exactly like a missing one."""
    with pytest.raises(NotFoundError) as exc_info:
        await verify_money_book_access(book_id=other_book.id, current_user=test_user, db=test_db)
    assert exc_info.value.detail == "Money book not found"

    book = await verify_money_book_access(
        book_id=other_book.id, current_user=other_user, db=test_db
    )
    assert book.id == other_book.id


@pytest.mark.integration
async def test_verify_pocket_access(test_db, test_user, other_user, test_pockets):
    """Pockets resolve through their book's owner."""
    pocket = await verify_pocket_access(
        pocket_id=test_pockets[0].id, current_user=test_user, db=test_db
    )
    assert pocket.name == "Needs"

    with pytest.raises(NotFoundError, match="Pocket not found"):
        await verify_pocket_access(
            pocket_id=test_pockets[0].id, current_user=other_user, db=test_db
        )


@pytest.mark.integration
async def test_verify_allocation_access(test_db, test_user, other_user, test_book, test_pockets):
    """Allocations resolve through their book's owner."""
    allocation = await allocation_service.create_allocation(
        test_db, test_book, AllocationCreate(source_amount=100, date=date(2026, 10, 1))
    )

    found = await verify_allocation_access(
        allocation_id=allocation.id, current_user=test_user, db=test_db
    )
    assert found.id == allocation.id

    with pytest.raises(NotFoundError, match="Allocation not found"):
        await verify_allocation_access(
            allocation_id=allocation.id, current_user=other_user, db=test_db
        )


@pytest.mark.integration
async def test_verify_holding_and_transaction_access(test_db, test_user, other_user, test_book):
    """Holdings and their transactions resolve through the portfolio's book."""
    result = await holding_service.create_holding_transaction(
        test_db,
        test_book,
        HoldingTransactionCreate(
            asset_type=AssetType.CRYPTO,
            asset_name="Crypto",
            platform="Exchange",
            instrument_name="BTC",
            amount=Decimal("500.00"),
            quantity=Decimal("0.01"),
        ),
    )

    holding = await verify_holding_access(holding_id=result.id, current_user=test_user, db=test_db)
    assert holding.asset.name == "Crypto"

    transaction = await verify_transaction_access(
        transaction_id=result.transaction_id, current_user=test_user, db=test_db
    )
    assert transaction.holding_id == result.id

    with pytest.raises(NotFoundError, match="Holding not found"):
        await verify_holding_access(holding_id=result.id, current_user=other_user, db=test_db)
    with pytest.raises(NotFoundError, match="Transaction not found"):
        await verify_transaction_access(
            transaction_id=result.transaction_id, current_user=other_user, db=test_db
        )
