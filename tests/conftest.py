"""Pytest fixtures for testing."""

from collections.abc import AsyncGenerator
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from moneybook.core.rate_limit import limiter
from moneybook.core.security import create_access_token, get_password_hash
from moneybook.db.base import Base
from moneybook.db.session import get_db
from moneybook.models.money_book import MoneyBook
from moneybook.models.pocket import Pocket
from moneybook.models.user import User
from main import app

# Test database URL (SQLite in-memory for fast tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(autouse=True)
def reset_limiter():
    """Start every test with empty rate-limit counters."""
    limiter.reset()
    yield
    limiter.reset()


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create a test database engine."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def test_db(test_engine) -> AsyncGenerator[AsyncSession]:
    """Create a test database session."""
    async_session_maker = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with async_session_maker() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(test_db: AsyncSession) -> AsyncGenerator[AsyncClient]:
    """Create a test client with database override."""

    async def override_get_db() -> AsyncGenerator[AsyncSession]:
        yield test_db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()


async def _create_user(db: AsyncSession, username: str, password: str, **kwargs) -> User:
    user = User(
        email=f"{username}@example.com",
        username=username,
        hashed_password=get_password_hash(password),
        is_active=kwargs.pop("is_active", True),
        is_superuser=False,
    )
    db.add(user)
    await db.commit()
    return user


@pytest_asyncio.fixture(scope="function")
async def test_user(test_db: AsyncSession) -> User:
    """Create a test user."""
    return await _create_user(test_db, "testuser", "TestPass123")


@pytest_asyncio.fixture(scope="function")
async def other_user(test_db: AsyncSession) -> User:
    """Create a second user whose data the test user must not see."""
    return await _create_user(test_db, "otheruser", "OtherPass123")


@pytest_asyncio.fixture(scope="function")
async def test_inactive_user(test_db: AsyncSession) -> User:
    """Create an inactive test user."""
    return await _create_user(test_db, "inactiveuser", "InactivePass123", is_active=False)


@pytest.fixture(scope="function")
def user_token(test_user: User) -> str:
    """Generate a valid access token for test user."""
    return create_access_token(test_user.username)


@pytest.fixture(scope="function")
def auth_headers(user_token: str) -> dict[str, str]:
    """Generate authorization headers with user token."""
    return {"Authorization": f"Bearer {user_token}"}


@pytest.fixture(scope="function")
def other_auth_headers(other_user: User) -> dict[str, str]:
    """Authorization headers for the second user."""
    token = create_access_token(other_user.username)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="function")
def inactive_user_auth_headers(test_inactive_user: User) -> dict[str, str]:
    """Generate authorization headers with inactive user token."""
    token = create_access_token(test_inactive_user.username)
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture(scope="function")
async def test_book(test_db: AsyncSession, test_user: User) -> MoneyBook:
    """Create a money book for the test user."""
    book = MoneyBook(user_id=test_user.id, name="Household", order_index=0)
    test_db.add(book)
    await test_db.commit()
    return book


@pytest_asyncio.fixture(scope="function")
async def other_book(test_db: AsyncSession, other_user: User) -> MoneyBook:
    """Create a money book owned by the second user."""
    book = MoneyBook(user_id=other_user.id, name="Someone Else", order_index=0)
    test_db.add(book)
    await test_db.commit()
    return book


@pytest_asyncio.fixture(scope="function")
async def test_pockets(test_db: AsyncSession, test_book: MoneyBook) -> list[Pocket]:
    """Needs 50% / Wants 30% / Savings 20% in display order."""
    pockets = [
        Pocket(money_book_id=test_book.id, name=name, percentage=Decimal(pct), order_index=index)
        for index, (name, pct) in enumerate((("Needs", 50), ("Wants", 30), ("Savings", 20)))
    ]
    test_db.add_all(pockets)
    await test_db.commit()
    return pockets
