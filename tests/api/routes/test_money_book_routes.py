"""Tests for money book and pocket endpoints."""

from decimal import Decimal
from uuid import uuid4

import pytest
from httpx import AsyncClient

from moneybook.models.money_book import MoneyBook
from moneybook.models.pocket import Pocket


@pytest.mark.integration
class TestMoneyBooks:
    """Money book CRUD."""

    async def test_create_puts_new_book_on_top(
        self, client: AsyncClient, auth_headers: dict[str, str]
    ):
        """Each new book gets order index 0 and pushes the others down."""
        for name in ("Household", "Side Business"):
            response = await client.post(
                "/api/v1/money-books/", json={"name": name}, headers=auth_headers
            )
            assert response.status_code == 201
            assert response.json()["order_index"] == 0

        response = await client.get("/api/v1/money-books/", headers=auth_headers)

        assert response.status_code == 200
        assert [(b["name"], b["order_index"]) for b in response.json()] == [
            ("Side Business", 0),
            ("Household", 1),
        ]

    async def test_create_rejects_blank_name(
        self, client: AsyncClient, auth_headers: dict[str, str]
    ):
        """Whitespace-only names are invalid."""
        response = await client.post(
            "/api/v1/money-books/", json={"name": "   "}, headers=auth_headers
        )

        assert response.status_code == 422

    async def test_requires_authentication(self, client: AsyncClient):
        """Money books are never served anonymously."""
        response = await client.get("/api/v1/money-books/")

        assert response.status_code == 401

    async def test_get_update_delete(
        self, client: AsyncClient, auth_headers: dict[str, str], test_book: MoneyBook
    ):
        """Read, rename and delete one's own book."""
        book_id = str(test_book.id)

        response = await client.get(f"/api/v1/money-books/{book_id}", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["name"] == "Household"
        assert response.json()["has_investment_portfolio"] is False

        response = await client.patch(
            f"/api/v1/money-books/{book_id}", json={"name": "Family"}, headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json()["name"] == "Family"

        response = await client.delete(f"/api/v1/money-books/{book_id}", headers=auth_headers)
        assert response.status_code == 204

        response = await client.get(f"/api/v1/money-books/{book_id}", headers=auth_headers)
        assert response.status_code == 404

    async def test_other_users_book_is_not_found(
        self, client: AsyncClient, auth_headers: dict[str, str], other_book: MoneyBook
    ):
        """Someone else's book is indistinguishable from a missing one."""
        book_id = str(other_book.id)

        for method in ("get", "delete"):
            response = await getattr(client, method)(
                f"/api/v1/money-books/{book_id}", headers=auth_headers
            )
            assert response.status_code == 404
            assert response.json() == {
                "detail": "Money book not found",
                "error_code": "NOT_FOUND",
            }

        missing = await client.get(f"/api/v1/money-books/{uuid4()}", headers=auth_headers)
        assert missing.json() == response.json()

    async def test_portfolio_created_on_first_access(
        self, client: AsyncClient, auth_headers: dict[str, str], test_book: MoneyBook
    ):
        """The portfolio is named after the book and the book is flagged."""
        book_id = str(test_book.id)

        response = await client.get(
            f"/api/v1/money-books/{book_id}/portfolio", headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json()["name"] == "Household Portfolio"
        assert response.json()["money_book_id"] == book_id

        again = await client.get(f"/api/v1/money-books/{book_id}/portfolio", headers=auth_headers)
        assert again.json()["id"] == response.json()["id"]

        book = await client.get(f"/api/v1/money-books/{book_id}", headers=auth_headers)
        assert book.json()["has_investment_portfolio"] is True


@pytest.mark.integration
class TestPockets:
    """Pocket CRUD."""

    async def test_create_and_list(
        self, client: AsyncClient, auth_headers: dict[str, str], test_book: MoneyBook
    ):
        """Pockets are listed in display order."""
        book_id = str(test_book.id)
        for name, percentage, order_index in (("Later", "40", 1), ("First", "60", 0)):
            response = await client.post(
                f"/api/v1/money-books/{book_id}/pockets",
                json={"name": name, "percentage": percentage, "order_index": order_index},
                headers=auth_headers,
            )
            assert response.status_code == 201

        response = await client.get(f"/api/v1/money-books/{book_id}/pockets", headers=auth_headers)

        assert response.status_code == 200
        pockets = response.json()
        assert [p["name"] for p in pockets] == ["First", "Later"]
        assert Decimal(str(pockets[0]["percentage"])) == Decimal("60")

    async def test_percentage_out_of_range(
        self, client: AsyncClient, auth_headers: dict[str, str], test_book: MoneyBook
    ):
        """A pocket cannot take more than 100%."""
        response = await client.post(
            f"/api/v1/money-books/{test_book.id}/pockets",
            json={"name": "Greedy", "percentage": "150"},
            headers=auth_headers,
        )

        assert response.status_code == 422

    async def test_update_and_delete(
        self, client: AsyncClient, auth_headers: dict[str, str], test_pockets: list[Pocket]
    ):
        """Pockets are addressed directly by ID."""
        pocket_id = str(test_pockets[0].id)
        book_id = str(test_pockets[0].money_book_id)

        response = await client.patch(
            f"/api/v1/pockets/{pocket_id}",
            json={"name": "Essentials", "percentage": "45"},
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert response.json()["name"] == "Essentials"
        assert Decimal(str(response.json()["percentage"])) == Decimal("45")

        response = await client.delete(f"/api/v1/pockets/{pocket_id}", headers=auth_headers)
        assert response.status_code == 204

        response = await client.get(f"/api/v1/money-books/{book_id}/pockets", headers=auth_headers)
        assert [p["name"] for p in response.json()] == ["Wants", "Savings"]

    async def test_other_users_pocket_is_not_found(
        self,
        client: AsyncClient,
        other_auth_headers: dict[str, str],
        test_pockets: list[Pocket],
    ):
        """Pockets are owned through their book."""
        response = await client.patch(
            f"/api/v1/pockets/{test_pockets[0].id}",
            json={"name": "Mine now"},
            headers=other_auth_headers,
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "Pocket not found"
