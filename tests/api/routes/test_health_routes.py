"""Tests for health endpoints."""

import pytest
from httpx import AsyncClient


@pytest.mark.integration
async def test_health(client: AsyncClient):
    """The liveness probe needs no database or token."""
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "app": "Money Book API"}


@pytest.mark.integration
async def test_database_health(client: AsyncClient):
    """The readiness probe runs a query against the session."""
    response = await client.get("/health/db")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "database": "connected"}
