"""Shared test fixtures."""

import pytest
from httpx import ASGITransport, AsyncClient

from helpers import NOW, TZ
from shopfinance.main import app


@pytest.fixture
def tz():
    return TZ


@pytest.fixture
def now():
    return NOW


@pytest.fixture
async def client():
    """Async test client for the FastAPI app."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()
