import httpx
import pytest
from fastapi.testclient import TestClient

from main import create_app
from services.checkout.client import StorefrontClient
from shared.config.settings import Settings

UNREACHABLE_DB = "sqlite+aiosqlite:////nonexistent/storefront/db.sqlite"

SHIPPING = {
    "full_name": "Asha Verma",
    "email": "asha@example.com",
    "phone": "9876543210",
    "address": "221B Residency Road",
    "city": "Bengaluru",
    "state": "Karnataka",
    "zip_code": "560025",
}


def make_settings(**overrides) -> Settings:
    values = {
        "database_url": "sqlite+aiosqlite:///:memory:",
        "store_backend": "memory",
        "metrics_enabled": False,
        "rate_limit_enabled": False,
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def client():
    """API backed by the in-memory store (seeded catalogue)."""
    with TestClient(create_app(make_settings())) as test_client:
        yield test_client


@pytest.fixture
def sql_client():
    """API backed by an in-memory SQLite database with the fallback disabled."""
    settings = make_settings(store_backend="database", mock_fallback=False)
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def fallback_client():
    """API whose database cannot be reached, served by the in-memory fallback."""
    settings = make_settings(store_backend="database", database_url=UNREACHABLE_DB, mock_fallback=True)
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def app():
    return create_app(make_settings())


@pytest.fixture
async def storefront(app):
    """StorefrontClient talking to the app in-process."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://storefront.test") as http:
        yield StorefrontClient(http=http)


@pytest.fixture
def unavailable_client():
    """API whose database cannot be reached and which has no fallback."""
    settings = make_settings(store_backend="database", database_url=UNREACHABLE_DB, mock_fallback=False)
    with TestClient(create_app(settings)) as test_client:
        yield test_client
