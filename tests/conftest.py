"""Shared test fixtures."""
import pytest
from fastapi.testclient import TestClient

from calendar_admin.api_server import create_app
from calendar_admin.config import Settings
from calendar_admin.registry import DateRegistry
from calendar_admin.store import BlockedDateStore

TEST_SECRET = "test-secret-value"


@pytest.fixture
def database_url(tmp_path) -> str:
    """SQLite file database unique to each test."""
    return f"sqlite:///{tmp_path / 'booked_dates.db'}"


@pytest.fixture
def store(database_url):
    """Create BlockedDateStore on a fresh database."""
    s = BlockedDateStore(database_url)
    yield s
    s.close()


@pytest.fixture
def registry(store) -> DateRegistry:
    """Empty registry backed by the test store."""
    return DateRegistry(store)


@pytest.fixture
def settings(database_url) -> Settings:
    return Settings(api_secret=TEST_SECRET, database_url=database_url, log_level="WARNING")


@pytest.fixture
def client(settings):
    """FastAPI test client with lifespan (registry loaded)."""
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_headers() -> dict:
    return {"X-API-Secret": TEST_SECRET}
