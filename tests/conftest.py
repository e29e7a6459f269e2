"""Shared test fixtures and configuration."""
import pytest
import os
import yaml
from pathlib import Path
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool, StaticPool

# Set test environment variables before importing app
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("BUSINESS_NAME", "Test Catering")

from catering.main import app
from catering.db.database import get_db
from catering.db.models import Base
from catering.core.dependencies import get_catalog_repository
from catering.services.catalog.base import CatalogEntry, ServicePrice, ServicePrices
from catering.services.catalog.repository import CatalogRepository
from catering.services.catalog.in_memory_catalog import InMemoryCatalogProvider
from catering.services.quote_session.models import QuoteSession
from catering.services.quoting import constants


# Test database URL (in-memory SQLite)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def test_db_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Drop all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def test_db(test_db_engine):
    """Create test database session."""
    async_session = async_sessionmaker(
        test_db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session


@pytest.fixture
def test_catalog_path():
    """Return path to test catalog YAML file."""
    return Path(__file__).parent / "fixtures" / "test_catalog.yaml"


@pytest.fixture
def test_catalog_repository(test_catalog_path):
    """Create catalog repository with test data."""
    provider = InMemoryCatalogProvider(catalog_file=str(test_catalog_path))
    return CatalogRepository(provider)


@pytest.fixture
def dish_entries(test_catalog_path):
    """Active dish entries of the test catalog, in file order."""
    with open(test_catalog_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    entries = [CatalogEntry(**entry) for entry in data["entries"]]
    return [
        entry for entry in entries
        if entry.active and entry.id not in constants.RESERVED_IDS
    ]


@pytest.fixture
def service_prices():
    """Service prices matching the test catalog."""
    return ServicePrices(
        table_inox=ServicePrice(selling=250000, cost=250000),
        table_event=ServicePrice(selling=500000, cost=500000),
        frame=ServicePrice(selling=450000, cost=400000),
        staff=ServicePrice(selling=350000, cost=300000),
    )


@pytest.fixture
def quote_session(dish_entries, service_prices):
    """Fresh quote session over the test catalog."""
    return QuoteSession(
        session_id="test-session",
        entries=dish_entries,
        service_prices=service_prices,
        default_table_count=10,
    )


@pytest.fixture
def api_db_engine(tmp_path):
    """File-backed database for API tests.

    Tables are created with a sync engine; the async engine opens a new
    connection per request so it works from the TestClient's event loop.
    """
    db_path = tmp_path / "test.db"
    sync_engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(sync_engine)
    sync_engine.dispose()
    return create_async_engine(f"sqlite+aiosqlite:///{db_path}", poolclass=NullPool)


@pytest.fixture
def override_get_db(api_db_engine):
    """Override get_db dependency with test database."""
    async_session = async_sessionmaker(
        api_db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async def _override_get_db():
        async with async_session() as session:
            yield session
    return _override_get_db


@pytest.fixture
def override_get_catalog_repository(test_catalog_repository):
    """Override get_catalog_repository dependency with test catalog."""
    def _override_get_catalog_repository():
        return test_catalog_repository
    return _override_get_catalog_repository


@pytest.fixture
def test_client(override_get_db, override_get_catalog_repository, clean_quote_sessions):
    """Create FastAPI test client with overrides."""
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_catalog_repository] = override_get_catalog_repository

    client = TestClient(app)

    yield client

    # Clear overrides
    app.dependency_overrides.clear()


@pytest.fixture
def clean_quote_sessions():
    """Clean up quote sessions before and after tests."""
    from catering.services.quote_session import manager
    manager._sessions.clear()
    yield
    manager._sessions.clear()
