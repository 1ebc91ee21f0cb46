"""Root conftest — shared test configuration and fixtures.

Invariants:
    - Every test gets a fresh in-memory SQLite database seeded with a small catalog
    - The cache substrate is an in-memory double (no Redis needed)
    - Services built per test; pending confirmations cancelled at teardown

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for store semantics
      (PostgreSQL-specific features are not used by the adapter)
    - Default confirmation delay is long so listings observe PENDING deterministically;
      confirmation tests build their own zero-delay services and drain()
"""

import os
from decimal import Decimal

os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault("REDIS_URL", "redis://127.0.0.1:6379/15")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import create_async_engine  # noqa: E402

from app.api.dependencies import get_database, get_order_services  # noqa: E402
from app.db.base import Base  # noqa: E402
from app.infrastructure.database import DatabaseSessionManager  # noqa: E402
from app.infrastructure.listing_cache import ResilientCache  # noqa: E402
from app.infrastructure.order_repository import SqlOrderStore  # noqa: E402
from app.main import app  # noqa: E402
from app.models import Product, User  # noqa: E402
from app.services.order_services import build_order_services  # noqa: E402

from tests.fakes import FakeClock, InMemoryCacheBackend  # noqa: E402


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def db_manager(test_engine):
    manager = DatabaseSessionManager.from_engine(test_engine)
    async with manager.session() as db:
        db.add_all([
            User(id=1, email="a@x.com", name="Alice"),
            User(id=2, email="bob@example.com", name="Bob"),
            Product(id=1, name="Widget", price=Decimal("9.99")),
            Product(id=2, name="Gadget", price=Decimal("24.50")),
            Product(id=3, name="100%_Cotton Tee", price=Decimal("15.00")),
        ])
        await db.commit()
    return manager


@pytest.fixture
def store(db_manager):
    return SqlOrderStore(db_manager)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache_backend(clock):
    return InMemoryCacheBackend(clock)


@pytest.fixture
def cache(cache_backend):
    return ResilientCache(cache_backend)


@pytest.fixture
async def order_services(store, cache):
    services = build_order_services(
        store, cache,
        listing_ttl_seconds=30,
        confirmation_delay_seconds=60,
    )
    yield services
    await services.scheduler.shutdown()


@pytest.fixture
async def client(order_services, db_manager):
    """FastAPI test client with services and DB overridden."""
    app.dependency_overrides[get_order_services] = lambda: order_services
    app.dependency_overrides[get_database] = lambda: db_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
