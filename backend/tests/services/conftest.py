"""Service test fixtures: async DB, recording fakes, FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - get_view_cache overridden with a fresh ViewCache per test
    - FakeInvoiceRepository records every call so tests assert exact parameters

Design Decisions:
    - SQLite in-memory with StaticPool: one shared connection, so tables created by
      the fixture are visible to every session
    - Fakes over mocks for the repository: the protocol is small and async
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool
from httpx import ASGITransport, AsyncClient

from app.core.errors import DatabaseError
from app.db.base import Base
from app.infrastructure.database import get_db, DatabaseSessionManager
from app.infrastructure.view_cache import ViewCache, get_view_cache
import app.infrastructure.database as db_module
import app.models  # noqa: F401
from app.main import app


class FakeInvoiceRepository:
    """Records calls; raise_on[operation] makes that operation fail."""

    def __init__(self):
        self.calls: list[tuple] = []
        self.raise_on: dict[str, Exception] = {}

    async def insert_invoice(self, customer_id, amount_cents, status, date):
        self.calls.append(("insert_invoice", customer_id, amount_cents, status, date))
        self._maybe_raise("insert")
        return "inv-new"

    async def update_invoice(self, invoice_id, customer_id, amount_cents, status):
        self.calls.append(
            ("update_invoice", invoice_id, customer_id, amount_cents, status),
        )
        self._maybe_raise("update")

    async def delete_invoice(self, invoice_id):
        self.calls.append(("delete_invoice", invoice_id))
        self._maybe_raise("delete")

    async def get_invoice(self, invoice_id):
        self.calls.append(("get_invoice", invoice_id))
        return None

    async def list_invoices(self, limit, offset, status=None):
        self.calls.append(("list_invoices", limit, offset, status))
        return []

    def _maybe_raise(self, operation):
        if operation in self.raise_on:
            raise self.raise_on[operation]


class RecordingInvalidator:
    def __init__(self):
        self.paths: list[str] = []

    def invalidate(self, path: str) -> None:
        self.paths.append(path)


@pytest.fixture
def fake_repository():
    return FakeInvoiceRepository()


@pytest.fixture
def invalidator():
    return RecordingInvalidator()


@pytest.fixture
def db_failure():
    return DatabaseError("Connection or operational error", "execute")


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def view_cache():
    return ViewCache()


@pytest.fixture
async def client(test_engine, test_session_factory, view_cache):
    """FastAPI test client with DB and view cache dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_view_cache] = lambda: view_cache

    # Readiness probe reads db_manager directly
    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
