"""Service test fixtures — async DB, seeded marketplace, FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB sessions
    - get_notifier overridden so notifications land in the same test DB
    - db_manager patched for the readiness probe

Design Decisions:
    - SQLite in-memory with StaticPool: one shared connection, so sessions
      opened by the app and by the test see the same data
    - Concurrency tests use a file database instead (see test_concurrency.py)
    - Callers identified by the X-User-Id header, as the upstream gateway does
"""

from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool
from httpx import ASGITransport, AsyncClient

from creditmart.api.dependencies import get_notifier
from creditmart.db.base import Base
from creditmart.infrastructure.database import get_db, DatabaseSessionManager
from creditmart.models.product import Product
from creditmart.models.user import User
from creditmart.services.catalog_store import SqlCatalogStore
from creditmart.services.credit_ledger import SqlCreditLedger
from creditmart.services.notification_sink import DatabaseNotificationSink
from creditmart.services.order_workflow import OrderWorkflow
import creditmart.infrastructure.database as db_module
from creditmart.main import app
from tests.services.fakes import RecordingSink


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
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
def notifier(test_session_factory):
    return DatabaseNotificationSink(test_session_factory)


@pytest.fixture
async def client(test_engine, test_session_factory, notifier):
    """FastAPI test client with DB and notifier dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier

    # Patch db_manager for the readiness probe
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


# ─── Seed data ──────────────────────────────────────────────────

@pytest.fixture
async def admin_user(test_db):
    """The admin inbox (settings.admin_user_id defaults to 1)."""
    user = User(id=1, username="admin", is_admin=True, balance=0)
    test_db.add(user)
    await test_db.commit()
    return user


@pytest.fixture
async def customer(test_db, admin_user):
    user = User(username="alice", balance=20)
    test_db.add(user)
    await test_db.commit()
    return user


@pytest.fixture
async def other_customer(test_db, admin_user):
    user = User(username="bob", balance=5)
    test_db.add(user)
    await test_db.commit()
    return user


@pytest.fixture
async def product(test_db):
    """Gift card at 5.00 credits, 10 in stock."""
    item = Product(
        name="Gift Card", price=Decimal("5.00"), category="cards",
        subcategory="gaming", stock=10, active=True,
    )
    test_db.add(item)
    await test_db.commit()
    return item


# ─── Workflow wiring ────────────────────────────────────────────

@pytest.fixture
def recording_notifier():
    return RecordingSink()


@pytest.fixture
async def workflow_db(test_session_factory):
    """Session owned by the workflow; seeding and assertions use test_db."""
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def workflow(workflow_db, recording_notifier):
    return OrderWorkflow(
        workflow_db,
        SqlCreditLedger(workflow_db),
        SqlCatalogStore(workflow_db),
        recording_notifier,
        admin_user_id=1,
    )
