"""Concurrency — racing purchases and approvals against one database.

Invariants:
    - Concurrent purchases against stock S sell at most S units
    - Concurrent debits never overdraw a balance
    - Concurrent approvals of one top-up credit the ledger exactly once

Design Decisions:
    - File-backed SQLite (tmp_path): every task gets its own connection and
      session, as concurrent requests do in production
    - BEGIN IMMEDIATE per transaction: SQLite serializes writers up front
      instead of failing lock upgrades with "database is locked"
"""

import asyncio
from decimal import Decimal

import pytest
from sqlalchemy import event, func, select
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

from creditmart.core.authorization import Actor
from creditmart.core.domain_types import OrderStatus, Role, UserId
from creditmart.core.errors import (
    InsufficientCreditsError, InsufficientStockError, InvalidTransitionError,
)
from creditmart.db.base import Base
from creditmart.models.order import Order
from creditmart.models.product import Product
from creditmart.models.user import User
from creditmart.services.catalog_store import SqlCatalogStore
from creditmart.services.credit_ledger import SqlCreditLedger
from creditmart.services.order_workflow import OrderWorkflow

from tests.services.fakes import RecordingSink

ADMIN = Actor(user_id=UserId(1), role=Role.ADMIN)


@pytest.fixture
async def file_factory(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'race.db'}",
        connect_args={"timeout": 30},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


async def _seed(factory, *rows):
    async with factory() as db:
        db.add_all(rows)
        await db.commit()
        return [row.id for row in rows]


async def _run(factory, operation):
    """Run operation(workflow) on a fresh session, like one request."""
    async with factory() as db:
        workflow = OrderWorkflow(
            db, SqlCreditLedger(db), SqlCatalogStore(db), RecordingSink(),
            admin_user_id=1,
        )
        return await operation(workflow)


async def _scalar(factory, query):
    async with factory() as db:
        return (await db.execute(query)).scalar_one()


async def test_racing_buyers_never_oversell(file_factory):
    await _seed(file_factory, User(id=1, username="admin", is_admin=True))
    [product_id] = await _seed(
        file_factory,
        Product(name="Last Keys", price=Decimal("5"), category="keys", stock=3),
    )
    buyer_ids = await _seed(
        file_factory, *[User(username=f"buyer{i}", balance=100) for i in range(8)],
    )

    results = await asyncio.gather(
        *[
            _run(file_factory, lambda wf, uid=uid: wf.submit_purchase(
                Actor(user_id=UserId(uid)), product_id, 1,
            ))
            for uid in buyer_ids
        ],
        return_exceptions=True,
    )

    sold = [r for r in results if not isinstance(r, BaseException)]
    failed = [r for r in results if isinstance(r, BaseException)]
    assert len(sold) == 3
    assert all(isinstance(e, InsufficientStockError) for e in failed)
    assert await _scalar(
        file_factory, select(Product.stock).where(Product.id == product_id),
    ) == 0
    assert await _scalar(file_factory, select(func.count()).select_from(Order)) == 3
    assert await _scalar(
        file_factory, select(func.sum(User.balance)).where(User.id.in_(buyer_ids)),
    ) == 8 * 100 - 3 * 5


async def test_racing_purchases_never_overdraw(file_factory):
    await _seed(file_factory, User(id=1, username="admin", is_admin=True))
    [buyer_id] = await _seed(file_factory, User(username="spender", balance=10))
    [product_id] = await _seed(
        file_factory,
        Product(name="Plenty", price=Decimal("5"), category="misc", stock=100),
    )
    actor = Actor(user_id=UserId(buyer_id))

    results = await asyncio.gather(
        *[
            _run(file_factory, lambda wf: wf.submit_purchase(actor, product_id, 1))
            for _ in range(6)
        ],
        return_exceptions=True,
    )

    failed = [r for r in results if isinstance(r, BaseException)]
    assert len(results) - len(failed) == 2
    assert all(isinstance(e, InsufficientCreditsError) for e in failed)
    assert await _scalar(
        file_factory, select(User.balance).where(User.id == buyer_id),
    ) == 0
    assert await _scalar(
        file_factory, select(Product.stock).where(Product.id == product_id),
    ) == 98


async def test_racing_approvals_credit_once(file_factory):
    await _seed(file_factory, User(id=1, username="admin", is_admin=True))
    [owner_id] = await _seed(file_factory, User(username="saver", balance=0))
    receipt = await _run(
        file_factory,
        lambda wf: wf.submit_top_up(Actor(user_id=UserId(owner_id)), 100, "KPay"),
    )

    results = await asyncio.gather(
        *[
            _run(file_factory, lambda wf: wf.set_status(
                ADMIN, receipt.order_id, OrderStatus.APPROVED,
            ))
            for _ in range(5)
        ],
        return_exceptions=True,
    )

    failed = [r for r in results if isinstance(r, BaseException)]
    assert len(results) - len(failed) == 1
    assert all(isinstance(e, InvalidTransitionError) for e in failed)
    assert await _scalar(
        file_factory, select(User.balance).where(User.id == owner_id),
    ) == 100
