"""Request Dependencies — caller identity and service wiring.

Invariants:
    - get_actor is the only place a request becomes an Actor
    - Unknown or malformed caller ids -> UnauthenticatedError (401)
    - Banned callers -> ForbiddenError (403) before any route body runs
    - One AsyncSession per request, shared by identity lookup and the workflow

Design Decisions:
    - The caller id arrives in a header set by the upstream identity gateway;
      token verification happens there, not here
    - The role is read from the users row on every request, so revoking admin
      takes effect immediately
"""

from fastapi import Depends, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from creditmart.config import get_settings
from creditmart.core.authorization import (
    Actor, check_not_banned, require_admin, role_for,
)
from creditmart.core.domain_types import UserId
from creditmart.core.errors import UnauthenticatedError
from creditmart.core.repository_protocols import NotificationSink
from creditmart.infrastructure.database import get_db, get_session_factory
from creditmart.models.user import User
from creditmart.services.catalog_store import SqlCatalogStore
from creditmart.services.credit_ledger import SqlCreditLedger
from creditmart.services.notification_sink import DatabaseNotificationSink
from creditmart.services.order_workflow import OrderWorkflow


async def get_actor(
    request: Request, db: AsyncSession = Depends(get_db),
) -> Actor:
    """Resolve the calling user and their role."""
    raw = request.headers.get(get_settings().identity_header)
    if not raw:
        raise UnauthenticatedError()
    try:
        user_id = int(raw)
    except ValueError:
        raise UnauthenticatedError("Malformed caller identity") from None

    result = await db.execute(
        select(User.is_admin, User.banned).where(User.id == user_id),
    )
    row = result.one_or_none()
    if row is None:
        raise UnauthenticatedError("Unknown caller")
    check_not_banned(user_id, row.banned)
    return Actor(user_id=UserId(user_id), role=role_for(row.is_admin))


async def get_admin(actor: Actor = Depends(get_actor)) -> Actor:
    require_admin(actor)
    return actor


def get_notifier() -> NotificationSink:
    return DatabaseNotificationSink(get_session_factory())


async def get_workflow(
    db: AsyncSession = Depends(get_db),
    notifier: NotificationSink = Depends(get_notifier),
) -> OrderWorkflow:
    return OrderWorkflow(
        db,
        SqlCreditLedger(db),
        SqlCatalogStore(db),
        notifier,
        admin_user_id=get_settings().admin_user_id,
    )
