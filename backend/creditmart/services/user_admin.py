"""User Administration — list accounts and toggle banned/admin flags.

Invariants:
    - Balance is NOT editable here; only CreditLedger writes users.balance
    - Flag updates run in the caller's transaction
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from creditmart.core.errors import ResourceNotFoundError
from creditmart.models.user import User

logger = logging.getLogger(__name__)

EDITABLE_FLAGS = frozenset({"banned", "is_admin"})


def serialize_user(user: User) -> dict:
    return {
        "id": user.id,
        "username": user.username,
        "is_admin": user.is_admin,
        "balance": user.balance,
        "security_deposit": user.security_deposit,
        "banned": user.banned,
        "created_at": user.created_at.isoformat(),
    }


async def list_users(db: AsyncSession) -> list[dict]:
    result = await db.execute(
        select(User)
        .order_by(User.created_at.desc(), User.id.desc())
        .execution_options(populate_existing=True),
    )
    return [serialize_user(u) for u in result.scalars().all()]


async def update_user_flags(db: AsyncSession, user_id: int, flags: dict) -> User:
    unknown = set(flags) - EDITABLE_FLAGS
    if unknown:
        raise ValueError(f"Not editable: {', '.join(sorted(unknown))}")
    user = await db.get(User, user_id, populate_existing=True)
    if user is None:
        raise ResourceNotFoundError("User", user_id)
    for key, value in flags.items():
        setattr(user, key, value)
    await db.flush()
    logger.info(
        f"User {user_id} flags updated: {sorted(flags)}",
        extra={"user_id": user_id},
    )
    return user
