"""User Routes — admin account management, inboxes and broadcasts."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from creditmart.api.dependencies import get_actor, get_admin, get_notifier
from creditmart.core.authorization import Actor, require_self_or_admin
from creditmart.core.domain_types import UserId
from creditmart.core.repository_protocols import NotificationSink
from creditmart.infrastructure.database import atomic, get_db
from creditmart.schemas.users import BroadcastRequest, UserFlagsUpdate
from creditmart.services.notification_sink import list_notifications
from creditmart.services.user_admin import (
    list_users, serialize_user, update_user_flags,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.get("")
async def get_users(
    admin: Actor = Depends(get_admin), db: AsyncSession = Depends(get_db),
):
    return await list_users(db)


@router.patch("/{user_id}")
async def update_user(
    user_id: int,
    body: UserFlagsUpdate,
    admin: Actor = Depends(get_admin),
    db: AsyncSession = Depends(get_db),
):
    """Ban/unban or grant/revoke admin. Balances are not editable here."""
    async with atomic(db):
        user = await update_user_flags(
            db, user_id, body.model_dump(exclude_unset=True, exclude_none=True),
        )
    return serialize_user(user)


@router.get("/{user_id}/notifications")
async def get_notifications(
    user_id: int,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    require_self_or_admin(actor, user_id)
    return await list_notifications(db, user_id)


@router.post("/broadcast")
async def broadcast(
    body: BroadcastRequest,
    admin: Actor = Depends(get_admin),
    notifier: NotificationSink = Depends(get_notifier),
):
    count = await notifier.broadcast(
        [UserId(uid) for uid in body.target_ids], body.message,
    )
    logger.info(
        f"Broadcast sent to {count} users", extra={"user_id": admin.user_id},
    )
    return {"message": "Broadcast sent successfully", "count": count}
