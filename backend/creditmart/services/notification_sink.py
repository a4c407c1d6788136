"""Notification Sink — durable inbox delivery outside the order transaction.

Invariants:
    - Each notify() runs in its OWN session and commits independently
    - Called only after the order transaction has committed
    - broadcast() inserts all messages in one commit; unknown user ids are skipped

Design Decisions:
    - Session factory injected (db_manager.session in production, a test
      sessionmaker in tests): the request session may still be mid-transaction
"""

import logging
from typing import AsyncContextManager, Callable, Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from creditmart.core.domain_types import UserId
from creditmart.models.notification import Notification
from creditmart.models.user import User

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AsyncContextManager[AsyncSession]]


class DatabaseNotificationSink:
    """NotificationSink writing to the notifications table."""

    def __init__(self, session_factory: SessionFactory):
        self._session_factory = session_factory

    async def notify(self, user_id: UserId, message: str) -> None:
        async with self._session_factory() as db:
            db.add(Notification(user_id=user_id, message=message))
            await db.commit()
        logger.info(
            f"Notification delivered to user {user_id}",
            extra={"user_id": user_id},
        )

    async def broadcast(self, user_ids: Iterable[UserId], message: str) -> int:
        targets = list(dict.fromkeys(user_ids))
        async with self._session_factory() as db:
            result = await db.execute(select(User.id).where(User.id.in_(targets)))
            known = set(result.scalars().all())
            targets = [uid for uid in targets if uid in known]
            db.add_all(
                Notification(user_id=uid, message=message) for uid in targets
            )
            await db.commit()
        logger.info(f"Broadcast delivered to {len(targets)} users")
        return len(targets)


async def list_notifications(db: AsyncSession, user_id: int) -> list[dict]:
    """Inbox for one user, newest first."""
    result = await db.execute(
        select(Notification)
        .where(Notification.user_id == user_id)
        .order_by(Notification.created_at.desc(), Notification.id.desc()),
    )
    return [
        {
            "id": n.id,
            "user_id": n.user_id,
            "message": n.message,
            "read": n.read,
            "created_at": n.created_at.isoformat(),
        }
        for n in result.scalars().all()
    ]
