"""Credit Ledger — authoritative user balances.

Invariants:
    - adjust_balance is the ONLY writer of users.balance
    - The check and the write are one conditional UPDATE (compare-and-set):
      balance never goes below zero, even under concurrent callers
    - Balance never exceeds INT_COLUMN_MAX; an approval that would overflow it
      fails with CapacityExceededError and leaves the order pending
    - The ledger never commits; the caller's transaction owns the write

Design Decisions:
    - UPDATE ... WHERE balance >= -delta RETURNING balance: the row lock taken
      by the UPDATE is held until the caller commits, which serializes writers
      per user without SELECT ... FOR UPDATE
"""

import logging

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from creditmart.core.domain_types import INT_COLUMN_MAX, UserId
from creditmart.core.errors import (
    CapacityExceededError, ErrorContext, InsufficientCreditsError,
    ResourceNotFoundError,
)
from creditmart.models.user import User

logger = logging.getLogger(__name__)


class SqlCreditLedger:
    """CreditLedger backed by the users table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_account(self, user_id: UserId) -> User:
        result = await self.db.execute(
            select(User)
            .where(User.id == user_id)
            .execution_options(populate_existing=True),
        )
        user = result.scalar_one_or_none()
        if user is None:
            raise ResourceNotFoundError("User", user_id)
        return user

    async def get_balance(self, user_id: UserId) -> int:
        result = await self.db.execute(
            select(User.balance).where(User.id == user_id),
        )
        balance = result.scalar_one_or_none()
        if balance is None:
            raise ResourceNotFoundError("User", user_id)
        return balance

    async def adjust_balance(self, user_id: UserId, delta: int) -> int:
        """Add delta (may be negative) to the balance; return the new balance."""
        if delta > INT_COLUMN_MAX:
            raise CapacityExceededError(
                "Balance", delta, context=ErrorContext(user_id=user_id),
            )
        if delta < -INT_COLUMN_MAX:
            raise InsufficientCreditsError(
                -delta, await self.get_balance(user_id), ErrorContext(user_id=user_id),
            )
        stmt = update(User).where(User.id == user_id)
        if delta < 0:
            stmt = stmt.where(User.balance >= -delta)
        else:
            stmt = stmt.where(User.balance <= INT_COLUMN_MAX - delta)
        result = await self.db.execute(
            stmt
            .values(balance=User.balance + delta)
            .returning(User.balance)
            .execution_options(synchronize_session=False),
        )
        new_balance = result.scalar_one_or_none()
        if new_balance is None:
            # Either the user is missing or the guard rejected the write
            current = await self.get_balance(user_id)
            if delta > 0:
                raise CapacityExceededError(
                    "Balance", delta, current, ErrorContext(user_id=user_id),
                )
            raise InsufficientCreditsError(
                -delta, current, ErrorContext(user_id=user_id),
            )
        logger.debug(
            f"Balance of user {user_id} adjusted by {delta} to {new_balance}",
            extra={"user_id": user_id, "delta": delta},
        )
        return new_balance
