"""User ORM — a marketplace account and its credit balance.

Invariants:
    - balance >= 0 (written only by CreditLedger.adjust_balance)
    - username unique, non-nullable
    - Never deleted while orders reference it

Design Decisions:
    - No password column: identity is owned by the upstream gateway
    - security_deposit is informational; the engine never reads it
"""

from datetime import datetime, timezone

from sqlalchemy import (
    Boolean, CheckConstraint, DateTime, Integer, String,
)
from sqlalchemy.orm import Mapped, mapped_column

from creditmart.db.base import Base


class User(Base):
    """Account with a scalar credit balance."""
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("balance >= 0", name="ck_users_balance_non_negative"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    is_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    balance: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    security_deposit: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    banned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
