"""Order ORM — immutable record of a purchase or top-up plus its status.

Invariants:
    - user_id, product_id, type, amount, quantity never change after insert
    - status transitions follow core/enforce_transitions.py
    - product_id is NULL for credit top-ups
    - quantity >= 1 (always 1 for credit orders)

Design Decisions:
    - product FK uses ON DELETE SET NULL so the audit row outlives the product
    - payment_reference holds opaque payment proof (no gateway integration)
"""

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import (
    CheckConstraint, DateTime, ForeignKey, Integer, Numeric, String,
)
from sqlalchemy.orm import Mapped, mapped_column

from creditmart.db.base import Base


class Order(Base):
    """Order entity — one row per purchase or top-up request."""
    __tablename__ = "orders"
    __table_args__ = (
        CheckConstraint("type IN ('product', 'credit')", name="ck_orders_type"),
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected', 'completed')",
            name="ck_orders_status",
        ),
        CheckConstraint("quantity >= 1", name="ck_orders_quantity_positive"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, index=True,
    )
    product_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("products.id", ondelete="SET NULL"), nullable=True,
    )
    type: Mapped[str] = mapped_column(String(10), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="pending", index=True,
    )
    payment_method: Mapped[str | None] = mapped_column(String(50), nullable=True)
    payment_reference: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
