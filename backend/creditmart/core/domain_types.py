"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId, ProductId, OrderId wrap integer row ids
    - Credits are whole numbers; money amounts are Decimal
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and compare equal to the DB column values
"""

from decimal import Decimal
from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", int)
ProductId = NewType("ProductId", int)
OrderId = NewType("OrderId", int)


# ─── Value Types ─────────────────────────────────────────────────

Credits = NewType("Credits", int)       # >= 0 on a balance
Money = NewType("Money", Decimal)       # 2 decimal places

# Upper bound of the 32-bit INTEGER columns (users.balance, products.stock)
INT_COLUMN_MAX = 2_147_483_647


# ─── Enums ───────────────────────────────────────────────────────

class OrderType(str, Enum):
    """Order kinds — maps to DB `orders.type` column."""
    PRODUCT = "product"
    CREDIT = "credit"


class OrderStatus(str, Enum):
    """Order lifecycle states — maps to DB `orders.status` column."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"


class Role(str, Enum):
    """Caller role resolved by the identity layer."""
    CUSTOMER = "customer"
    ADMIN = "admin"


class OrderScope(str, Enum):
    """Projection scope for order listings."""
    MINE = "mine"
    ALL = "all"


# Payment label recorded on orders paid from the credit balance
CREDITS_PAYMENT_METHOD = "credits"
