"""Order Status Transitions — the legal edges and the ledger effect of each edge.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Edges: pending -> approved | rejected, approved -> completed
    - rejected and completed are terminal; nothing returns to pending
    - Same-status requests are invalid (no silent no-ops)
    - Only credit + pending -> approved changes the ledger; product orders
      settle at creation and never again

Design Decisions:
    - One edge table shared by both order kinds; the kinds differ only in
      credit_delta_for()
    - Raise InvalidTransitionError (not return dicts): callers run inside a
      transaction that must abort on violation
"""

from decimal import Decimal

from creditmart.core.domain_types import OrderStatus, OrderType
from creditmart.core.errors import (
    ErrorContext, InputValidationError, InvalidTransitionError,
)


ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.APPROVED, OrderStatus.REJECTED}),
    OrderStatus.APPROVED: frozenset({OrderStatus.COMPLETED}),
    OrderStatus.REJECTED: frozenset(),
    OrderStatus.COMPLETED: frozenset(),
}

TERMINAL_STATUSES = frozenset(
    status for status, successors in ALLOWED_TRANSITIONS.items() if not successors
)


def parse_status(value: object, context: ErrorContext | None = None) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError:
        raise InputValidationError(
            f"Unknown order status: {value!r}", "status", context,
        ) from None


def is_allowed(current: OrderStatus, new: OrderStatus) -> bool:
    return new in ALLOWED_TRANSITIONS[current]


def check_transition(
    current: OrderStatus, new: OrderStatus, context: ErrorContext | None = None,
) -> None:
    """Raise InvalidTransitionError unless current -> new is a legal edge."""
    if not is_allowed(current, new):
        raise InvalidTransitionError(current.value, new.value, context)


def credit_delta_for(
    order_type: OrderType, current: OrderStatus, new: OrderStatus, amount: Decimal,
) -> int:
    """Credits to add to the owner's balance when taking this edge.

    Non-zero only for a top-up being approved.
    """
    if (
        order_type == OrderType.CREDIT
        and current == OrderStatus.PENDING
        and new == OrderStatus.APPROVED
    ):
        return int(amount)
    return 0
