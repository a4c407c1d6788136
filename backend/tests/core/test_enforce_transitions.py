"""Order status transitions — pure tests for the edge table and ledger effect.

Tests cover:
    - Every legal edge passes
    - Terminal states reject everything
    - Same-status and backwards moves are rejected
    - Only credit pending -> approved carries a balance delta
"""

from decimal import Decimal

import pytest

from creditmart.core.domain_types import OrderStatus, OrderType
from creditmart.core.enforce_transitions import (
    ALLOWED_TRANSITIONS, TERMINAL_STATUSES,
    check_transition, credit_delta_for, is_allowed, parse_status,
)
from creditmart.core.errors import (
    ErrorContext, InputValidationError, InvalidTransitionError,
)


LEGAL_EDGES = [
    (OrderStatus.PENDING, OrderStatus.APPROVED),
    (OrderStatus.PENDING, OrderStatus.REJECTED),
    (OrderStatus.APPROVED, OrderStatus.COMPLETED),
]


@pytest.mark.parametrize("current,new", LEGAL_EDGES)
def test_legal_edges_pass(current, new):
    assert is_allowed(current, new)
    check_transition(current, new)


def test_edge_table_has_exactly_three_edges():
    edges = {(c, n) for c, successors in ALLOWED_TRANSITIONS.items() for n in successors}
    assert edges == set(LEGAL_EDGES)


def test_terminal_statuses():
    assert TERMINAL_STATUSES == {OrderStatus.REJECTED, OrderStatus.COMPLETED}


@pytest.mark.parametrize("terminal", [OrderStatus.REJECTED, OrderStatus.COMPLETED])
@pytest.mark.parametrize("target", list(OrderStatus))
def test_terminal_states_reject_everything(terminal, target):
    with pytest.raises(InvalidTransitionError):
        check_transition(terminal, target)


@pytest.mark.parametrize("status", list(OrderStatus))
def test_same_status_is_rejected(status):
    assert not is_allowed(status, status)


def test_cannot_skip_approval():
    with pytest.raises(InvalidTransitionError) as exc_info:
        check_transition(OrderStatus.PENDING, OrderStatus.COMPLETED)
    assert exc_info.value.current == "pending"
    assert exc_info.value.requested == "completed"


def test_cannot_return_to_pending():
    with pytest.raises(InvalidTransitionError):
        check_transition(OrderStatus.APPROVED, OrderStatus.PENDING)


def test_transition_error_carries_context():
    ctx = ErrorContext(order_id=12)
    with pytest.raises(InvalidTransitionError) as exc_info:
        check_transition(OrderStatus.REJECTED, OrderStatus.APPROVED, ctx)
    assert exc_info.value.context.order_id == 12
    assert exc_info.value.http_status == 409


# --- credit_delta_for ---------------------------------------------------------

def test_credit_approval_adds_amount():
    delta = credit_delta_for(
        OrderType.CREDIT, OrderStatus.PENDING, OrderStatus.APPROVED, Decimal("100.00"),
    )
    assert delta == 100


def test_credit_rejection_adds_nothing():
    assert credit_delta_for(
        OrderType.CREDIT, OrderStatus.PENDING, OrderStatus.REJECTED, Decimal("100"),
    ) == 0


def test_credit_completion_adds_nothing():
    assert credit_delta_for(
        OrderType.CREDIT, OrderStatus.APPROVED, OrderStatus.COMPLETED, Decimal("100"),
    ) == 0


@pytest.mark.parametrize("current,new", LEGAL_EDGES)
def test_product_orders_never_touch_ledger(current, new):
    assert credit_delta_for(OrderType.PRODUCT, current, new, Decimal("10")) == 0


def test_parse_status_accepts_enum_and_string():
    assert parse_status("approved") is OrderStatus.APPROVED
    assert parse_status(OrderStatus.REJECTED) is OrderStatus.REJECTED


@pytest.mark.parametrize("value", ["shipped", "", None, 3])
def test_parse_status_rejects_unknown_values(value):
    with pytest.raises(InputValidationError) as exc_info:
        parse_status(value, ErrorContext(order_id=4))
    assert exc_info.value.field == "status"
    assert exc_info.value.code == "VALIDATION_ERROR"
    assert exc_info.value.context.order_id == 4
