"""Order Request Enforcement — pure precondition checks for purchases and top-ups.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Checks run in a fixed order: quantity, product availability, stock, credits
    - purchase_debit() rounds up: a fractional cost never under-charges the ledger

Design Decisions:
    - Checks here are advisory snapshots; the authoritative stock/balance guard is
      the conditional UPDATE in CatalogStore/CreditLedger, which re-checks under
      the row lock
"""

import math
from decimal import Decimal, InvalidOperation

from creditmart.core.domain_types import INT_COLUMN_MAX
from creditmart.core.errors import (
    ErrorContext,
    InputValidationError,
    InsufficientCreditsError,
    InsufficientStockError,
    InvalidAmountError,
    InvalidQuantityError,
    ResourceNotFoundError,
)

MAX_PAYMENT_METHOD_LENGTH = 50
MAX_TOP_UP_CREDITS = INT_COLUMN_MAX


# --- Purchases ---------------------------------------------------------------

def check_quantity(quantity: int, context: ErrorContext | None = None) -> None:
    if quantity < 1:
        raise InvalidQuantityError(quantity, context)


def check_product_active(
    product_id: int, active: bool, context: ErrorContext | None = None,
) -> None:
    """Inactive products are indistinguishable from missing ones."""
    if not active:
        raise ResourceNotFoundError("Product", product_id, context)


def check_stock(stock: int, quantity: int, context: ErrorContext | None = None) -> None:
    if stock < quantity:
        raise InsufficientStockError(quantity, stock, context)


def purchase_cost(price: Decimal, quantity: int) -> Decimal:
    """Exact cost recorded on the order."""
    return (Decimal(price) * quantity).quantize(Decimal("0.01"))


def purchase_debit(cost: Decimal) -> int:
    """Whole credits taken from the balance for a given cost."""
    return math.ceil(cost)


def check_credits(balance: int, debit: int, context: ErrorContext | None = None) -> None:
    if balance < debit:
        raise InsufficientCreditsError(debit, balance, context)


# --- Top-ups -----------------------------------------------------------------

def normalize_top_up_amount(amount: object, context: ErrorContext | None = None) -> Decimal:
    """Return amount as Decimal; a whole number of credits in 1..MAX_TOP_UP_CREDITS."""
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError):
        raise InvalidAmountError(amount, context) from None
    if not value.is_finite() or value <= 0 or value != value.to_integral_value():
        raise InvalidAmountError(amount, context)
    if value > MAX_TOP_UP_CREDITS:
        raise InvalidAmountError(amount, context)
    return value


def normalize_payment_method(
    payment_method: str | None, context: ErrorContext | None = None,
) -> str:
    method = (payment_method or "").strip()
    if not method:
        raise InputValidationError(
            "Payment method is required", "payment_method", context,
        )
    if len(method) > MAX_PAYMENT_METHOD_LENGTH:
        raise InputValidationError(
            f"Payment method exceeds {MAX_PAYMENT_METHOD_LENGTH} characters",
            "payment_method", context,
        )
    return method
