"""Error Hierarchy — typed, categorized exceptions for every CreditMart failure.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
      and http_status, declared once on the class
    - Domain errors (4xx) abort the request's transaction and leave no partial state
    - Infrastructure errors (5xx) carry an opaque message; details go to the log
    - to_response() produces the REST envelope used by every handler

Design Decisions:
    - Single hierarchy rooted at CreditMartError: one FastAPI handler catches all
    - ErrorContext carries the marketplace ids involved so handlers can log them
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    AUTHORIZATION = "authorization"
    CONFLICT = "conflict"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Which user, order and product an error concerns."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: int | None = None
    order_id: int | None = None
    product_id: int | None = None
    debug_info: dict[str, Any] | None = None


class CreditMartError(Exception):
    """Base exception for all CreditMart errors."""

    code: str = "INTERNAL_ERROR"
    category: ErrorCategory = ErrorCategory.INTERNAL
    severity: ErrorSeverity = ErrorSeverity.ERROR
    http_status: int = 500

    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or ErrorContext()

    def to_response(self) -> dict:
        """Convert to the standardized REST error envelope."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "user_id": self.context.user_id,
                    "order_id": self.context.order_id,
                    "product_id": self.context.product_id,
                },
            }
        }


# ─── Validation (400) ───────────────────────────────────────────

class InputValidationError(CreditMartError):
    """A request field is malformed."""
    code = "VALIDATION_ERROR"
    category = ErrorCategory.VALIDATION
    http_status = 400

    def __init__(
        self, message: str, field: str, context: ErrorContext | None = None,
        code: str | None = None,
    ):
        super().__init__(message, context)
        self.field = field
        if code is not None:
            self.code = code


class InvalidQuantityError(InputValidationError):
    """Purchase quantity below 1."""
    code = "INVALID_QUANTITY"

    def __init__(self, quantity: int, context: ErrorContext | None = None):
        super().__init__(
            f"Quantity must be at least 1, got {quantity}", "quantity", context,
        )
        self.quantity = quantity


class InvalidAmountError(InputValidationError):
    """Top-up amount is not a whole number of credits within the storable range."""
    code = "INVALID_AMOUNT"

    def __init__(self, amount: object, context: ErrorContext | None = None):
        super().__init__(
            f"Amount must be a whole number of credits from 1 to 2147483647, got {amount}",
            "amount", context,
        )
        self.amount = amount


# ─── Business rules ─────────────────────────────────────────────

class ResourceNotFoundError(CreditMartError):
    """User, product or order does not exist (or is hidden)."""
    code = "RESOURCE_NOT_FOUND"
    category = ErrorCategory.RESOURCE_NOT_FOUND
    http_status = 404

    def __init__(
        self, resource_type: str, resource_id: object,
        context: ErrorContext | None = None,
    ):
        super().__init__(f"{resource_type} '{resource_id}' not found", context)
        self.resource_type = resource_type
        self.resource_id = resource_id


class InsufficientStockError(CreditMartError):
    """Stock would go negative."""
    code = "INSUFFICIENT_STOCK"
    category = ErrorCategory.BUSINESS_RULE
    http_status = 400

    def __init__(
        self, requested: int, available: int | None = None,
        context: ErrorContext | None = None,
    ):
        message = f"Insufficient stock: requested {requested}"
        if available is not None:
            message += f", available {available}"
        super().__init__(message, context)
        self.requested = requested
        self.available = available


class InsufficientCreditsError(CreditMartError):
    """Balance would go negative."""
    code = "INSUFFICIENT_CREDITS"
    category = ErrorCategory.BUSINESS_RULE
    http_status = 400

    def __init__(
        self, required: int, balance: int | None = None,
        context: ErrorContext | None = None,
    ):
        message = f"Insufficient credits: {required} required"
        if balance is not None:
            message += f", balance {balance}"
        super().__init__(message, context)
        self.required = required
        self.balance = balance


class CapacityExceededError(CreditMartError):
    """Balance or stock would exceed what its column can store."""
    code = "CAPACITY_EXCEEDED"
    category = ErrorCategory.BUSINESS_RULE
    http_status = 400

    def __init__(
        self, resource: str, delta: int, current: int | None = None,
        context: ErrorContext | None = None,
    ):
        message = f"{resource} cannot grow by {delta}"
        if current is not None:
            message += f" from {current}"
        super().__init__(message, context)
        self.resource = resource
        self.delta = delta
        self.current = current


class InvalidTransitionError(CreditMartError):
    """Requested status is not a legal successor of the current one."""
    code = "INVALID_TRANSITION"
    category = ErrorCategory.CONFLICT
    http_status = 409

    def __init__(
        self, current: str, requested: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Cannot move order from '{current}' to '{requested}'", context,
        )
        self.current = current
        self.requested = requested


# ─── Authorization ──────────────────────────────────────────────

class UnauthenticatedError(CreditMartError):
    """Caller identity missing, malformed or unknown."""
    code = "UNAUTHENTICATED"
    category = ErrorCategory.AUTHORIZATION
    severity = ErrorSeverity.WARNING
    http_status = 401

    def __init__(
        self, message: str = "Caller identity required",
        context: ErrorContext | None = None,
    ):
        super().__init__(message, context)


class ForbiddenError(CreditMartError):
    """Caller lacks the role or standing for the operation."""
    code = "FORBIDDEN"
    category = ErrorCategory.AUTHORIZATION
    severity = ErrorSeverity.WARNING
    http_status = 403

    def __init__(
        self, message: str = "Admin access required",
        context: ErrorContext | None = None,
    ):
        super().__init__(message, context)


# ─── Infrastructure (5xx) ───────────────────────────────────────

class DatabaseError(CreditMartError):
    """Database operation failed; the transaction was rolled back."""
    code = "DATABASE_ERROR"
    category = ErrorCategory.DATABASE
    severity = ErrorSeverity.CRITICAL
    http_status = 503

    def __init__(
        self, message: str, operation: str, context: ErrorContext | None = None,
    ):
        super().__init__(f"Database {operation} failed: {message}", context)
        self.operation = operation
