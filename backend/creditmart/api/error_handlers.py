"""Error Handlers — every failure leaves the API as one {"error": {...}} envelope.

Invariants:
    - CreditMartError -> its own code and http_status (core/errors.py)
    - Field-level problems, whether caught by pydantic or by core/, carry
      error.details = [{field, message, type}] in the same shape
    - Unhandled exceptions -> 500 INTERNAL_ERROR, details only in the log
    - 5xx logged at ERROR with traceback; client errors at WARNING

Design Decisions:
    - Three handlers: domain (CreditMartError), validation (pydantic), catch-all
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from creditmart.core.errors import (
    CreditMartError, ErrorCategory, ErrorSeverity, InputValidationError,
)

logger = logging.getLogger(__name__)

# Request sections FastAPI prefixes onto error locations
_LOCATION_ROOTS = frozenset({"body", "query", "path", "header"})


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    app.add_exception_handler(CreditMartError, handle_domain_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(Exception, handle_unexpected_error)


async def handle_domain_error(request: Request, exc: CreditMartError) -> JSONResponse:
    extra = {
        "error_code": exc.code,
        "path": request.url.path,
        "user_id": exc.context.user_id,
        "order_id": exc.context.order_id,
        "product_id": exc.context.product_id,
    }
    if exc.http_status >= 500:
        logger.error(f"{exc.code}: {exc.message}", extra=extra, exc_info=exc)
    else:
        logger.warning(f"{exc.code}: {exc.message}", extra=extra)

    body = exc.to_response()
    if isinstance(exc, InputValidationError):
        body["error"]["details"] = [
            {"field": exc.field, "message": exc.message, "type": exc.code.lower()},
        ]
    return JSONResponse(status_code=exc.http_status, content=body)


async def handle_request_validation(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    details = [
        {
            "field": _field_name(e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
    logger.warning(
        f"Invalid request to {request.url.path}: "
        f"{', '.join(d['field'] for d in details)}",
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_envelope(
            "VALIDATION_ERROR", "Invalid request data",
            ErrorCategory.VALIDATION, ErrorSeverity.ERROR, details,
        ),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    """Never leaks internal details."""
    logger.error(
        f"Unhandled exception on {request.url.path}: {exc}",
        extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_envelope(
            "INTERNAL_ERROR", "An unexpected error occurred",
            ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL,
        ),
    )


def _field_name(loc) -> str:
    parts = [str(p) for p in loc]
    if len(parts) > 1 and parts[0] in _LOCATION_ROOTS:
        parts = parts[1:]
    return ".".join(parts)


def _envelope(
    code: str,
    message: str,
    category: ErrorCategory,
    severity: ErrorSeverity,
    details: list[dict] | None = None,
) -> dict:
    error = {
        "code": code,
        "message": message,
        "category": category.value,
        "severity": severity.value,
    }
    if details is not None:
        error["details"] = details
    return {"error": error}
