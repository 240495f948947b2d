"""Error Handlers: exceptions that escape an invoice route, rendered as JSON.

Invariants:
    - InvoiceAppError -> its own http_status and to_response() envelope
    - Log records carry error_code, path, invoice_id and operation from ErrorContext
    - RequestValidationError -> 400 VALIDATION_ERROR with a field -> messages map,
      the same shape the invoice form uses for its own field errors
    - Anything else -> 500 INTERNAL_ERROR, exception text never sent to the client

Design Decisions:
    - Form-level validation does NOT come through here: handlers return it as
      MutationState. Only query/path parameter errors reach the 400 handler
    - Log level follows ErrorSeverity so a missing invoice is not paged as critical
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from app.core.errors import ErrorCategory, ErrorSeverity, InvoiceAppError

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
    ErrorSeverity.INFO: logging.INFO,
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.WARNING,
    ErrorSeverity.CRITICAL: logging.ERROR,
}

# Request locations FastAPI prefixes to loc; the field name is what follows.
_LOCATIONS = {"query", "path", "body", "header", "cookie"}


def register_error_handlers(app: FastAPI) -> None:
    """Attach the invoice, request-validation and catch-all handlers."""
    app.add_exception_handler(InvoiceAppError, handle_invoice_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)


async def handle_invoice_error(request: Request, exc: InvoiceAppError) -> JSONResponse:
    logger.log(
        _LOG_LEVELS[exc.severity],
        f"{exc.code} on {request.method} {request.url.path}: {exc.message}",
        extra={
            "error_code": exc.code,
            "path": request.url.path,
            "invoice_id": exc.context.invoice_id,
            "operation": exc.context.operation,
        },
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    fields = request_field_errors(exc.errors())
    logger.warning(
        f"Rejected parameters on {request.url.path}: {sorted(fields)}",
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Invalid request parameters",
                "category": ErrorCategory.VALIDATION.value,
                "severity": ErrorSeverity.ERROR.value,
                "errors": fields,
            },
        },
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled {type(exc).__name__} on {request.method} {request.url.path}",
        exc_info=exc,
        extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
                "category": ErrorCategory.INTERNAL.value,
                "severity": ErrorSeverity.CRITICAL.value,
            },
        },
    )


def request_field_errors(errors) -> dict[str, list[str]]:
    """Group pydantic error entries by parameter name, dropping the location prefix."""
    fields: dict[str, list[str]] = {}
    for error in errors:
        loc = [str(part) for part in error["loc"]]
        if len(loc) > 1 and loc[0] in _LOCATIONS:
            loc = loc[1:]
        fields.setdefault(".".join(loc), []).append(error["msg"])
    return fields
