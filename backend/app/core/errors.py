"""Error Hierarchy: typed, categorized exceptions for all invoice failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Form validation failures are NOT exceptions: they travel as InvalidInvoiceForm results
    - DatabaseError and its subclasses are caught by mutation handlers
    - DeleteInvoiceError is never caught by handlers
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with InvoiceAppError base: FastAPI global handler catches all
    - InvoiceNotFoundError subclasses DatabaseError: a zero-row update is a persistence failure
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    invoice_id: str | None = None
    operation: str | None = None
    debug_info: dict[str, Any] | None = None


class InvoiceAppError(Exception):
    """Base exception for all invoice service errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "invoice_id": self.context.invoice_id,
                    "operation": self.context.operation,
                },
            }
        }


# ─── Infrastructure Errors ──────────────────────────────────────

class DatabaseError(InvoiceAppError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.operation = ctx.operation or operation
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, ctx, 503,
        )
        self.operation = operation


class InvoiceNotFoundError(DatabaseError):
    """No invoice row matched the id (update, delete or lookup)."""
    def __init__(self, invoice_id: str, operation: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.invoice_id = invoice_id
        ctx.operation = ctx.operation or operation
        InvoiceAppError.__init__(
            self, f"Invoice '{invoice_id}' not found",
            "INVOICE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )
        self.operation = operation
        self.invoice_id = invoice_id


# ─── Handler Errors ─────────────────────────────────────────────

class DeleteInvoiceError(InvoiceAppError):
    """Invoice deletion is unavailable, raised on every delete request."""
    def __init__(self, invoice_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.invoice_id = invoice_id
        ctx.operation = "delete"
        super().__init__(
            "Failed to delete invoice",
            "DELETE_INVOICE_FAILED", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, ctx, 500,
        )
        self.invoice_id = invoice_id
