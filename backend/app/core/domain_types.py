"""Domain Types: rich types that replace bare primitives across the codebase.

Invariants:
    - InvoiceId, CustomerId wrap opaque strings, never parsed or generated in core
    - AmountCents is always a positive integer (minor units)
    - Valid invoice statuses encoded as an Enum, no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and bind to SQL parameters without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

InvoiceId = NewType("InvoiceId", str)
CustomerId = NewType("CustomerId", str)


# ─── Value Types ─────────────────────────────────────────────────

AmountCents = NewType("AmountCents", int)   # > 0
IsoTimestamp = NewType("IsoTimestamp", str)  # e.g. 2026-10-16T09:30:00.000Z


# ─── Enums ───────────────────────────────────────────────────────

class InvoiceStatus(str, Enum):
    """Invoice payment states, maps to DB `status` column."""
    PAID = "paid"
    PENDING = "pending"


class FormVariant(str, Enum):
    """Which mutation a submitted invoice form belongs to."""
    CREATE = "create"
    UPDATE = "update"


class InvoiceField(str, Enum):
    """Form field names as submitted by the invoice form."""
    CUSTOMER_ID = "customerId"
    AMOUNT = "amount"
    STATUS = "status"


# ─── Paths ───────────────────────────────────────────────────────

INVOICES_VIEW_PATH = "/dashboard/invoices"
