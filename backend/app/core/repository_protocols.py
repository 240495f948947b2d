"""Boundary Protocols: contracts between core and shell.

Invariants:
    - Core NEVER imports from shell, dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection
    - InvoiceRepository signals failure by raising DatabaseError (core/errors.py);
      zero matched rows on update/delete raise InvoiceNotFoundError

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Async repository: every method does IO. ViewInvalidator is sync, fire-and-forget
"""

from typing import Protocol

from app.core.domain_types import (
    AmountCents, CustomerId, InvoiceId, InvoiceStatus, IsoTimestamp,
)


class InvoiceRepository(Protocol):
    """Contract for invoice persistence, implemented by shell."""
    async def insert_invoice(
        self,
        customer_id: CustomerId,
        amount_cents: AmountCents,
        status: InvoiceStatus,
        date: IsoTimestamp,
    ) -> InvoiceId: ...
    async def update_invoice(
        self,
        invoice_id: InvoiceId,
        customer_id: CustomerId,
        amount_cents: AmountCents,
        status: InvoiceStatus,
    ) -> None: ...
    async def delete_invoice(self, invoice_id: InvoiceId) -> None: ...
    async def get_invoice(self, invoice_id: InvoiceId) -> dict | None: ...
    async def list_invoices(
        self, limit: int, offset: int, status: InvoiceStatus | None = None,
    ) -> list[dict]: ...


class ViewInvalidator(Protocol):
    """Contract for marking cached view data stale, implemented by shell."""
    def invalidate(self, path: str) -> None: ...
