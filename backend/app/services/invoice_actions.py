"""Invoice Actions: create, update and delete mutation handlers.

Invariants:
    - Invalid forms return MutationState(errors, message) and never reach the repository
    - DatabaseError from the repository becomes a generic MutationState message;
      the cause is logged, never returned, never retried
    - Success invalidates /dashboard/invoices, then returns RedirectExit to it
    - delete_invoice raises DeleteInvoiceError on every call, before any side effect
    - Exactly one repository call per successful create/update

Design Decisions:
    - Handlers take (prev_state, form) so any form framework can call them unchanged;
      prev_state only fixes the return shape
    - Repository, invalidator and clock injected: handlers run without a web app or DB
"""

import logging
from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from typing import NoReturn

from app.core.domain_types import (
    FormVariant, INVOICES_VIEW_PATH, InvoiceId, IsoTimestamp,
)
from app.core.errors import DatabaseError, DeleteInvoiceError
from app.core.money import to_cents
from app.core.mutation_state import MutationResult, MutationState, RedirectExit
from app.core.repository_protocols import InvoiceRepository, ViewInvalidator
from app.core.validate_invoice_form import (
    InvalidInvoiceForm, validate_invoice_form,
)

logger = logging.getLogger(__name__)

CREATE_FAILED_MESSAGE = "Database error: failed to create invoice."
UPDATE_FAILED_MESSAGE = "Database error: failed to update invoice."


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> IsoTimestamp:
    """ISO-8601 in UTC with millisecond precision and a Z suffix."""
    utc = moment.astimezone(timezone.utc)
    return IsoTimestamp(
        utc.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
    )


class InvoiceActions:
    """Mutation handlers for the invoices view."""

    def __init__(
        self,
        repository: InvoiceRepository,
        invalidator: ViewInvalidator,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.repository = repository
        self.invalidator = invalidator
        self.clock = clock

    async def create_invoice(
        self, prev_state: MutationState, form: Mapping[str, object],
    ) -> MutationResult:
        """Validate the form, insert a new invoice stamped with the current time."""
        result = validate_invoice_form(form, FormVariant.CREATE)
        if isinstance(result, InvalidInvoiceForm):
            return self._rejected(result, FormVariant.CREATE)

        amount_cents = to_cents(result.amount)
        date = format_timestamp(self.clock())
        try:
            invoice_id = await self.repository.insert_invoice(
                result.customer_id, amount_cents, result.status, date,
            )
        except DatabaseError as e:
            logger.error(
                f"Failed to create invoice: {e.message}",
                extra={"error_code": e.code, "operation": "create"},
            )
            return MutationState(message=CREATE_FAILED_MESSAGE)

        logger.info(
            "Invoice created",
            extra={"invoice_id": invoice_id, "operation": "create"},
        )
        return self._refresh_invoices()

    async def update_invoice(
        self,
        invoice_id: InvoiceId,
        prev_state: MutationState,
        form: Mapping[str, object],
    ) -> MutationResult:
        """Validate the form, overwrite customer, amount and status of invoice_id."""
        result = validate_invoice_form(form, FormVariant.UPDATE)
        if isinstance(result, InvalidInvoiceForm):
            return self._rejected(result, FormVariant.UPDATE, invoice_id)

        amount_cents = to_cents(result.amount)
        try:
            await self.repository.update_invoice(
                invoice_id, result.customer_id, amount_cents, result.status,
            )
        except DatabaseError as e:
            logger.error(
                f"Failed to update invoice: {e.message}",
                extra={
                    "invoice_id": invoice_id,
                    "error_code": e.code,
                    "operation": "update",
                },
            )
            return MutationState(message=UPDATE_FAILED_MESSAGE)

        logger.info(
            "Invoice updated",
            extra={"invoice_id": invoice_id, "operation": "update"},
        )
        return self._refresh_invoices()

    async def delete_invoice(self, invoice_id: InvoiceId) -> NoReturn:
        """Always raises DeleteInvoiceError; the repository is never called.

        Deleting is currently disabled at this layer. SqlInvoiceRepository.delete_invoice
        is implemented and tested, so enabling deletion means replacing the raise with
        a repository call followed by _refresh_invoices().
        """
        logger.error(
            "Invoice deletion requested but deletion is disabled",
            extra={"invoice_id": invoice_id, "operation": "delete"},
        )
        raise DeleteInvoiceError(invoice_id)

    def _rejected(
        self,
        result: InvalidInvoiceForm,
        variant: FormVariant,
        invoice_id: InvoiceId | None = None,
    ) -> MutationState:
        logger.info(
            f"Invoice form rejected: {sorted(result.errors)}",
            extra={"invoice_id": invoice_id, "variant": variant.value},
        )
        return MutationState.from_invalid_form(result)

    def _refresh_invoices(self) -> RedirectExit:
        self.invalidator.invalidate(INVOICES_VIEW_PATH)
        return RedirectExit(INVOICES_VIEW_PATH)
