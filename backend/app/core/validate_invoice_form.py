"""Invoice Form Validation: explicit field checks over raw form entries.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Field checkers return an error message on violation, None on success
    - validate_invoice_form runs every checker, all field errors are reported, none masked
    - A failing form never yields a partial payload

Design Decisions:
    - Plain functions over a declarative schema: each rule is visible and testable alone
    - Tagged result (ValidInvoiceForm | InvalidInvoiceForm) over exceptions: the handler
      hands field errors straight back to the form, keeping error path identical to success path
    - CREATE and UPDATE share the same rules; the update id never travels in the form
"""

from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal

from app.core.domain_types import (
    CustomerId, FormVariant, InvoiceField, InvoiceStatus,
)
from app.core.money import in_storable_range, parse_amount, to_cents

CUSTOMER_REQUIRED_MESSAGE = "Please select a customer."
AMOUNT_INVALID_MESSAGE = "Please enter an amount greater than $0."
STATUS_REQUIRED_MESSAGE = "Please select a status."
FORM_INVALID_MESSAGE = "Missing fields or invalid values."

FieldErrors = dict[str, list[str]]


@dataclass(frozen=True)
class ValidInvoiceForm:
    """Typed payload of a form that passed every field check."""
    customer_id: CustomerId
    amount: Decimal
    status: InvoiceStatus


@dataclass(frozen=True)
class InvalidInvoiceForm:
    """Field-error mapping plus the top-level form message."""
    errors: FieldErrors
    message: str = FORM_INVALID_MESSAGE


ValidationResult = ValidInvoiceForm | InvalidInvoiceForm


def check_customer_id(raw: object) -> str | None:
    """customerId must be a non-blank string."""
    if not isinstance(raw, str) or not raw.strip():
        return CUSTOMER_REQUIRED_MESSAGE
    return None


def check_amount(raw: object) -> str | None:
    """amount must coerce to a number worth at least one cent and fit storage."""
    amount = parse_amount(raw)
    if amount is None or not in_storable_range(amount) or to_cents(amount) <= 0:
        return AMOUNT_INVALID_MESSAGE
    return None


def check_status(raw: object) -> str | None:
    """status must be exactly one of the InvoiceStatus values."""
    if not isinstance(raw, str) or raw not in {s.value for s in InvoiceStatus}:
        return STATUS_REQUIRED_MESSAGE
    return None


_CHECKS = (
    (InvoiceField.CUSTOMER_ID, check_customer_id),
    (InvoiceField.AMOUNT, check_amount),
    (InvoiceField.STATUS, check_status),
)


def collect_field_errors(form: Mapping[str, object]) -> FieldErrors:
    """Run every field check; map failing field names to their messages."""
    errors: FieldErrors = {}
    for field, check in _CHECKS:
        message = check(form.get(field.value))
        if message is not None:
            errors.setdefault(field.value, []).append(message)
    return errors


def validate_invoice_form(
    form: Mapping[str, object],
    variant: FormVariant = FormVariant.CREATE,
) -> ValidationResult:
    """Validate raw invoice form entries for a create or update mutation.

    Both variants accept the same fields; unknown keys (id, date, framework
    hidden inputs) are ignored.
    """
    errors = collect_field_errors(form)
    if errors:
        return InvalidInvoiceForm(errors=errors)

    amount = parse_amount(form[InvoiceField.AMOUNT.value])
    return ValidInvoiceForm(
        customer_id=CustomerId(form[InvoiceField.CUSTOMER_ID.value].strip()),
        amount=amount,
        status=InvoiceStatus(form[InvoiceField.STATUS.value]),
    )
