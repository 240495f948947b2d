"""Invoice Actions: handler orchestration against recording fakes.

Invariants:
    - Invalid forms never reach the repository and never invalidate
    - Valid create: exact cents, fresh ISO date, invalidate then redirect
    - Valid update: exactly id + three mutable fields reach the repository
    - DatabaseError (including not-found) becomes the generic message, no redirect
    - delete_invoice raises on every call and never touches the repository

Design Decisions:
    - Clock injected as a lambda: the generated date is asserted exactly
"""

from datetime import datetime, timedelta, timezone

import pytest

from app.core.domain_types import InvoiceStatus
from app.core.errors import DeleteInvoiceError, InvoiceNotFoundError
from app.core.mutation_state import MutationState, RedirectExit
from app.services.invoice_actions import (
    CREATE_FAILED_MESSAGE,
    UPDATE_FAILED_MESSAGE,
    InvoiceActions,
    format_timestamp,
)

FIXED_NOW = datetime(2026, 10, 16, 9, 30, 0, 123456, tzinfo=timezone.utc)
VALID_FORM = {"customerId": "c1", "amount": "15.50", "status": "pending"}


@pytest.fixture
def actions(fake_repository, invalidator):
    return InvoiceActions(fake_repository, invalidator, clock=lambda: FIXED_NOW)


# ─── format_timestamp ────────────────────────────────────────────

def test_format_timestamp_uses_millisecond_utc_with_z():
    assert format_timestamp(FIXED_NOW) == "2026-10-16T09:30:00.123Z"


def test_format_timestamp_converts_offsets_to_utc():
    local = datetime(2026, 10, 16, 12, 0, tzinfo=timezone(timedelta(hours=3)))
    assert format_timestamp(local) == "2026-10-16T09:00:00.000Z"


# ─── create_invoice ──────────────────────────────────────────────

async def test_create_inserts_cents_and_fresh_date(actions, fake_repository):
    await actions.create_invoice(MutationState(), VALID_FORM)
    assert fake_repository.calls == [
        ("insert_invoice", "c1", 1550, InvoiceStatus.PENDING, "2026-10-16T09:30:00.123Z"),
    ]


async def test_create_invalidates_then_redirects(actions, invalidator):
    result = await actions.create_invoice(MutationState(), VALID_FORM)
    assert result == RedirectExit("/dashboard/invoices")
    assert invalidator.paths == ["/dashboard/invoices"]


@pytest.mark.parametrize("missing", ["customerId", "amount", "status"])
async def test_create_with_missing_field_skips_persistence(
    actions, fake_repository, invalidator, missing,
):
    form = {k: v for k, v in VALID_FORM.items() if k != missing}
    result = await actions.create_invoice(MutationState(), form)
    assert isinstance(result, MutationState)
    assert list(result.errors) == [missing]
    assert result.message == "Missing fields or invalid values."
    assert fake_repository.calls == []
    assert invalidator.paths == []


async def test_create_reports_amount_and_status_together(actions, fake_repository):
    result = await actions.create_invoice(
        MutationState(), {"customerId": "c1", "amount": "-3", "status": "x"},
    )
    assert result.errors == {
        "amount": ["Please enter an amount greater than $0."],
        "status": ["Please select a status."],
    }
    assert fake_repository.calls == []


async def test_create_database_failure_returns_generic_message(
    actions, fake_repository, invalidator, db_failure,
):
    fake_repository.raise_on["insert"] = db_failure
    result = await actions.create_invoice(MutationState(), VALID_FORM)
    assert result == MutationState(message=CREATE_FAILED_MESSAGE)
    assert invalidator.paths == []
    assert len(fake_repository.calls) == 1


async def test_create_ignores_prev_state(actions):
    prev = MutationState(errors={"amount": ["old"]}, message="old")
    result = await actions.create_invoice(prev, VALID_FORM)
    assert isinstance(result, RedirectExit)


async def test_create_does_not_catch_unexpected_errors(actions, fake_repository):
    fake_repository.raise_on["insert"] = RuntimeError("boom")
    with pytest.raises(RuntimeError):
        await actions.create_invoice(MutationState(), VALID_FORM)


# ─── update_invoice ──────────────────────────────────────────────

async def test_update_passes_only_mutable_fields(actions, fake_repository):
    form = {**VALID_FORM, "status": "paid", "id": "other", "date": "1999-01-01"}
    await actions.update_invoice("inv-1", MutationState(), form)
    assert fake_repository.calls == [
        ("update_invoice", "inv-1", "c1", 1550, InvoiceStatus.PAID),
    ]


async def test_update_invalidates_then_redirects(actions, invalidator):
    result = await actions.update_invoice("inv-1", MutationState(), VALID_FORM)
    assert result == RedirectExit("/dashboard/invoices")
    assert invalidator.paths == ["/dashboard/invoices"]


async def test_update_invalid_form_skips_persistence(actions, fake_repository):
    result = await actions.update_invoice(
        "inv-1", MutationState(), {"customerId": "", "amount": "0"},
    )
    assert set(result.errors) == {"customerId", "amount", "status"}
    assert fake_repository.calls == []


async def test_update_not_found_surfaces_as_database_error(
    actions, fake_repository, invalidator,
):
    fake_repository.raise_on["update"] = InvoiceNotFoundError("missing", "update")
    result = await actions.update_invoice("missing", MutationState(), VALID_FORM)
    assert result == MutationState(message=UPDATE_FAILED_MESSAGE)
    assert invalidator.paths == []


async def test_update_database_failure_returns_generic_message(
    actions, fake_repository, db_failure,
):
    fake_repository.raise_on["update"] = db_failure
    result = await actions.update_invoice("inv-1", MutationState(), VALID_FORM)
    assert result.message == UPDATE_FAILED_MESSAGE
    assert result.errors is None


async def test_repeated_update_calls_repository_twice(actions, fake_repository):
    first = await actions.update_invoice("inv-1", MutationState(), VALID_FORM)
    second = await actions.update_invoice("inv-1", MutationState(), VALID_FORM)
    assert first == second == RedirectExit("/dashboard/invoices")
    assert len(fake_repository.calls) == 2
    assert fake_repository.calls[0] == fake_repository.calls[1]


# ─── delete_invoice ──────────────────────────────────────────────

@pytest.mark.parametrize("invoice_id", ["inv-1", "", "does-not-exist"])
async def test_delete_always_raises_without_side_effects(
    actions, fake_repository, invalidator, invoice_id,
):
    # Deletion is disabled at the handler level; this pins the current behaviour.
    with pytest.raises(DeleteInvoiceError, match="Failed to delete invoice"):
        await actions.delete_invoice(invoice_id)
    assert fake_repository.calls == []
    assert invalidator.paths == []
