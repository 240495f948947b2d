"""Invoice Schemas: Pydantic response models for the invoice routes.

Invariants:
    - Form submissions are NOT parsed by Pydantic: raw entries go to validate_invoice_form
      so field messages match the invoice form exactly
    - MutationStateResponse mirrors core MutationState one-to-one

Design Decisions:
    - Literal status over str: response contract documents the two valid states
"""

from typing import Literal

from pydantic import BaseModel

from app.core.mutation_state import MutationState


class MutationStateResponse(BaseModel):
    """Form state returned when a mutation does not redirect."""
    errors: dict[str, list[str]] | None = None
    message: str | None = None

    @classmethod
    def from_state(cls, state: MutationState) -> "MutationStateResponse":
        return cls(errors=state.errors, message=state.message)


class InvoiceResponse(BaseModel):
    """Invoice response, amount in cents, date as stored."""
    id: str
    customer_id: str
    amount: int
    status: Literal["paid", "pending"]
    date: str


class InvoiceListResponse(BaseModel):
    invoices: list[InvoiceResponse]
    pagination: dict[str, int]
