"""Mutation Results: what an invoice handler hands back to its caller.

Invariants:
    - MutationState is transient: built per request, never persisted
    - A handler returns exactly one of MutationState or RedirectExit
    - RedirectExit means the mutation succeeded and the view was invalidated

Design Decisions:
    - Redirect as a result variant, not an exception: handlers are testable without
      a web framework, and the HTTP layer decides how to navigate
"""

from dataclasses import dataclass

from app.core.validate_invoice_form import FieldErrors, InvalidInvoiceForm


@dataclass(frozen=True)
class MutationState:
    """Form state: field errors and/or a top-level message for re-rendering."""
    errors: FieldErrors | None = None
    message: str | None = None

    @classmethod
    def from_invalid_form(cls, result: InvalidInvoiceForm) -> "MutationState":
        return cls(errors=result.errors, message=result.message)


@dataclass(frozen=True)
class RedirectExit:
    """Successful mutation: navigate the caller to path."""
    path: str


MutationResult = MutationState | RedirectExit
