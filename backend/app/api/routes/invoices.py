"""Invoice Routes: HTTP surface for the invoice mutation handlers and listing.

Invariants:
    - Mutation routes read raw form entries; validation happens in InvoiceActions only
    - RedirectExit -> 303 See Other with Location header
    - MutationState with field errors -> 422; message-only MutationState -> 503
    - DeleteInvoiceError is not caught here: the global error handler renders it
    - Listing carries an ETag tied to the /dashboard/invoices view revision

Design Decisions:
    - Repeated form keys: last value wins, as when a form is flattened into a dict
    - Route handlers stay thin: build InvoiceActions via dependencies and translate results
"""

import logging

from fastapi import APIRouter, Depends, Query, Request, Response, status
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import INVOICES_VIEW_PATH, InvoiceId, InvoiceStatus
from app.core.errors import InvoiceNotFoundError
from app.core.mutation_state import MutationResult, MutationState, RedirectExit
from app.infrastructure.database import get_db
from app.infrastructure.invoice_repository import SqlInvoiceRepository
from app.infrastructure.view_cache import ViewCache, get_view_cache
from app.schemas.invoice import (
    InvoiceListResponse, InvoiceResponse, MutationStateResponse,
)
from app.services.invoice_actions import InvoiceActions

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/invoices", tags=["invoices"])


def get_invoice_repository(
    db: AsyncSession = Depends(get_db),
) -> SqlInvoiceRepository:
    return SqlInvoiceRepository(db)


def get_invoice_actions(
    repository: SqlInvoiceRepository = Depends(get_invoice_repository),
    view_cache: ViewCache = Depends(get_view_cache),
) -> InvoiceActions:
    return InvoiceActions(repository, view_cache)


async def read_form_entries(request: Request) -> dict[str, object]:
    """Flatten submitted form data into a field -> value mapping."""
    form = await request.form()
    return {key: value for key, value in form.multi_items()}


def to_http_response(result: MutationResult) -> Response:
    """Translate a handler result into redirect or state response."""
    if isinstance(result, RedirectExit):
        return RedirectResponse(
            url=result.path, status_code=status.HTTP_303_SEE_OTHER,
        )
    code = (
        status.HTTP_422_UNPROCESSABLE_ENTITY
        if result.errors
        else status.HTTP_503_SERVICE_UNAVAILABLE
    )
    return JSONResponse(
        status_code=code,
        content=MutationStateResponse.from_state(result).model_dump(),
    )


@router.post("")
async def create_invoice(
    request: Request,
    actions: InvoiceActions = Depends(get_invoice_actions),
):
    """Create an invoice from a submitted invoice form."""
    form = await read_form_entries(request)
    result = await actions.create_invoice(MutationState(), form)
    return to_http_response(result)


@router.post("/{invoice_id}")
async def update_invoice(
    invoice_id: str,
    request: Request,
    actions: InvoiceActions = Depends(get_invoice_actions),
):
    """Update customer, amount and status of an existing invoice."""
    form = await read_form_entries(request)
    result = await actions.update_invoice(
        InvoiceId(invoice_id), MutationState(), form,
    )
    return to_http_response(result)


@router.delete("/{invoice_id}")
async def delete_invoice(
    invoice_id: str,
    actions: InvoiceActions = Depends(get_invoice_actions),
):
    """Delete an invoice. Currently always answers with DELETE_INVOICE_FAILED."""
    await actions.delete_invoice(InvoiceId(invoice_id))


@router.get("", response_model=InvoiceListResponse)
async def list_invoices(
    request: Request,
    response: Response,
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    status_filter: InvoiceStatus | None = Query(None, alias="status"),
    repository: SqlInvoiceRepository = Depends(get_invoice_repository),
    view_cache: ViewCache = Depends(get_view_cache),
):
    """List invoices, newest first."""
    etag = view_cache.etag(INVOICES_VIEW_PATH)
    if request.headers.get("if-none-match") == etag:
        return Response(
            status_code=status.HTTP_304_NOT_MODIFIED, headers={"ETag": etag},
        )
    invoices = await repository.list_invoices(limit, offset, status_filter)
    response.headers["ETag"] = etag
    return {
        "invoices": invoices,
        "pagination": {"limit": limit, "offset": offset},
    }


@router.get("/{invoice_id}", response_model=InvoiceResponse)
async def get_invoice(
    invoice_id: str,
    repository: SqlInvoiceRepository = Depends(get_invoice_repository),
):
    """Get one invoice."""
    invoice = await repository.get_invoice(InvoiceId(invoice_id))
    if invoice is None:
        raise InvoiceNotFoundError(invoice_id, "select")
    return invoice
