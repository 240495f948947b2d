"""SQL Invoice Repository: InvoiceRepository protocol over an async SQLAlchemy session.

Invariants:
    - Every value reaches the database as a bound parameter, never interpolated
    - Each mutation commits on success and rolls back on failure
    - Any SQLAlchemyError surfaces as DatabaseError; the driver message is logged, not raised
    - update/delete matching zero rows raise InvoiceNotFoundError after rollback

Design Decisions:
    - Core insert/update/delete on the invoices table over ORM unit-of-work: one statement per
      mutation, rowcount available for not-found detection
    - id default lives on the model column: the store layer owns id generation
"""

import logging

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import (
    AmountCents, CustomerId, InvoiceId, InvoiceStatus, IsoTimestamp,
)
from app.core.errors import DatabaseError, ErrorContext, InvoiceNotFoundError
from app.models.invoice import Invoice

logger = logging.getLogger(__name__)

invoices_table = Invoice.__table__


class SqlInvoiceRepository:
    """Invoice persistence backed by the `invoices` table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def insert_invoice(
        self,
        customer_id: CustomerId,
        amount_cents: AmountCents,
        status: InvoiceStatus,
        date: IsoTimestamp,
    ) -> InvoiceId:
        """Insert a new invoice row and return its generated id."""
        stmt = insert(invoices_table).values(
            customer_id=customer_id,
            amount=amount_cents,
            status=InvoiceStatus(status).value,
            date=date,
        )
        try:
            result = await self.db.execute(stmt)
            await self.db.commit()
        except SQLAlchemyError as e:
            raise await self._fail("insert", e)
        invoice_id = InvoiceId(result.inserted_primary_key[0])
        logger.info(
            "Invoice inserted",
            extra={"invoice_id": invoice_id, "operation": "insert"},
        )
        return invoice_id

    async def update_invoice(
        self,
        invoice_id: InvoiceId,
        customer_id: CustomerId,
        amount_cents: AmountCents,
        status: InvoiceStatus,
    ) -> None:
        """Overwrite customer, amount and status of one invoice. id and date untouched."""
        stmt = (
            update(invoices_table)
            .where(invoices_table.c.id == invoice_id)
            .values(
                customer_id=customer_id,
                amount=amount_cents,
                status=InvoiceStatus(status).value,
            )
        )
        try:
            result = await self.db.execute(stmt)
            if result.rowcount == 0:
                await self.db.rollback()
                raise InvoiceNotFoundError(invoice_id, "update")
            await self.db.commit()
        except SQLAlchemyError as e:
            raise await self._fail("update", e, invoice_id)
        logger.info(
            "Invoice updated",
            extra={"invoice_id": invoice_id, "operation": "update"},
        )

    async def delete_invoice(self, invoice_id: InvoiceId) -> None:
        """Delete one invoice row."""
        stmt = (
            delete(invoices_table)
            .where(invoices_table.c.id == invoice_id)
        )
        try:
            result = await self.db.execute(stmt)
            if result.rowcount == 0:
                await self.db.rollback()
                raise InvoiceNotFoundError(invoice_id, "delete")
            await self.db.commit()
        except SQLAlchemyError as e:
            raise await self._fail("delete", e, invoice_id)
        logger.info(
            "Invoice deleted",
            extra={"invoice_id": invoice_id, "operation": "delete"},
        )

    async def get_invoice(self, invoice_id: InvoiceId) -> dict | None:
        try:
            invoice = await self.db.get(
                Invoice, invoice_id, populate_existing=True,
            )
        except SQLAlchemyError as e:
            raise await self._fail("select", e, invoice_id)
        return invoice.to_dict() if invoice else None

    async def list_invoices(
        self, limit: int, offset: int, status: InvoiceStatus | None = None,
    ) -> list[dict]:
        """Newest invoices first, optionally filtered by status."""
        query = select(Invoice).order_by(Invoice.date.desc(), Invoice.id)
        if status is not None:
            query = query.where(Invoice.status == InvoiceStatus(status).value)
        query = query.limit(limit).offset(offset)
        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            raise await self._fail("select", e)
        return [invoice.to_dict() for invoice in result.scalars().all()]

    async def _fail(
        self, operation: str, error: SQLAlchemyError, invoice_id: str | None = None,
    ) -> DatabaseError:
        """Roll back, log the driver error, and build the DatabaseError to raise."""
        await self.db.rollback()
        logger.error(
            f"DB {operation} on invoices failed: {error}",
            extra={"invoice_id": invoice_id, "operation": operation},
        )
        reason = (
            "Integrity constraint violated"
            if isinstance(error, IntegrityError)
            else "Database operation failed"
        )
        return DatabaseError(
            reason, operation, ErrorContext(invoice_id=invoice_id),
        )
