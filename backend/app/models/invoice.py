"""Invoice ORM: persists billing records mutated by the invoice actions.

Invariants:
    - id is a UUID4 string generated on insert; never updated
    - amount is integer cents, strictly positive (CHECK constraint)
    - status is 'paid' or 'pending' (CHECK constraint)
    - date is the ISO-8601 creation timestamp; never updated

Design Decisions:
    - String id/customer_id: identifiers are opaque to the service, portable across
      PostgreSQL and SQLite
    - BigInteger amount: cents overflow a 32-bit column above ~21M in major units
"""

import uuid

from sqlalchemy import BigInteger, CheckConstraint, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class Invoice(Base):
    """Invoice row, one billing record for one customer."""
    __tablename__ = "invoices"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_invoices_amount_positive"),
        CheckConstraint(
            "status IN ('paid', 'pending')", name="ck_invoices_status_valid",
        ),
        Index("ix_invoices_customer_id", "customer_id"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4()),
    )
    customer_id: Mapped[str] = mapped_column(String(64), nullable=False)
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    status: Mapped[str] = mapped_column(String(10), nullable=False)
    date: Mapped[str] = mapped_column(String(32), nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "customer_id": self.customer_id,
            "amount": self.amount,
            "status": self.status,
            "date": self.date,
        }
