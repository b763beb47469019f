"""Request-scoped persistence handle for invoice rows."""

from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy import String, cast, delete, insert, or_, select, update
from sqlalchemy.orm import Session

from dashboard.models import Customer, Invoice


class InvoiceStore:
    """Issue one parameterised statement per mutation against ``session``.

    The hosting request owns the session; the store only commits or rolls
    back the work it started.  Any statement error is re-raised after the
    rollback so callers decide whether to recover.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    # ------------------------------------------------------------------
    def _execute(self, statement):
        try:
            result = self.session.execute(statement)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        return result

    # ------------------------------------------------------------------
    def insert_invoice(
        self, customer_id: str, amount: int, status: str, invoice_date: date
    ) -> None:
        self._execute(
            insert(Invoice).values(
                customer_id=customer_id,
                amount=amount,
                status=status,
                date=invoice_date,
            )
        )

    def update_invoice(
        self, invoice_id: str, customer_id: str, amount: int, status: str
    ) -> int:
        """Rewrite the mutable columns of one invoice; return rows matched."""
        result = self._execute(
            update(Invoice)
            .where(Invoice.id == invoice_id)
            .values(customer_id=customer_id, amount=amount, status=status)
        )
        return result.rowcount

    def delete_invoice(self, invoice_id: str) -> int:
        result = self._execute(delete(Invoice).where(Invoice.id == invoice_id))
        return result.rowcount

    # ------------------------------------------------------------------
    def get_invoice(self, invoice_id: str) -> Optional[Invoice]:
        return self.session.get(Invoice, invoice_id)

    def search_invoices(self, query: str = ""):
        """Return a select of invoices joined to customers, newest first."""
        statement = select(Invoice).join(Customer)
        if query:
            pattern = f"%{query}%"
            statement = statement.where(
                or_(
                    Customer.name.ilike(pattern),
                    Customer.email.ilike(pattern),
                    Invoice.status.ilike(pattern),
                    cast(Invoice.amount, String).ilike(pattern),
                    cast(Invoice.date, String).ilike(pattern),
                )
            )
        return statement.order_by(Invoice.date.desc(), Invoice.id)
