"""Validated write workflow for invoices.

Each action validates raw form data with :class:`~dashboard.forms.InvoiceForm`,
writes through an injected :class:`~dashboard.services.invoice_store.InvoiceStore`
and returns a result describing what the caller should do next.  Actions never
redirect on their own; the routing layer turns :class:`PersistedAndRedirect`
into an HTTP redirect.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Dict, List, Mapping, Union

from flask import current_app
from werkzeug.datastructures import MultiDict

from dashboard.forms import InvoiceForm
from dashboard.services.invoice_store import InvoiceStore
from dashboard.utils.activity import log_activity
from dashboard.utils.cache import INVOICES_PATH, revalidate_path
from dashboard.utils.money import to_minor_units

CREATE_VALIDATION_MESSAGE = "Missing Fields. Failed to create invoices."
UPDATE_VALIDATION_MESSAGE = "Missing Fields. Failed to update invoice"
CREATE_DATABASE_MESSAGE = "Database Error: Failed to create invoice"
UPDATE_DATABASE_MESSAGE = "Database Error: Failed to update database"


@dataclass(frozen=True)
class PersistedAndRedirect:
    """The write succeeded; the caller should navigate to ``path``."""

    path: str

    def to_state(self) -> dict:
        return {}


@dataclass(frozen=True)
class ValidationFailed:
    """Input was rejected; ``errors`` is keyed by form field name."""

    errors: Dict[str, List[str]] = field(default_factory=dict)
    message: str = ""

    def to_state(self) -> dict:
        return {"errors": self.errors, "message": self.message}


@dataclass(frozen=True)
class PersistenceFailed:
    """The statement failed; ``message`` carries no error detail."""

    message: str

    def to_state(self) -> dict:
        return {"message": self.message}


ActionResult = Union[PersistedAndRedirect, ValidationFailed, PersistenceFailed]


def today() -> date:
    """Return the current UTC calendar day."""
    return datetime.now(timezone.utc).date()


def _build_form(formdata: Mapping) -> InvoiceForm:
    if not hasattr(formdata, "getlist"):
        formdata = MultiDict(formdata)
    # CSRFProtect guards the routes; the form only checks the invoice fields.
    return InvoiceForm(formdata=formdata, meta={"csrf": False})


def _validate(formdata: Mapping, message: str):
    form = _build_form(formdata)
    if not form.validate():
        return None, ValidationFailed(errors=form.field_errors(), message=message)
    return form, None


def create_invoice(store: InvoiceStore, formdata: Mapping) -> ActionResult:
    """Validate ``formdata`` and insert a new invoice dated today."""
    form, failure = _validate(formdata, CREATE_VALIDATION_MESSAGE)
    if failure is not None:
        return failure

    customer_id = form.customer_id.data
    amount_in_cents = to_minor_units(form.amount.data)
    status = form.status.data
    invoice_date = today()

    try:
        store.insert_invoice(customer_id, amount_in_cents, status, invoice_date)
    except Exception:
        current_app.logger.exception(
            "Failed to create invoice for customer %s", customer_id
        )
        return PersistenceFailed(CREATE_DATABASE_MESSAGE)

    current_app.logger.info(
        "Created invoice for customer %s (%s cents, %s)",
        customer_id,
        amount_in_cents,
        status,
    )
    revalidate_path(INVOICES_PATH)
    log_activity(f"Created invoice for customer {customer_id}")
    return PersistedAndRedirect(INVOICES_PATH)


def update_invoice(
    store: InvoiceStore, invoice_id: str, formdata: Mapping
) -> ActionResult:
    """Validate ``formdata`` and rewrite customer, amount and status.

    The date and identifier of the invoice are never touched.  An update
    that matches no row is reported as a success.
    """
    form, failure = _validate(formdata, UPDATE_VALIDATION_MESSAGE)
    if failure is not None:
        return failure

    amount_in_cents = to_minor_units(form.amount.data)
    try:
        matched = store.update_invoice(
            invoice_id, form.customer_id.data, amount_in_cents, form.status.data
        )
    except Exception:
        current_app.logger.exception("Failed to update invoice %s", invoice_id)
        return PersistenceFailed(UPDATE_DATABASE_MESSAGE)

    if not matched:
        current_app.logger.info("Update of invoice %s matched no rows", invoice_id)
    revalidate_path(INVOICES_PATH)
    log_activity(f"Edited invoice {invoice_id}")
    return PersistedAndRedirect(INVOICES_PATH)


def delete_invoice(store: InvoiceStore, invoice_id: str) -> int:
    """Delete an invoice by identifier.

    Store errors propagate to the caller unchanged, in which case the
    listing cache is left alone.  Returns the number of rows removed.
    """
    removed = store.delete_invoice(invoice_id)
    revalidate_path(INVOICES_PATH)
    log_activity(f"Deleted invoice {invoice_id}")
    return removed
