from flask import Blueprint, abort, redirect, request
from flask_login import login_required

from dashboard import cache, db
from dashboard.services.invoice_actions import (
    PersistedAndRedirect,
    PersistenceFailed,
    create_invoice,
    delete_invoice,
    update_invoice,
)
from dashboard.services.invoice_store import InvoiceStore
from dashboard.utils.cache import INVOICES_PATH, view_cache_key

invoice = Blueprint("invoice", __name__)

ITEMS_PER_PAGE = 6


def _store() -> InvoiceStore:
    return InvoiceStore(db.session)


def _respond(result):
    """Turn a workflow result into an HTTP response."""
    if isinstance(result, PersistedAndRedirect):
        return redirect(result.path)
    status = 500 if isinstance(result, PersistenceFailed) else 400
    return result.to_state(), status


@invoice.route(INVOICES_PATH)
@login_required
@cache.cached(
    key_prefix=view_cache_key(INVOICES_PATH),
    unless=lambda: bool(request.query_string),
)
def view_invoices():
    """List invoices, newest first, with optional search and paging."""
    query = request.args.get("query", "").strip()
    page = request.args.get("page", 1, type=int)
    pagination = db.paginate(
        _store().search_invoices(query),
        page=page,
        per_page=ITEMS_PER_PAGE,
        error_out=False,
    )
    return {
        "invoices": [inv.to_dict() for inv in pagination.items],
        "page": pagination.page,
        "pages": pagination.pages,
        "total": pagination.total,
        "query": query,
    }


@invoice.route(f"{INVOICES_PATH}/<invoice_id>")
@login_required
def view_invoice(invoice_id):
    """Return a single invoice."""
    inv = _store().get_invoice(invoice_id)
    if inv is None:
        abort(404)
    return {"invoice": inv.to_dict()}


@invoice.route(f"{INVOICES_PATH}/create", methods=["POST"])
@login_required
def create_invoice_view():
    """Create an invoice from the submitted form."""
    return _respond(create_invoice(_store(), request.form))


@invoice.route(f"{INVOICES_PATH}/<invoice_id>/edit", methods=["POST"])
@login_required
def edit_invoice_view(invoice_id):
    """Update an invoice from the submitted form."""
    return _respond(update_invoice(_store(), invoice_id, request.form))


@invoice.route(f"{INVOICES_PATH}/<invoice_id>/delete", methods=["POST"])
@login_required
def delete_invoice_view(invoice_id):
    """Delete an invoice; storage errors surface as a server error."""
    delete_invoice(_store(), invoice_id)
    return redirect(INVOICES_PATH)
