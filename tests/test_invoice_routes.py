from datetime import date

from dashboard import db
from dashboard.models import ActivityLog, Invoice
from dashboard.services.invoice_actions import today
from tests.utils import login_admin


def test_invoice_pages_require_login(client, existing_invoice):
    assert client.get("/dashboard/invoices").status_code == 401
    resp = client.post(
        "/dashboard/invoices/create",
        data={"customerId": "c1", "amount": "1", "status": "paid"},
    )
    assert resp.status_code == 401
    assert client.post(f"/dashboard/invoices/{existing_invoice}/delete").status_code == 401


def test_create_invoice_redirects_to_listing(client, app, customers):
    with client:
        login_admin(client)
        resp = client.post(
            "/dashboard/invoices/create",
            data={"customerId": "c1", "amount": "250.00", "status": "pending"},
        )
        assert resp.status_code == 302
        assert resp.headers["Location"].endswith("/dashboard/invoices")

    with app.app_context():
        invoice = Invoice.query.filter_by(customer_id="c1").one()
        assert invoice.amount == 25000
        assert invoice.status == "pending"
        assert invoice.date == today()
        assert ActivityLog.query.filter(
            ActivityLog.activity.like("Created invoice%")
        ).count() == 1


def test_create_invoice_validation_errors(client, app, customers):
    with client:
        login_admin(client)
        resp = client.post(
            "/dashboard/invoices/create",
            data={"customerId": "c1", "amount": "0", "status": "pending"},
        )
    assert resp.status_code == 400
    assert resp.get_json() == {
        "errors": {"amount": ["Please enter an amount greater than $0."]},
        "message": "Missing Fields. Failed to create invoices.",
    }
    with app.app_context():
        assert Invoice.query.count() == 0


def test_create_invoice_database_error(client, app, customers):
    with client:
        login_admin(client)
        resp = client.post(
            "/dashboard/invoices/create",
            data={"customerId": "nobody", "amount": "5", "status": "paid"},
        )
    assert resp.status_code == 500
    assert resp.get_json() == {"message": "Database Error: Failed to create invoice"}


def test_edit_invoice(client, app, customers, existing_invoice):
    with client:
        login_admin(client)
        resp = client.post(
            f"/dashboard/invoices/{existing_invoice}/edit",
            data={"customerId": "c2", "amount": "99.50", "status": "paid"},
        )
        assert resp.status_code == 302
        assert resp.headers["Location"].endswith("/dashboard/invoices")

    with app.app_context():
        invoice = db.session.get(Invoice, existing_invoice)
        assert invoice.customer_id == "c2"
        assert invoice.amount == 9950
        assert invoice.status == "paid"
        assert invoice.date == date(2023, 1, 15)


def test_edit_invoice_validation_errors(client, existing_invoice):
    with client:
        login_admin(client)
        resp = client.post(
            f"/dashboard/invoices/{existing_invoice}/edit",
            data={"customerId": "", "amount": "12", "status": "late"},
        )
    assert resp.status_code == 400
    assert resp.get_json() == {
        "errors": {
            "customerId": ["Please select a customer"],
            "status": ["Please select an invoice status"],
        },
        "message": "Missing Fields. Failed to update invoice",
    }


def test_delete_invoice(client, app, existing_invoice):
    with client:
        login_admin(client)
        resp = client.post(f"/dashboard/invoices/{existing_invoice}/delete")
        assert resp.status_code == 302
        # Deleting again affects nothing and is not an error.
        resp = client.post(f"/dashboard/invoices/{existing_invoice}/delete")
        assert resp.status_code == 302
    with app.app_context():
        assert db.session.get(Invoice, existing_invoice) is None


def test_listing_is_cached_until_a_mutation(client, app, customers, existing_invoice):
    with client:
        login_admin(client)
        first = client.get("/dashboard/invoices").get_json()
        assert [inv["id"] for inv in first["invoices"]] == [existing_invoice]
        assert first["invoices"][0]["name"] == "Evil Rabbit"
        assert first["invoices"][0]["amount_display"] == "$10.00"

        # A write that bypasses the actions leaves the cached view stale.
        with app.app_context():
            db.session.add(
                Invoice(
                    id="inv-direct",
                    customer_id="c2",
                    amount=500,
                    status="paid",
                    date=date(2022, 6, 1),
                )
            )
            db.session.commit()
        stale = client.get("/dashboard/invoices").get_json()
        assert stale == first

        client.post(
            "/dashboard/invoices/create",
            data={"customerId": "c2", "amount": "1", "status": "paid"},
        )
        fresh = client.get("/dashboard/invoices").get_json()
        assert fresh["total"] == 3
        assert "inv-direct" in {inv["id"] for inv in fresh["invoices"]}


def test_listing_search_and_pagination(client, app, customers):
    with app.app_context():
        for day in range(1, 9):
            db.session.add(
                Invoice(
                    id=f"inv-{day}",
                    customer_id="c1" if day % 2 else "c2",
                    amount=day * 100,
                    status="paid" if day % 2 else "pending",
                    date=date(2024, 1, day),
                )
            )
        db.session.commit()

    with client:
        login_admin(client)
        page_one = client.get("/dashboard/invoices?page=1").get_json()
        assert page_one["total"] == 8
        assert page_one["pages"] == 2
        assert [inv["id"] for inv in page_one["invoices"]][:2] == ["inv-8", "inv-7"]

        page_two = client.get("/dashboard/invoices?page=2").get_json()
        assert len(page_two["invoices"]) == 2

        delba = client.get("/dashboard/invoices?query=delba").get_json()
        assert {inv["customer_id"] for inv in delba["invoices"]} == {"c2"}
        assert delba["total"] == 4


def test_view_single_invoice(client, existing_invoice):
    with client:
        login_admin(client)
        resp = client.get(f"/dashboard/invoices/{existing_invoice}")
        assert resp.status_code == 200
        assert resp.get_json()["invoice"]["date"] == "2023-01-15"
        assert client.get("/dashboard/invoices/missing").status_code == 404


def test_security_headers_present(client):
    resp = client.get("/dashboard/invoices")
    assert resp.headers["X-Content-Type-Options"] == "nosniff"
    assert "Content-Security-Policy" in resp.headers
    assert client.options("/dashboard/invoices").status_code == 405
