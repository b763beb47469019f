import os
from datetime import date

from dashboard import create_admin_user, create_app, db
from dashboard.models import Customer, Invoice

SAMPLE_CUSTOMERS = [
    ("Delba de Oliveira", "delba@oliveira.com", "/customers/delba-de-oliveira.png"),
    ("Lee Robinson", "lee@robinson.com", "/customers/lee-robinson.png"),
    ("Hector Simpson", "hector@simpson.com", "/customers/hector-simpson.png"),
]

SAMPLE_INVOICES = [
    ("delba@oliveira.com", 15795, "pending", date(2022, 12, 6)),
    ("lee@robinson.com", 20348, "pending", date(2022, 11, 14)),
    ("hector@simpson.com", 3040, "paid", date(2022, 10, 29)),
]


def seed_initial_data() -> None:
    """Seed the database with an admin user and sample invoices."""
    app = create_app([])
    with app.app_context():
        create_admin_user()
        if os.getenv("SEED_SAMPLE_DATA", "1") != "1":
            return

        customers = {}
        for name, email, image_url in SAMPLE_CUSTOMERS:
            customer = Customer.query.filter_by(email=email).first()
            if customer is None:
                customer = Customer(name=name, email=email, image_url=image_url)
                db.session.add(customer)
            customers[email] = customer
        db.session.flush()

        if Invoice.query.count() == 0:
            for email, amount, status, invoice_date in SAMPLE_INVOICES:
                db.session.add(
                    Invoice(
                        customer_id=customers[email].id,
                        amount=amount,
                        status=status,
                        date=invoice_date,
                    )
                )

        db.session.commit()
        print("Initial admin user and sample invoices created.")


if __name__ == "__main__":
    seed_initial_data()
