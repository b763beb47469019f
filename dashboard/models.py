import uuid
from datetime import datetime

from flask_login import UserMixin
from sqlalchemy.orm import relationship

from dashboard import db

INVOICE_STATUSES = ("paid", "pending")


def _new_id() -> str:
    return str(uuid.uuid4())


class User(UserMixin, db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False, default="")
    email = db.Column(db.String(120), unique=True, nullable=False)
    password = db.Column(db.String(255), nullable=False)
    active = db.Column(db.Boolean, default=False, nullable=False)


class Customer(db.Model):
    __tablename__ = "customers"

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), nullable=False)
    image_url = db.Column(db.String(255), nullable=False, default="")

    invoices = db.relationship("Invoice", backref="customer", lazy=True)


class Invoice(db.Model):
    __tablename__ = "invoices"

    # Assigned by storage; never read from form input.
    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    customer_id = db.Column(
        db.String(36), db.ForeignKey("customers.id"), nullable=False, index=True
    )
    # Stored in cents.
    amount = db.Column(db.Integer, nullable=False)
    status = db.Column(db.String(20), nullable=False)
    date = db.Column(db.Date, nullable=False, index=True)

    __table_args__ = (
        db.CheckConstraint(
            "status IN ('paid', 'pending')", name="ck_invoices_status"
        ),
        db.CheckConstraint("amount > 0", name="ck_invoices_amount_positive"),
    )

    def to_dict(self):
        """Serialise the invoice for JSON responses."""
        from dashboard.utils.money import format_currency

        data = {
            "id": self.id,
            "customer_id": self.customer_id,
            "amount": self.amount,
            "amount_display": format_currency(self.amount),
            "status": self.status,
            "date": self.date.isoformat(),
        }
        if self.customer is not None:
            data["name"] = self.customer.name
            data["email"] = self.customer.email
            data["image_url"] = self.customer.image_url
        return data


class ActivityLog(db.Model):
    __tablename__ = "activity_log"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)
    activity = db.Column(db.String(255), nullable=False)
    timestamp = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("User", backref="activity_logs")
