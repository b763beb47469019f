from decimal import InvalidOperation

from flask_wtf import FlaskForm
from wtforms import DecimalField, PasswordField, StringField
from wtforms.validators import (
    AnyOf,
    DataRequired,
    Email,
    Length,
    ValidationError,
)

from dashboard.models import INVOICE_STATUSES
from dashboard.utils.money import parse_amount, to_minor_units

CUSTOMER_REQUIRED_MESSAGE = "Please select a customer"
AMOUNT_MESSAGE = "Please enter an amount greater than $0."
STATUS_MESSAGE = "Please select an invoice status"


class AmountField(DecimalField):
    """Decimal field that coerces formatted money and never raises on parse.

    Unparseable input leaves ``data`` as ``None`` so the range validator can
    report the single user-facing amount message instead of WTForms'
    generic "Not a valid decimal value".
    """

    def process_formdata(self, valuelist):
        if valuelist:
            self.data = parse_amount(valuelist[0])


class PositiveAmount:
    """Require an amount that is worth at least one cent."""

    def __init__(self, message=None):
        self.message = message

    def __call__(self, form, field):
        if field.data is None or field.data <= 0:
            raise ValidationError(self.message)
        try:
            cents = to_minor_units(field.data)
        except InvalidOperation:
            # Too many digits to express in whole cents.
            raise ValidationError(self.message) from None
        if cents < 1:
            raise ValidationError(self.message)


class InvoiceForm(FlaskForm):
    """Fields accepted when creating or editing an invoice.

    The HTML names match the dashboard's form inputs (``customerId``,
    ``amount`` and ``status``).  Identifier and date are deliberately absent.
    """

    customer_id = StringField(
        "Customer",
        name="customerId",
        validators=[DataRequired(message=CUSTOMER_REQUIRED_MESSAGE)],
    )
    amount = AmountField(
        "Amount", validators=[PositiveAmount(message=AMOUNT_MESSAGE)]
    )
    status = StringField(
        "Status",
        validators=[AnyOf(INVOICE_STATUSES, message=STATUS_MESSAGE)],
    )

    def field_errors(self):
        """Return validation errors keyed by HTML field name."""
        return {field.name: list(field.errors) for field in self if field.errors}


class LoginForm(FlaskForm):
    email = StringField("Email", validators=[DataRequired(), Email()])
    password = PasswordField(
        "Password", validators=[DataRequired(), Length(min=6)]
    )
