"""Helpers for parsing and formatting monetary amounts."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional

_CURRENCY_SYMBOLS = "$€£¥"
_CENTS = Decimal("100")


def _normalise_plain_number(text: str) -> str:
    """Return a plain numeric string for formatted monetary input.

    Browsers submit whatever the user typed, so values such as
    ``"$1,234.50"`` or ``" 250 "`` show up.  Currency symbols, whitespace
    and thousands separators are stripped so :class:`~decimal.Decimal` can
    parse the remainder.
    """

    cleaned = text.strip().replace("\u00a0", " ")

    sign = ""
    if cleaned[:1] in "+-":
        sign, cleaned = cleaned[0], cleaned[1:].lstrip()

    while cleaned and cleaned[0] in _CURRENCY_SYMBOLS:
        cleaned = cleaned[1:].lstrip()
    while cleaned and cleaned[-1] in _CURRENCY_SYMBOLS:
        cleaned = cleaned[:-1].rstrip()

    cleaned = cleaned.replace(",", "").replace("_", "").replace(" ", "")
    return sign + cleaned


def parse_amount(raw_value: Any) -> Optional[Decimal]:
    """Coerce raw form input to a :class:`Decimal`.

    Returns ``None`` when the value is missing, empty or not a finite
    number.  The sign is preserved; range checks belong to the caller.
    """

    if raw_value is None:
        return None
    if isinstance(raw_value, Decimal):
        value = raw_value
    elif isinstance(raw_value, (int, float)):
        value = Decimal(str(raw_value))
    else:
        text = str(raw_value).strip()
        if not text:
            return None
        try:
            value = Decimal(_normalise_plain_number(text))
        except InvalidOperation:
            return None
    if not value.is_finite():
        return None
    return value


def to_minor_units(amount: Decimal) -> int:
    """Convert a major-unit amount to whole cents, rounding half up."""

    return int((amount * _CENTS).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_currency(amount_in_cents: int) -> str:
    """Render cents as a dollar string, e.g. ``25000`` -> ``"$250.00"``."""

    dollars = Decimal(amount_in_cents) / _CENTS
    sign = "-" if dollars < 0 else ""
    return f"{sign}${abs(dollars):,.2f}"
