"""Utility functions for the invoice dashboard."""

from .activity import log_activity
from .cache import INVOICES_PATH, revalidate_path
from .money import format_currency, parse_amount, to_minor_units

__all__ = [
    "log_activity",
    "INVOICES_PATH",
    "revalidate_path",
    "format_currency",
    "parse_amount",
    "to_minor_units",
]
