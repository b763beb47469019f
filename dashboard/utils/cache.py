"""Cache helpers for rendered dashboard views."""

from __future__ import annotations

from flask import current_app

from dashboard import cache

INVOICES_PATH = "/dashboard/invoices"


def view_cache_key(path: str) -> str:
    """Return the Flask-Caching key used for the cached view at ``path``."""

    return f"view/{path}"


def revalidate_path(path: str) -> None:
    """Drop any cached render of ``path`` so the next read is fresh."""

    cache.delete(view_cache_key(path))
    current_app.logger.debug("Revalidated cached view %s", path)
