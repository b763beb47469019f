from urllib.parse import urlparse

from flask import Blueprint, redirect, request, url_for
from flask_login import login_required, logout_user
from flask_wtf.csrf import generate_csrf

from dashboard import limiter
from dashboard.services.auth import authenticate
from dashboard.utils.activity import log_activity
from dashboard.utils.cache import INVOICES_PATH

auth = Blueprint("auth", __name__)


def _safe_next(target):
    """Return ``target`` only if it points back into this site."""
    if not target:
        return None
    parsed = urlparse(target)
    if parsed.scheme or parsed.netloc or not target.startswith("/"):
        return None
    return target


@auth.route("/csrf-token")
def csrf_token():
    """Hand out a CSRF token for clients posting the dashboard forms."""
    return {"csrf_token": generate_csrf()}


@auth.route("/login", methods=["POST"])
@limiter.limit("5 per minute")
def login():
    """Authenticate a user and start their session."""
    message = authenticate(request.form.get("state"), request.form)
    if message is not None:
        return {"message": message}, 401
    next_url = _safe_next(request.args.get("next") or request.form.get("redirectTo"))
    return redirect(next_url or INVOICES_PATH)


@auth.route("/logout", methods=["POST"])
@login_required
def logout():
    """End the current session."""
    log_activity("Logged out")
    logout_user()
    return redirect(url_for("auth.login"))
