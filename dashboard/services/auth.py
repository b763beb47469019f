"""Credential sign-in and the login form action."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional, Union

from flask import current_app
from flask_login import login_user
from werkzeug.datastructures import MultiDict
from werkzeug.security import check_password_hash

from dashboard.forms import LoginForm
from dashboard.models import User
from dashboard.utils.activity import log_activity

CREDENTIALS_SIGNIN = "CredentialsSignin"
INVALID_CREDENTIALS_MESSAGE = "Invalid credentials."
GENERIC_FAILURE_MESSAGE = "Something went wrong."


class AuthError(Exception):
    """Raised by :func:`sign_in`; ``type`` tells callers what went wrong."""

    def __init__(self, kind: str, message: Optional[str] = None) -> None:
        super().__init__(message or kind)
        self.type = kind


@dataclass(frozen=True)
class KnownAuthFailure:
    """An :class:`AuthError` whose kind maps to a user-facing message."""

    kind: str

    @property
    def message(self) -> str:
        if self.kind == CREDENTIALS_SIGNIN:
            return INVALID_CREDENTIALS_MESSAGE
        return GENERIC_FAILURE_MESSAGE


@dataclass(frozen=True)
class UnknownAuthFailure:
    """Any other error raised during sign-in; it is re-raised."""

    cause: BaseException


AuthFailure = Union[KnownAuthFailure, UnknownAuthFailure]


def _credentials_user(formdata) -> User:
    form = LoginForm(formdata=formdata, meta={"csrf": False})
    if not form.validate():
        raise AuthError(CREDENTIALS_SIGNIN)

    user = User.query.filter_by(email=form.email.data).first()
    if user is None or not check_password_hash(user.password, form.password.data):
        raise AuthError(CREDENTIALS_SIGNIN)
    if not user.active:
        raise AuthError("AccessDenied", "Account is not active.")
    return user


_STRATEGIES = {"credentials": _credentials_user}


def sign_in(strategy: str, formdata: Mapping) -> User:
    """Verify ``formdata`` with the named strategy and start a session."""
    if not hasattr(formdata, "getlist"):
        formdata = MultiDict(formdata)
    resolver = _STRATEGIES.get(strategy)
    if resolver is None:
        raise AuthError("Configuration", f"Unknown sign-in strategy {strategy!r}")

    user = resolver(formdata)
    login_user(user)
    log_activity("Logged in", user.id)
    return user


def classify_auth_error(error: BaseException) -> AuthFailure:
    """Sort a sign-in error into a known or unknown failure."""
    if isinstance(error, AuthError):
        return KnownAuthFailure(error.type)
    return UnknownAuthFailure(error)


def authenticate(previous_state: Optional[str], formdata: Mapping) -> Optional[str]:
    """Sign in with credentials and return a message only on failure.

    ``previous_state`` is the message from the last attempt; it is accepted
    for form-action compatibility and otherwise unused.  Errors that are not
    :class:`AuthError` are re-raised.
    """
    try:
        sign_in("credentials", formdata)
    except Exception as exc:
        failure = classify_auth_error(exc)
        if isinstance(failure, UnknownAuthFailure):
            raise failure.cause
        current_app.logger.info("Sign-in rejected: %s", failure.kind)
        return failure.message
    return None
