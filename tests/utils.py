"""Utility helpers shared across the test-suite."""

from __future__ import annotations

import os


def login(client, email: str, password: str, **kwargs):
    """Helper to login a user in tests."""

    return client.post(
        "/login",
        data={"email": email, "password": password},
        **kwargs,
    )


def login_admin(client):
    """Log in with the seeded admin account."""

    return login(
        client,
        os.getenv("ADMIN_EMAIL", "admin@example.com"),
        os.getenv("ADMIN_PASS", "adminpass"),
    )
