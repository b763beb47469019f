from __future__ import annotations

import os
import sys
from datetime import date

import pytest
from werkzeug.security import generate_password_hash

from dashboard import create_admin_user, create_app, db
from dashboard.models import Customer, Invoice, User

# Ensure the project root is importable when tests change directories
BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, BASE_DIR)


@pytest.fixture
def app(tmp_path, monkeypatch):
    os.environ.setdefault("SECRET_KEY", "testsecret")
    os.environ.setdefault("ADMIN_EMAIL", "admin@example.com")
    os.environ.setdefault("ADMIN_PASS", "adminpass")
    monkeypatch.delenv("POSTGRES_URL", raising=False)
    monkeypatch.delenv("DATABASE_PATH", raising=False)

    # Ensure a clean database for each test within the temp directory
    cwd = os.getcwd()
    os.chdir(tmp_path)
    app = create_app(
        ["--demo"],
        config={
            "TESTING": True,
            "WTF_CSRF_ENABLED": False,
            "CACHE_TYPE": "SimpleCache",
        },
    )
    os.chdir(cwd)

    with app.app_context():
        db.create_all()
        create_admin_user()

        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def customers(app):
    """Two customers with predictable identifiers."""
    with app.app_context():
        db.session.add_all(
            [
                Customer(id="c1", name="Evil Rabbit", email="evil@rabbit.com"),
                Customer(id="c2", name="Delba de Oliveira", email="delba@oliveira.com"),
            ]
        )
        db.session.commit()
    return "c1", "c2"


@pytest.fixture
def existing_invoice(app, customers):
    """An invoice dated in the past so date changes are easy to spot."""
    with app.app_context():
        db.session.add(
            Invoice(
                id="inv-42",
                customer_id="c1",
                amount=1000,
                status="pending",
                date=date(2023, 1, 15),
            )
        )
        db.session.commit()
    return "inv-42"


@pytest.fixture
def make_user(app):
    def _make(email="user@example.com", password="secret1", active=True):
        with app.app_context():
            user = User(
                name="Test User",
                email=email,
                password=generate_password_hash(password),
                active=active,
            )
            db.session.add(user)
            db.session.commit()
            return user.email

    return _make
