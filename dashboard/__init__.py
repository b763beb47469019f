import os
import sqlite3
from datetime import datetime, timedelta

from dotenv import load_dotenv
from flask import Flask, Response, request
from flask_caching import Cache
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_login import LoginManager
from flask_sqlalchemy import SQLAlchemy
from flask_wtf import CSRFProtect
from sqlalchemy import event
from sqlalchemy.engine import Engine
from werkzeug.security import generate_password_hash

load_dotenv()
db = SQLAlchemy()
cache = Cache()
login_manager = LoginManager()
storage_uri = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
limiter = Limiter(key_func=get_remote_address, storage_uri=storage_uri)


def _get_bool_env(var_name: str, default: bool = False) -> bool:
    """Return a boolean environment variable value."""

    value = os.getenv(var_name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


DEFAULT_CSP = (
    "default-src 'none'; "
    "frame-ancestors 'none'; "
    "form-action 'self'; "
    "base-uri 'none'"
)


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores REFERENCES clauses unless asked per connection.
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


@login_manager.user_loader
def load_user(user_id):
    """Retrieve a user by ID for Flask-Login."""
    from dashboard.models import User

    return db.session.get(User, int(user_id))


@login_manager.unauthorized_handler
def unauthorized():
    return {"message": "Authentication required."}, 401


def create_admin_user():
    """Ensure an admin user exists for the application."""
    from dashboard.models import User

    db.create_all()

    admin_email = os.getenv("ADMIN_EMAIL", "admin@example.com")
    if User.query.filter_by(email=admin_email).first() is None:
        raw_password = os.getenv("ADMIN_PASS")
        if raw_password is None:
            raise RuntimeError("ADMIN_PASS environment variable not set")
        admin_user = User(
            name="Admin",
            email=admin_email,
            password=generate_password_hash(raw_password),
            active=True,
        )
        db.session.add(admin_user)
        db.session.commit()
        print("Admin user created.")


def _database_settings(base_dir: str):
    """Return the SQLAlchemy URI and engine options for this deployment.

    ``POSTGRES_URL`` wins when present; PostgreSQL connections are opened
    with ``sslmode`` taken from ``DATABASE_SSLMODE``.  Without a URL the
    application falls back to a SQLite file which may be relocated through
    ``DATABASE_PATH`` (a file or a directory).
    """

    url = os.getenv("POSTGRES_URL", "").strip()
    if url:
        # SQLAlchemy dropped the "postgres://" alias many hosts still hand out.
        if url.startswith("postgres://"):
            url = "postgresql://" + url[len("postgres://") :]
        options = {"pool_pre_ping": True}
        sslmode = os.getenv("DATABASE_SSLMODE", "require").strip()
        if sslmode:
            options["connect_args"] = {"sslmode": sslmode}
        return url, options

    default_db_path = os.path.join(base_dir, "invoices.db")
    db_path = os.getenv("DATABASE_PATH", default_db_path)
    if os.path.isdir(db_path):
        db_path = os.path.join(db_path, "invoices.db")
    os.makedirs(os.path.dirname(os.path.abspath(db_path)), exist_ok=True)
    return f"sqlite:///{os.path.abspath(db_path)}", {}


def create_app(args: list, config: dict | None = None):
    """Application factory used by Flask."""
    app = Flask(__name__)
    app.config["SECRET_KEY"] = os.getenv("SECRET_KEY")
    default_secure_cookies = "--demo" not in args
    session_cookie_secure = _get_bool_env(
        "SESSION_COOKIE_SECURE", default=default_secure_cookies
    )
    app.config["ENFORCE_HTTPS"] = _get_bool_env("ENFORCE_HTTPS", default=False)
    app.config.update(
        SESSION_COOKIE_SECURE=session_cookie_secure,
        REMEMBER_COOKIE_SECURE=session_cookie_secure,
        SESSION_COOKIE_HTTPONLY=True,
        SESSION_COOKIE_SAMESITE="Lax",
        PERMANENT_SESSION_LIFETIME=timedelta(minutes=30),
    )
    app.config["START_TIME"] = datetime.utcnow()
    app.config["DEMO"] = "--demo" in args

    database_uri, engine_options = _database_settings(os.getcwd())
    app.config["SQLALCHEMY_DATABASE_URI"] = database_uri
    app.config["SQLALCHEMY_ENGINE_OPTIONS"] = engine_options

    app.config["CACHE_TYPE"] = os.getenv("CACHE_TYPE", "SimpleCache")
    app.config["CACHE_DEFAULT_TIMEOUT"] = int(
        os.getenv("CACHE_DEFAULT_TIMEOUT", "300")
    )

    if config:
        app.config.update(config)

    db.init_app(app)
    from flask_migrate import Migrate

    Migrate(app, db)
    login_manager.init_app(app)
    if app.config.get("TESTING"):
        app.config["RATELIMIT_ENABLED"] = False
    limiter.init_app(app)
    cache.init_app(app)
    CSRFProtect(app)

    @app.before_request
    def block_http_options():
        """Return a 405 for HTTP OPTIONS requests to reduce information leakage."""
        if request.method == "OPTIONS":
            return Response(status=405)

    @app.after_request
    def apply_security_headers(response):
        """Attach standard security headers to every response."""
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        if request.is_secure or app.config.get("ENFORCE_HTTPS", False):
            response.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )
        response.headers.setdefault(
            "Content-Security-Policy",
            app.config.get("CONTENT_SECURITY_POLICY", DEFAULT_CSP),
        )
        return response

    with app.app_context():
        # Ensure models are imported and the schema exists even if
        # migrations have not been run yet.
        from . import models  # noqa: F401

        db.create_all()

        from dashboard.routes.auth_routes import auth
        from dashboard.routes.invoice_routes import invoice

        app.register_blueprint(auth)
        app.register_blueprint(invoice)

    return app
