"""
tasktracker/__init__.py

Flask application factory for the Task Tracker.

Requirements:
- Users register, log in and manage their own tasks.
- Login state lives server-side (AuthSession); the cookie only holds a token.
- UI is never trusted; ownership is enforced in tasktracker.tasks.
- Errors never leak internals: every failure ends as a flash + redirect.
"""

from __future__ import annotations

import logging
import time

import click
from flask import Flask, g, redirect, render_template, request, session, url_for, flash
from flask_login import current_user
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from .errors import (
    DuplicateEmail,
    InvalidCredentials,
    NotFound,
    StoreUnavailable,
    TaskTrackerError,
    Unauthenticated,
    ValidationError,
)
from .extensions import csrf, db, hasher, login_manager, migrate
from .logging_setup import configure_logging
from .middleware import MethodOverrideMiddleware
from .security import SESSION_TOKEN_KEY, load_user_from_request, unauthorized

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Something went wrong"

# Error kind -> flash category. Messages come from the error itself.
ERROR_FLASH_CATEGORIES = {
    Unauthenticated: "info",
    NotFound: "danger",
    ValidationError: "danger",
    DuplicateEmail: "danger",
    InvalidCredentials: "danger",
    StoreUnavailable: "danger",
}

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "Content-Security-Policy": "default-src 'self'; style-src 'self' 'unsafe-inline'; form-action 'self'",
}


def create_app(config_object="config.Config", **overrides) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.config.update(overrides)

    configure_logging(app)

    # Extensions
    db.init_app(app)
    migrate.init_app(app, db)
    csrf.init_app(app)
    hasher.init_app(app)

    login_manager.init_app(app)
    login_manager.request_loader(load_user_from_request)
    login_manager.unauthorized_handler(unauthorized)

    # PUT/DELETE from HTML forms via ?_method=
    app.wsgi_app = MethodOverrideMiddleware(app.wsgi_app)

    # ----------------------------------------------------------------------
    # Blueprints
    # ----------------------------------------------------------------------
    from .blueprints.users import users_bp
    from .blueprints.tasks import tasks_bp

    app.register_blueprint(users_bp)
    app.register_blueprint(tasks_bp)

    _register_error_handlers(app)
    _register_request_hooks(app)
    _register_cli(app)

    # ----------------------------------------------------------------------
    # Context globals
    # ----------------------------------------------------------------------
    @app.context_processor
    def inject_globals():
        return {"app_name": app.config.get("APP_NAME", "Task Tracker")}

    # ----------------------------------------------------------------------
    # Home
    # ----------------------------------------------------------------------
    @app.route("/")
    def index():
        """Home: task list for logged-in users, welcome page otherwise."""
        if current_user.is_authenticated:
            return redirect(url_for("tasks.index"))
        return render_template("home.html")

    return app


# ----------------------------------------------------------------------
# Error boundary
# ----------------------------------------------------------------------
def _safe_redirect(authenticated: bool):
    """
    Task list when logged in, login page otherwise.

    If the failing request *is* that page, render an error page instead of
    redirecting back into the same failure.
    """
    endpoint = "tasks.index" if authenticated else "users.login"
    target = url_for(endpoint)
    if request.path == target and request.method == "GET":
        return render_template("error.html"), 503
    return redirect(target)


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(TaskTrackerError)
    def handle_app_error(error: TaskTrackerError):
        if isinstance(error, Unauthenticated) and g.get("store_unavailable"):
            # login_required fired only because the session lookup failed
            error = StoreUnavailable()

        category = ERROR_FLASH_CATEGORIES.get(type(error), "danger")

        if isinstance(error, Unauthenticated):
            flash(error.message, category)
            next_url = request.full_path.rstrip("?") if request.method == "GET" else None
            return redirect(url_for("users.login", next=next_url))

        if isinstance(error, StoreUnavailable):
            logger.error("Store unavailable while handling %s %s", request.method, request.path)

        flash(error.message, category)
        return _safe_redirect(bool(session.get(SESSION_TOKEN_KEY)))

    @app.errorhandler(SQLAlchemyError)
    def handle_store_error(error: SQLAlchemyError):
        db.session.rollback()
        logger.exception("Unhandled store error on %s %s", request.method, request.path)
        return handle_app_error(StoreUnavailable())

    @app.errorhandler(Exception)
    def handle_unexpected(error: Exception):
        if isinstance(error, HTTPException):
            return error
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        flash(GENERIC_ERROR_MESSAGE, "danger")
        return _safe_redirect(bool(session.get(SESSION_TOKEN_KEY)))


# ----------------------------------------------------------------------
# Request hooks: access log + security headers
# ----------------------------------------------------------------------
def _register_request_hooks(app: Flask) -> None:
    access_log = logging.getLogger("tasktracker.access")

    @app.before_request
    def _start_timer():
        g.request_started = time.perf_counter()

    @app.after_request
    def _after(response):
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)

        started = g.get("request_started")
        elapsed_ms = (time.perf_counter() - started) * 1000 if started else 0.0
        access_log.info(
            "%s %s %s %.1fms", request.method, request.path, response.status_code, elapsed_ms
        )
        return response


# ----------------------------------------------------------------------
# CLI
# ----------------------------------------------------------------------
def _register_cli(app: Flask) -> None:
    @app.cli.command("init-db")
    def init_db_command():
        """Create all tables."""
        db.create_all()
        click.echo("Database tables created.")

    @app.cli.command("purge-sessions")
    def purge_sessions_command():
        """Delete expired login sessions."""
        from .auth import purge_expired_sessions

        count = purge_expired_sessions()
        click.echo(f"Purged {count} expired session(s).")
