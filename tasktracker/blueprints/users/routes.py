"""
Account Routes

Provides:
- /users/register
- /users/login
- /users/logout

Rules:
- Registration failures re-render the form with every error listed and
  the non-password fields filled back in.
- Login failures redirect back to the login page with one generic message.
- Register and login are async views: password hashing runs on the
  hasher's thread pool and is awaited.
"""

from __future__ import annotations

from urllib.parse import urlparse

from flask import (
    Blueprint,
    render_template,
    redirect,
    url_for,
    flash,
    request,
)
from flask_login import current_user

from ... import auth
from ...errors import DuplicateEmail, InvalidCredentials, ValidationError
from ...security import end_session, start_session

users_bp = Blueprint("users", __name__, url_prefix="/users")


def _safe_next_url(raw_next: str | None) -> str:
    """
    Return a safe local next URL.

    Rules:
    - Only allow relative URLs (no scheme/netloc).
    - Fall back to the task list if invalid/empty.
    """
    fallback = url_for("tasks.index")
    if not raw_next:
        return fallback

    parsed = urlparse(raw_next)
    if parsed.scheme or parsed.netloc:
        return fallback

    # Must start with a single /
    if not raw_next.startswith("/") or raw_next.startswith("//"):
        return fallback

    return raw_next


def _render_register(errors=None, name: str = "", email: str = ""):
    return render_template(
        "users/register.html",
        errors=errors or [],
        name=name,
        email=email,
    )


# ============================================================
# REGISTER
# ============================================================

@users_bp.route("/register", methods=["GET", "POST"])
async def register():
    """Create an account, then send the user to the login page."""
    if current_user.is_authenticated:
        return redirect(url_for("tasks.index"))

    if request.method == "POST":
        name = request.form.get("name", "")
        email = request.form.get("email", "")

        try:
            await auth.register(
                name,
                email,
                request.form.get("password", ""),
                request.form.get("password2", ""),
            )
        except ValidationError as exc:
            return _render_register(exc.messages, name=name, email=email)
        except DuplicateEmail as exc:
            return _render_register([exc.message], name=name, email=email)

        flash("You are now registered and can log in", "success")
        return redirect(url_for("users.login"))

    return _render_register()


# ============================================================
# LOGIN
# ============================================================

@users_bp.route("/login", methods=["GET", "POST"])
async def login():
    """Verify credentials and start a new server-side session."""
    if current_user.is_authenticated:
        return redirect(url_for("tasks.index"))

    if request.method == "POST":
        email = request.form.get("email", "")
        password = request.form.get("password", "")

        try:
            user = await auth.verify(email, password)
        except InvalidCredentials as exc:
            flash(exc.message, "danger")
            next_url = request.args.get("next") or request.form.get("next") or None
            return redirect(url_for("users.login", next=next_url))

        start_session(user)
        flash("You are now logged in", "success")

        next_url = request.args.get("next") or request.form.get("next")
        return redirect(_safe_next_url(next_url))

    return render_template("users/login.html", next=request.args.get("next", ""))


# ============================================================
# LOGOUT
# ============================================================

@users_bp.route("/logout")
def logout():
    """Drop the current session. Already-invalid sessions are fine."""
    end_session()
    flash("You are logged out", "success")
    return redirect(url_for("users.login"))
