"""
tasktracker/security.py

Access control helpers for the Task Tracker.

Key rules:
- The Flask cookie session only carries the auth token; the user is
  resolved server-side on every request (Flask-Login request loader).
- Unknown or expired tokens simply mean "anonymous".
- A store failure during lookup also yields "anonymous" for the request and
  sets g.store_unavailable; the token is kept.
- login_required fails closed: Flask-Login's unauthorized hook raises
  Unauthenticated, which the error boundary turns into a redirect to login.
"""

from __future__ import annotations

from typing import Optional

from flask import g, session
from flask_login import current_user

from . import auth
from .errors import StoreUnavailable, Unauthenticated
from .models import User

SESSION_TOKEN_KEY = "auth_token"


def load_user_from_request(_request) -> Optional[User]:
    """Flask-Login request loader: session token -> User (or None)."""
    token = session.get(SESSION_TOKEN_KEY)
    if not token:
        return None

    try:
        user = auth.resolve_session(token)
    except StoreUnavailable:
        # treat as anonymous for this request; the error boundary reports it
        g.store_unavailable = True
        return None

    if user is None:
        # stale cookie; forget it so we don't look it up again
        session.pop(SESSION_TOKEN_KEY, None)
    return user


def unauthorized():
    raise Unauthenticated()


def start_session(user: User) -> None:
    """Issue a fresh token for `user` and attach it to the cookie session."""
    token = auth.issue_session(user)
    session[SESSION_TOKEN_KEY] = token
    session.permanent = True


def end_session() -> None:
    auth.revoke_session(session.pop(SESSION_TOKEN_KEY, None))


def current_user_id() -> int:
    """Id of the logged-in user. Only call behind login_required."""
    if not current_user.is_authenticated:
        raise Unauthenticated()
    return current_user.id
