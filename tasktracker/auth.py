"""
tasktracker/auth.py

Authentication component.

Provides:
- register(): validate, hash, insert (email uniqueness enforced by the store)
- verify(): email/password check, constant-time hash comparison
- issue_session() / resolve_session() / revoke_session(): server-side sessions
- purge_expired_sessions(): housekeeping for the CLI

Rules:
- Raw passwords are only handed to the PasswordHasher. They are never
  logged, returned or persisted.
- Login failures are reported as InvalidCredentials whether the email is
  unknown or the password is wrong.
- A new login always creates a new token. Older tokens are left alone.
"""

from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError

from .errors import DuplicateEmail, InvalidCredentials
from .extensions import db, hasher
from .models import AuthSession, User, utcnow
from .store import guarded
from .validation import normalize_email, validate_registration

logger = logging.getLogger(__name__)

TOKEN_BYTES = 32
DEFAULT_SESSION_TTL = timedelta(hours=24)


def _session_ttl() -> timedelta:
    return current_app.config.get("AUTH_SESSION_TTL", DEFAULT_SESSION_TTL)


def find_user_by_email(email: str) -> Optional[User]:
    with guarded("user lookup"):
        return User.query.filter_by(email=normalize_email(email)).first()


# ============================================================
# REGISTER
# ============================================================

async def register(name: str, email: str, raw_password: str, confirm_password: str) -> int:
    """
    Create a user and return its id.

    Raises ValidationError (all rule violations) or DuplicateEmail.
    The pre-insert lookup is only a fast path; the unique index on
    users.email is what actually guards against concurrent registrations.
    """
    data = validate_registration(name, email, raw_password, confirm_password)

    if find_user_by_email(data.email) is not None:
        logger.info("Registration rejected: email already registered")
        raise DuplicateEmail()

    password_hash = await hasher.hash(data.password)

    user = User(name=data.name, email=data.email, password_hash=password_hash)
    try:
        with guarded("register user"):
            db.session.add(user)
            db.session.commit()
    except IntegrityError:
        logger.info("Registration rejected by unique constraint on email")
        raise DuplicateEmail() from None

    logger.info("Registered user id=%s", user.id)
    return user.id


# ============================================================
# VERIFY
# ============================================================

async def verify(email: str, raw_password: str) -> User:
    """Return the matching user or raise InvalidCredentials."""
    user = find_user_by_email(email)
    if user is None:
        logger.info("Login failed: unknown email")
        raise InvalidCredentials()

    if not await hasher.verify(user.password_hash, raw_password or ""):
        logger.info("Login failed: wrong password for user id=%s", user.id)
        raise InvalidCredentials()

    return user


# ============================================================
# SESSIONS
# ============================================================

def issue_session(user: User, now: datetime | None = None) -> str:
    """Create a session record for `user` and return its token."""
    now = now or utcnow()
    token = secrets.token_urlsafe(TOKEN_BYTES)

    record = AuthSession(
        token=token,
        user_id=user.id,
        created_at=now,
        expires_at=now + _session_ttl(),
    )
    with guarded("issue session"):
        db.session.add(record)
        db.session.commit()

    logger.info("Session issued for user id=%s", user.id)
    return token


def resolve_session(token: str | None, now: datetime | None = None) -> Optional[User]:
    """
    Map a token back to its user.

    Absent, unknown and expired tokens all resolve to None; nothing is raised
    for them. Expired records are deleted on sight.
    """
    if not token:
        return None

    with guarded("resolve session"):
        record = AuthSession.query.filter_by(token=token).first()
        if record is None:
            return None

        if record.is_expired(now):
            logger.info("Session expired for user id=%s", record.user_id)
            db.session.delete(record)
            db.session.commit()
            return None

        return db.session.get(User, record.user_id)


def revoke_session(token: str | None) -> None:
    """Delete the session record. Unknown tokens are fine."""
    if not token:
        return
    with guarded("revoke session"):
        deleted = AuthSession.query.filter_by(token=token).delete()
        db.session.commit()
    if deleted:
        logger.info("Session revoked")


def purge_expired_sessions(now: datetime | None = None) -> int:
    now = now or utcnow()
    with guarded("purge sessions"):
        count = AuthSession.query.filter(AuthSession.expires_at <= now).delete()
        db.session.commit()
    return count
