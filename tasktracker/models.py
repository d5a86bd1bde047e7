"""
Task Tracker – Domain Models

- User: registered account. Email is unique and stored lower-cased.
- Task: personal to-do item, owned by exactly one User.
- AuthSession: server-side login session keyed by a random token.

IMPORTANT:
- Passwords are never stored; only the salted hash produced by PasswordHasher.
- Ownership is enforced in tasktracker.tasks, never by the UI.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

from flask_login import UserMixin

from .extensions import db


def utcnow() -> datetime:
    """Naive UTC timestamp (the store keeps naive datetimes)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


# ---------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------
class User(UserMixin, db.Model):
    """Registered account."""

    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)

    name = db.Column(db.String(50), nullable=False)
    email = db.Column(db.String(254), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    def __repr__(self):
        return f"<User {self.id} {self.email}>"


# ---------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------
class Task(db.Model):
    __tablename__ = "tasks"

    id = db.Column(db.Integer, primary_key=True)

    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.String(1000), nullable=True)
    due_date = db.Column(db.Date, nullable=True, index=True)
    completed = db.Column(db.Boolean, default=False, nullable=False, index=True)

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    def is_overdue(self, today: date | None = None) -> bool:
        if self.completed or self.due_date is None:
            return False
        return self.due_date < (today or date.today())

    def __repr__(self):
        return f"<Task {self.id} user={self.user_id} completed={self.completed}>"


# ---------------------------------------------------------------------
# Login sessions
# ---------------------------------------------------------------------
class AuthSession(db.Model):
    """
    Server-side session record.

    The client only ever holds `token`. A login creates a new row; older
    rows for the same user stay valid until they expire or are revoked.
    """

    __tablename__ = "auth_sessions"

    id = db.Column(db.Integer, primary_key=True)

    token = db.Column(db.String(128), unique=True, nullable=False, index=True)

    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    expires_at = db.Column(db.DateTime, nullable=False, index=True)

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or utcnow()) >= self.expires_at

    def __repr__(self):
        # never include the token
        return f"<AuthSession {self.id} user={self.user_id}>"
