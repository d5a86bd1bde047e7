"""
Field rules for registration and task forms.

Every rule is checked; the caller gets the full list of violations and
decides how many of them to show.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional

from .errors import FieldError, ValidationError

NAME_MAX = 50
TITLE_MAX = 200
DESCRIPTION_MAX = 1000
PASSWORD_MIN = 8

NAME_RE = re.compile(r"^[A-Za-z\s]+$")
EMAIL_RE = re.compile(r"^[^@\s]+@[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?(?:\.[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?)+$")
PASSWORD_CLASSES_RE = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")


def normalize_email(value: str | None) -> str:
    return (value or "").strip().lower()


def _parse_due_date(value) -> Optional[date]:
    """Accept a date, or an ISO string (YYYY-MM-DD, optionally with a time part)."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raw = str(value).strip()
    if raw == "":
        return None
    if len(raw) > 10 and raw[10] in "T ":
        raw = raw[:10]
    try:
        return date.fromisoformat(raw)
    except ValueError:
        raise ValueError("Invalid date format") from None


# ---------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class Registration:
    name: str
    email: str
    password: str


def validate_registration(name, email, password, password2) -> Registration:
    """Return cleaned values or raise ValidationError listing every broken rule."""
    errors: List[FieldError] = []

    name = (name or "").strip()
    if not name:
        errors.append(FieldError("name", "Name is required"))
    else:
        if len(name) > NAME_MAX:
            errors.append(FieldError("name", f"Name must be between 1 and {NAME_MAX} characters"))
        if not NAME_RE.match(name):
            errors.append(FieldError("name", "Name can only contain letters and spaces"))

    email = normalize_email(email)
    if not email:
        errors.append(FieldError("email", "Email is required"))
    elif len(email) > 254 or not EMAIL_RE.match(email):
        errors.append(FieldError("email", "Please enter a valid email address"))

    password = password or ""
    if not password:
        errors.append(FieldError("password", "Password is required"))
    else:
        if len(password) < PASSWORD_MIN:
            errors.append(FieldError("password", f"Password must be at least {PASSWORD_MIN} characters"))
        if not PASSWORD_CLASSES_RE.match(password):
            errors.append(
                FieldError(
                    "password",
                    "Password must contain at least one uppercase letter, "
                    "one lowercase letter, and one number",
                )
            )

    if not password2:
        errors.append(FieldError("password2", "Please confirm your password"))
    elif password2 != password:
        errors.append(FieldError("password2", "Passwords do not match"))

    if errors:
        raise ValidationError(errors)
    return Registration(name=name, email=email, password=password)


# ---------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class TaskFields:
    title: str
    description: Optional[str]
    due_date: Optional[date]


def validate_task(title, description=None, due_date=None) -> TaskFields:
    errors: List[FieldError] = []

    title = (title or "").strip()
    if not title:
        errors.append(FieldError("title", "Title is required"))
    elif len(title) > TITLE_MAX:
        errors.append(FieldError("title", f"Title must be between 1 and {TITLE_MAX} characters"))

    description = (description or "").strip()
    if len(description) > DESCRIPTION_MAX:
        errors.append(FieldError("description", f"Description must not exceed {DESCRIPTION_MAX} characters"))

    parsed_due: Optional[date] = None
    try:
        parsed_due = _parse_due_date(due_date)
    except ValueError as exc:
        errors.append(FieldError("due_date", str(exc)))

    if errors:
        raise ValidationError(errors)
    return TaskFields(title=title, description=description or None, due_date=parsed_due)
