# tests/test_validation.py

from __future__ import annotations

from datetime import date

import pytest

from tasktracker.errors import ValidationError
from tasktracker.validation import normalize_email, validate_registration, validate_task


def test_registration_cleans_values() -> None:
    data = validate_registration("  Ada Lovelace ", " Ada@Example.com ", "Passw0rd1", "Passw0rd1")
    assert data.name == "Ada Lovelace"
    assert data.email == "ada@example.com"
    assert data.password == "Passw0rd1"


def test_registration_reports_every_broken_rule() -> None:
    with pytest.raises(ValidationError) as info:
        validate_registration("R2D2", "not-an-email", "short", "other")

    fields = {e.field for e in info.value.errors}
    assert fields == {"name", "email", "password", "password2"}
    assert "Name can only contain letters and spaces" in info.value.messages
    assert "Please enter a valid email address" in info.value.messages
    assert "Password must be at least 8 characters" in info.value.messages
    assert "Passwords do not match" in info.value.messages
    # first violation is what a single flash would show
    assert info.value.message == info.value.messages[0]


@pytest.mark.parametrize(
    "password",
    ["alllowercase1", "ALLUPPERCASE1", "NoDigitsHere"],
)
def test_password_needs_upper_lower_and_digit(password: str) -> None:
    with pytest.raises(ValidationError) as info:
        validate_registration("Ada", "ada@example.com", password, password)
    assert info.value.for_field("password") == [
        "Password must contain at least one uppercase letter, one lowercase letter, and one number"
    ]


def test_missing_fields() -> None:
    with pytest.raises(ValidationError) as info:
        validate_registration("", "", "", "")
    assert info.value.messages == [
        "Name is required",
        "Email is required",
        "Password is required",
        "Please confirm your password",
    ]


def test_name_length_limit() -> None:
    with pytest.raises(ValidationError) as info:
        validate_registration("A" * 51, "ada@example.com", "Passw0rd1", "Passw0rd1")
    assert info.value.for_field("name") == ["Name must be between 1 and 50 characters"]


def test_normalize_email() -> None:
    assert normalize_email("  A@X.COM ") == "a@x.com"
    assert normalize_email(None) == ""


def test_task_fields_are_trimmed_and_parsed() -> None:
    fields = validate_task("  Write spec ", "  notes  ", "2025-01-01")
    assert fields.title == "Write spec"
    assert fields.description == "notes"
    assert fields.due_date == date(2025, 1, 1)


def test_task_optional_fields() -> None:
    fields = validate_task("Title", "", "")
    assert fields.description is None
    assert fields.due_date is None


def test_task_accepts_datetime_strings_and_dates() -> None:
    assert validate_task("T", None, "2025-03-04T10:00:00").due_date == date(2025, 3, 4)
    assert validate_task("T", None, date(2025, 3, 4)).due_date == date(2025, 3, 4)


def test_task_rules() -> None:
    with pytest.raises(ValidationError) as info:
        validate_task("   ", "x" * 1001, "2025-13-45")
    assert info.value.messages == [
        "Title is required",
        "Description must not exceed 1000 characters",
        "Invalid date format",
    ]


def test_task_title_too_long() -> None:
    with pytest.raises(ValidationError) as info:
        validate_task("x" * 201)
    assert info.value.messages == ["Title must be between 1 and 200 characters"]
