"""
tasktracker/errors.py

Error taxonomy shared by the authentication and task components.

Components raise these; the presentation layer turns them into a flash
message plus a redirect. Nothing here ever carries internal error text
to the client.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List


@dataclass(frozen=True)
class FieldError:
    """One violated field rule."""

    field: str
    message: str


class TaskTrackerError(Exception):
    """Base class. `message` is safe to show to the user."""

    message = "Something went wrong"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(TaskTrackerError):
    """One or more field rules were violated. All of them are listed."""

    def __init__(self, errors: Iterable[FieldError]) -> None:
        self.errors: List[FieldError] = list(errors)
        first = self.errors[0].message if self.errors else "Invalid input"
        super().__init__(first)

    @property
    def messages(self) -> List[str]:
        return [e.message for e in self.errors]

    def for_field(self, field: str) -> List[str]:
        return [e.message for e in self.errors if e.field == field]


class DuplicateEmail(TaskTrackerError):
    message = "Email already exists"


class InvalidCredentials(TaskTrackerError):
    message = "Invalid email or password"


class Unauthenticated(TaskTrackerError):
    message = "Please log in to view that resource"


class NotFound(TaskTrackerError):
    """Task is absent or owned by someone else; the two are indistinguishable."""

    message = "Task not found"


class StoreUnavailable(TaskTrackerError):
    message = "The service is temporarily unavailable. Please try again."
