"""
tasktracker/store.py

Store access guard.

Pattern:
    with guarded("create task"):
        db.session.add(task)
        db.session.commit()

- IntegrityError propagates untouched (callers map it, e.g. duplicate email).
- Any other SQLAlchemy failure rolls the session back and surfaces as
  StoreUnavailable. No retry.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from .errors import StoreUnavailable
from .extensions import db

logger = logging.getLogger(__name__)


@contextmanager
def guarded(action: str) -> Iterator[None]:
    try:
        yield
    except IntegrityError:
        db.session.rollback()
        raise
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.exception("Store failure during %s", action)
        raise StoreUnavailable() from exc
