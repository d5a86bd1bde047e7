"""
tasktracker/tasks.py

Task management component. Every operation is scoped to the owner's id.

IMPORTANT:
- A task that exists but belongs to another user is reported as NotFound,
  exactly like a task that does not exist.
- update_task() never touches the completion flag.
- No optimistic locking: last write wins.
"""

from __future__ import annotations

import enum
import logging
from datetime import date
from typing import List, Optional

from .errors import NotFound
from .extensions import db
from .models import Task, utcnow
from .store import guarded
from .validation import validate_task

logger = logging.getLogger(__name__)


class TaskFilter(enum.Enum):
    ALL = "all"
    PENDING = "pending"
    COMPLETED = "completed"


def _owned_query(user_id: int):
    return Task.query.filter(Task.user_id == user_id)


def get_task(user_id: int, task_id: int) -> Task:
    with guarded("load task"):
        task = _owned_query(user_id).filter(Task.id == task_id).first()
    if task is None:
        raise NotFound()
    return task


def create_task(
    user_id: int,
    title: str,
    description: Optional[str] = None,
    due_date: date | str | None = None,
) -> int:
    """Validate and insert a task; returns the new id."""
    fields = validate_task(title, description, due_date)

    task = Task(
        title=fields.title,
        description=fields.description,
        due_date=fields.due_date,
        completed=False,
        created_at=utcnow(),
        user_id=user_id,
    )
    with guarded("create task"):
        db.session.add(task)
        db.session.commit()

    logger.info("Task id=%s created by user id=%s", task.id, user_id)
    return task.id


def list_tasks(user_id: int, task_filter: TaskFilter = TaskFilter.ALL) -> List[Task]:
    """
    ALL is ordered by due date ascending (undated first).
    PENDING / COMPLETED keep store order.
    """
    q = _owned_query(user_id)
    if task_filter is TaskFilter.PENDING:
        q = q.filter(Task.completed.is_(False))
    elif task_filter is TaskFilter.COMPLETED:
        q = q.filter(Task.completed.is_(True))
    else:
        q = q.order_by(Task.due_date.asc().nulls_first(), Task.id.asc())

    with guarded("list tasks"):
        return q.all()


def update_task(
    user_id: int,
    task_id: int,
    title: str,
    description: Optional[str] = None,
    due_date: date | str | None = None,
) -> None:
    task = get_task(user_id, task_id)
    fields = validate_task(title, description, due_date)

    task.title = fields.title
    task.description = fields.description
    task.due_date = fields.due_date
    with guarded("update task"):
        db.session.commit()

    logger.info("Task id=%s updated by user id=%s", task_id, user_id)


def toggle_completion(user_id: int, task_id: int) -> bool:
    """Flip the completion flag and return the new value."""
    task = get_task(user_id, task_id)
    task.completed = not task.completed
    with guarded("toggle task"):
        db.session.commit()

    logger.info("Task id=%s completed=%s (user id=%s)", task_id, task.completed, user_id)
    return task.completed


def delete_task(user_id: int, task_id: int) -> None:
    task = get_task(user_id, task_id)
    with guarded("delete task"):
        db.session.delete(task)
        db.session.commit()

    logger.info("Task id=%s deleted by user id=%s", task_id, user_id)
