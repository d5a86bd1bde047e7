"""
tasktracker/blueprints/tasks/routes.py

Task routes.

Includes:
- All / Pending / Completed lists
- New + create, edit + update (PUT), toggle (PUT), delete (DELETE)

IMPORTANT:
- Every route requires a login; every lookup is scoped to the current user.
- NotFound raised by the task component is handled by the app-level error
  boundary (flash "Task not found" + redirect to the list).
- Validation failures redirect back to the originating form, one flash per
  violated rule.
"""

from __future__ import annotations

from datetime import date

from flask import Blueprint, render_template, request, redirect, url_for, flash
from flask_login import login_required

from ... import tasks as task_service
from ...errors import ValidationError
from ...security import current_user_id
from ...tasks import TaskFilter

tasks_bp = Blueprint("tasks", __name__, url_prefix="/tasks")

LIST_TITLES = {
    TaskFilter.ALL: "All Tasks",
    TaskFilter.PENDING: "Pending Tasks",
    TaskFilter.COMPLETED: "Completed Tasks",
}


def _form_fields():
    return (
        request.form.get("title", ""),
        request.form.get("description", ""),
        request.form.get("dueDate") or request.form.get("due_date") or None,
    )


def _flash_validation(exc: ValidationError) -> None:
    for message in exc.messages:
        flash(message, "danger")


def _render_list(task_filter: TaskFilter):
    tasks = task_service.list_tasks(current_user_id(), task_filter)
    return render_template(
        "tasks/index.html",
        tasks=tasks,
        active_filter=task_filter.value,
        page_title=LIST_TITLES[task_filter],
        today=date.today(),
    )


# ---------------------------------------------------------------------
# Lists
# ---------------------------------------------------------------------
@tasks_bp.route("", methods=["GET"])
@login_required
def index():
    return _render_list(TaskFilter.ALL)


@tasks_bp.route("/pending")
@login_required
def pending():
    return _render_list(TaskFilter.PENDING)


@tasks_bp.route("/completed")
@login_required
def completed():
    return _render_list(TaskFilter.COMPLETED)


# ---------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------
@tasks_bp.route("/new")
@login_required
def new_task():
    return render_template("tasks/new.html")


@tasks_bp.route("", methods=["POST"])
@login_required
def create_task():
    title, description, due_date = _form_fields()
    try:
        task_service.create_task(current_user_id(), title, description, due_date)
    except ValidationError as exc:
        _flash_validation(exc)
        return redirect(url_for("tasks.new_task"))

    flash("Task created successfully", "success")
    return redirect(url_for("tasks.index"))


# ---------------------------------------------------------------------
# Edit
# ---------------------------------------------------------------------
@tasks_bp.route("/<int:task_id>/edit")
@login_required
def edit_task(task_id: int):
    task = task_service.get_task(current_user_id(), task_id)
    return render_template("tasks/edit.html", task=task)


@tasks_bp.route("/<int:task_id>", methods=["PUT"])
@login_required
def update_task(task_id: int):
    title, description, due_date = _form_fields()
    try:
        task_service.update_task(current_user_id(), task_id, title, description, due_date)
    except ValidationError as exc:
        _flash_validation(exc)
        return redirect(url_for("tasks.edit_task", task_id=task_id))

    flash("Task updated successfully", "success")
    return redirect(url_for("tasks.index"))


# ---------------------------------------------------------------------
# Toggle / delete
# ---------------------------------------------------------------------
@tasks_bp.route("/<int:task_id>/toggle", methods=["PUT"])
@login_required
def toggle_task(task_id: int):
    completed = task_service.toggle_completion(current_user_id(), task_id)
    flash(f"Task marked as {'complete' if completed else 'incomplete'}", "success")
    return redirect(url_for("tasks.index"))


@tasks_bp.route("/<int:task_id>", methods=["DELETE"])
@login_required
def delete_task(task_id: int):
    task_service.delete_task(current_user_id(), task_id)
    flash("Task deleted successfully", "success")
    return redirect(url_for("tasks.index"))
