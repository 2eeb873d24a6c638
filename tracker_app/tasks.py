"""
Task store: owner-scoped persistence operations on ``tasks``.

Every operation that takes a task id also takes the owner's id and filters
on both, so a task is never reachable by id alone.  Database errors are
logged here with context and re-raised unchanged for the API layer to map.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError

from . import db
from .models import MAX_SQL_INTEGER, Task, TaskStatus, utcnow
from .query import TaskListQuery, stats_statement

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("title", "description", "status", "due_date")


def _owned_task(task_id: int, user_id: int):
    return select(Task).where(Task.id == task_id, Task.user_id == user_id)


def create_task(
    user_id: int,
    title: str,
    description: str | None = None,
    due_date: datetime | None = None,
    status: str = TaskStatus.PENDING.value,
) -> Task:
    """Insert a task and return it with its id and timestamps populated."""
    now = utcnow()
    task = Task(
        user_id=user_id,
        title=title,
        description=description,
        due_date=due_date,
        status=status,
        created_at=now,
        updated_at=now,
    )
    db.session.add(task)
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Error creating task for user %s", user_id)
        raise
    return task


def _storable_id(task_id: int) -> bool:
    # Ids past the INTEGER range cannot exist and would overflow the bind.
    return 0 <= task_id <= MAX_SQL_INTEGER


def get_task(task_id: int, user_id: int) -> Task | None:
    if not _storable_id(task_id):
        return None
    try:
        return db.session.scalar(_owned_task(task_id, user_id))
    except SQLAlchemyError:
        logger.exception("Error getting task %s for user %s", task_id, user_id)
        raise


def list_tasks(query: TaskListQuery) -> list[Task]:
    try:
        return list(db.session.scalars(query.statement()))
    except SQLAlchemyError:
        logger.exception("Error listing tasks for user %s", query.user_id)
        raise


def update_task(task_id: int, user_id: int, changes: dict[str, Any]) -> Task | None:
    """
    Apply a partial update.

    Args:
        task_id: Task to update.
        user_id: Requesting user; the task must belong to them.
        changes: Field name to new value.  Keys that are absent leave the
            column untouched; a key present with ``None`` stores ``None``.

    Returns:
        The updated task, or ``None`` if no task matched id and owner.
    """
    task = get_task(task_id, user_id)
    if task is None:
        return None

    for name in UPDATABLE_FIELDS:
        if name in changes:
            setattr(task, name, changes[name])
    task.updated_at = utcnow()

    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Error updating task %s for user %s", task_id, user_id)
        raise
    return task


def delete_task(task_id: int, user_id: int) -> bool:
    """Delete the task; ``False`` when nothing matched id and owner."""
    if not _storable_id(task_id):
        return False
    try:
        result = db.session.execute(
            delete(Task).where(Task.id == task_id, Task.user_id == user_id)
        )
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Error deleting task %s for user %s", task_id, user_id)
        raise
    return result.rowcount > 0


def task_stats(user_id: int) -> dict[str, int]:
    """Return ``total`` and a count per status; absent statuses count 0."""
    try:
        row = db.session.execute(stats_statement(user_id)).one()
    except SQLAlchemyError:
        logger.exception("Error getting task stats for user %s", user_id)
        raise
    stats = {"total": int(row.total or 0)}
    for status in TaskStatus:
        stats[status.value] = int(getattr(row, status.value) or 0)
    return stats
