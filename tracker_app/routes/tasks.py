"""
Task endpoints.

Every route requires a bearer token, and every query is scoped to the
authenticated user, so another user's task id behaves exactly like an id
that does not exist (404).

Endpoints:
    POST   /api/tasks        - Create a task
    GET    /api/tasks        - List tasks (filter, search, sort, paginate)
    GET    /api/tasks/stats  - Count tasks in total and per status
    GET    /api/tasks/<id>   - Retrieve a single task
    PUT    /api/tasks/<id>   - Partially update a task
    DELETE /api/tasks/<id>   - Delete a task
"""

from __future__ import annotations

import logging

from flask import Blueprint, Response, current_app, jsonify, request

from .. import tasks, users
from ..auth import current_session, require_auth
from ..errors import NotFound
from ..query import TaskListQuery
from ..validation import json_body, read_task_fields

logger = logging.getLogger(__name__)

tasks_bp = Blueprint("tasks", __name__)

TASK_NOT_FOUND = "Task not found"


@tasks_bp.route("", methods=["POST"])
@require_auth
def create_task() -> tuple[Response, int]:
    """
    Create a task for the caller.

    Expects ``title`` and optionally ``description``, ``dueDate`` and
    ``status`` (defaults to ``pending``).

    Returns:
        201 with ``message`` and the created ``task``; 400 on invalid input;
        404 when the token's user no longer exists.
    """
    fields = read_task_fields(json_body(), creating=True)
    session = current_session()
    if users.find_by_id(session.user_id) is None:
        raise NotFound("User not found")
    task = tasks.create_task(session.user_id, **fields)
    logger.info("Created task id=%s for user_id=%s", task.id, session.user_id)
    return jsonify({"message": "Task created successfully", "task": task.to_dict()}), 201


@tasks_bp.route("", methods=["GET"])
@require_auth
def list_tasks() -> tuple[Response, int]:
    """
    List the caller's tasks.

    Query parameters: ``status``, ``searchTerm``, ``sortBy``, ``sortOrder``,
    ``limit`` (1..100, default 50) and ``offset`` (default 0).  See
    :mod:`tracker_app.query` for the validation rules.

    Returns:
        200 with a JSON array of tasks; 400 on an invalid filter.
    """
    query = TaskListQuery.from_args(
        current_session().user_id,
        request.args,
        max_limit=current_app.config.get("MAX_PAGE_LIMIT", 100),
        default_limit=current_app.config.get("DEFAULT_PAGE_LIMIT", 50),
    )
    logger.info(
        "GET /api/tasks - user_id=%s sort=%s %s limit=%s offset=%s",
        query.user_id,
        query.sort_by.value,
        query.sort_order.value,
        query.limit,
        query.offset,
    )
    return jsonify([task.to_dict() for task in tasks.list_tasks(query)]), 200


@tasks_bp.route("/stats", methods=["GET"])
@require_auth
def task_stats() -> tuple[Response, int]:
    return jsonify(tasks.task_stats(current_session().user_id)), 200


@tasks_bp.route("/<int:task_id>", methods=["GET"])
@require_auth
def get_task(task_id: int) -> tuple[Response, int]:
    task = tasks.get_task(task_id, current_session().user_id)
    if task is None:
        raise NotFound(TASK_NOT_FOUND)
    return jsonify(task.to_dict()), 200


@tasks_bp.route("/<int:task_id>", methods=["PUT"])
@require_auth
def update_task(task_id: int) -> tuple[Response, int]:
    """
    Partially update a task.

    Only fields present in the body change; ``updated_at`` is always
    refreshed.  An explicit ``null`` clears ``description`` or ``dueDate``.

    Returns:
        200 with ``message`` and the updated ``task``; 400 on invalid input;
        404 if the caller owns no task with this id.
    """
    fields = read_task_fields(json_body(), creating=False)
    task = tasks.update_task(task_id, current_session().user_id, fields)
    if task is None:
        raise NotFound(TASK_NOT_FOUND)
    return jsonify({"message": "Task updated successfully", "task": task.to_dict()}), 200


@tasks_bp.route("/<int:task_id>", methods=["DELETE"])
@require_auth
def delete_task(task_id: int) -> tuple[Response, int]:
    if not tasks.delete_task(task_id, current_session().user_id):
        raise NotFound(TASK_NOT_FOUND)
    return jsonify({"message": "Task deleted successfully"}), 200
