"""
Routes package for the Task Tracker API.

Blueprints:
- meta: welcome and health endpoints
- users: registration, login and profile endpoints under ``/api/users``
- tasks: task CRUD, listing and statistics under ``/api/tasks``
"""

from __future__ import annotations

from flask import Flask


def register_blueprints(app: Flask) -> None:
    from .meta import meta_bp
    from .tasks import tasks_bp
    from .users import users_bp

    app.register_blueprint(meta_bp)
    app.register_blueprint(users_bp, url_prefix="/api/users")
    app.register_blueprint(tasks_bp, url_prefix="/api/tasks")
