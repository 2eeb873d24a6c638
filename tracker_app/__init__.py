"""
Task Tracker Flask application factory.

Builds the Flask application that serves the user and task REST API.  The
factory pattern lets the WSGI server, the test-suite and the Flask CLI each
obtain an identically wired application for a given configuration name.

Key Concepts Demonstrated:
- Application factory pattern (create_app)
- Flask extension initialisation (SQLAlchemy)
- Blueprint-based route registration
- Centralised JSON error handling
"""

from __future__ import annotations

import logging
import os
import sqlite3
from pathlib import Path

from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event
from sqlalchemy.engine import Engine

from config import DEV_JWT_SECRET, get_config

db = SQLAlchemy()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@event.listens_for(Engine, "connect")
def _configure_sqlite_connection(dbapi_connection, _connection_record) -> None:
    """
    Prepare each SQLite connection.

    Turns on FK enforcement so deleting a user cascades to their tasks, and
    replaces the built-in ``lower()`` (ASCII only) with Python's Unicode
    case folding so ``ilike`` searches match non-ASCII text.
    """
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
        dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def _ensure_sqlite_db_parent_exists(database_uri: str) -> None:
    """Create parent directories for file-based SQLite URIs when missing."""
    sqlite_prefix = "sqlite:///"
    if not database_uri.startswith(sqlite_prefix):
        return

    sqlite_path = database_uri[len(sqlite_prefix) :].split("?", 1)[0]
    if not sqlite_path or sqlite_path == ":memory:":
        return

    Path(sqlite_path).parent.mkdir(parents=True, exist_ok=True)


def create_app(config_name: str | None = None) -> Flask:
    """
    Create and configure the Task Tracker application.

    Args:
        config_name: The configuration environment to load (e.g.
            ``"development"``, ``"testing"``, ``"production"``).  When
            ``None``, the value is resolved from the ``FLASK_ENV``
            environment variable, defaulting to ``"development"``.

    Returns:
        A fully configured :class:`~flask.Flask` application with the
        database schema created.

    Raises:
        RuntimeError: If the production profile is selected while the JWT
            secret is still the development default.
    """
    app = Flask(__name__, instance_relative_config=True)
    config_class = get_config(config_name)
    app.config.from_object(config_class)

    if not app.debug and not app.testing and app.config["JWT_SECRET_KEY"] == DEV_JWT_SECRET:
        raise RuntimeError("JWT_SECRET_KEY must be set outside development and testing.")

    logger.info("Creating task tracker app with config: %s", config_class.__name__)

    os.makedirs(app.instance_path, exist_ok=True)
    _ensure_sqlite_db_parent_exists(app.config.get("SQLALCHEMY_DATABASE_URI", ""))

    db.init_app(app)

    from .errors import register_error_handlers
    from .routes import register_blueprints

    register_blueprints(app)
    register_error_handlers(app)

    # Import models before create_all so both tables are registered.
    from . import models  # noqa: F401

    with app.app_context():
        db.create_all()
        logger.info("Database tables created")

    return app
