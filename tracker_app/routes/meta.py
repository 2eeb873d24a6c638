"""Welcome and health-check endpoints (both public)."""

from __future__ import annotations

import logging
import os

from flask import Blueprint, Response, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from .. import db

logger = logging.getLogger(__name__)

meta_bp = Blueprint("meta", __name__)


@meta_bp.route("/", methods=["GET"])
def index() -> tuple[Response, int]:
    return jsonify({"message": "Welcome to the Task Tracker API"}), 200


@meta_bp.route("/api/health", methods=["GET"])
def health_check() -> tuple[Response, int]:
    """
    Liveness / readiness probe.

    Runs a trivial ``SELECT 1`` so the probe fails when the database is
    unreachable.

    Returns:
        200 with ``"database": "ok"``, or 503 with
        ``"database": "unavailable"``.
    """
    body = {
        "status": "healthy",
        "service": "tasks",
        "database": "ok",
        "environment": os.getenv("ENVIRONMENT", "unknown"),
    }
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Health check could not reach the database")
        db.session.rollback()
        body.update(status="unhealthy", database="unavailable")
        return jsonify(body), 503
    return jsonify(body), 200
