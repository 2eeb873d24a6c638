"""
Error taxonomy and the JSON error handlers that map it onto HTTP.

Data-access and service code raise the exceptions defined here (or let
database exceptions propagate); :func:`register_error_handlers` is the one
place that turns them into status codes and response bodies.
"""

from __future__ import annotations

import logging
from typing import Any

from flask import Flask, Response, current_app, jsonify
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException, MethodNotAllowed, NotFound as RouteNotFound

from . import db

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Base class for errors that carry their own HTTP status."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message}


class ValidationError(ApiError):
    """
    Malformed or out-of-range input.

    ``errors`` holds field-level details as ``{"field", "message"}`` dicts.
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Validation Error",
        errors: list[dict[str, str]] | None = None,
    ) -> None:
        super().__init__(message)
        self.errors = errors or []

    @classmethod
    def for_field(cls, field: str, message: str) -> ValidationError:
        return cls(errors=[{"field": field, "message": message}])

    def to_dict(self) -> dict[str, Any]:
        body = super().to_dict()
        if self.errors:
            body["errors"] = self.errors
        return body


class Unauthorized(ApiError):
    status_code = 401


class NotFound(ApiError):
    status_code = 404


class Conflict(ApiError):
    status_code = 409


def _json_error(body: dict[str, Any], status_code: int) -> tuple[Response, int]:
    return jsonify(body), status_code


def register_error_handlers(app: Flask) -> None:
    """
    Install the JSON error handlers on *app*.

    Args:
        app: The application being assembled by ``create_app``.
    """

    @app.errorhandler(ApiError)
    def handle_api_error(error: ApiError) -> tuple[Response, int]:
        return _json_error(error.to_dict(), error.status_code)

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(error: IntegrityError) -> tuple[Response, int]:
        # Unique violations outside the explicit email checks land here too;
        # task creation checks its owner first, so FK failures do not.
        db.session.rollback()
        logger.warning("Integrity error: %s", error.orig)
        return _json_error({"message": "Resource already exists"}, 409)

    @app.errorhandler(RouteNotFound)
    def handle_unknown_route(_: RouteNotFound) -> tuple[Response, int]:
        return _json_error({"message": "Endpoint not found"}, 404)

    @app.errorhandler(MethodNotAllowed)
    def handle_method_not_allowed(_: MethodNotAllowed) -> tuple[Response, int]:
        return _json_error({"message": "Method not allowed"}, 405)

    @app.errorhandler(HTTPException)
    def handle_http_exception(error: HTTPException) -> tuple[Response, int]:
        return _json_error({"message": error.description or error.name}, error.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(error: Exception) -> tuple[Response, int]:
        db.session.rollback()
        logger.exception("Internal server error: %s", error)
        body: dict[str, Any] = {"message": "Internal server error"}
        if current_app.debug:
            body["error"] = str(error)
        return _json_error(body, 500)
