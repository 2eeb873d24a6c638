"""
User account endpoints.

Endpoints:
    POST /api/users/register  -- Create an account and receive a token.
    POST /api/users/login     -- Authenticate and receive a token.
    GET  /api/users/me        -- Current user's profile (bearer).
    PUT  /api/users/profile   -- Update name and/or email (bearer).
    PUT  /api/users/password  -- Change password (bearer).

Emails are stripped and lower-cased before they are stored or looked up, so
``Alice@Example.com`` and ``alice@example.com`` name the same account.
"""

from __future__ import annotations

from typing import Any

from flask import Blueprint, Response, jsonify

from .. import accounts, users
from ..auth import current_session, require_auth
from ..errors import NotFound
from ..validation import (
    MAX_NAME_LENGTH,
    MIN_PASSWORD_LENGTH,
    FieldErrors,
    json_body,
    non_blank,
    normalize_email,
)

users_bp = Blueprint("users", __name__)


def _public_user(user) -> dict[str, Any]:
    return {"id": user.id, "name": user.name, "email": user.email}


def _check_name(errors: FieldErrors, value: Any, message: str) -> str | None:
    name = non_blank(value)
    if name is None:
        errors.add("name", message)
    elif len(name) > MAX_NAME_LENGTH:
        errors.add("name", f"Name must be {MAX_NAME_LENGTH} characters or less")
        return None
    return name


@users_bp.route("/register", methods=["POST"])
def register() -> tuple[Response, int]:
    """
    Register a new user.

    Returns:
        201 with ``message``, ``user`` and ``token``.
        400 on validation failure.
        409 if the email is already registered.
    """
    data = json_body()
    errors = FieldErrors()
    name = _check_name(errors, data.get("name"), "Name is required")
    email = normalize_email(data.get("email"))
    if email is None:
        errors.add("email", "Valid email is required")
    password = data.get("password")
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        errors.add(
            "password",
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long",
        )
    errors.raise_if_any()

    user, token = accounts.register(name, email, password)
    return (
        jsonify(
            {
                "message": "User registered successfully",
                "user": _public_user(user),
                "token": token,
            }
        ),
        201,
    )


@users_bp.route("/login", methods=["POST"])
def login() -> tuple[Response, int]:
    """
    Authenticate with email and password.

    Returns:
        200 with ``message``, ``user`` and ``token``.
        400 if the email is malformed or the password missing.
        401 with the same body for an unknown email or a wrong password.
    """
    data = json_body()
    errors = FieldErrors()
    email = normalize_email(data.get("email"))
    if email is None:
        errors.add("email", "Valid email is required")
    password = data.get("password")
    if not isinstance(password, str) or not password:
        errors.add("password", "Password is required")
    errors.raise_if_any()

    user, token = accounts.login(email, password)
    return (
        jsonify({"message": "Login successful", "user": _public_user(user), "token": token}),
        200,
    )


@users_bp.route("/me", methods=["GET"])
@require_auth
def me() -> tuple[Response, int]:
    user = users.find_by_id(current_session().user_id)
    if user is None:
        raise NotFound("User not found")
    return jsonify(user.to_dict()), 200


@users_bp.route("/profile", methods=["PUT"])
@require_auth
def update_profile() -> tuple[Response, int]:
    """
    Update the caller's name and/or email.

    Returns:
        200 with ``message`` and the updated ``user``.
        400 on validation failure, 404 if the user is gone, 409 if the new
        email belongs to someone else.
    """
    data = json_body()
    errors = FieldErrors()
    changes: dict[str, Any] = {}
    if "name" in data:
        name = _check_name(errors, data["name"], "Name cannot be empty if provided")
        if name is not None:
            changes["name"] = name
    if "email" in data:
        email = normalize_email(data["email"])
        if email is None:
            errors.add("email", "Valid email is required if provided")
        else:
            changes["email"] = email
    errors.raise_if_any()

    user = users.update_profile(current_session().user_id, **changes)
    if user is None:
        raise NotFound("User not found")
    return jsonify({"message": "Profile updated successfully", "user": user.to_dict()}), 200


@users_bp.route("/password", methods=["PUT"])
@require_auth
def change_password() -> tuple[Response, int]:
    data = json_body()
    errors = FieldErrors()
    current_password = data.get("currentPassword")
    if not isinstance(current_password, str) or not current_password:
        errors.add("currentPassword", "Current password is required")
    new_password = data.get("newPassword")
    if not isinstance(new_password, str) or len(new_password) < MIN_PASSWORD_LENGTH:
        errors.add(
            "newPassword",
            f"New password must be at least {MIN_PASSWORD_LENGTH} characters long",
        )
    errors.raise_if_any()

    accounts.change_password(current_session().user_id, current_password, new_password)
    return jsonify({"message": "Password updated successfully"}), 200
