"""
Account operations: registration, login and password changes.

Passwords are hashed with Werkzeug's ``generate_password_hash``, which mixes
a random salt into every hash, so two users with the same password end up
with different stored secrets.
"""

from __future__ import annotations

import logging

from flask import current_app
from werkzeug.security import check_password_hash, generate_password_hash

from . import users
from .errors import Conflict, NotFound, Unauthorized, ValidationError
from .jwt import create_token
from .models import User

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def check_password(password_hash: str, password: str) -> bool:
    return check_password_hash(password_hash, password)


def issue_token(user: User) -> str:
    """Sign a bearer token for *user* using the application's settings."""
    return create_token(
        user_id=user.id,
        email=user.email,
        secret=current_app.config["JWT_SECRET_KEY"],
        expiry_days=current_app.config["JWT_EXPIRY_DAYS"],
    )


def register(name: str, email: str, password: str) -> tuple[User, str]:
    """
    Create an account and sign the caller in.

    Returns:
        The new user and a freshly issued token.

    Raises:
        Conflict: If *email* is already registered.
    """
    if users.find_by_email(email) is not None:
        raise Conflict("User already exists with this email")

    user = users.create_user(name, email, hash_password(password))
    logger.info("Registered user id=%s", user.id)
    return user, issue_token(user)


def login(email: str, password: str) -> tuple[User, str]:
    """
    Verify credentials and issue a token.

    An unknown email and a wrong password raise the same error so the
    response does not reveal which check failed.

    Raises:
        Unauthorized: If the credentials do not match a user.
    """
    user = users.find_by_email(email)
    if user is None or not check_password(user.password, password):
        raise Unauthorized(INVALID_CREDENTIALS)
    return user, issue_token(user)


def change_password(user_id: int, current_password: str, new_password: str) -> None:
    """
    Replace the user's password after re-checking the current one.

    Raises:
        NotFound: If the user no longer exists.
        ValidationError: If *current_password* does not verify.
    """
    user = users.find_by_id(user_id)
    if user is None:
        raise NotFound("User not found")
    if not check_password(user.password, current_password):
        raise ValidationError("Current password is incorrect")

    users.update_password(user_id, hash_password(new_password))
    logger.info("Password changed for user id=%s", user_id)
