"""
Credential store: single-row persistence operations on ``users``.

``find_by_email`` returns the full row (the password hash is needed for
login); everything handed to API responses goes through ``User.to_dict``,
which never includes the hash.
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from . import db
from .errors import Conflict
from .models import User

logger = logging.getLogger(__name__)

# Marks a keyword the caller did not supply, as opposed to an explicit None.
MISSING = object()


def create_user(name: str, email: str, password_hash: str) -> User:
    """
    Insert a new user row.

    Raises:
        Conflict: If the email is already registered.
    """
    user = User(name=name, email=email, password=password_hash)
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        logger.warning("Duplicate email on create_user: %s", email)
        raise Conflict("User already exists with this email") from exc
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Error creating user %s", email)
        raise
    return user


def find_by_email(email: str) -> User | None:
    try:
        return db.session.scalar(select(User).where(User.email == email))
    except SQLAlchemyError:
        logger.exception("Error finding user by email %s", email)
        raise


def find_by_id(user_id: int) -> User | None:
    try:
        return db.session.get(User, user_id)
    except SQLAlchemyError:
        logger.exception("Error finding user %s", user_id)
        raise


def update_profile(user_id: int, name=MISSING, email=MISSING) -> User | None:
    """
    Apply a partial profile update.

    Args:
        user_id: The user to update.
        name: New display name, or ``MISSING`` to keep the current one.
        email: New email, or ``MISSING`` to keep the current one.

    Returns:
        The updated user, or ``None`` if no such user exists.

    Raises:
        Conflict: If *email* already belongs to another user.
    """
    user = find_by_id(user_id)
    if user is None:
        return None

    if email is not MISSING and email != user.email:
        existing = find_by_email(email)
        if existing is not None and existing.id != user_id:
            raise Conflict("Email is already in use")
        user.email = email
    if name is not MISSING:
        user.name = name

    try:
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        raise Conflict("Email is already in use") from exc
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Error updating user %s", user_id)
        raise
    return user


def update_password(user_id: int, password_hash: str) -> bool:
    """Persist a new password hash.  Returns ``False`` if the user is gone."""
    user = find_by_id(user_id)
    if user is None:
        return False
    user.password = password_hash
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Error updating password for user %s", user_id)
        raise
    return True
