"""
Database models for the Task Tracker.

Defines the :class:`User` and :class:`Task` ORM models.  Every task belongs
to exactly one user through ``user_id``; the foreign key is declared with
``ON DELETE CASCADE`` so removing a user removes their tasks at the database
level.

Key Concepts Demonstrated:
- SQLAlchemy declarative models with explicit foreign-key behaviour
- ``str, Enum`` inheritance for JSON-friendly enumeration values
- Safe serialisation that excludes the password hash
- Timezone-aware datetime handling for SQLite compatibility
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from . import db


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_utc_iso(value: datetime | None) -> str | None:
    """
    Convert a datetime to a UTC ISO-8601 string.

    SQLite does not store timezone information, so values read back from
    the database may be naive even though they were written in UTC.  Naive
    values are assumed UTC; aware values are converted.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return value.isoformat()


# Largest value a signed 64-bit INTEGER column or bind parameter can hold.
MAX_SQL_INTEGER = 2**63 - 1


class TaskStatus(str, Enum):
    """Lifecycle status of a task."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"

    @classmethod
    def values(cls) -> list[str]:
        return [status.value for status in cls]


class User(db.Model):
    """
    A registered account.

    Attributes:
        id: Auto-incrementing integer primary key.
        email: Unique email address, indexed for login lookups.
        password: Werkzeug-generated salted hash; never serialised.
        name: Display name.
        created_at: Timestamp of account creation, stored as UTC.
    """

    __tablename__ = "users"

    id: int = db.Column(db.Integer, primary_key=True)
    email: str = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password: str = db.Column(db.String(255), nullable=False)
    name: str = db.Column(db.String(255), nullable=False)
    created_at: datetime = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    def to_dict(self) -> dict[str, Any]:
        """
        Return a client-safe representation.

        ``password`` is deliberately left out so the result can be returned
        directly in API responses.
        """
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "created_at": to_utc_iso(self.created_at),
        }

    def __repr__(self) -> str:
        return f"<User {self.id}: {self.email}>"


class Task(db.Model):
    """
    Task owned by a single user.

    Attributes:
        id: Auto-incrementing primary key.
        user_id: Owning user.  Immutable after creation; every lookup by
            ``id`` is also filtered by this column.
        title: Short summary of the task.
        description: Optional free text.
        status: Current lifecycle status (see ``TaskStatus``).
        due_date: Optional timezone-aware deadline.
        created_at: Timestamp of task creation (UTC).
        updated_at: Timestamp of last modification (UTC).
    """

    __tablename__ = "tasks"

    id: int = db.Column(db.Integer, primary_key=True)
    user_id: int = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: str = db.Column(db.String(255), nullable=False)
    description: str | None = db.Column(db.Text, nullable=True)
    status: str = db.Column(
        db.String(50),
        nullable=False,
        default=TaskStatus.PENDING.value,
    )
    due_date: datetime | None = db.Column(db.DateTime(timezone=True), nullable=True)
    created_at: datetime = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    updated_at: datetime = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    def to_dict(self) -> dict[str, Any]:
        """Serialise the task to a JSON-safe dictionary."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "title": self.title,
            "description": self.description,
            "status": self.status,
            "due_date": to_utc_iso(self.due_date),
            "created_at": to_utc_iso(self.created_at),
            "updated_at": to_utc_iso(self.updated_at),
        }

    def __repr__(self) -> str:
        return f"<Task {self.id}: {self.title}>"
