"""
Request-body validation helpers shared by the API blueprints.

Each ``FieldErrors`` instance collects field-level problems for one request
so a client sees every invalid field at once; ``raise_if_any`` turns them
into a :class:`~tracker_app.errors.ValidationError`.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any

from flask import request

from .errors import ValidationError
from .models import TaskStatus

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 6
MAX_TITLE_LENGTH = 255
MAX_NAME_LENGTH = 255


class FieldErrors:
    def __init__(self) -> None:
        self.errors: list[dict[str, str]] = []

    def add(self, field: str, message: str) -> None:
        self.errors.append({"field": field, "message": message})

    def raise_if_any(self) -> None:
        if self.errors:
            raise ValidationError(errors=self.errors)


def json_body() -> dict[str, Any]:
    """Return the request body as a dict, or fail with a 400."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def normalize_email(value: Any) -> str | None:
    """Strip and lower-case an email; ``None`` if it is not a valid address."""
    if not isinstance(value, str):
        return None
    email = value.strip().lower()
    if len(email) > 255 or not EMAIL_PATTERN.match(email):
        return None
    return email


def non_blank(value: Any) -> str | None:
    """Return the stripped string, or ``None`` if it is missing or blank."""
    if not isinstance(value, str) or not value.strip():
        return None
    return value.strip()


def parse_datetime(value: str) -> datetime:
    """
    Parse an ISO-8601 date or datetime into an aware UTC datetime.

    A trailing ``Z`` is accepted and naive values are taken to be UTC.

    Raises:
        ValueError: If *value* is not ISO-8601.
    """
    parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def read_task_fields(data: dict[str, Any], *, creating: bool) -> dict[str, Any]:
    """
    Validate a task payload and return the fields to persist.

    Accepts ``dueDate`` (or its alias ``due_date``).  On create ``title`` is
    required; on update every field is optional and only keys present in
    *data* appear in the result, so callers can tell "absent" from "null".

    Raises:
        ValidationError: With one entry per offending field.
    """
    errors = FieldErrors()
    fields: dict[str, Any] = {}

    if "title" in data or creating:
        title = non_blank(data.get("title"))
        if title is None:
            message = "Title is required" if creating else "Title cannot be empty if provided"
            errors.add("title", message)
        elif len(title) > MAX_TITLE_LENGTH:
            errors.add("title", f"Title must be {MAX_TITLE_LENGTH} characters or less")
        else:
            fields["title"] = title

    if "description" in data:
        description = data["description"]
        if description is None:
            fields["description"] = None
        elif isinstance(description, str):
            fields["description"] = description.strip()
        else:
            errors.add("description", "Description must be a string")

    if "status" in data:
        if data["status"] in TaskStatus.values():
            fields["status"] = data["status"]
        else:
            errors.add("status", "Status must be pending, in_progress, or completed")

    due_key = "dueDate" if "dueDate" in data else "due_date" if "due_date" in data else None
    if due_key is not None:
        raw_due = data[due_key]
        if raw_due is None:
            fields["due_date"] = None
        else:
            try:
                fields["due_date"] = parse_datetime(raw_due)
            except (TypeError, ValueError, AttributeError):
                errors.add("dueDate", "Due date must be a valid date")

    errors.raise_if_any()
    return fields
