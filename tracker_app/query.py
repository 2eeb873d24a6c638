"""
Task listing query builder.

Turns the loosely typed ``GET /api/tasks`` query string into a
:class:`TaskListQuery` and then into a SQLAlchemy ``Select``.

The ``WHERE`` clause is a conjunction of a fixed set of predicate variants
(:class:`OwnerEquals`, :class:`StatusEquals`,
:class:`TitleOrDescriptionContains`), every literal travelling as a bound
parameter.  The ``ORDER BY`` column is the only identifier chosen from
input, and it is looked up in :data:`SORT_COLUMNS` from a validated
:class:`SortColumn`, never taken from the raw string.

Validation is deliberately asymmetric: a bad ``status``, ``limit`` or
``offset`` fails the request, while an unknown ``sortBy`` or ``sortOrder``
silently falls back to ``created_at`` / ``DESC``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from sqlalchemy import Select, and_, case, func, or_, select
from sqlalchemy.sql.elements import ColumnElement

from .errors import ValidationError
from .models import MAX_SQL_INTEGER, Task, TaskStatus

DEFAULT_LIMIT = 50
MAX_LIMIT = 100
LIKE_ESCAPE = "\\"


class SortColumn(str, Enum):
    """Columns a task listing may be ordered by."""

    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"
    DUE_DATE = "due_date"
    TITLE = "title"
    STATUS = "status"

    @classmethod
    def parse(cls, value: Any) -> SortColumn:
        try:
            return cls(value)
        except ValueError:
            return cls.CREATED_AT


class SortOrder(str, Enum):
    ASC = "ASC"
    DESC = "DESC"

    @classmethod
    def parse(cls, value: Any) -> SortOrder:
        if isinstance(value, str) and value.upper() == cls.ASC.value:
            return cls.ASC
        return cls.DESC


SORT_COLUMNS = {
    SortColumn.CREATED_AT: Task.created_at,
    SortColumn.UPDATED_AT: Task.updated_at,
    SortColumn.DUE_DATE: Task.due_date,
    SortColumn.TITLE: Task.title,
    SortColumn.STATUS: Task.status,
}


@dataclass(frozen=True)
class OwnerEquals:
    user_id: int

    def clause(self) -> ColumnElement[bool]:
        return Task.user_id == self.user_id


@dataclass(frozen=True)
class StatusEquals:
    status: TaskStatus

    def clause(self) -> ColumnElement[bool]:
        return Task.status == self.status.value


@dataclass(frozen=True)
class TitleOrDescriptionContains:
    """Case-insensitive substring match on title OR description."""

    term: str

    def pattern(self) -> str:
        escaped = (
            self.term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
            .replace("%", LIKE_ESCAPE + "%")
            .replace("_", LIKE_ESCAPE + "_")
        )
        return f"%{escaped}%"

    def clause(self) -> ColumnElement[bool]:
        pattern = self.pattern()
        return or_(
            Task.title.ilike(pattern, escape=LIKE_ESCAPE),
            Task.description.ilike(pattern, escape=LIKE_ESCAPE),
        )


Predicate = Union[OwnerEquals, StatusEquals, TitleOrDescriptionContains]


def _parse_int(
    args: Mapping[str, Any],
    name: str,
    default: int,
    minimum: int,
    maximum: int | None,
    message: str,
    errors: list[dict[str, str]],
) -> int:
    raw = args.get(name)
    if raw is None or raw == "":
        return default
    if isinstance(raw, bool):
        errors.append({"field": name, "message": message})
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        errors.append({"field": name, "message": message})
        return default
    if value < minimum or (maximum is not None and value > maximum):
        errors.append({"field": name, "message": message})
        return default
    return value


@dataclass(frozen=True)
class TaskListQuery:
    """A validated, owner-scoped task listing request."""

    user_id: int
    status: TaskStatus | None = None
    search_term: str | None = None
    sort_by: SortColumn = SortColumn.CREATED_AT
    sort_order: SortOrder = SortOrder.DESC
    limit: int = DEFAULT_LIMIT
    offset: int = 0
    predicates: tuple[Predicate, ...] = field(init=False)

    def __post_init__(self) -> None:
        predicates: list[Predicate] = [OwnerEquals(self.user_id)]
        if self.status is not None:
            predicates.append(StatusEquals(self.status))
        if self.search_term:
            predicates.append(TitleOrDescriptionContains(self.search_term))
        object.__setattr__(self, "predicates", tuple(predicates))

    @classmethod
    def from_args(
        cls,
        user_id: int,
        args: Mapping[str, Any],
        max_limit: int = MAX_LIMIT,
        default_limit: int = DEFAULT_LIMIT,
    ) -> TaskListQuery:
        """
        Build a query from request arguments.

        Args:
            user_id: The requesting user; always the first predicate.
            args: Query-string mapping (``request.args`` or a plain dict)
                with optional ``status``, ``searchTerm``, ``sortBy``,
                ``sortOrder``, ``limit`` and ``offset``.
            max_limit: Largest accepted ``limit``.
            default_limit: ``limit`` used when the argument is absent.

        Raises:
            ValidationError: If ``status`` is not a known status, ``limit``
                is not an integer in ``1..max_limit`` or ``offset`` is not a
                non-negative integer that fits a 64-bit column.  All
                offending fields are reported.
        """
        errors: list[dict[str, str]] = []

        status = None
        raw_status = args.get("status")
        if raw_status not in (None, ""):
            try:
                status = TaskStatus(raw_status)
            except ValueError:
                errors.append({"field": "status", "message": "Invalid status filter"})

        search_term = args.get("searchTerm")
        if isinstance(search_term, str):
            search_term = search_term.strip() or None
        else:
            search_term = None

        limit = _parse_int(
            args,
            "limit",
            default_limit,
            1,
            max_limit,
            f"Limit must be between 1 and {max_limit}",
            errors,
        )
        offset = _parse_int(
            args,
            "offset",
            0,
            0,
            MAX_SQL_INTEGER,
            "Offset must be a non-negative integer",
            errors,
        )

        if errors:
            raise ValidationError(errors=errors)

        return cls(
            user_id=user_id,
            status=status,
            search_term=search_term,
            sort_by=SortColumn.parse(args.get("sortBy")),
            sort_order=SortOrder.parse(args.get("sortOrder")),
            limit=limit,
            offset=offset,
        )

    def where_clause(self) -> ColumnElement[bool]:
        return and_(*(predicate.clause() for predicate in self.predicates))

    def statement(self) -> Select:
        """Render the listing as a parameterised ``SELECT``."""
        column = SORT_COLUMNS[self.sort_by]
        if self.sort_order is SortOrder.ASC:
            ordering = (column.asc(), Task.id.asc())
        else:
            ordering = (column.desc(), Task.id.desc())
        return (
            select(Task)
            .where(self.where_clause())
            .order_by(*ordering)
            .limit(self.limit)
            .offset(self.offset)
        )


def stats_statement(user_id: int) -> Select:
    """One-pass aggregate of a user's tasks: total plus a count per status."""
    columns = [func.count(Task.id).label("total")]
    for status in TaskStatus:
        columns.append(
            func.coalesce(
                func.sum(case((Task.status == status.value, 1), else_=0)), 0
            ).label(status.value)
        )
    return select(*columns).where(OwnerEquals(user_id).clause())
