"""
Shared pytest fixtures for the Task Tracker test suite.

Provides the Flask application, test client, database session, user and
task factories, and bearer headers for two distinct users so isolation
tests can act as both sides.

Key SDET Concepts Demonstrated:
- Session-scoped vs function-scoped fixtures for performance and isolation
- Factory fixtures (user_factory, task_factory) for flexible test data
- Fixture teardown that drops every table between tests
- Tokens minted through the same helper the application uses
"""

from __future__ import annotations

import os
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
from faker import Faker

# Set testing environment before importing the app
os.environ["FLASK_ENV"] = "testing"
os.environ["TEST_JWT_SECRET_KEY"] = "test-jwt-secret-key-for-local-tests-123456"

from tests.helpers import auth_headers, create_test_token
from tracker_app import create_app, db
from tracker_app.accounts import hash_password
from tracker_app.models import Task, TaskStatus, User

fake = Faker()

DEFAULT_PASSWORD = "secret1"


# -----------------------------------------------------------------------------
# Application Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture(scope="session")
def app():
    """
    Provide the Flask application for the whole test session.

    The factory is invoked once with the 'testing' configuration.
    """
    application = create_app("testing")
    yield application


@pytest.fixture(scope="function")
def client(app):
    """Provide a fresh Flask test client for each test."""
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture(scope="function")
def db_session(app):
    """
    Provide a clean database for each test function.

    Creates all tables before the test, yields the db instance, then rolls
    back uncommitted changes and drops all tables.
    """
    with app.app_context():
        db.create_all()
        yield db
        db.session.rollback()
        db.drop_all()


# -----------------------------------------------------------------------------
# Test Data Factory Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def user_factory(db_session) -> Callable[..., User]:
    """
    Factory that persists User rows directly, bypassing the API.

    Example:
        def test_something(user_factory):
            user = user_factory(email="bob@example.com")
    """

    def _create_user(
        *,
        name: str | None = None,
        email: str | None = None,
        password: str = DEFAULT_PASSWORD,
    ) -> User:
        user = User(
            name=name or fake.name(),
            email=email or fake.unique.email().lower(),
            password=hash_password(password),
        )
        db_session.session.add(user)
        db_session.session.commit()
        return user

    return _create_user


@pytest.fixture
def task_factory(db_session) -> Callable[..., Task]:
    """
    Factory that persists Task rows for a given owner.

    Timestamps default to "now" but can be pinned so ordering tests are
    deterministic.
    """

    def _create_task(
        *,
        user_id: int,
        title: str | None = None,
        description: str | None = None,
        status: str = TaskStatus.PENDING.value,
        due_date: datetime | None = None,
        created_at: datetime | None = None,
    ) -> Task:
        timestamp = created_at or datetime.now(timezone.utc)
        task = Task(
            user_id=user_id,
            title=title or fake.sentence(nb_words=4),
            description=description if description is not None else fake.paragraph(),
            status=status,
            due_date=due_date,
            created_at=timestamp,
            updated_at=timestamp,
        )
        db_session.session.add(task)
        db_session.session.commit()
        return task

    return _create_task


@pytest.fixture
def user(user_factory) -> User:
    """The primary test user."""
    return user_factory(name="Alice", email="alice@example.com")


@pytest.fixture
def second_user(user_factory) -> User:
    """A second user for tenant-isolation tests."""
    return user_factory(name="Bob", email="bob@example.com")


@pytest.fixture
def token_for(app) -> Callable[..., str]:
    """Return a callable that mints a valid token for a user."""

    def _token_for(owner: User, **kwargs: Any) -> str:
        return create_test_token(
            user_id=owner.id,
            email=owner.email,
            secret=app.config["JWT_SECRET_KEY"],
            **kwargs,
        )

    return _token_for


@pytest.fixture
def api_headers(user, token_for) -> dict[str, str]:
    """Bearer + JSON headers for the primary user."""
    return auth_headers(token_for(user))


@pytest.fixture
def second_user_headers(second_user, token_for) -> dict[str, str]:
    """Bearer + JSON headers for the second user."""
    return auth_headers(token_for(second_user))


@pytest.fixture
def multiple_tasks(user, task_factory) -> list[Task]:
    """
    Four tasks for the primary user with distinct statuses, titles and
    creation times (oldest first).
    """
    base = datetime.now(timezone.utc) - timedelta(days=10)
    return [
        task_factory(
            user_id=user.id,
            title="Buy milk",
            description="Semi-skimmed",
            status=TaskStatus.PENDING.value,
            due_date=base + timedelta(days=20),
            created_at=base,
        ),
        task_factory(
            user_id=user.id,
            title="Write report",
            description="Quarterly numbers for MILKING operations",
            status=TaskStatus.IN_PROGRESS.value,
            due_date=base + timedelta(days=12),
            created_at=base + timedelta(days=1),
        ),
        task_factory(
            user_id=user.id,
            title="Call plumber",
            description="Kitchen sink",
            status=TaskStatus.COMPLETED.value,
            created_at=base + timedelta(days=2),
        ),
        task_factory(
            user_id=user.id,
            title="Archive photos",
            description="",
            status=TaskStatus.IN_PROGRESS.value,
            due_date=base + timedelta(days=15),
            created_at=base + timedelta(days=3),
        ),
    ]
