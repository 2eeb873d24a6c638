"""
Configuration classes for the Task Tracker API.

A shared ``Config`` base class holds defaults and the environment-specific
subclasses (``DevelopmentConfig``, ``TestingConfig``, ``ProductionConfig``)
override only what differs.  Every value can be supplied through an
environment variable so the same code-base serves any deployment.

Key Concepts Demonstrated:
- Inheritance-based configuration hierarchy
- Environment variable overrides with sensible defaults
- Separate database for testing to protect development data
- JWT settings (shared secret, 7-day expiry, clock skew)
"""

from __future__ import annotations

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent

DEV_JWT_SECRET = "tracker-dev-jwt-secret-change-in-production"


class Config:
    """
    Base configuration shared by all environments.

    Attributes:
        SECRET_KEY: Flask session signing key.
        SQLALCHEMY_DATABASE_URI: Database connection string (default: local
            SQLite file).
        JWT_SECRET_KEY: Server-held secret used to sign and verify bearer
            tokens (HS256).
        JWT_EXPIRY_DAYS: Validity window of a newly issued token.
        JWT_CLOCK_SKEW_SECONDS: Allowed clock drift when checking ``exp``.
        DEFAULT_PAGE_LIMIT: Page size used when a listing omits ``limit``.
        MAX_PAGE_LIMIT: Largest ``limit`` a listing may request.
    """

    SECRET_KEY: str = os.environ.get(
        "SECRET_KEY", "tracker-dev-secret-change-in-production"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS: bool = False
    SQLALCHEMY_DATABASE_URI: str = os.environ.get(
        "DATABASE_URL",
        f"sqlite:///{BASE_DIR / 'instance' / 'tracker.db'}",
    )
    SQLALCHEMY_ENGINE_OPTIONS: dict = {"pool_pre_ping": True}

    JWT_SECRET_KEY: str = os.environ.get("JWT_SECRET_KEY", DEV_JWT_SECRET)
    JWT_EXPIRY_DAYS: int = int(os.environ.get("JWT_EXPIRY_DAYS", "7"))
    # Seconds of tolerance for clock differences between issuer and verifier
    JWT_CLOCK_SKEW_SECONDS: int = int(os.environ.get("JWT_CLOCK_SKEW_SECONDS", "30"))

    DEFAULT_PAGE_LIMIT: int = 50
    MAX_PAGE_LIMIT: int = 100


class DevelopmentConfig(Config):
    """
    Configuration for local development.

    Enables debug mode, which also makes the 500 handler include the
    underlying exception message in its response body.
    """

    DEBUG: bool = True
    TESTING: bool = False


class TestingConfig(Config):
    """
    Configuration for the automated test suite.

    Uses a separate SQLite database (``test_tracker.db``) so test runs never
    touch development data.  ``DEBUG`` stays off so error responses look the
    way they do in production.
    """

    DEBUG: bool = False
    TESTING: bool = True
    # check_same_thread=False: the test client may use the connection from
    # a different thread than the one that opened it.
    SQLALCHEMY_DATABASE_URI: str = os.environ.get(
        "TEST_DATABASE_URL",
        f"sqlite:///{BASE_DIR / 'instance' / 'test_tracker.db'}?check_same_thread=False",
    )
    JWT_SECRET_KEY: str = os.environ.get(
        "TEST_JWT_SECRET_KEY", "test-jwt-secret-key-for-local-tests-123456"
    )


class ProductionConfig(Config):
    """
    Configuration for production deployments.

    All secrets must come from environment variables; ``create_app``
    refuses to start when ``JWT_SECRET_KEY`` is still the development value.
    """

    DEBUG: bool = False
    TESTING: bool = False


config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}


def get_config(env: str | None = None) -> type[Config]:
    """
    Resolve a configuration class by environment name.

    Args:
        env: One of ``"development"``, ``"testing"``, or ``"production"``.
            When ``None``, the ``FLASK_ENV`` environment variable is
            consulted, falling back to ``"development"``.

    Returns:
        The configuration class (not an instance).  Unrecognised names
        resolve to ``DevelopmentConfig``.
    """
    if env is None:
        env = os.environ.get("FLASK_ENV", "development")
    return config.get(env, config["default"])
