"""Test helper functions shared across the test suites."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

TEST_JWT_SECRET = "test-jwt-secret-key-for-local-tests-123456"
DEFAULT_TEST_USER_ID = 1
DEFAULT_TEST_EMAIL = "test_user@example.com"


def create_test_token(
    user_id: int = DEFAULT_TEST_USER_ID,
    email: str = DEFAULT_TEST_EMAIL,
    secret: str = TEST_JWT_SECRET,
    issued_at: datetime | None = None,
    lifetime: timedelta = timedelta(days=7),
    algorithm: str = "HS256",
    **extra_claims: Any,
) -> str:
    """Create a signed test token with the required claims."""
    now = issued_at or datetime.now(timezone.utc)
    payload: dict[str, Any] = {
        "user_id": user_id,
        "email": email,
        "iat": int(now.timestamp()),
        "exp": int((now + lifetime).timestamp()),
    }
    payload.update(extra_claims)
    return jwt.encode(payload, secret, algorithm=algorithm)


def auth_headers(token: str) -> dict[str, str]:
    """Build common JSON API headers with bearer token auth."""
    return {
        "Authorization": f"Bearer {token}",
        "Content-Type": "application/json",
        "Accept": "application/json",
    }
