"""
JWT issuing and verification.

Tokens are HS256-signed with the server-held ``JWT_SECRET_KEY``; the same
secret verifies them on every protected request.  There is no revocation
list, so a token stays valid until ``exp`` (logout is a client-side discard).

Token structure (claims):
    - ``user_id`` -- integer primary key of the authenticated user.
    - ``email``   -- the user's email at issue time.
    - ``iat``     -- issued-at timestamp (UTC epoch seconds).
    - ``exp``     -- expiration timestamp (UTC epoch seconds).
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

ALGORITHM = "HS256"
REQUIRED_TOKEN_CLAIMS = ["user_id", "email", "iat", "exp"]
DEFAULT_EXPIRY_DAYS = 7


def create_token(
    user_id: int,
    email: str,
    secret: str,
    expiry_days: int = DEFAULT_EXPIRY_DAYS,
    issued_at: datetime | None = None,
) -> str:
    """
    Create an HS256-signed JWT binding the user's id and email.

    Args:
        user_id: Primary key of the authenticated user.  Must be positive.
        email: The user's email address.  Must be a non-empty string.
        secret: The server-held signing secret.
        expiry_days: Days from *issued_at* until the token expires.
        issued_at: Issue time; defaults to now.  Always interpreted as UTC.

    Returns:
        A compact JWS string suitable for an ``Authorization: Bearer`` header.

    Raises:
        ValueError: If *user_id* is not positive or *email* is blank.
    """
    if int(user_id) <= 0:
        raise ValueError("user_id must be a positive integer")
    if not isinstance(email, str) or not email.strip():
        raise ValueError("email must be a non-empty string")

    now = issued_at or datetime.now(timezone.utc)
    expires_at = now + timedelta(days=int(expiry_days))

    payload: dict[str, Any] = {
        "user_id": int(user_id),
        "email": email,
        "iat": int(now.timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    return jwt.encode(payload, secret, algorithm=ALGORITHM)


def verify_token(token: str, secret: str, leeway: int = 0) -> dict[str, Any] | None:
    """
    Decode and validate a JWT, returning the payload on success.

    Checks the signature, expiry and presence of every required claim, and
    that ``user_id`` is a positive int and ``email`` a non-blank string.
    Only HS256 is accepted, which rules out ``none`` and algorithm swaps.

    Args:
        token: The encoded JWT string.
        secret: The server-held signing secret.
        leeway: Seconds of clock-skew tolerance applied to ``exp``.

    Returns:
        The decoded payload, or ``None`` if verification fails for any
        reason.
    """
    try:
        decoded = jwt.decode(
            token,
            secret,
            algorithms=[ALGORITHM],
            options={"require": REQUIRED_TOKEN_CLAIMS},
            leeway=leeway,
        )
    except jwt.InvalidTokenError:
        return None

    user_id = decoded.get("user_id")
    email = decoded.get("email")
    # bool is an int subclass; a True user_id is not a real identity.
    if isinstance(user_id, bool) or not isinstance(user_id, int) or user_id <= 0:
        return None
    if not isinstance(email, str) or not email.strip():
        return None
    return decoded
