"""
Request authentication for protected endpoints.

The ``require_auth`` decorator verifies the bearer token and exposes the
caller's identity as an explicit :class:`AuthSession` on ``flask.g.auth``.
Routes read the acting user from that object rather than from the token.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from functools import wraps

from flask import current_app, g, request

from .errors import Unauthorized
from .jwt import verify_token


@dataclass(frozen=True)
class AuthSession:
    """Identity of the caller for the lifetime of one request."""

    user_id: int
    email: str


def _extract_bearer_token() -> str | None:
    """Return the token from ``Authorization: Bearer <token>``, if any."""
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith("Bearer "):
        return None
    token = auth_header[7:].strip()
    return token or None


def current_session() -> AuthSession:
    """Return the session stored by ``require_auth`` for this request."""
    return g.auth


def require_auth(view_func: Callable):
    """
    Decorator that enforces bearer-token authentication.

    On success stores an :class:`AuthSession` on ``flask.g.auth`` and calls
    the wrapped view.  Otherwise raises :class:`Unauthorized` before the
    view runs, which the error handlers turn into a 401.
    """

    @wraps(view_func)
    def wrapper(*args, **kwargs):
        token = _extract_bearer_token()
        if token is None:
            raise Unauthorized("No token, authorization denied")

        payload = verify_token(
            token,
            current_app.config["JWT_SECRET_KEY"],
            leeway=int(current_app.config.get("JWT_CLOCK_SKEW_SECONDS", 30)),
        )
        if payload is None:
            raise Unauthorized("Token is not valid")

        g.auth = AuthSession(user_id=payload["user_id"], email=payload["email"])
        return view_func(*args, **kwargs)

    return wrapper
