from __future__ import annotations

from functools import wraps
from urllib.parse import unquote

from flask import g, request

from ..core.constants import SESSION_COOKIE_NAME
from .service import AuthService


def session_token() -> str | None:
    """Session token from the cookie header, percent-decoded."""
    raw = request.cookies.get(SESSION_COOKIE_NAME)
    return unquote(raw) if raw else None


def make_admin_required(auth_service: AuthService):
    """Build the decorator guarding admin routes.

    The resolved identity is kept on ``flask.g.admin`` for the current request
    only; the cookie carries nothing but the opaque token.
    """

    def admin_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            g.admin = auth_service.resolve(session_token())
            return view(*args, **kwargs)

        return wrapper

    return admin_required
