"""Reject unauthenticated API requests and attach the session user to ``g``."""

from __future__ import annotations

from flask import Flask, current_app, g, request, session

from ...errors import AuthError
from ...services.auth import LOCAL_USER

SESSION_USER_KEY = "user"
PUBLIC_API_PATHS = frozenset({"/api/userinfo"})


def current_user() -> dict | None:
    """The logged-in user for this request, or None."""

    if not current_app.config["AUTH_ENABLED"]:
        return dict(LOCAL_USER)
    return session.get(SESSION_USER_KEY)


def register_gate(app: Flask) -> None:
    @app.before_request
    def _require_session() -> None:
        g.user = current_user()
        if not request.path.startswith("/api") or request.path in PUBLIC_API_PATHS:
            return None
        if g.user is None:
            raise AuthError()
        return None
