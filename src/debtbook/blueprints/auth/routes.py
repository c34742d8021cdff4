"""OAuth2 authorization-code routes."""

from __future__ import annotations

import secrets
from urllib.parse import quote

from flask import g, jsonify, redirect, request, session

from ...errors import AuthError
from ...extensions import get_oauth_client
from ...logging_config import get_logger
from ...services.auth import generate_state
from . import bp
from .gate import SESSION_USER_KEY

logger = get_logger(__name__)

STATE_KEY = "oauth_state"
ID_TOKEN_KEY = "id_token"


def _login_error(code: str):
    return redirect(f"/login?error={quote(code)}")


def _start_login() -> str:
    state = generate_state()
    url = get_oauth_client().authorization_url(state)
    session[STATE_KEY] = state
    return url


@bp.get("/auth/login")
def login():
    """Redirect the browser to the identity provider."""

    try:
        return redirect(_start_login())
    except AuthError:
        logger.warning("Login attempted without an identity provider configured")
        return _login_error("not_configured")


@bp.get("/auth/login-info")
def login_info():
    """Authorization URL for clients that open the provider in a popup."""

    return jsonify({"authUrl": _start_login()})


@bp.get("/authorization-code/callback")
def callback():
    error = request.args.get("error")
    if error:
        logger.warning(
            "Identity provider returned an error",
            extra={"error": error, "error_description": request.args.get("error_description")},
        )
        return _login_error(error)

    expected_state = session.pop(STATE_KEY, None)
    received_state = request.args.get("state")
    if not expected_state or not received_state or not secrets.compare_digest(
        expected_state, received_state
    ):
        logger.warning("OAuth state missing or mismatched")
        return _login_error("invalid_state")

    code = request.args.get("code")
    if not code:
        return _login_error("missing_code")

    client = get_oauth_client()
    try:
        tokens = client.exchange_code(code)
        user = client.fetch_user(tokens)
    except AuthError:
        return _login_error("auth_failed")

    session.clear()
    session.permanent = True
    session[SESSION_USER_KEY] = user
    if tokens.id_token:
        session[ID_TOKEN_KEY] = tokens.id_token
    logger.info("User signed in", extra={"user_id": user["id"]})
    return redirect("/")


@bp.get("/auth/logout")
def logout():
    id_token = session.get(ID_TOKEN_KEY)
    had_user = SESSION_USER_KEY in session
    session.clear()
    client = get_oauth_client()
    if not had_user or not client.config.OAUTH_ISSUER:
        return redirect("/login")
    logger.info("User signed out")
    return redirect(client.logout_url(id_token))


@bp.get("/api/userinfo")
def userinfo():
    if g.user is None:
        raise AuthError("Not authenticated")
    return jsonify(g.user)
