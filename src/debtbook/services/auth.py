"""OAuth2 authorization-code client for the external identity provider.

The provider is addressed through an issuer URL with Okta-style endpoints
(``/v1/authorize``, ``/v1/token``, ``/v1/userinfo``, ``/v1/logout``).
Network or provider failures raise :class:`~debtbook.errors.AuthError`;
callers turn that into a failed login rather than a server error.
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import urlencode

import requests

from ..config import BaseConfig
from ..errors import AuthError
from ..logging_config import get_logger

logger = get_logger(__name__)

LOCAL_USER = {"id": "local", "displayName": "Local user", "email": None}


@dataclass(frozen=True, slots=True)
class TokenSet:
    access_token: str
    id_token: Optional[str] = None
    token_type: str = "Bearer"


def generate_state() -> str:
    """Random value binding the callback to the browser session that started the login."""

    return secrets.token_urlsafe(24)


def user_from_claims(claims: dict[str, Any]) -> dict[str, Any]:
    """Session user built from OIDC userinfo claims."""

    subject = claims.get("sub")
    if not subject:
        raise AuthError("Identity provider returned no subject")
    return {
        "id": subject,
        "displayName": claims.get("name")
        or claims.get("preferred_username")
        or claims.get("email")
        or "Unknown User",
        "email": claims.get("email"),
    }


class OAuthClient:
    """Talks to the identity provider's authorize, token, userinfo and logout endpoints."""

    def __init__(self, config: BaseConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.http = session or requests.Session()
        self.http.headers.setdefault("Accept", "application/json")

    @property
    def issuer(self) -> str:
        if not self.config.OAUTH_ISSUER:
            raise AuthError("Identity provider is not configured")
        return self.config.OAUTH_ISSUER

    def authorization_url(self, state: str) -> str:
        query = urlencode(
            {
                "client_id": self.config.OAUTH_CLIENT_ID or "",
                "response_type": "code",
                "scope": self.config.OAUTH_SCOPE,
                "redirect_uri": self.config.OAUTH_REDIRECT_URI,
                "state": state,
            }
        )
        return f"{self.issuer}/v1/authorize?{query}"

    def logout_url(self, id_token: Optional[str] = None) -> str:
        params = {
            "client_id": self.config.OAUTH_CLIENT_ID or "",
            "post_logout_redirect_uri": f"{self.config.APP_BASE_URL}/login",
        }
        if id_token:
            params["id_token_hint"] = id_token
        return f"{self.issuer}/v1/logout?{urlencode(params)}"

    def exchange_code(self, code: str) -> TokenSet:
        """Trade an authorization code for tokens."""

        payload = self._request(
            "post",
            f"{self.issuer}/v1/token",
            data={
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": self.config.OAUTH_REDIRECT_URI,
            },
            auth=(self.config.OAUTH_CLIENT_ID or "", self.config.OAUTH_CLIENT_SECRET or ""),
        )
        access_token = payload.get("access_token")
        if not access_token:
            raise AuthError("Token response did not include an access token")
        return TokenSet(
            access_token=access_token,
            id_token=payload.get("id_token"),
            token_type=payload.get("token_type", "Bearer"),
        )

    def fetch_user(self, tokens: TokenSet) -> dict[str, Any]:
        claims = self._request(
            "get",
            f"{self.issuer}/v1/userinfo",
            headers={"Authorization": f"Bearer {tokens.access_token}"},
        )
        return user_from_claims(claims)

    def _request(self, method: str, url: str, **kwargs) -> dict[str, Any]:
        try:
            response = self.http.request(method, url, timeout=self.config.OAUTH_TIMEOUT, **kwargs)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as exc:
            logger.warning("Identity provider request failed", extra={"url": url, "error": str(exc)})
            raise AuthError("Identity provider request failed") from exc
        except ValueError as exc:
            logger.warning("Identity provider returned invalid JSON", extra={"url": url})
            raise AuthError("Identity provider returned invalid JSON") from exc
        if not isinstance(payload, dict):
            raise AuthError("Identity provider returned an unexpected payload")
        return payload
