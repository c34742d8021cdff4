"""Session gate, OAuth routes and the identity-provider client."""

from __future__ import annotations

from urllib.parse import parse_qs, urlparse

import pytest
import requests

from debtbook import create_app
from debtbook.errors import AuthError
from debtbook.extensions import OAUTH_KEY
from debtbook.infra.repositories import (
    MemoryPersonRepository,
    MemoryStore,
    MemoryTransactionRepository,
)
from debtbook.services.auth import LOCAL_USER, OAuthClient, TokenSet, user_from_claims
from debtbook.services.ledger_service import DebtLedger

from tests.conftest import TEST_USER

ISSUER = "https://idp.example.com/oauth2/default"


# =============================================================================
# Gate
# =============================================================================


@pytest.mark.parametrize(
    "path", ["/api/people", "/api/transactions", "/api/summary", "/api/summary/debtors"]
)
def test_api_requires_session(anon_client, path):
    response = anon_client.get(path)

    assert response.status_code == 401
    assert response.get_json() == {"message": "Authentication required"}


def test_userinfo_without_session(anon_client):
    response = anon_client.get("/api/userinfo")

    assert response.status_code == 401
    assert response.get_json() == {"message": "Not authenticated"}


def test_userinfo_returns_session_user(client):
    assert client.get("/api/userinfo").get_json() == TEST_USER


def test_auth_disabled_uses_local_user(monkeypatch, tmp_path):
    monkeypatch.setenv("DEBTBOOK_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("DEBTBOOK_AUTH_ENABLED", "false")
    store = MemoryStore()
    ledger = DebtLedger(MemoryPersonRepository(store), MemoryTransactionRepository(store))
    app = create_app("testing", ledger=ledger)

    with app.test_client() as client:
        assert client.get("/api/people").status_code == 200
        assert client.get("/api/userinfo").get_json() == LOCAL_USER
        assert client.post("/api/people", json={"name": "Ada"}).status_code == 201

    assert [person.name for person in ledger.list_people()] == ["Ada"]


# =============================================================================
# Login / callback / logout
# =============================================================================


def test_login_redirects_to_provider_with_state(anon_client):
    response = anon_client.get("/auth/login")

    assert response.status_code == 302
    location = urlparse(response.headers["Location"])
    assert f"{location.scheme}://{location.netloc}{location.path}" == f"{ISSUER}/v1/authorize"
    query = parse_qs(location.query)
    assert query["client_id"] == ["client-123"]
    assert query["response_type"] == ["code"]
    assert query["redirect_uri"] == ["http://localhost:5000/authorization-code/callback"]
    with anon_client.session_transaction() as sess:
        assert query["state"] == [sess["oauth_state"]]


def test_login_without_provider_redirects_with_error(monkeypatch, tmp_path):
    monkeypatch.setenv("DEBTBOOK_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("DEBTBOOK_AUTH_ENABLED", "true")
    monkeypatch.delenv("DEBTBOOK_OAUTH_ISSUER", raising=False)
    store = MemoryStore()
    app = create_app(
        "testing", ledger=DebtLedger(MemoryPersonRepository(store), MemoryTransactionRepository(store))
    )

    with app.test_client() as client:
        response = client.get("/auth/login")

        assert response.status_code == 302
        assert response.headers["Location"] == "/login?error=not_configured"
        with client.session_transaction() as sess:
            assert "oauth_state" not in sess


def test_login_info_returns_auth_url(anon_client):
    response = anon_client.get("/auth/login-info")

    assert response.status_code == 200
    assert response.get_json()["authUrl"].startswith(f"{ISSUER}/v1/authorize?")


def _stub_provider(app, monkeypatch, *, fail=False):
    oauth = app.extensions[OAUTH_KEY]

    def exchange_code(code):
        if fail:
            raise AuthError("Identity provider request failed")
        assert code == "the-code"
        return TokenSet(access_token="access", id_token="id-token")

    def fetch_user(tokens):
        assert tokens.access_token == "access"
        return {"id": "00u-1", "displayName": "Ada", "email": "ada@example.com"}

    monkeypatch.setattr(oauth, "exchange_code", exchange_code)
    monkeypatch.setattr(oauth, "fetch_user", fetch_user)


def test_callback_signs_user_in(app, anon_client, monkeypatch):
    _stub_provider(app, monkeypatch)
    with anon_client.session_transaction() as sess:
        sess["oauth_state"] = "expected"

    response = anon_client.get("/authorization-code/callback?code=the-code&state=expected")

    assert response.status_code == 302
    assert response.headers["Location"] == "/"
    with anon_client.session_transaction() as sess:
        assert sess["user"]["id"] == "00u-1"
        assert sess["id_token"] == "id-token"
        assert "oauth_state" not in sess
    assert anon_client.get("/api/people").status_code == 200


@pytest.mark.parametrize(
    ("query", "stored_state", "error"),
    [
        ("code=the-code&state=forged", "expected", "invalid_state"),
        ("code=the-code&state=expected", None, "invalid_state"),
        ("state=expected", "expected", "missing_code"),
        ("error=access_denied&state=expected", "expected", "access_denied"),
    ],
)
def test_callback_failures_redirect_to_login(app, anon_client, monkeypatch, query, stored_state, error):
    _stub_provider(app, monkeypatch)
    if stored_state:
        with anon_client.session_transaction() as sess:
            sess["oauth_state"] = stored_state

    response = anon_client.get(f"/authorization-code/callback?{query}")

    assert response.status_code == 302
    assert response.headers["Location"] == f"/login?error={error}"
    with anon_client.session_transaction() as sess:
        assert "user" not in sess


def test_callback_provider_failure(app, anon_client, monkeypatch):
    _stub_provider(app, monkeypatch, fail=True)
    with anon_client.session_transaction() as sess:
        sess["oauth_state"] = "expected"

    response = anon_client.get("/authorization-code/callback?code=the-code&state=expected")

    assert response.headers["Location"] == "/login?error=auth_failed"


def test_logout_redirects_to_provider(client):
    with client.session_transaction() as sess:
        sess["id_token"] = "id-token"

    response = client.get("/auth/logout")

    assert response.status_code == 302
    location = urlparse(response.headers["Location"])
    assert location.path.endswith("/v1/logout")
    query = parse_qs(location.query)
    assert query["id_token_hint"] == ["id-token"]
    assert query["post_logout_redirect_uri"] == ["http://localhost:5000/login"]
    assert client.get("/api/people").status_code == 401


def test_logout_without_session_goes_to_login(anon_client):
    response = anon_client.get("/auth/logout")

    assert response.headers["Location"] == "/login"


# =============================================================================
# OAuthClient
# =============================================================================


class FakeResponse:
    def __init__(self, payload=None, status=200, invalid_json=False):
        self.payload = payload
        self.status_code = status
        self.invalid_json = invalid_json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if self.invalid_json:
            raise ValueError("Expecting value")
        return self.payload


class FakeSession:
    def __init__(self, *responses):
        self.headers = {}
        self.responses = list(responses)
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def oauth_config(app):
    return app.config["DEBTBOOK_CONFIG"]


def test_exchange_code_and_fetch_user(oauth_config):
    http = FakeSession(
        FakeResponse({"access_token": "at", "id_token": "it", "token_type": "Bearer"}),
        FakeResponse({"sub": "00u-9", "preferred_username": "ada@corp", "email": "ada@corp"}),
    )
    oauth = OAuthClient(oauth_config, session=http)

    tokens = oauth.exchange_code("abc")
    user = oauth.fetch_user(tokens)

    assert tokens == TokenSet(access_token="at", id_token="it")
    assert user == {"id": "00u-9", "displayName": "ada@corp", "email": "ada@corp"}
    method, url, kwargs = http.calls[0]
    assert (method, url) == ("post", f"{ISSUER}/v1/token")
    assert kwargs["data"]["grant_type"] == "authorization_code"
    assert kwargs["auth"] == ("client-123", "shh")
    assert http.calls[1][2]["headers"] == {"Authorization": "Bearer at"}
    assert http.headers["Accept"] == "application/json"


@pytest.mark.parametrize(
    "response",
    [
        FakeResponse({"error": "invalid_grant"}, status=400),
        FakeResponse(invalid_json=True),
        FakeResponse(["not", "a", "dict"]),
        FakeResponse({"token_type": "Bearer"}),
        requests.ConnectionError("unreachable"),
    ],
)
def test_exchange_code_failures_raise_auth_error(oauth_config, response):
    oauth = OAuthClient(oauth_config, session=FakeSession(response))

    with pytest.raises(AuthError):
        oauth.exchange_code("abc")


def test_user_from_claims_fallbacks():
    assert user_from_claims({"sub": "1", "name": "Ada L"})["displayName"] == "Ada L"
    assert user_from_claims({"sub": "2"})["displayName"] == "Unknown User"
    with pytest.raises(AuthError):
        user_from_claims({"email": "nobody@example.com"})
