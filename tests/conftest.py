"""Pytest configuration and shared fixtures for debtbook tests.

This module provides database fixtures, repository fixtures for both storage
backends, a Flask app with a logged-in test client, and data factories.
"""

from __future__ import annotations

import tempfile
from datetime import datetime
from decimal import Decimal
from pathlib import Path

import pytest
from sqlmodel import SQLModel

from debtbook import create_app
from debtbook.infra.database import create_session_factory, make_engine
from debtbook.infra.repositories import (
    MemoryPersonRepository,
    MemoryStore,
    MemoryTransactionRepository,
    SQLModelPersonRepository,
    SQLModelTransactionRepository,
)
from debtbook.models import Person, Transaction
from debtbook.services.ledger_service import DebtLedger

TEST_USER = {"id": "00u-test", "displayName": "Test User", "email": "test@example.com"}


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: engine with all tables created and foreign keys enforced
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = make_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching the one the application builds."""

    return create_session_factory(db_engine)


# =============================================================================
# Repository Fixtures
# =============================================================================


@pytest.fixture
def sql_repositories(session_factory):
    return SQLModelPersonRepository(session_factory), SQLModelTransactionRepository(session_factory)


@pytest.fixture
def memory_repositories():
    store = MemoryStore()
    return MemoryPersonRepository(store), MemoryTransactionRepository(store)


@pytest.fixture(params=["sql", "memory"])
def repositories(request):
    """(people, transactions) repositories for each storage backend in turn."""

    return request.getfixturevalue(f"{request.param}_repositories")


@pytest.fixture
def ledger(repositories) -> DebtLedger:
    people, transactions = repositories
    return DebtLedger(people, transactions)


# =============================================================================
# Application Fixtures
# =============================================================================


@pytest.fixture
def app(tmp_path, monkeypatch: pytest.MonkeyPatch):
    """Flask app on a temporary SQLite database with OAuth settings for a fake issuer."""

    monkeypatch.setenv("DEBTBOOK_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("DEBTBOOK_DATABASE_URL", f"sqlite:///{tmp_path / 'debtbook.db'}")
    monkeypatch.setenv("DEBTBOOK_STORAGE", "sql")
    monkeypatch.setenv("DEBTBOOK_AUTH_ENABLED", "true")
    monkeypatch.setenv("DEBTBOOK_OAUTH_ISSUER", "https://idp.example.com/oauth2/default")
    monkeypatch.setenv("DEBTBOOK_OAUTH_CLIENT_ID", "client-123")
    monkeypatch.setenv("DEBTBOOK_OAUTH_CLIENT_SECRET", "shh")
    monkeypatch.setenv("DEBTBOOK_APP_BASE_URL", "http://localhost:5000")
    return create_app("testing")


@pytest.fixture
def anon_client(app):
    """Test client without a session."""

    with app.test_client() as client:
        yield client


@pytest.fixture
def client(app):
    """Test client whose session holds a signed-in user."""

    with app.test_client() as client:
        with client.session_transaction() as sess:
            sess["user"] = dict(TEST_USER)
        yield client


@pytest.fixture
def app_ledger(app) -> DebtLedger:
    from debtbook.extensions import LEDGER_KEY

    return app.extensions[LEDGER_KEY]


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def person_factory(app_ledger):
    """Factory for creating people through the application's ledger."""

    def _create_person(name: str = "Test Person", **overrides) -> Person:
        values = {"name": name, "relationship": None, "email": None, "phone": None}
        values.update(overrides)
        return app_ledger.create_person(values)

    return _create_person


@pytest.fixture
def transaction_factory(app_ledger):
    """Factory for creating transactions through the application's ledger.

    ``amount`` is always positive; pass ``is_person_debtor=False`` for money the
    user owes.
    """

    def _create_transaction(
        person: Person,
        amount: str | Decimal = "10.00",
        *,
        is_person_debtor: bool = True,
        description: str = "Test transaction",
        date: datetime | None = None,
    ) -> Transaction:
        return app_ledger.create_transaction(
            {
                "person_id": person.id,
                "amount": Decimal(str(amount)),
                "description": description,
                "date": date or datetime(2024, 1, 15, 12, 0),
                "is_person_debtor": is_person_debtor,
            }
        )

    return _create_transaction
