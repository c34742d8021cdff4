"""Storage and client wiring for the Flask application."""

from __future__ import annotations

from flask import Flask, current_app

from .config import BaseConfig
from .infra.database import bootstrap_database
from .infra.repositories import (
    MemoryPersonRepository,
    MemoryStore,
    MemoryTransactionRepository,
    SQLModelPersonRepository,
    SQLModelTransactionRepository,
)
from .logging_config import get_logger
from .services.auth import OAuthClient
from .services.ledger_service import DebtLedger

logger = get_logger(__name__)

LEDGER_KEY = "debtbook.ledger"
OAUTH_KEY = "debtbook.oauth"


def build_ledger(config: BaseConfig) -> DebtLedger:
    """Construct the ledger on the storage backend named by the configuration."""

    if config.STORAGE_BACKEND == "memory":
        store = MemoryStore()
        return DebtLedger(MemoryPersonRepository(store), MemoryTransactionRepository(store))

    engine, session_factory = bootstrap_database(config)
    logger.info("Database ready", extra={"dialect": engine.dialect.name})
    return DebtLedger(
        SQLModelPersonRepository(session_factory),
        SQLModelTransactionRepository(session_factory),
    )


def init_app(app: Flask, ledger: DebtLedger | None = None) -> None:
    """Attach the ledger and the OAuth client to ``app.extensions``."""

    config: BaseConfig = app.config["DEBTBOOK_CONFIG"]
    app.extensions[LEDGER_KEY] = ledger or build_ledger(config)
    app.extensions[OAUTH_KEY] = OAuthClient(config)


def get_ledger() -> DebtLedger:
    """Return the ledger bound to the current application."""

    return current_app.extensions[LEDGER_KEY]


def get_oauth_client() -> OAuthClient:
    return current_app.extensions[OAUTH_KEY]
