"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from datetime import timedelta
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {value!r}") from exc


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "debtbook"
    DB_FILENAME = "debtbook.db"
    STORAGE_BACKENDS = ("sql", "memory")
    OAUTH_SCOPE = "openid profile email"

    DEBUG = False
    TESTING = False
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"
    PERMANENT_SESSION_LIFETIME = timedelta(hours=24)

    def __init__(self) -> None:
        self.SECRET_KEY = os.getenv("DEBTBOOK_SECRET_KEY", "replace-me")
        self.DEV_MODE = _env_bool("DEBTBOOK_DEV_MODE", default=True)
        self.DATA_DIR = self._resolve_data_dir()
        self.DATABASE_URL = os.getenv("DEBTBOOK_DATABASE_URL", self._build_sqlite_url())
        self.STORAGE_BACKEND = os.getenv("DEBTBOOK_STORAGE", "sql").strip().lower()
        self.LOG_LEVEL = os.getenv("DEBTBOOK_LOG_LEVEL", "INFO").strip().upper()

        self.AUTH_ENABLED = _env_bool("DEBTBOOK_AUTH_ENABLED", default=True)
        self.OAUTH_ISSUER = (os.getenv("DEBTBOOK_OAUTH_ISSUER") or "").rstrip("/") or None
        self.OAUTH_CLIENT_ID = os.getenv("DEBTBOOK_OAUTH_CLIENT_ID")
        self.OAUTH_CLIENT_SECRET = os.getenv("DEBTBOOK_OAUTH_CLIENT_SECRET")
        self.APP_BASE_URL = os.getenv("DEBTBOOK_APP_BASE_URL", "http://localhost:5000").rstrip("/")
        self.OAUTH_TIMEOUT = _env_float("DEBTBOOK_OAUTH_TIMEOUT", 10.0)

        self.SESSION_COOKIE_SECURE = not self.DEV_MODE

        if self.STORAGE_BACKEND not in self.STORAGE_BACKENDS:
            raise ValueError(
                f"DEBTBOOK_STORAGE must be one of {', '.join(self.STORAGE_BACKENDS)}; "
                f"got {self.STORAGE_BACKEND!r}"
            )
        if not self.DEV_MODE and self.SECRET_KEY == "replace-me":
            raise ValueError("DEBTBOOK_SECRET_KEY must be set in non-dev mode.")

    @property
    def OAUTH_REDIRECT_URI(self) -> str:
        return f"{self.APP_BASE_URL}/authorization-code/callback"

    @property
    def oauth_configured(self) -> bool:
        """True when every setting needed for the authorization-code flow is present."""

        return bool(self.OAUTH_ISSUER and self.OAUTH_CLIENT_ID and self.OAUTH_CLIENT_SECRET)

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv("DEBTBOOK_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        return f"sqlite:///{self.DATA_DIR / self.DB_FILENAME}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        engine_options: dict[str, Any] = {}
        if self.DATABASE_URL.startswith("sqlite"):
            engine_options["connect_args"] = {"check_same_thread": False}
        return engine_options


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True


class TestConfig(BaseConfig):
    """Configuration used by the test-suite; never talks to a real provider."""

    TESTING = True

    def __init__(self) -> None:
        super().__init__()
        self.SECRET_KEY = "test-secret"
        self.SESSION_COOKIE_SECURE = False


class ProductionConfig(BaseConfig):
    """Production configuration; dev conveniences are refused."""

    def __init__(self) -> None:
        super().__init__()
        if self.DEV_MODE:
            raise ValueError("ProductionConfig requires DEBTBOOK_DEV_MODE=false.")
        if self.AUTH_ENABLED and not self.oauth_configured:
            raise ValueError(
                "DEBTBOOK_OAUTH_ISSUER, DEBTBOOK_OAUTH_CLIENT_ID and "
                "DEBTBOOK_OAUTH_CLIENT_SECRET must be set in production."
            )
