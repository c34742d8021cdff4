"""debtbook application factory."""

from __future__ import annotations

from importlib import import_module
from typing import Iterable

from flask import Flask, jsonify, request

from . import cli, extensions
from .blueprints.auth import register_gate
from .blueprints.common import IdConverter
from .config import BaseConfig, DevConfig, ProductionConfig, TestConfig
from .errors import register_error_handlers
from .logging_config import get_logger, setup_logging

_CONFIG_MAP = {
    "development": DevConfig,
    "testing": TestConfig,
    "production": ProductionConfig,
    "default": BaseConfig,
}


def _resolve_config(name: str | None) -> type[BaseConfig]:
    """Return the config class for the provided environment name."""

    if not name:
        return BaseConfig
    return _CONFIG_MAP.get(name.lower(), BaseConfig)


def _blueprint_paths() -> Iterable[str]:
    """Yield blueprint import paths registered on every app."""

    yield "debtbook.blueprints.auth"
    yield "debtbook.blueprints.people"
    yield "debtbook.blueprints.transactions"
    yield "debtbook.blueprints.summary"


def create_app(config_name: str | None = None, *, ledger=None) -> Flask:
    """Create and configure the Flask application instance.

    ``ledger`` replaces the storage chosen by the configuration, which is how
    tests inject in-memory repositories.
    """

    app = Flask(__name__, instance_relative_config=True)
    config_obj = _resolve_config(config_name)()
    app.config.from_object(config_obj)
    app.config["DEBTBOOK_CONFIG"] = config_obj

    setup_logging(config_obj)
    logger = get_logger("app")

    extensions.init_app(app, ledger=ledger)
    register_error_handlers(app)
    register_gate(app)
    app.url_map.converters["id"] = IdConverter
    _register_blueprints(app)
    cli.init_app(app)

    @app.get("/health")
    def health():
        return jsonify({"ok": True})

    @app.after_request
    def _log_request(response):
        logger.debug(
            "%s %s -> %s",
            request.method,
            request.path,
            response.status_code,
            extra={"status": response.status_code},
        )
        return response

    logger.info(
        "Application created",
        extra={"config": type(config_obj).__name__, "auth_enabled": config_obj.AUTH_ENABLED},
    )
    return app


def _register_blueprints(app: Flask) -> None:
    """Import and register all blueprints declared in `_blueprint_paths`."""

    for dotted_path in _blueprint_paths():
        module = import_module(dotted_path)
        blueprint = getattr(module, "bp")
        app.register_blueprint(blueprint)


__all__ = ["create_app"]
