"""Error taxonomy and the JSON handlers that render it."""

from __future__ import annotations

from typing import Any, Mapping

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from .logging_config import get_logger

logger = get_logger(__name__)


class DebtbookError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message}


class ValidationError(DebtbookError):
    """Malformed or missing input."""

    status_code = 400
    default_message = "Invalid data"

    def __init__(
        self,
        errors: Mapping[str, list[str]] | None = None,
        message: str | None = None,
    ) -> None:
        super().__init__(message)
        self.errors = {field: list(messages) for field, messages in (errors or {}).items()}

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        if self.errors:
            payload["errors"] = self.errors
        return payload


class NotFoundError(DebtbookError):
    """Unknown id."""

    status_code = 404
    default_message = "Not found"

    @classmethod
    def for_entity(cls, entity: str) -> "NotFoundError":
        return cls(f"{entity} not found")


class AuthError(DebtbookError):
    """Missing or invalid session, or a failed exchange with the identity provider."""

    status_code = 401
    default_message = "Authentication required"


class InternalError(DebtbookError):
    """Storage or other server-side failure."""

    status_code = 500


def _wants_json() -> bool:
    return request.path.startswith("/api") or request.is_json


def register_error_handlers(app: Flask) -> None:
    """Render the error taxonomy (and stray HTTP errors under /api) as JSON."""

    @app.errorhandler(DebtbookError)
    def _handle_debtbook_error(error: DebtbookError):
        if error.status_code >= 500:
            logger.error(
                "Request failed: %s",
                error.message,
                exc_info=error.__cause__ or error,
                extra={"path": request.path, "method": request.method},
            )
        elif isinstance(error, AuthError):
            logger.info("Unauthenticated request to %s", request.path)
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def _handle_http_exception(error: HTTPException):
        if not _wants_json():
            return error
        return jsonify({"message": error.description or error.name}), error.code

    @app.errorhandler(Exception)
    def _handle_unexpected(error: Exception):
        logger.exception(
            "Unhandled error on %s %s", request.method, request.path,
        )
        return jsonify(InternalError().to_dict()), 500
