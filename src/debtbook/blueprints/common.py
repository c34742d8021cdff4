"""Request helpers shared by the API blueprints."""

from __future__ import annotations

from typing import Any

from flask import request
from werkzeug.routing import IntegerConverter

from ..errors import ValidationError
from ..services.balances import DEFAULT_LIMIT

# SQLite INTEGER is a signed 64-bit value.
MAX_ID = 2**63 - 1


class IdConverter(IntegerConverter):
    """Row id in a URL; values the database cannot hold do not match the route."""

    def __init__(self, map, *args, **kwargs):
        super().__init__(map, min=1, max=MAX_ID)


def json_body() -> dict[str, Any]:
    """Return the request body as a JSON object or raise ValidationError."""

    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationError({"body": ["Request body must be a JSON object."]})
    return payload


def parse_limit(default: int = DEFAULT_LIMIT) -> int:
    """Read the positive ``limit`` query parameter."""

    raw = request.args.get("limit")
    if raw is None or raw.strip() == "":
        return default
    try:
        limit = int(raw)
    except ValueError:
        raise ValidationError({"limit": ["Limit must be a whole number."]}) from None
    if limit <= 0:
        raise ValidationError({"limit": ["Limit must be greater than zero."]})
    return limit
