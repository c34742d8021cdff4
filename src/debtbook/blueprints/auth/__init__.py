"""Login, logout and session gate for the API."""

from __future__ import annotations

from flask import Blueprint

bp = Blueprint("auth", __name__)

from . import routes  # noqa: E402,F401 - ensure routes get registered
from .gate import register_gate  # noqa: E402

__all__ = ["bp", "register_gate"]
