"""Blueprint exports."""

from . import auth, people, summary, transactions

__all__ = [
    "auth",
    "people",
    "summary",
    "transactions",
]
