"""SQLModel table exports."""

from .person import Person, utcnow
from .transaction import Transaction

__all__ = [
    "Person",
    "Transaction",
    "utcnow",
]
