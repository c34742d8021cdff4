"""Repository protocol definitions for domain layer."""

from .person import PersonRepository
from .transaction import TransactionRepository

__all__ = [
    "PersonRepository",
    "TransactionRepository",
]
