"""Concrete repository implementations."""

from .memory import MemoryPersonRepository, MemoryStore, MemoryTransactionRepository
from .person import SQLModelPersonRepository
from .transaction import SQLModelTransactionRepository

__all__ = [
    "MemoryPersonRepository",
    "MemoryStore",
    "MemoryTransactionRepository",
    "SQLModelPersonRepository",
    "SQLModelTransactionRepository",
]
