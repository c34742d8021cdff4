"""Service module exports."""

from . import auth, balances, ledger_service

__all__ = [
    "auth",
    "balances",
    "ledger_service",
]
