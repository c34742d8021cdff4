"""Transaction repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.transaction import Transaction


class TransactionRepository(Protocol):
    """Repository for managing transaction entities."""

    def get_by_id(self, transaction_id: int) -> Optional[Transaction]:
        """Retrieve a transaction by ID."""
        ...

    def list_all(self) -> list[Transaction]:
        """List all transactions, newest date first."""
        ...

    def list_by_person(self, person_id: int) -> list[Transaction]:
        """Get all transactions for a specific person, newest date first."""
        ...

    def create(self, transaction: Transaction) -> Transaction:
        """Create a new transaction."""
        ...

    def update(self, transaction: Transaction) -> Transaction:
        """Update an existing transaction."""
        ...

    def delete(self, transaction_id: int) -> bool:
        """Delete a transaction by ID; False when the ID is unknown."""
        ...
