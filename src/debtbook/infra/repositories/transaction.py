"""SQLModel implementation of Transaction repository."""

from __future__ import annotations

from typing import Optional

from sqlmodel import select

from ...models.transaction import Transaction
from ..database import SessionFactory


class SQLModelTransactionRepository:
    """SQLModel-based transaction repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, transaction_id: int) -> Optional[Transaction]:
        """Retrieve a transaction by ID."""
        with self.session_factory() as session:
            obj = session.get(Transaction, transaction_id)
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self) -> list[Transaction]:
        """List all transactions, newest date first."""
        with self.session_factory() as session:
            statement = select(Transaction).order_by(
                Transaction.date.desc(),  # type: ignore[attr-defined]
                Transaction.id.desc(),  # type: ignore[union-attr]
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def list_by_person(self, person_id: int) -> list[Transaction]:
        """Get all transactions for a specific person."""
        with self.session_factory() as session:
            statement = (
                select(Transaction)
                .where(Transaction.person_id == person_id)
                .order_by(
                    Transaction.date.desc(),  # type: ignore[attr-defined]
                    Transaction.id.desc(),  # type: ignore[union-attr]
                )
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, transaction: Transaction) -> Transaction:
        """Create a new transaction."""
        with self.session_factory() as session:
            transaction.id = None
            session.add(transaction)
            session.commit()
            session.refresh(transaction)
            session.expunge(transaction)
            return transaction

    def update(self, transaction: Transaction) -> Transaction:
        """Update an existing transaction."""
        with self.session_factory() as session:
            merged = session.merge(transaction)
            session.commit()
            session.refresh(merged)
            session.expunge(merged)
            return merged

    def delete(self, transaction_id: int) -> bool:
        """Delete a transaction by ID."""
        with self.session_factory() as session:
            transaction = session.get(Transaction, transaction_id)
            if transaction is None:
                return False
            session.delete(transaction)
            session.commit()
            return True
