"""SQLModel implementation of Person repository."""

from __future__ import annotations

from typing import Optional

from sqlmodel import select

from ...models.person import Person
from ...models.transaction import Transaction
from ..database import SessionFactory


class SQLModelPersonRepository:
    """SQLModel-based person repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, person_id: int) -> Optional[Person]:
        """Retrieve a person by ID."""
        with self.session_factory() as session:
            obj = session.get(Person, person_id)
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self) -> list[Person]:
        """List every person ordered by ID."""
        with self.session_factory() as session:
            rows = list(session.exec(select(Person).order_by(Person.id)).all())  # type: ignore[arg-type]
            session.expunge_all()
            return rows

    def exists(self, person_id: int) -> bool:
        with self.session_factory() as session:
            return session.exec(select(Person.id).where(Person.id == person_id)).first() is not None

    def create(self, person: Person) -> Person:
        """Persist a new person; the database assigns the ID."""
        with self.session_factory() as session:
            person.id = None
            session.add(person)
            session.commit()
            session.refresh(person)
            session.expunge(person)
            return person

    def update(self, person: Person) -> Person:
        """Update an existing person."""
        with self.session_factory() as session:
            merged = session.merge(person)
            session.commit()
            session.refresh(merged)
            session.expunge(merged)
            return merged

    def delete(self, person_id: int) -> bool:
        """Delete a person and all of their transactions in one commit."""
        with self.session_factory() as session:
            person = session.get(Person, person_id)
            if person is None:
                return False
            transactions = session.exec(
                select(Transaction).where(Transaction.person_id == person_id)
            ).all()
            for transaction in transactions:
                session.delete(transaction)
            session.delete(person)
            session.commit()
            return True
