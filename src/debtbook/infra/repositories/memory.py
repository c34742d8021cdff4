"""In-memory repositories sharing one store.

Used by the test-suite and by ``DEBTBOOK_STORAGE=memory``. The two
repositories share a :class:`MemoryStore` so that deleting a person can
remove that person's transactions in the same step.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import count
from threading import RLock
from typing import Iterator, Optional

from ...models.person import Person
from ...models.transaction import Transaction


def _copy_person(person: Person) -> Person:
    return Person(
        id=person.id,
        name=person.name,
        relationship=person.relationship,
        email=person.email,
        phone=person.phone,
        created_at=person.created_at,
    )


def _copy_transaction(transaction: Transaction) -> Transaction:
    return Transaction(
        id=transaction.id,
        person_id=transaction.person_id,
        amount=transaction.amount,
        description=transaction.description,
        date=transaction.date,
        is_person_debtor=transaction.is_person_debtor,
        created_at=transaction.created_at,
    )


@dataclass
class MemoryStore:
    """Row storage plus id sequences for both tables."""

    people: dict[int, Person] = field(default_factory=dict)
    transactions: dict[int, Transaction] = field(default_factory=dict)
    lock: RLock = field(default_factory=RLock, repr=False)
    _person_ids: Iterator[int] = field(default_factory=lambda: count(1), repr=False)
    _transaction_ids: Iterator[int] = field(default_factory=lambda: count(1), repr=False)

    def next_person_id(self) -> int:
        return next(self._person_ids)

    def next_transaction_id(self) -> int:
        return next(self._transaction_ids)


class MemoryPersonRepository:
    """Person repository backed by a :class:`MemoryStore`."""

    def __init__(self, store: MemoryStore):
        self.store = store

    def get_by_id(self, person_id: int) -> Optional[Person]:
        person = self.store.people.get(person_id)
        return _copy_person(person) if person else None

    def list_all(self) -> list[Person]:
        return [_copy_person(self.store.people[key]) for key in sorted(self.store.people)]

    def exists(self, person_id: int) -> bool:
        return person_id in self.store.people

    def create(self, person: Person) -> Person:
        with self.store.lock:
            person.id = self.store.next_person_id()
            self.store.people[person.id] = _copy_person(person)
            return _copy_person(person)

    def update(self, person: Person) -> Person:
        with self.store.lock:
            if person.id not in self.store.people:
                raise KeyError(f"person {person.id} is not stored")
            self.store.people[person.id] = _copy_person(person)
            return _copy_person(person)

    def delete(self, person_id: int) -> bool:
        with self.store.lock:
            if self.store.people.pop(person_id, None) is None:
                return False
            orphaned = [
                key
                for key, transaction in self.store.transactions.items()
                if transaction.person_id == person_id
            ]
            for key in orphaned:
                del self.store.transactions[key]
            return True


class MemoryTransactionRepository:
    """Transaction repository backed by a :class:`MemoryStore`."""

    def __init__(self, store: MemoryStore):
        self.store = store

    def get_by_id(self, transaction_id: int) -> Optional[Transaction]:
        transaction = self.store.transactions.get(transaction_id)
        return _copy_transaction(transaction) if transaction else None

    def list_all(self) -> list[Transaction]:
        return self._sorted(self.store.transactions.values())

    def list_by_person(self, person_id: int) -> list[Transaction]:
        return self._sorted(
            t for t in self.store.transactions.values() if t.person_id == person_id
        )

    def create(self, transaction: Transaction) -> Transaction:
        with self.store.lock:
            if transaction.person_id not in self.store.people:
                raise KeyError(f"person {transaction.person_id} is not stored")
            transaction.id = self.store.next_transaction_id()
            self.store.transactions[transaction.id] = _copy_transaction(transaction)
            return _copy_transaction(transaction)

    def update(self, transaction: Transaction) -> Transaction:
        with self.store.lock:
            if transaction.id not in self.store.transactions:
                raise KeyError(f"transaction {transaction.id} is not stored")
            if transaction.person_id not in self.store.people:
                raise KeyError(f"person {transaction.person_id} is not stored")
            self.store.transactions[transaction.id] = _copy_transaction(transaction)
            return _copy_transaction(transaction)

    def delete(self, transaction_id: int) -> bool:
        with self.store.lock:
            return self.store.transactions.pop(transaction_id, None) is not None

    @staticmethod
    def _sorted(transactions) -> list[Transaction]:
        rows = sorted(transactions, key=lambda t: (t.date, t.id or 0), reverse=True)
        return [_copy_transaction(t) for t in rows]
