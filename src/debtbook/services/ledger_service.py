"""Use cases over the person and transaction repositories."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from functools import wraps
from typing import Any, Callable, Mapping, Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from ..domain.repositories import PersonRepository, TransactionRepository
from ..errors import InternalError, NotFoundError, ValidationError
from ..logging_config import get_logger
from ..models.person import Person
from ..models.transaction import Transaction
from . import balances

logger = get_logger(__name__)

PERSON_FIELDS = ("name", "relationship", "email", "phone")
TRANSACTION_FIELDS = ("person_id", "amount", "description", "date", "is_person_debtor")

F = TypeVar("F", bound=Callable[..., Any])


@dataclass(frozen=True, slots=True)
class TransactionWithPerson:
    """A transaction together with the person it belongs to."""

    transaction: Transaction
    person: Person


def _storage_errors(func: F) -> F:
    """Translate database failures into :class:`InternalError`."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except SQLAlchemyError as exc:
            raise InternalError("Storage operation failed") from exc

    return wrapper  # type: ignore[return-value]


class DebtLedger:
    """Entry point used by the HTTP layer and the CLI."""

    def __init__(self, people: PersonRepository, transactions: TransactionRepository):
        self.people = people
        self.transactions = transactions

    # People -------------------------------------------------------------

    @_storage_errors
    def list_people(self) -> list[Person]:
        return self.people.list_all()

    @_storage_errors
    def get_person(self, person_id: int) -> Person:
        person = self.people.get_by_id(person_id)
        if person is None:
            raise NotFoundError.for_entity("Person")
        return person

    @_storage_errors
    def create_person(self, values: Mapping[str, Any]) -> Person:
        person = Person(**{key: values.get(key) for key in PERSON_FIELDS})
        created = self.people.create(person)
        logger.info("Person created", extra={"person_id": created.id})
        return created

    @_storage_errors
    def update_person(self, person_id: int, changes: Mapping[str, Any]) -> Person:
        person = self.get_person(person_id)
        for key in PERSON_FIELDS:
            if key in changes:
                setattr(person, key, changes[key])
        updated = self.people.update(person)
        logger.info("Person updated", extra={"person_id": person_id, "fields": sorted(changes)})
        return updated

    @_storage_errors
    def delete_person(self, person_id: int) -> None:
        if not self.people.delete(person_id):
            raise NotFoundError.for_entity("Person")
        logger.info("Person deleted with their transactions", extra={"person_id": person_id})

    # Transactions -------------------------------------------------------

    @_storage_errors
    def list_transactions(self) -> list[TransactionWithPerson]:
        people = {person.id: person for person in self.people.list_all()}
        return self._attach_people(self.transactions.list_all(), people)

    @_storage_errors
    def get_transaction(self, transaction_id: int) -> Transaction:
        transaction = self.transactions.get_by_id(transaction_id)
        if transaction is None:
            raise NotFoundError.for_entity("Transaction")
        return transaction

    @_storage_errors
    def transactions_for_person(self, person_id: int) -> list[TransactionWithPerson]:
        person = self.get_person(person_id)
        return self._attach_people(self.transactions.list_by_person(person_id), {person_id: person})

    @_storage_errors
    def create_transaction(self, values: Mapping[str, Any]) -> Transaction:
        self._require_person(values["person_id"])
        transaction = Transaction(**{key: values[key] for key in TRANSACTION_FIELDS})
        created = self.transactions.create(transaction)
        logger.info(
            "Transaction created",
            extra={"transaction_id": created.id, "person_id": created.person_id},
        )
        return created

    @_storage_errors
    def update_transaction(self, transaction_id: int, changes: Mapping[str, Any]) -> Transaction:
        transaction = self.get_transaction(transaction_id)
        if "person_id" in changes:
            self._require_person(changes["person_id"])
        for key in TRANSACTION_FIELDS:
            if key in changes:
                setattr(transaction, key, changes[key])
        updated = self.transactions.update(transaction)
        logger.info(
            "Transaction updated",
            extra={"transaction_id": transaction_id, "fields": sorted(changes)},
        )
        return updated

    @_storage_errors
    def delete_transaction(self, transaction_id: int) -> None:
        if not self.transactions.delete(transaction_id):
            raise NotFoundError.for_entity("Transaction")
        logger.info("Transaction deleted", extra={"transaction_id": transaction_id})

    # Balances -----------------------------------------------------------

    @_storage_errors
    def person_balance(self, person_id: int):
        self.get_person(person_id)
        return balances.person_balance(person_id, self.transactions.list_by_person(person_id))

    @_storage_errors
    def all_balances(self) -> list[balances.PersonBalance]:
        return list(
            balances.all_person_balances(
                self.people.list_all(), self.transactions.list_all()
            ).values()
        )

    @_storage_errors
    def summary(self, now: Optional[datetime] = None) -> balances.FinancialSummary:
        return balances.financial_summary(
            self.people.list_all(), self.transactions.list_all(), now=now
        )

    @_storage_errors
    def top_debtors(self, limit: int = balances.DEFAULT_LIMIT) -> list[balances.PersonBalance]:
        return balances.top_debtors(self.people.list_all(), self.transactions.list_all(), limit)

    @_storage_errors
    def top_creditors(self, limit: int = balances.DEFAULT_LIMIT) -> list[balances.PersonBalance]:
        return balances.top_creditors(self.people.list_all(), self.transactions.list_all(), limit)

    # Helpers ------------------------------------------------------------

    def _require_person(self, person_id: int) -> None:
        if not self.people.exists(person_id):
            raise ValidationError({"personId": ["Person does not exist."]})

    @staticmethod
    def _attach_people(
        transactions: list[Transaction], people: Mapping[Optional[int], Person]
    ) -> list[TransactionWithPerson]:
        rows: list[TransactionWithPerson] = []
        for transaction in transactions:
            person = people.get(transaction.person_id)
            if person is None:
                # Unreachable under cascade delete.
                logger.warning(
                    "Transaction without a person skipped",
                    extra={"transaction_id": transaction.id},
                )
                continue
            rows.append(TransactionWithPerson(transaction=transaction, person=person))
        return rows
