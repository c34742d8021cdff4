"""Balance calculations over a snapshot of people and transactions.

Every function here is pure: it reads the rows it is given and never touches
storage. A transaction adds its amount to the person's balance when the person
is the debtor and subtracts it otherwise, so a positive balance means the
person owes the user and a negative one means the user owes the person.

Portfolio totals are computed from the per-person net balances, never from
raw transaction amounts: a person with 100 lent and 40 borrowed contributes 60
to ``total_owed_to_you`` and nothing to ``total_you_owe``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Optional, Protocol

from ..models.person import utcnow

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
DEFAULT_LIMIT = 5


class PersonLike(Protocol):
    id: Optional[int]


class TransactionLike(Protocol):
    person_id: int
    amount: Any
    is_person_debtor: bool
    date: datetime


@dataclass(slots=True)
class PersonBalance:
    """Net position against one person."""

    person: Any
    balance: Decimal = ZERO
    last_transaction: Optional[datetime] = None


@dataclass(frozen=True, slots=True)
class FinancialSummary:
    """Portfolio-level aggregates over all per-person balances."""

    total_owed_to_you: Decimal
    total_you_owe: Decimal
    net_balance: Decimal
    debtor_count: int
    creditor_count: int
    last_updated: datetime


def to_money(value: Any) -> Decimal:
    """Return ``value`` as a Decimal rounded to cents.

    Floats go through ``str`` so that 0.1 becomes Decimal("0.10") rather than
    its binary expansion.
    """

    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, float):
        amount = Decimal(str(value))
    else:
        amount = Decimal(value)
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def signed_amount(transaction: TransactionLike) -> Decimal:
    """Contribution of one transaction to its person's balance."""

    amount = to_money(transaction.amount)
    return amount if transaction.is_person_debtor else -amount


def person_balance(person_id: int, transactions: Iterable[TransactionLike]) -> Decimal:
    """Net balance for ``person_id``; zero when it has no transactions or is unknown."""

    balance = ZERO
    for transaction in transactions:
        if transaction.person_id == person_id:
            balance += signed_amount(transaction)
    return balance


def all_person_balances(
    people: Iterable[PersonLike], transactions: Iterable[TransactionLike]
) -> dict[int, PersonBalance]:
    """Balance for every known person, including those with no transactions.

    Transactions referencing a person missing from ``people`` are ignored.
    The result is keyed by person id in the order ``people`` was given.
    """

    balances: dict[int, PersonBalance] = {}
    for person in people:
        if person.id is None:
            continue
        balances[person.id] = PersonBalance(person=person)

    for transaction in transactions:
        entry = balances.get(transaction.person_id)
        if entry is None:
            continue
        entry.balance += signed_amount(transaction)
        if entry.last_transaction is None or transaction.date > entry.last_transaction:
            entry.last_transaction = transaction.date

    return balances


def top_debtors(
    people: Iterable[PersonLike],
    transactions: Iterable[TransactionLike],
    limit: int = DEFAULT_LIMIT,
) -> list[PersonBalance]:
    """People who owe the user, largest balance first."""

    debtors = [
        entry for entry in all_person_balances(people, transactions).values() if entry.balance > 0
    ]
    debtors.sort(key=lambda entry: entry.balance, reverse=True)
    return debtors[: max(limit, 0)]


def top_creditors(
    people: Iterable[PersonLike],
    transactions: Iterable[TransactionLike],
    limit: int = DEFAULT_LIMIT,
) -> list[PersonBalance]:
    """People the user owes, most negative balance first."""

    creditors = [
        entry for entry in all_person_balances(people, transactions).values() if entry.balance < 0
    ]
    creditors.sort(key=lambda entry: entry.balance)
    return creditors[: max(limit, 0)]


def financial_summary(
    people: Iterable[PersonLike],
    transactions: Iterable[TransactionLike],
    *,
    now: Optional[datetime] = None,
) -> FinancialSummary:
    """Aggregate the per-person net balances into portfolio totals.

    ``last_updated`` is the time of the computation, not of the newest row.
    """

    total_owed_to_you = ZERO
    total_you_owe = ZERO
    debtor_count = 0
    creditor_count = 0

    for entry in all_person_balances(people, transactions).values():
        if entry.balance > 0:
            total_owed_to_you += entry.balance
            debtor_count += 1
        elif entry.balance < 0:
            total_you_owe += -entry.balance
            creditor_count += 1

    return FinancialSummary(
        total_owed_to_you=total_owed_to_you,
        total_you_owe=total_you_owe,
        net_balance=total_owed_to_you - total_you_owe,
        debtor_count=debtor_count,
        creditor_count=creditor_count,
        last_updated=now or utcnow(),
    )
