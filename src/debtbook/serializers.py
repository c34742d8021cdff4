"""JSON shapes returned by the API.

Keys are camelCase to match what the web client expects. Money is
rendered as a two-decimal string so no binary float reaches the wire.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional

from .models import Person, Transaction
from .services.balances import FinancialSummary, PersonBalance, to_money
from .services.ledger_service import TransactionWithPerson


def money(value: Decimal) -> str:
    return format(to_money(value), "f")


def timestamp(value: Optional[datetime]) -> Optional[str]:
    """ISO-8601 in UTC with a ``Z`` suffix; stored datetimes are naive UTC."""

    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.isoformat() + "Z"


def person_to_dict(person: Person) -> dict[str, Any]:
    return {
        "id": person.id,
        "name": person.name,
        "relationship": person.relationship,
        "email": person.email,
        "phone": person.phone,
        "createdAt": timestamp(person.created_at),
    }


def transaction_to_dict(transaction: Transaction) -> dict[str, Any]:
    return {
        "id": transaction.id,
        "personId": transaction.person_id,
        "amount": money(transaction.amount),
        "description": transaction.description,
        "date": timestamp(transaction.date),
        "isPersonDebtor": transaction.is_person_debtor,
        "createdAt": timestamp(transaction.created_at),
    }


def transaction_with_person_to_dict(row: TransactionWithPerson) -> dict[str, Any]:
    payload = transaction_to_dict(row.transaction)
    payload["person"] = person_to_dict(row.person)
    return payload


def balance_to_dict(entry: PersonBalance) -> dict[str, Any]:
    return {
        "person": person_to_dict(entry.person),
        "balance": money(entry.balance),
        "lastTransaction": timestamp(entry.last_transaction),
    }


def summary_to_dict(summary: FinancialSummary) -> dict[str, Any]:
    return {
        "totalOwedToYou": money(summary.total_owed_to_you),
        "totalYouOwe": money(summary.total_you_owe),
        "netBalance": money(summary.net_balance),
        "debtorCount": summary.debtor_count,
        "creditorCount": summary.creditor_count,
        "lastUpdated": timestamp(summary.last_updated),
    }
