"""Flask CLI commands for debtbook."""

from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal

import click

from .extensions import get_ledger
from .models import utcnow

DEMO_PEOPLE = (
    {"name": "Alice Martin", "relationship": "Friend", "email": "alice@example.com", "phone": None},
    {"name": "Bruno Silva", "relationship": "Colleague", "email": None, "phone": "555-0102"},
    {"name": "Chen Wei", "relationship": "Family", "email": "chen@example.com", "phone": None},
)

# (person index, amount, description, days ago, person is debtor)
DEMO_TRANSACTIONS = (
    (0, "100.00", "Concert tickets", 30, True),
    (0, "40.00", "Lunch", 12, False),
    (1, "25.00", "Taxi home", 9, False),
    (2, "250.00", "Rent share", 20, True),
    (2, "250.00", "Paid back rent share", 2, False),
)


def seed_demo_data(ledger, *, reset: bool = False, now: datetime | None = None) -> tuple[int, int]:
    """Insert the demo people and transactions; returns (people, transactions) created."""

    if reset:
        for person in ledger.list_people():
            ledger.delete_person(person.id)

    now = now or utcnow()
    people = [ledger.create_person(values) for values in DEMO_PEOPLE]
    for index, amount, description, days_ago, is_debtor in DEMO_TRANSACTIONS:
        ledger.create_transaction(
            {
                "person_id": people[index].id,
                "amount": Decimal(amount),
                "description": description,
                "date": now - timedelta(days=days_ago),
                "is_person_debtor": is_debtor,
            }
        )
    return len(people), len(DEMO_TRANSACTIONS)


def init_app(app) -> None:
    """Register CLI commands on the Flask app."""

    @app.cli.command("debtbook-seed")
    @click.option("--reset", is_flag=True, default=False, help="Delete every person first")
    def debtbook_seed(reset: bool) -> None:
        """Seed demo people and transactions."""

        people, transactions = seed_demo_data(get_ledger(), reset=reset)
        click.echo(f"Seeded {people} people and {transactions} transactions.")

    @app.cli.command("debtbook-summary")
    @click.option("--limit", default=5, show_default=True, type=click.IntRange(min=1))
    def debtbook_summary(limit: int) -> None:
        """Print the financial summary and the top debtors and creditors."""

        ledger = get_ledger()
        summary = ledger.summary()
        click.echo(f"Owed to you:  {summary.total_owed_to_you}")
        click.echo(f"You owe:      {summary.total_you_owe}")
        click.echo(f"Net balance:  {summary.net_balance}")
        click.echo(f"Debtors: {summary.debtor_count}  Creditors: {summary.creditor_count}")

        for title, entries in (
            ("Top debtors", ledger.top_debtors(limit)),
            ("Top creditors", ledger.top_creditors(limit)),
        ):
            click.echo(f"\n{title}:")
            if not entries:
                click.echo("  (none)")
            for entry in entries:
                click.echo(f"  {entry.person.name:<24} {entry.balance:>12}")
