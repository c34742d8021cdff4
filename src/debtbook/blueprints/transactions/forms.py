"""Transaction payload validation."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any

from ...services.balances import to_money
from ..common import MAX_ID

DESCRIPTION_MAX_LENGTH = 255
# NUMERIC(10, 2) leaves eight integer digits.
AMOUNT_CEILING = Decimal("100000000")


def parse_amount(value: Any) -> Decimal:
    """Return a positive cent-precision Decimal or raise ValueError with a user message."""

    if isinstance(value, bool) or value is None:
        raise ValueError("Amount is required.")
    if isinstance(value, float):
        value = str(value)
    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise ValueError("Amount is required.")
    if not isinstance(value, (str, int, Decimal)):
        raise ValueError("Enter a valid number for the amount.")
    try:
        amount = Decimal(value)
    except InvalidOperation:
        raise ValueError("Enter a valid number for the amount.") from None
    if not amount.is_finite():
        raise ValueError("Enter a valid number for the amount.")
    if amount <= 0:
        raise ValueError("Amount must be greater than zero.")
    if amount.normalize().as_tuple().exponent < -2:
        raise ValueError("Amount can have at most two decimal places.")
    if amount >= AMOUNT_CEILING:
        raise ValueError("Amount must be less than 100,000,000.")
    return to_money(amount)


def parse_datetime(value: Any) -> datetime:
    """Parse an ISO-8601 date or datetime into naive UTC."""

    if not isinstance(value, str) or not value.strip():
        raise ValueError("Date is required.")
    raw = value.strip()
    try:
        if len(raw) == 10:
            return datetime.strptime(raw, "%Y-%m-%d")
        if raw.endswith(("Z", "z")):
            raw = raw[:-1] + "+00:00"
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        raise ValueError("Enter a valid ISO-8601 date.") from None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def parse_person_id(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError("Person must be a whole number.")
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if not isinstance(value, int):
        raise ValueError("Person must be a whole number.")
    if value <= 0:
        raise ValueError("Person must be greater than zero.")
    if value > MAX_ID:
        raise ValueError("Person id is out of range.")
    return value


def parse_flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in {"true", "false"}:
        return value.strip().lower() == "true"
    raise ValueError("Must be true or false.")


def parse_description(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError("Description is required.")
    value = value.strip()
    if len(value) > DESCRIPTION_MAX_LENGTH:
        raise ValueError(f"Description must be {DESCRIPTION_MAX_LENGTH} characters or fewer.")
    return value


# API key -> (model attribute, parser)
FIELDS = {
    "personId": ("person_id", parse_person_id),
    "amount": ("amount", parse_amount),
    "description": ("description", parse_description),
    "date": ("date", parse_datetime),
    "isPersonDebtor": ("is_person_debtor", parse_flag),
}


@dataclass(slots=True)
class TransactionForm:
    """Represents transaction input prior to validation."""

    partial: bool = False
    errors: dict[str, list[str]] = field(default_factory=dict, init=False)
    cleaned: dict[str, Any] = field(default_factory=dict, init=False)
    raw_data: dict[str, Any] = field(default_factory=dict, init=False)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, partial: bool = False) -> TransactionForm:
        form = cls(partial=partial)
        form.raw_data = dict(data)
        return form

    def validate(self) -> bool:
        """Validate the bound data and populate :attr:`cleaned` with model attributes."""

        self.errors.clear()
        self.cleaned.clear()

        for key, (attribute, parser) in FIELDS.items():
            if key not in self.raw_data:
                if not self.partial:
                    self._add_error(key, "This field is required.")
                continue
            try:
                self.cleaned[attribute] = parser(self.raw_data[key])
            except ValueError as exc:
                self._add_error(key, str(exc))

        return not self.errors

    def _add_error(self, field: str, message: str) -> None:
        """Accumulate validation errors for a specific field."""

        self.errors.setdefault(field, []).append(message)
