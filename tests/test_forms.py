"""Payload validation for people and transactions."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest

from debtbook.blueprints.people.forms import PersonForm
from debtbook.blueprints.transactions.forms import (
    TransactionForm,
    parse_amount,
    parse_datetime,
    parse_flag,
    parse_person_id,
)


class TestPersonForm:
    def test_valid_payload_blank_optionals_become_none(self):
        form = PersonForm.from_mapping(
            {"name": "  Ada  ", "relationship": "", "email": "ada@example.com"}
        )

        assert form.validate()
        assert form.cleaned == {
            "name": "Ada",
            "relationship": None,
            "email": "ada@example.com",
            "phone": None,
        }

    @pytest.mark.parametrize("name", [None, "", "   ", 42])
    def test_name_is_required(self, name):
        form = PersonForm.from_mapping({"name": name})

        assert not form.validate()
        assert form.errors["name"] == ["Name is required."]

    def test_name_length_limit(self):
        form = PersonForm.from_mapping({"name": "x" * 121})

        assert not form.validate()
        assert "name" in form.errors

    @pytest.mark.parametrize("email", ["no-at-sign", "@example.com", "ada@", "a@b@c"])
    def test_invalid_email(self, email):
        form = PersonForm.from_mapping({"name": "Ada", "email": email})

        assert not form.validate()
        assert form.errors["email"] == ["Enter a valid email address."]

    def test_partial_only_reports_present_keys(self):
        form = PersonForm.from_mapping({"phone": "555"}, partial=True)

        assert form.validate()
        assert form.cleaned == {"phone": "555"}

    def test_partial_still_validates_name_when_present(self):
        form = PersonForm.from_mapping({"name": ""}, partial=True)

        assert not form.validate()


class TestTransactionForm:
    payload = {
        "personId": 1,
        "amount": "42.50",
        "description": "Groceries",
        "date": "2024-03-01T10:00:00Z",
        "isPersonDebtor": True,
    }

    def test_valid_payload_maps_to_model_attributes(self):
        form = TransactionForm.from_mapping(self.payload)

        assert form.validate()
        assert form.cleaned == {
            "person_id": 1,
            "amount": Decimal("42.50"),
            "description": "Groceries",
            "date": datetime(2024, 3, 1, 10, 0),
            "is_person_debtor": True,
        }

    def test_missing_fields_reported(self):
        form = TransactionForm.from_mapping({})

        assert not form.validate()
        assert set(form.errors) == {"personId", "amount", "description", "date", "isPersonDebtor"}
        assert form.errors["amount"] == ["This field is required."]

    def test_partial_accepts_subset(self):
        form = TransactionForm.from_mapping({"amount": 5}, partial=True)

        assert form.validate()
        assert form.cleaned == {"amount": Decimal("5.00")}


@pytest.mark.parametrize(
    ("value", "message"),
    [
        (None, "Amount is required."),
        ("", "Amount is required."),
        ("abc", "Enter a valid number for the amount."),
        ("NaN", "Enter a valid number for the amount."),
        (0, "Amount must be greater than zero."),
        ("-3", "Amount must be greater than zero."),
        ("1.005", "Amount can have at most two decimal places."),
        ("100000000", "Amount must be less than 100,000,000."),
        (True, "Amount is required."),
    ],
)
def test_parse_amount_rejects(value, message):
    with pytest.raises(ValueError) as excinfo:
        parse_amount(value)

    assert str(excinfo.value) == message


@pytest.mark.parametrize(
    ("value", "expected"),
    [("10", Decimal("10.00")), (0.1, Decimal("0.10")), ("99999999.99", Decimal("99999999.99"))],
)
def test_parse_amount_accepts(value, expected):
    assert parse_amount(value) == expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("2024-03-01", datetime(2024, 3, 1)),
        ("2024-03-01T12:30:00", datetime(2024, 3, 1, 12, 30)),
        ("2024-03-01T12:30:00Z", datetime(2024, 3, 1, 12, 30)),
        ("2024-03-01T14:30:00+02:00", datetime(2024, 3, 1, 12, 30)),
    ],
)
def test_parse_datetime_normalizes_to_naive_utc(value, expected):
    assert parse_datetime(value) == expected


def test_parse_datetime_rejects_garbage():
    with pytest.raises(ValueError):
        parse_datetime("yesterday")


@pytest.mark.parametrize(("value", "expected"), [(True, True), ("false", False), (" TRUE ", True)])
def test_parse_flag(value, expected):
    assert parse_flag(value) is expected


@pytest.mark.parametrize("value", [1, "yes", None])
def test_parse_flag_rejects_non_booleans(value):
    with pytest.raises(ValueError):
        parse_flag(value)


def test_parse_person_id_bounds():
    assert parse_person_id(2**63 - 1) == 2**63 - 1
    assert parse_person_id("42") == 42
    with pytest.raises(ValueError, match="out of range"):
        parse_person_id(2**63)
