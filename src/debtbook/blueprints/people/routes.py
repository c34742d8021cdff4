"""People routes."""

from __future__ import annotations

from flask import jsonify

from ...errors import ValidationError
from ...extensions import get_ledger
from ...serializers import money, person_to_dict, transaction_with_person_to_dict
from ..common import json_body
from . import bp
from .forms import PersonForm


def _validated(partial: bool) -> dict:
    form = PersonForm.from_mapping(json_body(), partial=partial)
    if not form.validate():
        raise ValidationError(form.errors)
    return form.cleaned


@bp.get("")
def list_people():
    return jsonify([person_to_dict(person) for person in get_ledger().list_people()])


@bp.post("")
def create_person():
    person = get_ledger().create_person(_validated(partial=False))
    return jsonify(person_to_dict(person)), 201


@bp.get("/<id:person_id>")
def get_person(person_id: int):
    return jsonify(person_to_dict(get_ledger().get_person(person_id)))


@bp.put("/<id:person_id>")
def update_person(person_id: int):
    """Partial update: only the keys present in the body change."""

    ledger = get_ledger()
    ledger.get_person(person_id)
    person = ledger.update_person(person_id, _validated(partial=True))
    return jsonify(person_to_dict(person))


@bp.delete("/<id:person_id>")
def delete_person(person_id: int):
    get_ledger().delete_person(person_id)
    return "", 204


@bp.get("/<id:person_id>/transactions")
def person_transactions(person_id: int):
    rows = get_ledger().transactions_for_person(person_id)
    return jsonify([transaction_with_person_to_dict(row) for row in rows])


@bp.get("/<id:person_id>/balance")
def person_balance(person_id: int):
    balance = get_ledger().person_balance(person_id)
    return jsonify({"personId": person_id, "balance": money(balance)})
