"""Transaction routes."""

from __future__ import annotations

from flask import jsonify

from ...errors import ValidationError
from ...extensions import get_ledger
from ...serializers import transaction_to_dict, transaction_with_person_to_dict
from ..common import json_body
from . import bp
from .forms import TransactionForm


def _validated(partial: bool) -> dict:
    form = TransactionForm.from_mapping(json_body(), partial=partial)
    if not form.validate():
        raise ValidationError(form.errors)
    return form.cleaned


@bp.get("")
def list_transactions():
    """Every transaction, newest first, with its person embedded."""

    rows = get_ledger().list_transactions()
    return jsonify([transaction_with_person_to_dict(row) for row in rows])


@bp.post("")
def create_transaction():
    transaction = get_ledger().create_transaction(_validated(partial=False))
    return jsonify(transaction_to_dict(transaction)), 201


@bp.get("/<id:transaction_id>")
def get_transaction(transaction_id: int):
    return jsonify(transaction_to_dict(get_ledger().get_transaction(transaction_id)))


@bp.put("/<id:transaction_id>")
def update_transaction(transaction_id: int):
    ledger = get_ledger()
    ledger.get_transaction(transaction_id)
    transaction = ledger.update_transaction(transaction_id, _validated(partial=True))
    return jsonify(transaction_to_dict(transaction))


@bp.delete("/<id:transaction_id>")
def delete_transaction(transaction_id: int):
    get_ledger().delete_transaction(transaction_id)
    return "", 204
