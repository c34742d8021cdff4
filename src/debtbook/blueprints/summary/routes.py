"""Summary routes backed by the balance calculations."""

from __future__ import annotations

from flask import jsonify

from ...extensions import get_ledger
from ...serializers import balance_to_dict, summary_to_dict
from ..common import parse_limit
from . import bp


@bp.get("")
def financial_summary():
    return jsonify(summary_to_dict(get_ledger().summary()))


@bp.get("/debtors")
def top_debtors():
    entries = get_ledger().top_debtors(parse_limit())
    return jsonify([balance_to_dict(entry) for entry in entries])


@bp.get("/creditors")
def top_creditors():
    entries = get_ledger().top_creditors(parse_limit())
    return jsonify([balance_to_dict(entry) for entry in entries])


@bp.get("/balances")
def all_balances():
    """Every person's balance, settled people included."""

    return jsonify([balance_to_dict(entry) for entry in get_ledger().all_balances()])
