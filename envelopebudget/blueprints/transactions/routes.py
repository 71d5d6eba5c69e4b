from flask import Blueprint, jsonify
from flask_login import login_required, current_user
from ...extensions import db
from ...services import transactions as ledger
from ..utils import coerce_amount, json_body

transactions_bp = Blueprint("transactions", __name__, url_prefix="/transactions")


@transactions_bp.route("/")
@login_required
def list_transactions():
    rows = ledger.get_transactions(db.session, current_user.id)
    return jsonify({"ok": True, "transactions": [t.to_dict(include_envelope=True) for t in rows]})


@transactions_bp.route("/", methods=["POST"])
@login_required
def create_transaction():
    data = coerce_amount(json_body(), "amount")
    transaction = ledger.create_transaction(db.session, current_user.id, data)
    return jsonify({"ok": True, "transaction": transaction.to_dict()}), 201


@transactions_bp.route("/<transaction_id>", methods=["PATCH"])
@login_required
def update_transaction(transaction_id):
    data = coerce_amount(json_body(), "amount")
    transaction = ledger.update_transaction(db.session, current_user.id, transaction_id, data)
    return jsonify({"ok": True, "transaction": transaction.to_dict()})


@transactions_bp.route("/<transaction_id>", methods=["DELETE"])
@login_required
def delete_transaction(transaction_id):
    transaction = ledger.delete_transaction(db.session, current_user.id, transaction_id)
    return jsonify({"ok": True, "transaction": transaction.to_dict()})
