from flask import Blueprint, jsonify
from flask_login import login_required, current_user
from ...extensions import db
from ...services import envelopes as ledger
from ..utils import coerce_amount, json_body

envelopes_bp = Blueprint("envelopes", __name__, url_prefix="/envelopes")


@envelopes_bp.route("/")
@login_required
def list_envelopes():
    return jsonify({"ok": True, "envelopes": ledger.get_envelopes(db.session, current_user.id)})


@envelopes_bp.route("/", methods=["POST"])
@login_required
def create_envelope():
    data = coerce_amount(json_body(), "allocated_amount")
    envelope = ledger.create_envelope(
        db.session,
        current_user.id,
        data.get("name"),
        data.get("budget_id"),
        data.get("allocated_amount", 0),
    )
    return jsonify({"ok": True, "envelope": envelope.to_dict()}), 201


@envelopes_bp.route("/<envelope_id>", methods=["PATCH"])
@login_required
def update_envelope(envelope_id):
    data = coerce_amount(json_body(), "allocated_amount")
    envelope = ledger.update_envelope(db.session, current_user.id, envelope_id, data)
    return jsonify({"ok": True, "envelope": envelope.to_dict()})


@envelopes_bp.route("/<envelope_id>", methods=["DELETE"])
@login_required
def delete_envelope(envelope_id):
    envelope = ledger.delete_envelope(db.session, current_user.id, envelope_id)
    return jsonify({"ok": True, "envelope": envelope.to_dict()})
