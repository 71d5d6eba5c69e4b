from flask import Blueprint, jsonify, request
from flask_login import login_required, current_user
from ...extensions import db
from ...services.dashboard import get_dashboard_totals, get_spending_by_envelope

dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/dashboard")


@dashboard_bp.route("/totals")
@login_required
def totals():
    budget_ids = request.args.getlist("budget_id")
    return jsonify({"ok": True, **get_dashboard_totals(db.session, current_user.id, budget_ids)})


@dashboard_bp.route("/spending")
@login_required
def spending():
    budget_ids = request.args.getlist("budget_id")
    rows = get_spending_by_envelope(db.session, current_user.id, budget_ids)
    return jsonify({"ok": True, "envelopes": rows})
