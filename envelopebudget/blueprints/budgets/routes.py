from flask import Blueprint, jsonify
from flask_login import login_required, current_user
from ...extensions import db
from ...services.budgets import get_accessible_budgets, get_my_budget

budgets_bp = Blueprint("budgets", __name__, url_prefix="/budgets")


@budgets_bp.route("/mine")
@login_required
def my_budget():
    budget = get_my_budget(db.session, current_user.id)
    return jsonify({"ok": True, "budget": budget.to_dict() if budget else None})


@budgets_bp.route("/accessible")
@login_required
def accessible_budgets():
    return jsonify({"ok": True, "budgets": get_accessible_budgets(db.session, current_user.id)})
