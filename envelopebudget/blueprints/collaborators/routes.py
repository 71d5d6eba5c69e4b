from flask import Blueprint, jsonify, request
from flask_login import login_required, current_user
from ...extensions import db
from ...services import collaboration
from ...services.users import find_user_by_email
from ..utils import json_body

collaborators_bp = Blueprint("collaborators", __name__, url_prefix="/collaborators")


@collaborators_bp.route("/users/lookup")
@login_required
def lookup_user():
    found = find_user_by_email(db.session, current_user.id, request.args.get("email"))
    return jsonify({"ok": True, "user": found})


@collaborators_bp.route("/<budget_id>")
@login_required
def list_collaborators(budget_id):
    rows = collaboration.get_budget_collaborators(db.session, current_user.id, budget_id)
    return jsonify({"ok": True, "collaborators": rows})


@collaborators_bp.route("/<budget_id>", methods=["POST"])
@login_required
def invite(budget_id):
    data = json_body()
    row = collaboration.invite_collaborator(
        db.session, current_user.id, budget_id, data.get("user_id"), data.get("role")
    )
    return jsonify({"ok": True, "collaborator": row.to_dict()}), 201


@collaborators_bp.route("/<budget_id>/<user_id>", methods=["PATCH"])
@login_required
def change_role(budget_id, user_id):
    data = json_body()
    row = collaboration.update_collaborator_role(
        db.session, current_user.id, budget_id, user_id, data.get("role")
    )
    return jsonify({"ok": True, "collaborator": row.to_dict()})


@collaborators_bp.route("/<budget_id>/<user_id>", methods=["DELETE"])
@login_required
def remove(budget_id, user_id):
    row = collaboration.remove_collaborator(db.session, current_user.id, budget_id, user_id)
    return jsonify({"ok": True, "collaborator": row.to_dict()})
