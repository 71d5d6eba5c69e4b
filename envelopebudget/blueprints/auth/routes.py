from flask import Blueprint, jsonify
from flask_login import login_user, logout_user, login_required, current_user
from ...extensions import db
from ...errors import Unauthenticated
from ...services.users import authenticate, register_user
from ..utils import json_body

auth_bp = Blueprint("auth", __name__, url_prefix="/auth")


@auth_bp.route("/register", methods=["POST"])
def register():
    data = json_body()
    user = register_user(db.session, data.get("email"), data.get("password"))
    return jsonify({"ok": True, "user": user.to_dict()}), 201


@auth_bp.route("/login", methods=["POST"])
def login():
    data = json_body()
    user = authenticate(db.session, data.get("email"), data.get("password"))
    if user is None:
        raise Unauthenticated("Invalid credentials")
    login_user(user)
    return jsonify({"ok": True, "user": user.to_dict()})


@auth_bp.route("/logout", methods=["POST"])
@login_required
def logout():
    logout_user()
    return jsonify({"ok": True})


@auth_bp.route("/me")
@login_required
def me():
    return jsonify({"ok": True, "user": current_user.to_dict()})
