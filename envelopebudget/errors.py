"""Typed failures raised by the budget operations.

Every failure an operation can produce is one of these, each carrying the HTTP
status the JSON boundary answers with.
"""
import logging

from flask import jsonify

logger = logging.getLogger(__name__)


class BudgetAppError(Exception):
    status_code = 500
    default_message = "Unexpected error"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self):
        return {"ok": False, "message": self.message}


class Unauthenticated(BudgetAppError):
    status_code = 401
    default_message = "User not authenticated"


class Forbidden(BudgetAppError):
    status_code = 403
    default_message = "User does not have sufficient permissions for this budget."


class NotFound(BudgetAppError):
    status_code = 404
    default_message = "Not found"


class ValidationError(BudgetAppError):
    status_code = 400
    default_message = "Invalid input"


class Conflict(BudgetAppError):
    status_code = 409
    default_message = "Conflict"


class InternalError(BudgetAppError):
    status_code = 500
    default_message = "Internal error"


def register_error_handlers(app):
    @app.errorhandler(BudgetAppError)
    def handle_budget_error(err):
        if err.status_code >= 500:
            logger.error("Request failed: %s", err.message)
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(404)
    def handle_missing_route(_err):
        return jsonify({"ok": False, "message": "Resource not found"}), 404

    @app.errorhandler(405)
    def handle_bad_method(_err):
        return jsonify({"ok": False, "message": "Method not allowed"}), 405
