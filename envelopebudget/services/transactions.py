import logging

from sqlalchemy.orm import joinedload

from ..errors import NotFound, ValidationError
from ..models import Envelope, Transaction, TransactionType
from .budgets import accessible_budget_ids
from .common import commit, is_number, reject_unknown_fields, require_caller, to_datetime
from .permissions import EDIT_ROLES, check_permission

logger = logging.getLogger(__name__)

FIELDS = ("date", "description", "amount", "type", "envelope_id")


def _clean_description(description):
    if not isinstance(description, str) or not description.strip():
        raise ValidationError("Description is required")
    return description.strip()


def _clean_amount(amount):
    # strings are converted at the HTTP boundary, not here
    if not is_number(amount) or amount <= 0:
        raise ValidationError("Amount must be greater than zero")
    return float(amount)


def _clean_type(value):
    try:
        return value if isinstance(value, TransactionType) else TransactionType(str(value).upper())
    except ValueError:
        raise ValidationError("Type must be INCOME or EXPENSE")


def _load_transaction(session, transaction_id):
    transaction = session.get(Transaction, transaction_id)
    if transaction is None:
        raise NotFound("Transaction not found.")
    return transaction


def create_transaction(session, caller_id, data):
    """Record a transaction in the budget that owns ``data['envelope_id']``."""
    require_caller(caller_id)
    reject_unknown_fields(data, FIELDS)

    envelope = session.get(Envelope, data.get("envelope_id"))
    if envelope is None:
        raise NotFound("Envelope not found.")
    check_permission(session, caller_id, envelope.budget_id, EDIT_ROLES)

    transaction = Transaction(
        date=to_datetime(data.get("date")),
        description=_clean_description(data.get("description")),
        amount=_clean_amount(data.get("amount")),
        type=_clean_type(data.get("type")),
        envelope_id=envelope.id,
        budget_id=envelope.budget_id,
    )
    session.add(transaction)
    commit(session, "Failed to create transaction.")
    logger.info("Transaction %s created in budget %s by %s", transaction.id, transaction.budget_id, caller_id)
    return transaction


def get_transactions(session, caller_id):
    require_caller(caller_id)
    budget_ids = accessible_budget_ids(session, caller_id)
    if not budget_ids:
        return []
    return (
        session.query(Transaction)
        .options(joinedload(Transaction.envelope))
        .filter(Transaction.budget_id.in_(budget_ids))
        .order_by(Transaction.date.desc())
        .all()
    )


def update_transaction(session, caller_id, transaction_id, data):
    """Apply a partial update; the envelope may only move within the same budget."""
    require_caller(caller_id)
    transaction = _load_transaction(session, transaction_id)
    check_permission(session, caller_id, transaction.budget_id, EDIT_ROLES)
    reject_unknown_fields(data, FIELDS)

    new_envelope_id = data.get("envelope_id")
    if "envelope_id" in data and new_envelope_id != transaction.envelope_id:
        envelope = session.get(Envelope, new_envelope_id) if new_envelope_id else None
        if envelope is None or envelope.budget_id != transaction.budget_id:
            raise ValidationError("Envelope must belong to the same budget as the transaction.")

    changes = {}
    if "date" in data:
        changes["date"] = to_datetime(data["date"])
    if "description" in data:
        changes["description"] = _clean_description(data["description"])
    if "amount" in data:
        changes["amount"] = _clean_amount(data["amount"])
    if "type" in data:
        changes["type"] = _clean_type(data["type"])
    if "envelope_id" in data:
        changes["envelope_id"] = new_envelope_id

    for field, value in changes.items():
        setattr(transaction, field, value)
    commit(session, "Failed to update transaction.")
    logger.info("Transaction %s updated by %s (%s)", transaction.id, caller_id, ", ".join(sorted(changes)))
    return transaction


def delete_transaction(session, caller_id, transaction_id):
    require_caller(caller_id)
    transaction = _load_transaction(session, transaction_id)
    check_permission(session, caller_id, transaction.budget_id, EDIT_ROLES)
    session.delete(transaction)
    commit(session, "Failed to delete transaction.")
    logger.info("Transaction %s deleted by %s", transaction_id, caller_id)
    return transaction
