import logging

from sqlalchemy import func

from ..errors import Conflict, NotFound, ValidationError
from ..models import Budget, Envelope, Transaction, TransactionType
from .budgets import accessible_budget_ids
from .common import commit, is_number, reject_unknown_fields, require_caller
from .permissions import EDIT_ROLES, check_permission

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("name", "allocated_amount")


def _clean_name(name):
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Envelope name is required")
    return name.strip()


def _clean_allocated(amount):
    if not is_number(amount) or amount < 0:
        raise ValidationError("Allocated amount must be a non-negative number")
    return float(amount)


def _load_envelope(session, envelope_id):
    envelope = session.get(Envelope, envelope_id)
    if envelope is None:
        raise NotFound("Envelope not found")
    return envelope


def spent_per_envelope(session, budget_ids):
    """Sum of EXPENSE amounts keyed by envelope id, recomputed on every call."""
    if not budget_ids:
        return {}
    rows = (
        session.query(Transaction.envelope_id, func.coalesce(func.sum(Transaction.amount), 0.0))
        .filter(
            Transaction.budget_id.in_(budget_ids),
            Transaction.type == TransactionType.EXPENSE,
        )
        .group_by(Transaction.envelope_id)
        .all()
    )
    return {envelope_id: float(total) for envelope_id, total in rows}


def summarize(envelope, spent, owner_id):
    row = envelope.to_dict()
    row["spent"] = spent
    row["remaining"] = envelope.allocated_amount - spent
    row["budget_owner_id"] = owner_id
    return row


def create_envelope(session, caller_id, name, budget_id, allocated_amount=0):
    require_caller(caller_id)
    check_permission(session, caller_id, budget_id, EDIT_ROLES)
    envelope = Envelope(
        name=_clean_name(name),
        allocated_amount=_clean_allocated(allocated_amount),
        budget_id=budget_id,
    )
    session.add(envelope)
    commit(session, "Failed to create envelope.")
    logger.info("Envelope %s created in budget %s by %s", envelope.id, budget_id, caller_id)
    return envelope


def get_envelopes(session, caller_id):
    """Envelopes of every accessible budget with their spent/remaining figures."""
    require_caller(caller_id)
    budget_ids = accessible_budget_ids(session, caller_id)
    if not budget_ids:
        return []

    rows = (
        session.query(Envelope, Budget.user_id)
        .join(Budget, Envelope.budget_id == Budget.id)
        .filter(Envelope.budget_id.in_(budget_ids))
        .order_by(Envelope.created_at.asc())
        .all()
    )
    spent = spent_per_envelope(session, budget_ids)
    return [summarize(envelope, spent.get(envelope.id, 0.0), owner_id) for envelope, owner_id in rows]


def update_envelope(session, caller_id, envelope_id, data):
    require_caller(caller_id)
    envelope = _load_envelope(session, envelope_id)
    check_permission(session, caller_id, envelope.budget_id, EDIT_ROLES)
    reject_unknown_fields(data, UPDATABLE_FIELDS)

    changes = {}
    if "name" in data:
        changes["name"] = _clean_name(data["name"])
    if "allocated_amount" in data:
        changes["allocated_amount"] = _clean_allocated(data["allocated_amount"])

    for field, value in changes.items():
        setattr(envelope, field, value)
    commit(session, "Failed to update envelope.")
    logger.info("Envelope %s updated by %s", envelope.id, caller_id)
    return envelope


def delete_envelope(session, caller_id, envelope_id):
    """Delete an envelope; refused while transactions still reference it."""
    require_caller(caller_id)
    envelope = _load_envelope(session, envelope_id)
    check_permission(session, caller_id, envelope.budget_id, EDIT_ROLES)

    used = session.query(Transaction.id).filter_by(envelope_id=envelope.id).first()
    if used:
        raise Conflict("Cannot delete an envelope that still has transactions")

    session.delete(envelope)
    commit(session, "Failed to delete envelope.")
    logger.info("Envelope %s deleted by %s", envelope_id, caller_id)
    return envelope
