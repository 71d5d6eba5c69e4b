"""Current-month rollups for the dashboard.

Both queries take the budget ids the dashboard asks about and keep only those
the caller can actually access; the rest contribute nothing.
"""
import calendar
import logging
from datetime import datetime

from sqlalchemy import func

from ..errors import ValidationError
from ..models import Envelope, Transaction, TransactionType
from .budgets import accessible_budget_ids
from .common import require_caller

logger = logging.getLogger(__name__)

UNKNOWN_ENVELOPE = "Unknown Envelope"


def current_month_range(now=None):
    """First instant and last millisecond of the month containing ``now``."""
    now = now or datetime.now()
    last_day = calendar.monthrange(now.year, now.month)[1]
    start = datetime(now.year, now.month, 1)
    end = datetime(now.year, now.month, last_day, 23, 59, 59, 999000)
    return start, end


def _visible_budget_ids(session, caller_id, budget_ids):
    if not isinstance(budget_ids, (list, tuple)):
        raise ValidationError("budget_ids must be a list.")
    if not all(isinstance(budget_id, str) for budget_id in budget_ids):
        raise ValidationError("budget_ids must contain budget id strings.")
    if not budget_ids:
        return []
    allowed = set(accessible_budget_ids(session, caller_id))
    visible = [budget_id for budget_id in dict.fromkeys(budget_ids) if budget_id in allowed]
    if len(visible) < len(set(budget_ids)):
        logger.warning("Dropped inaccessible budget ids for user %s", caller_id)
    return visible


def get_dashboard_totals(session, caller_id, budget_ids, now=None):
    require_caller(caller_id)
    budget_ids = _visible_budget_ids(session, caller_id, budget_ids)
    if not budget_ids:
        return {"income": 0.0, "expense": 0.0}

    start, end = current_month_range(now)
    rows = (
        session.query(Transaction.type, func.coalesce(func.sum(Transaction.amount), 0.0))
        .filter(
            Transaction.budget_id.in_(budget_ids),
            Transaction.date >= start,
            Transaction.date <= end,
        )
        .group_by(Transaction.type)
        .all()
    )
    totals = {"income": 0.0, "expense": 0.0}
    for ttype, total in rows:
        if ttype == TransactionType.INCOME:
            totals["income"] = float(total)
        elif ttype == TransactionType.EXPENSE:
            totals["expense"] = float(total)
    return totals


def get_spending_by_envelope(session, caller_id, budget_ids, now=None):
    require_caller(caller_id)
    budget_ids = _visible_budget_ids(session, caller_id, budget_ids)
    if not budget_ids:
        return []

    start, end = current_month_range(now)
    spending = (
        session.query(Transaction.envelope_id, func.sum(Transaction.amount))
        .filter(
            Transaction.budget_id.in_(budget_ids),
            Transaction.type == TransactionType.EXPENSE,
            Transaction.date >= start,
            Transaction.date <= end,
        )
        .group_by(Transaction.envelope_id)
        .all()
    )
    envelope_ids = [envelope_id for envelope_id, _ in spending if envelope_id is not None]
    if not envelope_ids:
        return []

    names = dict(
        session.query(Envelope.id, Envelope.name).filter(Envelope.id.in_(envelope_ids)).all()
    )
    return [
        {"name": names.get(envelope_id, UNKNOWN_ENVELOPE), "total": float(total or 0.0)}
        for envelope_id, total in spending
    ]
