import logging

from sqlalchemy.exc import SQLAlchemyError

from ..models import Budget, BudgetCollaborator
from .common import require_caller
from .permissions import resolve_role

logger = logging.getLogger(__name__)


def accessible_budget_ids(session, user_id):
    """Ids of budgets the user owns or collaborates on, owned first, no repeats."""
    owned = [row.id for row in session.query(Budget.id).filter(Budget.user_id == user_id).all()]
    shared = [
        row.budget_id
        for row in session.query(BudgetCollaborator.budget_id)
        .filter(BudgetCollaborator.user_id == user_id)
        .all()
    ]
    return list(dict.fromkeys(owned + shared))


def get_my_budget(session, caller_id):
    """The caller's own budget, or None when they have not got one."""
    require_caller(caller_id)
    return (
        session.query(Budget)
        .filter_by(user_id=caller_id)
        .order_by(Budget.created_at)
        .first()
    )


def get_accessible_budgets(session, caller_id):
    require_caller(caller_id)
    budget_ids = accessible_budget_ids(session, caller_id)
    if not budget_ids:
        return []
    budgets = session.query(Budget).filter(Budget.id.in_(budget_ids)).all()
    by_id = {b.id: b for b in budgets}
    rows = []
    for budget_id in budget_ids:
        budget = by_id.get(budget_id)
        if budget is None:
            continue
        row = budget.to_dict()
        role = resolve_role(session, caller_id, budget)
        row["role"] = role.value if role else None
        rows.append(row)
    return rows


def create_default_budget(session, user):
    """Signup hook: give a new user exactly one budget.

    A failure is logged and swallowed so that signup itself still succeeds.
    """
    try:
        budget = Budget(user_id=user.id)
        session.add(budget)
        session.commit()
    except SQLAlchemyError:
        session.rollback()
        logger.exception("Error creating budget for user %s", user.id)
        return None
    logger.info("Budget created for new user: %s", user.id)
    return budget
