"""Decides whether a user may act on a budget.

Ownership is a derived role: the owner is never stored as a collaborator, so
every call site passes the set of roles it accepts and this module is the only
place that compares ``Budget.user_id`` with the caller.
"""
import logging

from ..errors import Forbidden, NotFound
from ..models import Budget, BudgetCollaborator, Role

logger = logging.getLogger(__name__)

EDIT_ROLES = frozenset({Role.OWNER, Role.EDITOR})
ANY_ROLE = frozenset({Role.OWNER, Role.EDITOR, Role.VIEWER})
COLLABORATOR_ROLES = frozenset({Role.EDITOR, Role.VIEWER})


def find_collaboration(session, budget_id, user_id):
    return (
        session.query(BudgetCollaborator)
        .filter_by(budget_id=budget_id, user_id=user_id)
        .first()
    )


def is_owner(budget, user_id):
    return budget.user_id == user_id


def resolve_role(session, user_id, budget):
    """Role of ``user_id`` on ``budget``, or None without access."""
    if is_owner(budget, user_id):
        return Role.OWNER
    collaboration = find_collaboration(session, budget.id, user_id)
    return collaboration.role if collaboration else None


def check_permission(session, user_id, budget_id, allowed_roles):
    """Return the budget if ``user_id`` holds one of ``allowed_roles`` on it.

    Raises NotFound for an unknown budget and Forbidden otherwise. Only roles
    listed in ``allowed_roles`` match; an owner is not implicitly an editor.
    """
    budget = session.get(Budget, budget_id)
    if budget is None:
        raise NotFound("Budget not found.")

    if is_owner(budget, user_id) and Role.OWNER in allowed_roles:
        return budget

    collaboration = find_collaboration(session, budget_id, user_id)
    if collaboration is not None and collaboration.role in allowed_roles:
        return budget

    logger.warning("Denied user %s on budget %s (needs one of %s)",
                   user_id, budget_id, sorted(r.value for r in allowed_roles))
    raise Forbidden()


def parse_role(value, allowed=COLLABORATOR_ROLES):
    """Coerce ``value`` to a Role from ``allowed``, or None if it is not one."""
    try:
        role = value if isinstance(value, Role) else Role(str(value).upper())
    except ValueError:
        return None
    return role if role in allowed else None
