"""Managing who else may use a budget.

Only the owner manages collaborators. Lookups that fail the ownership test
answer "not found or not owner" so a non-owner cannot probe for budgets.
"""
import logging

from ..errors import Conflict, NotFound, ValidationError
from ..models import Budget, BudgetCollaborator, User
from .common import commit, require_caller
from .permissions import ANY_ROLE, check_permission, find_collaboration, is_owner, parse_role

logger = logging.getLogger(__name__)


def _owned_budget(session, budget_id, caller_id):
    budget = session.query(Budget).filter_by(id=budget_id, user_id=caller_id).first()
    if budget is None:
        raise NotFound("Budget not found or you are not the owner.")
    return budget


def _clean_role(value):
    role = parse_role(value)
    if role is None:
        raise ValidationError("Role must be EDITOR or VIEWER")
    return role


def _existing_collaboration(session, budget_id, user_id):
    collaboration = find_collaboration(session, budget_id, user_id)
    if collaboration is None:
        raise NotFound("Collaborator not found on this budget.")
    return collaboration


def invite_collaborator(session, caller_id, budget_id, invitee_user_id, role):
    require_caller(caller_id)
    if invitee_user_id == caller_id:
        raise ValidationError("You cannot invite yourself.")

    budget = _owned_budget(session, budget_id, caller_id)

    if session.get(User, invitee_user_id) is None:
        raise NotFound("Invitee user not found.")

    if find_collaboration(session, budget_id, invitee_user_id) is not None:
        raise Conflict("User is already a collaborator on this budget.")

    if is_owner(budget, invitee_user_id):
        raise ValidationError("The budget owner cannot be invited as a collaborator.")

    collaboration = BudgetCollaborator(
        budget_id=budget_id,
        user_id=invitee_user_id,
        role=_clean_role(role),
    )
    session.add(collaboration)
    commit(session, "Failed to add collaborator.")
    logger.info("User %s invited to budget %s as %s", invitee_user_id, budget_id, collaboration.role.value)
    return collaboration


def remove_collaborator(session, caller_id, budget_id, user_id_to_remove):
    require_caller(caller_id)
    budget = _owned_budget(session, budget_id, caller_id)
    if is_owner(budget, user_id_to_remove):
        raise ValidationError("The budget owner cannot be removed.")

    collaboration = _existing_collaboration(session, budget_id, user_id_to_remove)
    session.delete(collaboration)
    commit(session, "Failed to remove collaborator.")
    logger.info("User %s removed from budget %s", user_id_to_remove, budget_id)
    return collaboration


def update_collaborator_role(session, caller_id, budget_id, collaborator_user_id, new_role):
    require_caller(caller_id)
    budget = _owned_budget(session, budget_id, caller_id)
    if is_owner(budget, collaborator_user_id):
        raise ValidationError("The budget owner's role cannot be changed.")

    role = _clean_role(new_role)
    collaboration = _existing_collaboration(session, budget_id, collaborator_user_id)
    collaboration.role = role
    commit(session, "Failed to update collaborator role.")
    logger.info("User %s is now %s on budget %s", collaborator_user_id, role.value, budget_id)
    return collaboration


def get_budget_collaborators(session, caller_id, budget_id):
    """Collaborators of a budget with their email; any member may list them."""
    require_caller(caller_id)
    check_permission(session, caller_id, budget_id, ANY_ROLE)

    collaborators = (
        session.query(BudgetCollaborator)
        .filter_by(budget_id=budget_id)
        .order_by(BudgetCollaborator.created_at.asc())
        .all()
    )
    rows = []
    for collaborator in collaborators:
        row = collaborator.to_dict()
        row["user"] = {"id": collaborator.user_id, "email": collaborator.user.email if collaborator.user else None}
        rows.append(row)
    return rows
