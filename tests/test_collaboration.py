import pytest

from envelopebudget.errors import Conflict, Forbidden, NotFound, ValidationError
from envelopebudget.models import BudgetCollaborator, Role
from envelopebudget.services.collaboration import (
    get_budget_collaborators,
    invite_collaborator,
    remove_collaborator,
    update_collaborator_role,
)
from envelopebudget.services.users import find_user_by_email


def test_invite_creates_single_row(session, owner, make_user):
    owner_user, budget = owner
    friend, _ = make_user("friend@example.com")

    row = invite_collaborator(session, owner_user.id, budget.id, friend.id, "EDITOR")
    assert row.role is Role.EDITOR
    assert session.query(BudgetCollaborator).filter_by(budget_id=budget.id, user_id=friend.id).count() == 1

    with pytest.raises(Conflict):
        invite_collaborator(session, owner_user.id, budget.id, friend.id, Role.VIEWER)
    assert session.query(BudgetCollaborator).filter_by(budget_id=budget.id, user_id=friend.id).count() == 1


@pytest.mark.parametrize("role", [Role.EDITOR, Role.VIEWER, Role.OWNER])
def test_owner_cannot_invite_themselves(session, owner, role):
    owner_user, budget = owner
    with pytest.raises(ValidationError):
        invite_collaborator(session, owner_user.id, budget.id, owner_user.id, role)


def test_non_owner_cannot_invite(session, owner, make_user, share):
    _, budget = owner
    editor, _ = make_user("editor@example.com")
    friend, _ = make_user("friend@example.com")
    share(editor, Role.EDITOR)

    with pytest.raises(NotFound, match="not the owner"):
        invite_collaborator(session, editor.id, budget.id, friend.id, Role.VIEWER)


def test_invite_unknown_user(session, owner):
    owner_user, budget = owner
    with pytest.raises(NotFound, match="Invitee"):
        invite_collaborator(session, owner_user.id, budget.id, "ghost", Role.VIEWER)


def test_invite_unknown_budget(session, owner, make_user):
    owner_user, _ = owner
    friend, _ = make_user("friend@example.com")
    with pytest.raises(NotFound):
        invite_collaborator(session, owner_user.id, "missing", friend.id, Role.VIEWER)


@pytest.mark.parametrize("role", ["OWNER", "admin", None])
def test_invite_with_invalid_role(session, owner, make_user, role):
    owner_user, budget = owner
    friend, _ = make_user("friend@example.com")
    with pytest.raises(ValidationError):
        invite_collaborator(session, owner_user.id, budget.id, friend.id, role)


def test_owner_cannot_remove_themselves(session, owner):
    owner_user, budget = owner
    with pytest.raises(ValidationError):
        remove_collaborator(session, owner_user.id, budget.id, owner_user.id)


def test_remove(session, owner, make_user, share):
    owner_user, budget = owner
    friend, _ = make_user("friend@example.com")
    share(friend, Role.VIEWER)

    removed = remove_collaborator(session, owner_user.id, budget.id, friend.id)
    assert removed.user_id == friend.id
    assert get_budget_collaborators(session, owner_user.id, budget.id) == []

    with pytest.raises(NotFound):
        remove_collaborator(session, owner_user.id, budget.id, friend.id)


def test_collaborator_cannot_remove_others(session, owner, make_user, share):
    _, budget = owner
    editor, _ = make_user("editor@example.com")
    viewer, _ = make_user("viewer@example.com")
    share(editor, Role.EDITOR)
    share(viewer, Role.VIEWER)
    with pytest.raises(NotFound):
        remove_collaborator(session, editor.id, budget.id, viewer.id)


def test_update_role(session, owner, make_user, share):
    owner_user, budget = owner
    friend, _ = make_user("friend@example.com")
    share(friend, Role.VIEWER)

    row = update_collaborator_role(session, owner_user.id, budget.id, friend.id, "editor")
    assert row.role is Role.EDITOR


def test_update_role_guards(session, owner, make_user):
    owner_user, budget = owner
    stranger, _ = make_user("stranger@example.com")

    with pytest.raises(ValidationError):
        update_collaborator_role(session, owner_user.id, budget.id, owner_user.id, Role.VIEWER)
    with pytest.raises(NotFound):
        update_collaborator_role(session, owner_user.id, budget.id, stranger.id, Role.VIEWER)
    with pytest.raises(NotFound):
        update_collaborator_role(session, stranger.id, budget.id, owner_user.id, Role.VIEWER)


def test_members_list_collaborators_with_email(session, owner, make_user, share):
    owner_user, budget = owner
    viewer, _ = make_user("Viewer@Example.com")
    share(viewer, Role.VIEWER)

    for caller in (owner_user, viewer):
        rows = get_budget_collaborators(session, caller.id, budget.id)
        assert len(rows) == 1
        assert rows[0]["user_id"] == viewer.id
        assert rows[0]["role"] == "VIEWER"
        assert rows[0]["user"] == {"id": viewer.id, "email": "viewer@example.com"}


def test_outsider_cannot_list_collaborators(session, owner, make_user):
    _, budget = owner
    outsider, _ = make_user("outsider@example.com")
    with pytest.raises(Forbidden):
        get_budget_collaborators(session, outsider.id, budget.id)


def test_listing_unknown_budget(session, owner):
    owner_user, _ = owner
    with pytest.raises(NotFound):
        get_budget_collaborators(session, owner_user.id, "missing")


def test_collaborator_without_email_identity(session, owner, budgetless_user, share):
    owner_user, budget = owner
    share(budgetless_user, Role.VIEWER)
    rows = get_budget_collaborators(session, owner_user.id, budget.id)
    assert rows[0]["user"] == {"id": budgetless_user.id, "email": None}


def test_find_user_by_email(session, owner, make_user):
    owner_user, _ = owner
    friend, _ = make_user("friend@example.com")

    assert find_user_by_email(session, owner_user.id, " FRIEND@example.com ") == {
        "id": friend.id,
        "email": "friend@example.com",
    }
    assert find_user_by_email(session, owner_user.id, "nobody@example.com") is None
    assert find_user_by_email(session, owner_user.id, "") is None
