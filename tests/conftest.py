import pytest

from envelopebudget import create_app
from envelopebudget.config import TestConfig
from envelopebudget.extensions import db
from envelopebudget.models import User
from envelopebudget.services.budgets import get_my_budget
from envelopebudget.services.collaboration import invite_collaborator
from envelopebudget.services.envelopes import create_envelope
from envelopebudget.services.users import register_user


@pytest.fixture
def app():
    app = create_app(TestConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def session(app):
    with app.app_context():
        yield db.session
        db.session.remove()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(session):
    """Register a user through the signup path; returns (user, their budget)."""
    def _make(email):
        user = register_user(session, email, "secret")
        return user, get_my_budget(session, user.id)
    return _make


@pytest.fixture
def owner(make_user):
    return make_user("owner@example.com")


@pytest.fixture
def groceries(session, owner):
    user, budget = owner
    return create_envelope(session, user.id, "Groceries", budget.id, allocated_amount=100)


@pytest.fixture
def share(session, owner):
    """Invite ``user`` onto the owner's budget with ``role``."""
    def _share(user, role):
        owner_user, budget = owner
        return invite_collaborator(session, owner_user.id, budget.id, user.id, role)
    return _share


@pytest.fixture
def budgetless_user(session):
    user = User()
    session.add(user)
    session.commit()
    return user
