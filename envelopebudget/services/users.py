import logging

from sqlalchemy.exc import IntegrityError

from ..errors import Conflict, ValidationError
from ..models import AuthIdentity, User
from ..models.user import EMAIL_PROVIDER
from .budgets import create_default_budget
from .common import require_caller

logger = logging.getLogger(__name__)


def normalize_email(email):
    return (email or "").strip().lower()


def find_email_identity(session, email):
    return (
        session.query(AuthIdentity)
        .filter_by(provider_name=EMAIL_PROVIDER, provider_user_id=normalize_email(email))
        .first()
    )


def find_user_by_email(session, caller_id, email):
    """Return ``{"id", "email"}`` for a registered email, else None."""
    require_caller(caller_id)
    if not normalize_email(email):
        return None
    identity = find_email_identity(session, email)
    if identity is None:
        return None
    return {"id": identity.user_id, "email": identity.provider_user_id}


def register_user(session, email, password):
    """Create a user with an email identity, then run the signup hook."""
    email = normalize_email(email)
    if not email or "@" not in email:
        raise ValidationError("A valid email is required")
    if not password:
        raise ValidationError("Password is required")
    if find_email_identity(session, email) is not None:
        raise Conflict("Email already registered")

    user = User()
    identity = AuthIdentity(provider_name=EMAIL_PROVIDER, provider_user_id=email)
    identity.set_password(password)
    user.identities.append(identity)
    session.add(user)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise Conflict("Email already registered")
    logger.info("Registered user %s", user.id)

    create_default_budget(session, user)
    return user


def authenticate(session, email, password):
    """The user owning these credentials, or None."""
    identity = find_email_identity(session, email)
    if identity is None or not identity.check_password(password or ""):
        return None
    return identity.user
