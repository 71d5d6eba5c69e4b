import uuid
from datetime import datetime
from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from ..extensions import db, login_manager

EMAIL_PROVIDER = "email"


def new_id():
    return str(uuid.uuid4())


class User(UserMixin, db.Model):
    __tablename__ = "users"
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    identities = db.relationship("AuthIdentity", backref="user", lazy=True, cascade="all, delete-orphan")
    budgets = db.relationship("Budget", backref="owner", lazy=True, cascade="all, delete-orphan")

    @property
    def email(self):
        """Email from the user's email identity, or None."""
        for identity in self.identities:
            if identity.provider_name == EMAIL_PROVIDER:
                return identity.provider_user_id
        return None

    def to_dict(self):
        return {"id": self.id, "email": self.email}


class AuthIdentity(db.Model):
    """Login identity of a user; for the email provider the id is the address."""

    __tablename__ = "auth_identities"
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    provider_name = db.Column(db.String(50), nullable=False)
    provider_user_id = db.Column(db.String(255), nullable=False)
    password_hash = db.Column(db.String(255))
    user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)

    __table_args__ = (
        db.UniqueConstraint("provider_name", "provider_user_id", name="uq_provider_identity"),
    )

    def set_password(self, password: str):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return bool(self.password_hash) and check_password_hash(self.password_hash, password)


@login_manager.user_loader
def load_user(user_id):
    return db.session.get(User, user_id)
