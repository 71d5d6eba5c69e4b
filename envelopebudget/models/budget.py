from datetime import datetime
from ..extensions import db
from .user import new_id


class Budget(db.Model):
    __tablename__ = "budgets"
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)
    name = db.Column(db.String(120), nullable=False, default="My Budget")
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    envelopes = db.relationship("Envelope", backref="budget", lazy=True)
    collaborators = db.relationship("BudgetCollaborator", backref="budget", lazy=True, cascade="all, delete-orphan")

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "name": self.name,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
