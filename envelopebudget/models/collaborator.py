import enum
from datetime import datetime
from ..extensions import db
from .user import new_id


class Role(str, enum.Enum):
    """Permission level on a budget. OWNER is derived from Budget.user_id and never stored."""

    OWNER = "OWNER"
    EDITOR = "EDITOR"
    VIEWER = "VIEWER"


class BudgetCollaborator(db.Model):
    __tablename__ = "budget_collaborators"
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    budget_id = db.Column(db.String(36), db.ForeignKey("budgets.id"), nullable=False)
    user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)
    role = db.Column(db.Enum(Role), nullable=False, default=Role.VIEWER)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    user = db.relationship("User", lazy="joined")

    __table_args__ = (
        db.UniqueConstraint("budget_id", "user_id", name="uq_budget_collaborator"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "budget_id": self.budget_id,
            "user_id": self.user_id,
            "role": self.role.value,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
