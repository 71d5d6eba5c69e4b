from datetime import datetime
from ..extensions import db
from .user import new_id


class Envelope(db.Model):
    __tablename__ = "envelopes"
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(120), nullable=False)
    allocated_amount = db.Column(db.Float, nullable=False, default=0.0)
    budget_id = db.Column(db.String(36), db.ForeignKey("budgets.id"), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    transactions = db.relationship("Transaction", backref="envelope", lazy=True)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "allocated_amount": self.allocated_amount,
            "budget_id": self.budget_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
