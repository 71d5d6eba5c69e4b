import enum
from datetime import datetime
from ..extensions import db
from .user import new_id


class TransactionType(str, enum.Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class Transaction(db.Model):
    __tablename__ = "transactions"
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    date = db.Column(db.DateTime, nullable=False, index=True)
    description = db.Column(db.String(255), nullable=False)
    amount = db.Column(db.Float, nullable=False)  # always positive; type carries the sign
    type = db.Column(db.Enum(TransactionType), nullable=False)
    envelope_id = db.Column(db.String(36), db.ForeignKey("envelopes.id"), nullable=False, index=True)
    budget_id = db.Column(db.String(36), db.ForeignKey("budgets.id"), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self, include_envelope=False):
        data = {
            "id": self.id,
            "date": self.date.isoformat() if self.date else None,
            "description": self.description,
            "amount": self.amount,
            "type": self.type.value if self.type else None,
            "envelope_id": self.envelope_id,
            "budget_id": self.budget_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
        if include_envelope:
            data["envelope"] = self.envelope.to_dict() if self.envelope else None
        return data
