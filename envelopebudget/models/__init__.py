from .user import User, AuthIdentity
from .budget import Budget
from .envelope import Envelope
from .transaction import Transaction, TransactionType
from .collaborator import BudgetCollaborator, Role

__all__ = [
    "User",
    "AuthIdentity",
    "Budget",
    "Envelope",
    "Transaction",
    "TransactionType",
    "BudgetCollaborator",
    "Role",
]
