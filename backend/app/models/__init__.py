from app.models.account import User, Pharmacy, Fournisseur, Role, ACCOUNT_MODELS
from app.models.medicine import Medicine
from app.models.stock import Stock
from app.models.command import Command, CommandState
from app.models.demand import DemandUser
from app.models.auth_session import AuthSession

__all__ = [
    "User", "Pharmacy", "Fournisseur", "Role", "ACCOUNT_MODELS",
    "Medicine", "Stock", "Command", "CommandState", "DemandUser", "AuthSession",
]
