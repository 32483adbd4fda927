"""
Accounts for the three roles: consumers, pharmacies and suppliers.

One repository class parameterised by role; the role picks the table.
Password hashes never leave this module except through the ORM row.
"""
import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import Conflict, NotFound
from app.core.security import get_password_hash, verify_password
from app.models.account import ACCOUNT_MODELS, Role
from app.models.command import Command, CommandState

logger = logging.getLogger(__name__)

_LABELS = {
    Role.USER: "User",
    Role.PHARMACY: "Pharmacy",
    Role.FOURNISSEUR: "Fournisseur",
}

_PARTNER_FIELDS = ("name", "location", "phone_number")


class AccountRepository:
    def __init__(self, db: Session, role: Role):
        self.db = db
        self.role = role
        self.model = ACCOUNT_MODELS[role]
        self.label = _LABELS[role]

    def list_all(self) -> List:
        return self.db.query(self.model).order_by(self.model.id).all()

    def get(self, account_id: int):
        account = self.db.get(self.model, account_id)
        if account is None:
            raise NotFound(f"{self.label} not found")
        return account

    def find_by_username(self, username: str):
        return self.db.query(self.model).filter(self.model.username == username).first()

    def authenticate(self, username: str, password: str):
        """Return the account when the credentials match, else None."""
        account = self.find_by_username(username)
        if account is None or not verify_password(password, account.hashed_password):
            return None
        return account

    def create(self, username: str, password: str, **details):
        if self.find_by_username(username):
            raise Conflict("Username already exists")
        fields = {"username": username, "hashed_password": get_password_hash(password)}
        if self.role != Role.USER:
            fields.update({key: details[key] for key in _PARTNER_FIELDS})
        account = self.model(**fields)
        self.db.add(account)
        self._commit()
        self.db.refresh(account)
        logger.info(f"[Accounts] Created {self.role.value} account {account.id}")
        return account

    def update(self, account_id: int, username: Optional[str] = None, password: Optional[str] = None, **details):
        account = self.get(account_id)
        if username and username != account.username:
            if self.find_by_username(username):
                raise Conflict("Username already exists")
            account.username = username
        if password:
            account.hashed_password = get_password_hash(password)
        if self.role != Role.USER:
            for key in _PARTNER_FIELDS:
                if details.get(key):
                    setattr(account, key, details[key])
        self._commit()
        self.db.refresh(account)
        return account

    def delete(self, account_id: int) -> None:
        """
        Delete an account and the rows it owns.

        Pharmacies take their stock and awaiting commands with them; consumers
        their demands. Commands that already left awaiting are history and
        block the deletion, as do commands bound to a supplier.
        """
        account = self.get(account_id)
        if self.role == Role.PHARMACY:
            started = (
                self.db.query(Command.id)
                .filter(Command.pharm_id == account.id, Command.state != CommandState.AWAITING.value)
                .first()
            )
            if started:
                raise Conflict("Pharmacy has commands in delivery or delivered")
        elif self.role == Role.FOURNISSEUR:
            bound = self.db.query(Command.id).filter(Command.fournisseur_id == account.id).first()
            if bound:
                raise Conflict("Fournisseur has accepted commands")
        self.db.delete(account)
        self.db.commit()
        logger.info(f"[Accounts] Deleted {self.role.value} account {account_id}")

    def _commit(self) -> None:
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise Conflict("Username already exists")
