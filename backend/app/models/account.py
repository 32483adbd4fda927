"""
Account tables. Three roles, three tables: consumers (users), pharmacies
and suppliers (fournisseurs). Usernames are unique per table.
"""
from enum import Enum

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from app.db.base import Base


class Role(str, Enum):
    USER = "user"
    PHARMACY = "pharmacy"
    FOURNISSEUR = "fournisseur"


class User(Base):
    """Consumer account. Files demand requests."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(150), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)

    demands = relationship("DemandUser", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User id={self.id} username={self.username}>"


class Pharmacy(Base):
    """Pharmacy branch. Owns stock rows and initiates commands."""

    __tablename__ = "pharmacies"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(150), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    location = Column(String(255), nullable=False)
    phone_number = Column(String(64), nullable=False)

    stocks = relationship("Stock", back_populates="pharmacy", cascade="all, delete-orphan")
    commands = relationship("Command", back_populates="pharmacy", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Pharmacy id={self.id} username={self.username}>"


class Fournisseur(Base):
    """Supplier. Accepts and delivers commands."""

    __tablename__ = "fournisseurs"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(150), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    location = Column(String(255), nullable=False)
    phone_number = Column(String(64), nullable=False)

    commands = relationship("Command", back_populates="fournisseur")

    def __repr__(self):
        return f"<Fournisseur id={self.id} username={self.username}>"


ACCOUNT_MODELS = {
    Role.USER: User,
    Role.PHARMACY: Pharmacy,
    Role.FOURNISSEUR: Fournisseur,
}
