"""
Command: a pharmacy's supply order for one medicine.

Status flow: awaiting -> on_delivery -> delivered. No way back.
fournisseur_id is NULL exactly while the command is awaiting.
"""
from enum import Enum

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.core.clock import utcnow
from app.db.base import Base


class CommandState(str, Enum):
    AWAITING = "awaiting"
    ON_DELIVERY = "on_delivery"
    DELIVERED = "delivered"


class Command(Base):
    __tablename__ = "commands"
    __table_args__ = (
        CheckConstraint("num_of_units > 0", name="ck_commands_units_positive"),
        CheckConstraint(
            "(state = 'awaiting' AND fournisseur_id IS NULL) OR "
            "(state != 'awaiting' AND fournisseur_id IS NOT NULL)",
            name="ck_commands_supplier_bound_after_accept",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    med_id = Column(Integer, ForeignKey("medicines.id"), nullable=False, index=True)
    pharm_id = Column(Integer, ForeignKey("pharmacies.id", ondelete="CASCADE"), nullable=False, index=True)
    fournisseur_id = Column(Integer, ForeignKey("fournisseurs.id"), nullable=True, index=True)
    num_of_units = Column(Integer, nullable=False)
    start_date = Column(DateTime, nullable=False, default=utcnow)
    state = Column(String(32), nullable=False, default=CommandState.AWAITING.value, index=True)

    medicine = relationship("Medicine", back_populates="commands")
    pharmacy = relationship("Pharmacy", back_populates="commands")
    fournisseur = relationship("Fournisseur", back_populates="commands")

    def __repr__(self):
        return f"<Command id={self.id} state={self.state}>"
