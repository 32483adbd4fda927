"""
Stock: units of one medicine held by one pharmacy.

At most one row per (pharmacy, medicine); units never go negative.
"""
from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship

from app.db.base import Base


class Stock(Base):
    __tablename__ = "stocks"
    __table_args__ = (
        UniqueConstraint("pharm_id", "medical_id", name="uq_stocks_pharmacy_medicine"),
        CheckConstraint("num_of_units >= 0", name="ck_stocks_units_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    pharm_id = Column(Integer, ForeignKey("pharmacies.id", ondelete="CASCADE"), nullable=False, index=True)
    medical_id = Column(Integer, ForeignKey("medicines.id"), nullable=False, index=True)
    num_of_units = Column(Integer, nullable=False, default=0)

    pharmacy = relationship("Pharmacy", back_populates="stocks")
    medicine = relationship("Medicine", back_populates="stocks")

    def __repr__(self):
        return f"<Stock id={self.id} pharm={self.pharm_id} med={self.medical_id} units={self.num_of_units}>"
