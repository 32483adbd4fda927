from sqlalchemy import CheckConstraint, Column, Integer, Numeric, String
from sqlalchemy.orm import relationship

from app.db.base import Base


class Medicine(Base):
    __tablename__ = "medicines"
    __table_args__ = (CheckConstraint("price >= 0", name="ck_medicines_price_non_negative"),)

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), unique=True, nullable=False, index=True)
    price = Column(Numeric(10, 2), nullable=False, default=0)

    commands = relationship("Command", back_populates="medicine")
    stocks = relationship("Stock", back_populates="medicine")
    demands = relationship("DemandUser", back_populates="medicine")

    def __repr__(self):
        return f"<Medicine id={self.id} name={self.name}>"
