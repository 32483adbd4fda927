from sqlalchemy import Column, DateTime, ForeignKey, Integer
from sqlalchemy.orm import relationship

from app.core.clock import utcnow
from app.db.base import Base


class DemandUser(Base):
    """A consumer asking for a medicine. Informational only, no workflow."""

    __tablename__ = "demand_users"

    id = Column(Integer, primary_key=True, index=True)
    med_id = Column(Integer, ForeignKey("medicines.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(DateTime, nullable=False, default=utcnow)

    medicine = relationship("Medicine", back_populates="demands")
    user = relationship("User", back_populates="demands")
