"""
AuthSession: server-side record binding an opaque token to an identity snapshot.

Lifecycle:
    1. Created on login
    2. Read on every authenticated request (only while expires_at is in the future)
    3. Deleted on logout, on account deletion, or by the hourly sweep once expired
"""
from sqlalchemy import Column, DateTime, Integer, String, Text

from app.core.clock import utcnow
from app.db.base import Base


class AuthSession(Base):
    __tablename__ = "sessions"

    session_id = Column(String(128), primary_key=True)
    user_id = Column(Integer, nullable=False, index=True)
    user_type = Column(String(32), nullable=False)
    user_data = Column(Text, nullable=False)  # JSON identity snapshot
    expires_at = Column(DateTime, nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    def __repr__(self):
        return f"<AuthSession user={self.user_type}:{self.user_id} expires_at={self.expires_at}>"
