"""
Session store: opaque token -> identity snapshot, with a time-to-live.

The only component that reads or writes the sessions table. Expired rows
stay in place until the background sweep removes them, but `resolve` never
returns them.
"""
import logging
from datetime import timedelta
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.clock import utcnow
from app.core.config import settings
from app.core.security import generate_session_token
from app.models.account import Role
from app.models.auth_session import AuthSession
from app.schemas.auth import Identity

logger = logging.getLogger(__name__)


class SessionStore:
    def __init__(self, db: Session, ttl: Optional[timedelta] = None):
        self.db = db
        self.ttl = ttl if ttl is not None else timedelta(hours=settings.SESSION_TTL_HOURS)

    def create(self, account, role: Role) -> str:
        """Start a session for `account` and return its token."""
        identity = Identity(
            id=account.id,
            username=account.username,
            role=role,
            name=getattr(account, "name", None),
        )
        token = generate_session_token()
        now = utcnow()
        self.db.add(
            AuthSession(
                session_id=token,
                user_id=account.id,
                user_type=role.value,
                user_data=identity.model_dump_json(),
                expires_at=now + self.ttl,
                created_at=now,
            )
        )
        self.db.commit()
        logger.info(f"[Sessions] Created session for {role.value}:{account.id}")
        return token

    def resolve(self, token: Optional[str]) -> Optional[Identity]:
        if not token:
            return None
        row = (
            self.db.query(AuthSession)
            .filter(AuthSession.session_id == token, AuthSession.expires_at > utcnow())
            .first()
        )
        if row is None:
            return None
        return Identity.model_validate_json(row.user_data)

    def revoke(self, token: Optional[str]) -> None:
        if not token:
            return
        self.db.query(AuthSession).filter(AuthSession.session_id == token).delete(synchronize_session=False)
        self.db.commit()

    def revoke_account(self, account_id: int, role: Role) -> int:
        """Drop every session belonging to one account. Returns how many were removed."""
        removed = (
            self.db.query(AuthSession)
            .filter(AuthSession.user_id == account_id, AuthSession.user_type == role.value)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return removed

    def list_active(self, account_id: int, role: Role) -> List[AuthSession]:
        return (
            self.db.query(AuthSession)
            .filter(
                AuthSession.user_id == account_id,
                AuthSession.user_type == role.value,
                AuthSession.expires_at > utcnow(),
            )
            .order_by(AuthSession.created_at.desc())
            .all()
        )

    def sweep(self) -> int:
        """Delete all expired sessions. Returns how many were removed."""
        removed = (
            self.db.query(AuthSession)
            .filter(AuthSession.expires_at < utcnow())
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return removed
