"""FastAPI dependencies: DB session, current identity from the session token, role guards.

The token is read from, in order of precedence:
1. Authorization: Bearer <token> header (API clients)
2. X-Session-Id header
3. sessionId httpOnly cookie (web frontend)
"""
from typing import Callable, Generator, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.audit import AuditLog
from app.core.config import settings
from app.core.exceptions import Forbidden, Unauthenticated
from app.db.session import SessionLocal
from app.models.account import Role
from app.schemas.auth import Identity
from app.services.session_store import SessionStore

security = HTTPBearer(auto_error=False)


def get_db() -> Generator[Session, None, None]:
    """Get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_session_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[str]:
    """Pull the session token off the request without validating it."""
    if credentials and credentials.credentials:
        return credentials.credentials
    header_token = request.headers.get(settings.SESSION_HEADER_NAME)
    if header_token:
        return header_token
    return request.cookies.get(settings.SESSION_COOKIE_NAME) or None


def get_current_identity(
    request: Request,
    token: Optional[str] = Depends(get_session_token),
    db: Session = Depends(get_db),
) -> Identity:
    if not token:
        raise Unauthenticated("Session ID required")

    identity = SessionStore(db).resolve(token)
    if identity is None:
        raise Unauthenticated("Invalid or expired session")

    request.state.identity = identity
    return identity


def require_role(role: Role) -> Callable[..., Identity]:
    """Dependency factory: the signed-in identity, but only if it has `role`."""

    def _guard(request: Request, identity: Identity = Depends(get_current_identity)) -> Identity:
        if identity.role != role:
            AuditLog.log_access_denied(
                request.method, request.url.path, None, identity, f"{role.value} access required"
            )
            raise Forbidden(f"{role.value} access required")
        return identity

    return _guard


require_user = require_role(Role.USER)
require_pharmacy = require_role(Role.PHARMACY)
require_fournisseur = require_role(Role.FOURNISSEUR)
