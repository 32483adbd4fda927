"""Auth: register, login, logout, current identity.

SECURITY FEATURES:
- Password hashing with bcrypt
- Opaque random session token stored server-side with a 24h expiry
- Token returned in the body and set as an httpOnly, SameSite=strict cookie
- Same 401 for unknown username and wrong password
"""
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_identity, get_db, get_session_token
from app.api.response import ok
from app.core.audit import AuditLog
from app.core.config import settings
from app.core.exceptions import Unauthenticated
from app.models.account import Role
from app.repositories.accounts import AccountRepository
from app.schemas.auth import Identity, LoginData, LoginRequest, RegisterRequest, SessionInfo
from app.services.session_store import SessionStore

router = APIRouter()


def _client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


@router.post("/login")
def login(data: LoginRequest, request: Request, db: Session = Depends(get_db)):
    """
    Check credentials for the given userType and open a session.

    The token is returned as `sessionId` for clients that prefer headers and
    is also set as a cookie for browsers.
    """
    account = AccountRepository(db, data.user_type).authenticate(data.username, data.password)
    if account is None:
        AuditLog.log_authentication(
            "failed_login", data.username, data.user_type.value, _client_ip(request), False,
            reason="Invalid credentials",
        )
        # Generic error: don't specify which field is wrong
        raise Unauthenticated("Invalid credentials")

    store = SessionStore(db)
    token = store.create(account, data.user_type)
    identity = store.resolve(token)

    AuditLog.log_authentication("login", account.username, data.user_type.value, _client_ip(request), True)

    result = ok(
        data=LoginData(session_id=token, user=identity),
        message="Login successful",
    )
    result.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.SESSION_TTL_HOURS * 3600,  # seconds
        secure=settings.SECURE_COOKIES,  # HTTPS only in production
        httponly=settings.HTTP_ONLY_COOKIE,
        samesite=settings.SAME_SITE_COOKIE,
    )
    return result


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(data: RegisterRequest, request: Request, db: Session = Depends(get_db)):
    """
    Create an account of the requested userType.

    pharmacy and fournisseur accounts also need name, location and phoneNumber.
    """
    account = AccountRepository(db, data.user_type).create(
        data.username,
        data.password,
        name=data.name,
        location=data.location,
        phone_number=data.phone_number,
    )
    AuditLog.log_authentication("register", account.username, data.user_type.value, _client_ip(request), True)

    identity = Identity(
        id=account.id,
        username=account.username,
        role=data.user_type,
        name=getattr(account, "name", None),
    )
    return ok(data=identity, message="Registration successful", status_code=status.HTTP_201_CREATED)


@router.post("/logout")
def logout(request: Request, token: str | None = Depends(get_session_token), db: Session = Depends(get_db)):
    """Revoke the presented session (if any) and clear the cookie. Always succeeds."""
    store = SessionStore(db)
    identity = store.resolve(token)
    store.revoke(token)
    if identity is not None:
        AuditLog.log_authentication("logout", identity.username, identity.role.value, _client_ip(request), True)

    result = ok(message="Logout successful")
    result.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        secure=settings.SECURE_COOKIES,
        httponly=settings.HTTP_ONLY_COOKIE,
        samesite=settings.SAME_SITE_COOKIE,
    )
    return result


@router.get("/me")
def me(identity: Identity = Depends(get_current_identity)):
    """Get current authenticated identity."""
    return ok(data=identity)


@router.get("/sessions")
def list_sessions(
    identity: Identity = Depends(get_current_identity),
    token: str | None = Depends(get_session_token),
    db: Session = Depends(get_db),
):
    """Active sessions of the signed-in account, newest first. Tokens are not disclosed."""
    rows = SessionStore(db).list_active(identity.id, Role(identity.role))
    sessions = [
        SessionInfo(created_at=row.created_at, expires_at=row.expires_at, current=row.session_id == token)
        for row in rows
    ]
    return ok(data={"count": len(sessions), "sessions": sessions})
