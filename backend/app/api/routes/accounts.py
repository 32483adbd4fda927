"""Account management for /api/users, /api/pharmacy and /api/fournisseur.

The three resources behave the same way; `build_account_router` wires one
router per role. Any signed-in identity can list, read and create accounts;
only the account itself may update or delete it.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_identity, get_db
from app.api.response import ok
from app.core.audit import AuditLog
from app.core.exceptions import Forbidden
from app.models.account import Role
from app.repositories.accounts import AccountRepository
from app.schemas.account import AccountUpdate, ConsumerCreate, ConsumerOut, PartnerCreate, PartnerOut
from app.schemas.auth import Identity
from app.services.session_store import SessionStore


def build_account_router(role: Role) -> APIRouter:
    router = APIRouter()
    out_schema = ConsumerOut if role == Role.USER else PartnerOut
    create_schema = ConsumerCreate if role == Role.USER else PartnerCreate
    resource = role.value

    def _repo(db: Session) -> AccountRepository:
        return AccountRepository(db, role)

    def _require_self(identity: Identity, account_id: int) -> None:
        if identity.role != role or identity.id != account_id:
            raise Forbidden(reason=f"{identity.role.value} {identity.id} touching {resource} {account_id}")

    @router.get("")
    def list_accounts(db: Session = Depends(get_db), identity: Identity = Depends(get_current_identity)):
        accounts = _repo(db).list_all()
        return ok(data=[out_schema.model_validate(a) for a in accounts])

    @router.get("/{account_id}")
    def get_account(account_id: int, db: Session = Depends(get_db), identity: Identity = Depends(get_current_identity)):
        return ok(data=out_schema.model_validate(_repo(db).get(account_id)))

    @router.post("", status_code=status.HTTP_201_CREATED)
    def create_account(
        data: create_schema,
        db: Session = Depends(get_db),
        identity: Identity = Depends(get_current_identity),
    ):
        details = data.model_dump(exclude={"username", "password"})
        account = _repo(db).create(data.username, data.password, **details)
        AuditLog.log_action("create", resource, account.id, identity)
        return ok(
            data=out_schema.model_validate(account),
            message=f"{_repo(db).label} created successfully",
            status_code=status.HTTP_201_CREATED,
        )

    @router.put("/{account_id}")
    def update_account(
        account_id: int,
        data: AccountUpdate,
        db: Session = Depends(get_db),
        identity: Identity = Depends(get_current_identity),
    ):
        repo = _repo(db)
        repo.get(account_id)
        _require_self(identity, account_id)
        account = repo.update(account_id, **data.model_dump())
        AuditLog.log_action(
            "update", resource, account_id, identity,
            changes={k: v for k, v in data.model_dump(exclude={"password"}).items() if v is not None},
        )
        return ok(data=out_schema.model_validate(account), message=f"{repo.label} updated successfully")

    @router.delete("/{account_id}")
    def delete_account(account_id: int, db: Session = Depends(get_db), identity: Identity = Depends(get_current_identity)):
        repo = _repo(db)
        repo.get(account_id)
        _require_self(identity, account_id)
        repo.delete(account_id)
        revoked = SessionStore(db).revoke_account(account_id, role)
        AuditLog.log_action("delete", resource, account_id, identity)
        AuditLog.log_security_event("sessions_revoked", {"role": resource, "account_id": account_id, "count": revoked})
        return ok(message=f"{repo.label} deleted successfully")

    return router


users_router = build_account_router(Role.USER)
pharmacy_router = build_account_router(Role.PHARMACY)
fournisseur_router = build_account_router(Role.FOURNISSEUR)
