"""Commands: a pharmacy's supply order moving through awaiting -> on_delivery -> delivered.

Pharmacies create, amend and cancel their own awaiting commands.
Suppliers accept awaiting commands and deliver the ones bound to them.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_identity, get_db, require_fournisseur, require_pharmacy
from app.api.response import ok
from app.core.audit import AuditLog
from app.models.command import CommandState
from app.repositories.commands import CommandRepository
from app.schemas.auth import Identity
from app.schemas.command import CommandAmend, CommandCreate, CommandOut

router = APIRouter()


@router.get("")
def list_commands(
    state: Optional[CommandState] = Query(None),
    pharm_id: Optional[int] = Query(None, alias="pharmId"),
    fournisseur_id: Optional[int] = Query(None, alias="fournisseurId"),
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    commands = CommandRepository(db).list_for(identity, state=state, pharm_id=pharm_id, fournisseur_id=fournisseur_id)
    return ok(data=[CommandOut.model_validate(c) for c in commands])


@router.get("/pending")
def list_pending_commands(db: Session = Depends(get_db), identity: Identity = Depends(require_fournisseur)):
    """Every command still waiting for a supplier."""
    commands = CommandRepository(db).list_pending()
    return ok(data=[CommandOut.model_validate(c) for c in commands])


@router.get("/{command_id}")
def get_command(command_id: int, db: Session = Depends(get_db), identity: Identity = Depends(get_current_identity)):
    command = CommandRepository(db).get_for(command_id, identity)
    return ok(data=CommandOut.model_validate(command))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_command(data: CommandCreate, db: Session = Depends(get_db), identity: Identity = Depends(require_pharmacy)):
    command = CommandRepository(db).create(identity.id, data.med_id, data.num_of_units)
    AuditLog.log_action(
        "create", "command", command.id, identity,
        changes={"med_id": data.med_id, "num_of_units": data.num_of_units},
    )
    return ok(
        data=CommandOut.model_validate(command),
        message="Command created successfully",
        status_code=status.HTTP_201_CREATED,
    )


@router.patch("/{command_id}/accept")
def accept_command(command_id: int, db: Session = Depends(get_db), identity: Identity = Depends(require_fournisseur)):
    command = CommandRepository(db).accept(command_id, identity.id)
    AuditLog.log_action("accept", "command", command_id, identity)
    return ok(data=CommandOut.model_validate(command), message="Command accepted successfully")


@router.patch("/{command_id}/deliver")
def deliver_command(command_id: int, db: Session = Depends(get_db), identity: Identity = Depends(require_fournisseur)):
    command = CommandRepository(db).deliver(command_id, identity.id)
    AuditLog.log_action("deliver", "command", command_id, identity)
    return ok(data=CommandOut.model_validate(command), message="Command marked as delivered successfully")


def _amend(command_id: int, data: CommandAmend, db: Session, identity: Identity):
    command = CommandRepository(db).amend(command_id, identity.id, data.num_of_units)
    AuditLog.log_action("update", "command", command_id, identity, changes={"num_of_units": data.num_of_units})
    return ok(data=CommandOut.model_validate(command), message="Command updated successfully")


@router.put("/{command_id}")
def update_command(
    command_id: int,
    data: CommandAmend,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_pharmacy),
):
    """Change the quantity of an awaiting command."""
    return _amend(command_id, data, db, identity)


@router.patch("/{command_id}")
def patch_command(
    command_id: int,
    data: CommandAmend,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_pharmacy),
):
    return _amend(command_id, data, db, identity)


@router.delete("/{command_id}")
def delete_command(command_id: int, db: Session = Depends(get_db), identity: Identity = Depends(require_pharmacy)):
    """Cancel an awaiting command."""
    CommandRepository(db).cancel(command_id, identity.id)
    AuditLog.log_action("delete", "command", command_id, identity)
    return ok(message="Command deleted successfully")
