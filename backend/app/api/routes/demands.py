"""Demands: consumers asking for a medicine. Consumers only ever see their own."""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_identity, get_db, require_user
from app.api.response import ok
from app.core.audit import AuditLog
from app.repositories.demands import DemandRepository
from app.schemas.auth import Identity
from app.schemas.demand import DemandCreate, DemandOut, DemandUpdate

router = APIRouter()


@router.get("")
def list_demands(
    user_id: Optional[int] = Query(None, alias="userId"),
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    demands = DemandRepository(db).list_for(identity, user_id=user_id)
    return ok(data=[DemandOut.model_validate(d) for d in demands])


@router.get("/{demand_id}")
def get_demand(demand_id: int, db: Session = Depends(get_db), identity: Identity = Depends(get_current_identity)):
    return ok(data=DemandOut.model_validate(DemandRepository(db).get_for(demand_id, identity)))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_demand(data: DemandCreate, db: Session = Depends(get_db), identity: Identity = Depends(require_user)):
    demand = DemandRepository(db).create(identity.id, data.med_id)
    AuditLog.log_action("create", "demand", demand.id, identity, changes={"med_id": data.med_id})
    return ok(data=DemandOut.model_validate(demand), message="Demand created successfully", status_code=status.HTTP_201_CREATED)


@router.put("/{demand_id}")
def update_demand(
    demand_id: int,
    data: DemandUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_user),
):
    demand = DemandRepository(db).update(demand_id, identity.id, data.med_id)
    AuditLog.log_action("update", "demand", demand_id, identity, changes=data.model_dump(exclude_none=True))
    return ok(data=DemandOut.model_validate(demand), message="Demand updated successfully")


@router.delete("/{demand_id}")
def delete_demand(demand_id: int, db: Session = Depends(get_db), identity: Identity = Depends(require_user)):
    DemandRepository(db).delete(demand_id, identity.id)
    AuditLog.log_action("delete", "demand", demand_id, identity)
    return ok(message="Demand deleted successfully")
