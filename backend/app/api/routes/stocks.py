"""Stocks: per-pharmacy unit counts. Pharmacies manage their own; everyone signed in can look."""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_identity, get_db, require_pharmacy
from app.api.response import ok
from app.core.audit import AuditLog
from app.repositories.stocks import StockRepository
from app.schemas.auth import Identity
from app.schemas.stock import StockAdjust, StockAvailability, StockCreate, StockOut, StockSet

router = APIRouter()


@router.get("")
def list_stocks(
    pharm_id: Optional[int] = Query(None, alias="pharmId"),
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    stocks = StockRepository(db).list_for(identity, pharm_id=pharm_id)
    return ok(data=[StockOut.model_validate(s) for s in stocks])


@router.get("/by-medicine/{medicine_id}")
def stocks_by_medicine(medicine_id: int, db: Session = Depends(get_db), identity: Identity = Depends(get_current_identity)):
    """Which pharmacies have this medicine in stock, largest first, with totals."""
    availability = StockRepository(db).list_by_medicine(medicine_id)
    return ok(data=StockAvailability.model_validate(availability))


@router.get("/{stock_id}")
def get_stock(stock_id: int, db: Session = Depends(get_db), identity: Identity = Depends(get_current_identity)):
    return ok(data=StockOut.model_validate(StockRepository(db).get_for(stock_id, identity)))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_stock(data: StockCreate, db: Session = Depends(get_db), identity: Identity = Depends(require_pharmacy)):
    stock = StockRepository(db).create(identity.id, data.medical_id, data.num_of_units)
    AuditLog.log_action(
        "create", "stock", stock.id, identity,
        changes={"medical_id": data.medical_id, "num_of_units": data.num_of_units},
    )
    return ok(data=StockOut.model_validate(stock), message="Stock created successfully", status_code=status.HTTP_201_CREATED)


def _set_units(stock_id: int, data: StockSet, db: Session, identity: Identity):
    stock = StockRepository(db).set_units(stock_id, identity.id, data.num_of_units)
    AuditLog.log_action("update", "stock", stock_id, identity, changes={"num_of_units": data.num_of_units})
    return ok(data=StockOut.model_validate(stock), message="Stock updated successfully")


@router.put("/{stock_id}")
def update_stock(stock_id: int, data: StockSet, db: Session = Depends(get_db), identity: Identity = Depends(require_pharmacy)):
    """Overwrite the unit count."""
    return _set_units(stock_id, data, db, identity)


@router.patch("/{stock_id}")
def patch_stock(stock_id: int, data: StockSet, db: Session = Depends(get_db), identity: Identity = Depends(require_pharmacy)):
    return _set_units(stock_id, data, db, identity)


@router.patch("/{stock_id}/add")
def add_to_stock(stock_id: int, data: StockAdjust, db: Session = Depends(get_db), identity: Identity = Depends(require_pharmacy)):
    stock = StockRepository(db).increment(stock_id, identity.id, data.units)
    AuditLog.log_action("add", "stock", stock_id, identity, changes={"units": data.units})
    return ok(data=StockOut.model_validate(stock), message=f"Added {data.units} units to stock")


@router.patch("/{stock_id}/remove")
def remove_from_stock(stock_id: int, data: StockAdjust, db: Session = Depends(get_db), identity: Identity = Depends(require_pharmacy)):
    stock = StockRepository(db).decrement(stock_id, identity.id, data.units)
    AuditLog.log_action("remove", "stock", stock_id, identity, changes={"units": data.units})
    return ok(data=StockOut.model_validate(stock), message=f"Removed {data.units} units from stock")


@router.delete("/{stock_id}")
def delete_stock(stock_id: int, db: Session = Depends(get_db), identity: Identity = Depends(require_pharmacy)):
    StockRepository(db).delete(stock_id, identity.id)
    AuditLog.log_action("delete", "stock", stock_id, identity)
    return ok(message="Stock deleted successfully")
