"""Medicine catalogue. Open to every signed-in role."""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_identity, get_db
from app.api.response import ok
from app.core.audit import AuditLog
from app.repositories.medicines import MedicineRepository
from app.schemas.auth import Identity
from app.schemas.medicine import MedicineCreate, MedicineOut, MedicineUpdate

router = APIRouter()


@router.get("")
def list_medicines(db: Session = Depends(get_db), identity: Identity = Depends(get_current_identity)):
    medicines = MedicineRepository(db).list_all()
    return ok(data=[MedicineOut.model_validate(m) for m in medicines])


@router.get("/search")
def search_medicines(
    name: str | None = Query(None),
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    """Case-insensitive search by name fragment."""
    medicines = MedicineRepository(db).search(name)
    return ok(data=[MedicineOut.model_validate(m) for m in medicines])


@router.get("/{medicine_id}")
def get_medicine(medicine_id: int, db: Session = Depends(get_db), identity: Identity = Depends(get_current_identity)):
    return ok(data=MedicineOut.model_validate(MedicineRepository(db).get(medicine_id)))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_medicine(data: MedicineCreate, db: Session = Depends(get_db), identity: Identity = Depends(get_current_identity)):
    medicine = MedicineRepository(db).create(data)
    AuditLog.log_action("create", "medicine", medicine.id, identity, changes={"name": medicine.name})
    return ok(
        data=MedicineOut.model_validate(medicine),
        message="Medicine created successfully",
        status_code=status.HTTP_201_CREATED,
    )


@router.put("/{medicine_id}")
def update_medicine(
    medicine_id: int,
    data: MedicineUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    medicine = MedicineRepository(db).update(medicine_id, data)
    AuditLog.log_action("update", "medicine", medicine_id, identity, changes=data.model_dump(exclude_none=True))
    return ok(data=MedicineOut.model_validate(medicine), message="Medicine updated successfully")


@router.delete("/{medicine_id}")
def delete_medicine(medicine_id: int, db: Session = Depends(get_db), identity: Identity = Depends(get_current_identity)):
    MedicineRepository(db).delete(medicine_id)
    AuditLog.log_action("delete", "medicine", medicine_id, identity)
    return ok(message="Medicine deleted successfully")
