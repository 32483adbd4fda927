"""Medicine catalogue. Names are unique; any signed-in role may manage it."""
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import Conflict, NotFound, ValidationFailed
from app.models.command import Command
from app.models.demand import DemandUser
from app.models.medicine import Medicine
from app.models.stock import Stock
from app.schemas.medicine import MedicineCreate, MedicineUpdate


class MedicineRepository:
    def __init__(self, db: Session):
        self.db = db

    def list_all(self) -> List[Medicine]:
        return self.db.query(Medicine).order_by(Medicine.id).all()

    def search(self, name: str) -> List[Medicine]:
        """Case-insensitive substring match on the medicine name."""
        name = (name or "").strip()
        if not name:
            raise ValidationFailed("Search term 'name' is required")
        # LIKE wildcards in the term match literally
        term = name.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        return (
            self.db.query(Medicine)
            .filter(Medicine.name.ilike(f"%{term}%", escape="\\"))
            .order_by(Medicine.name)
            .all()
        )

    def get(self, medicine_id: int) -> Medicine:
        medicine = self.db.get(Medicine, medicine_id)
        if medicine is None:
            raise NotFound("Medicine not found")
        return medicine

    def _name_taken(self, name: str, exclude_id: int | None = None) -> bool:
        q = self.db.query(Medicine.id).filter(Medicine.name == name)
        if exclude_id is not None:
            q = q.filter(Medicine.id != exclude_id)
        return q.first() is not None

    def create(self, data: MedicineCreate) -> Medicine:
        if self._name_taken(data.name):
            raise Conflict("Medicine already exists")
        medicine = Medicine(name=data.name, price=data.price)
        self.db.add(medicine)
        self._commit()
        self.db.refresh(medicine)
        return medicine

    def update(self, medicine_id: int, data: MedicineUpdate) -> Medicine:
        medicine = self.get(medicine_id)
        if data.name is not None:
            if self._name_taken(data.name, exclude_id=medicine.id):
                raise Conflict("Medicine already exists")
            medicine.name = data.name
        if data.price is not None:
            medicine.price = data.price
        self._commit()
        self.db.refresh(medicine)
        return medicine

    def delete(self, medicine_id: int) -> None:
        medicine = self.get(medicine_id)
        in_use = (
            self.db.query(Command.id).filter(Command.med_id == medicine.id).first()
            or self.db.query(Stock.id).filter(Stock.medical_id == medicine.id).first()
            or self.db.query(DemandUser.id).filter(DemandUser.med_id == medicine.id).first()
        )
        if in_use:
            raise Conflict("Medicine is referenced by commands, stocks or demands")
        self.db.delete(medicine)
        self.db.commit()

    def _commit(self) -> None:
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise Conflict("Medicine already exists")
