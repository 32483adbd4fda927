"""Consumer demand requests: a flat log, no workflow."""
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from app.core.clock import utcnow
from app.core.exceptions import Forbidden, NotFound
from app.models.account import Role
from app.models.demand import DemandUser
from app.models.medicine import Medicine
from app.schemas.auth import Identity


class DemandRepository:
    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return self.db.query(DemandUser).options(joinedload(DemandUser.medicine), joinedload(DemandUser.user))

    def _require_medicine(self, med_id: int) -> None:
        if self.db.get(Medicine, med_id) is None:
            raise NotFound("Medicine not found")

    def list_for(self, identity: Identity, user_id: Optional[int] = None) -> List[DemandUser]:
        # Consumers only see their own requests
        if identity.role == Role.USER:
            user_id = identity.id
        q = self._query()
        if user_id is not None:
            q = q.filter(DemandUser.user_id == user_id)
        return q.order_by(DemandUser.date.desc(), DemandUser.id.desc()).all()

    def get(self, demand_id: int) -> DemandUser:
        demand = self._query().filter(DemandUser.id == demand_id).first()
        if demand is None:
            raise NotFound("Demand not found")
        return demand

    def get_for(self, demand_id: int, identity: Identity) -> DemandUser:
        demand = self.get(demand_id)
        if identity.role == Role.USER and demand.user_id != identity.id:
            raise Forbidden(reason=f"user {identity.id} reading demand {demand_id}")
        return demand

    def get_owned(self, demand_id: int, user_id: int) -> DemandUser:
        demand = self.get(demand_id)
        if demand.user_id != user_id:
            raise Forbidden(reason=f"user {user_id} does not own demand {demand_id}")
        return demand

    def create(self, user_id: int, med_id: int) -> DemandUser:
        self._require_medicine(med_id)
        demand = DemandUser(med_id=med_id, user_id=user_id, date=utcnow())
        self.db.add(demand)
        self.db.commit()
        return self.get(demand.id)

    def update(self, demand_id: int, user_id: int, med_id: Optional[int]) -> DemandUser:
        demand = self.get_owned(demand_id, user_id)
        if med_id is not None:
            self._require_medicine(med_id)
            demand.med_id = med_id
            self.db.commit()
        return self.get(demand_id)

    def delete(self, demand_id: int, user_id: int) -> None:
        demand = self.get_owned(demand_id, user_id)
        self.db.delete(demand)
        self.db.commit()
