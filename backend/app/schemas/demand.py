from datetime import datetime
from typing import Optional

from app.schemas.account import ConsumerOut
from app.schemas.common import CamelModel
from app.schemas.medicine import MedicineOut


class DemandCreate(CamelModel):
    med_id: int


class DemandUpdate(CamelModel):
    med_id: Optional[int] = None


class DemandOut(CamelModel):
    id: int
    med_id: int
    user_id: int
    date: datetime
    medicine: Optional[MedicineOut] = None
    user: Optional[ConsumerOut] = None
