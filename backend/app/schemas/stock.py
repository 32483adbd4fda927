from typing import List, Optional

from pydantic import Field

from app.schemas.account import PartnerOut
from app.schemas.common import CamelModel
from app.schemas.medicine import MedicineOut


class StockCreate(CamelModel):
    medical_id: int
    num_of_units: int = Field(ge=0)


class StockSet(CamelModel):
    num_of_units: int = Field(ge=0)


class StockAdjust(CamelModel):
    units: int = Field(gt=0)


class StockOut(CamelModel):
    id: int
    pharm_id: int
    medical_id: int
    num_of_units: int
    medicine: Optional[MedicineOut] = None
    pharmacy: Optional[PartnerOut] = None


class StockAvailability(CamelModel):
    """Which pharmacies hold a medicine, and how much in total."""

    medicine: MedicineOut
    stocks: List[StockOut]
    total_pharmacies: int
    total_units: int
