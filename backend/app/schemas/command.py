from datetime import datetime
from typing import Optional

from pydantic import Field

from app.models.command import CommandState
from app.schemas.account import PartnerOut
from app.schemas.common import CamelModel
from app.schemas.medicine import MedicineOut


class CommandCreate(CamelModel):
    med_id: int
    num_of_units: int = Field(gt=0)


class CommandAmend(CamelModel):
    num_of_units: int = Field(gt=0)


class CommandOut(CamelModel):
    id: int
    med_id: int
    pharm_id: int
    fournisseur_id: Optional[int] = None
    num_of_units: int
    start_date: datetime
    state: CommandState
    medicine: Optional[MedicineOut] = None
    pharmacy: Optional[PartnerOut] = None
    fournisseur: Optional[PartnerOut] = None
