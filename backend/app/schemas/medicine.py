from decimal import Decimal
from typing import Optional

from pydantic import Field, field_serializer, field_validator, model_validator

from app.schemas.common import CamelModel


class MedicineCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    price: Decimal = Field(default=Decimal("0"), ge=0, max_digits=10, decimal_places=2)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Medicine name is required")
        return v


class MedicineUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    price: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)

    @model_validator(mode="after")
    def something_to_update(self):
        if self.name is None and self.price is None:
            raise ValueError("Medicine name or price is required")
        if self.name is not None:
            self.name = self.name.strip()
            if not self.name:
                raise ValueError("Medicine name is required")
        return self


class MedicineOut(CamelModel):
    id: int
    name: str
    price: Decimal

    @field_serializer("price")
    def price_as_number(self, price: Decimal) -> float:
        return float(price)
