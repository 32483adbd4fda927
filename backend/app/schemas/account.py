from typing import Optional

from pydantic import Field, field_validator

from app.core.config import settings
from app.schemas.common import CamelModel


def _check_password(v: Optional[str]) -> Optional[str]:
    if v is not None and len(v) < settings.MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters")
    return v


class ConsumerCreate(CamelModel):
    username: str = Field(min_length=1, max_length=150)
    password: str = Field(max_length=72)

    check_password = field_validator("password")(_check_password)


class PartnerCreate(CamelModel):
    """Pharmacy or supplier account: contact details are mandatory."""

    username: str = Field(min_length=1, max_length=150)
    password: str = Field(max_length=72)
    name: str = Field(min_length=1, max_length=255)
    location: str = Field(min_length=1, max_length=255)
    phone_number: str = Field(min_length=1, max_length=64)

    check_password = field_validator("password")(_check_password)


class AccountUpdate(CamelModel):
    """Partial update. Contact fields are ignored for consumer accounts."""

    username: Optional[str] = Field(default=None, min_length=1, max_length=150)
    password: Optional[str] = Field(default=None, max_length=72)
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    location: Optional[str] = Field(default=None, min_length=1, max_length=255)
    phone_number: Optional[str] = Field(default=None, min_length=1, max_length=64)

    check_password = field_validator("password")(_check_password)


class ConsumerOut(CamelModel):
    id: int
    username: str


class PartnerOut(CamelModel):
    id: int
    username: str
    name: str
    location: str
    phone_number: str
