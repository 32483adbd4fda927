from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator, model_validator

from app.core.config import settings
from app.models.account import Role
from app.schemas.common import CamelModel


class Identity(CamelModel):
    """Snapshot of the signed-in account stored with the session."""

    id: int
    username: str
    role: Role
    name: Optional[str] = None


class LoginRequest(CamelModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)
    user_type: Role


class RegisterRequest(CamelModel):
    username: str = Field(min_length=1, max_length=150)
    # bcrypt only looks at the first 72 bytes
    password: str = Field(max_length=72)
    user_type: Role
    name: Optional[str] = None
    location: Optional[str] = None
    phone_number: Optional[str] = None

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Username is required")
        return v

    @field_validator("password")
    @classmethod
    def password_min_length(cls, v: str) -> str:
        if len(v) < settings.MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters")
        return v

    @model_validator(mode="after")
    def partner_fields_required(self):
        if self.user_type != Role.USER and not (self.name and self.location and self.phone_number):
            raise ValueError(
                f"Name, location, and phone number are required for {self.user_type.value} registration"
            )
        return self


class LoginData(CamelModel):
    session_id: str
    user: Identity


class SessionInfo(CamelModel):
    created_at: datetime
    expires_at: datetime
    current: bool = False
