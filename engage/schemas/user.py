"""User API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from engage.domain.enums import Department


class UserCreateRequest(BaseModel):
    """Admin-side creation. A temporary password is generated and emailed."""

    email: EmailStr
    full_name: str = Field(..., min_length=1, max_length=200)
    department: Department | None = None
    fonction: str | None = Field(default=None, max_length=200)
    sector: str | None = Field(default=None, max_length=200)
    phone_number: str | None = Field(default=None, max_length=32)
    roles: list[str] = Field(default_factory=list)


class UserResponse(BaseModel):
    """User response (no password, no session state)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    full_name: str
    department: str | None = None
    fonction: str | None = None
    sector: str | None = None
    phone_number: str | None = None
    is_active: bool
    is_first_login: bool
    roles: list[str]
    created_at: datetime
