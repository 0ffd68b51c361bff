"""Role API schemas."""

from pydantic import BaseModel, ConfigDict, Field


class RoleCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=64)


class RoleAssignRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    role_name: str = Field(..., min_length=1, max_length=64)


class RoleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str


class UserRolesResponse(BaseModel):
    user_id: str
    roles: list[str]
