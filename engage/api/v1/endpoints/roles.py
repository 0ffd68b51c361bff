"""Role catalogue and assignment API (SuperAdmin / Admin)."""

from fastapi import APIRouter, Request

from engage.api.v1.dependencies import Admin, RoleQueryDep, RoleServiceDep
from engage.core.limiter import limit_writes
from engage.schemas.role import (
    RoleAssignRequest,
    RoleCreateRequest,
    RoleResponse,
    UserRolesResponse,
)

router = APIRouter()


@router.get("", response_model=list[RoleResponse])
async def list_roles(admin: Admin, roles: RoleQueryDep):
    return [RoleResponse.model_validate(r) for r in await roles.list_roles()]


@router.post("", response_model=RoleResponse, status_code=201)
@limit_writes
async def create_role(request: Request, body: RoleCreateRequest, admin: Admin, roles: RoleServiceDep):
    return RoleResponse.model_validate(await roles.add_role(body.name))


@router.post("/assign", response_model=UserRolesResponse)
@limit_writes
async def assign_role(request: Request, body: RoleAssignRequest, admin: Admin, roles: RoleServiceDep):
    """Give a user an existing role. Returns the user's roles afterwards."""
    assigned = await roles.assign_role(body.user_id, body.role_name)
    return UserRolesResponse(user_id=body.user_id, roles=assigned)
