"""User administration API (SuperAdmin / Admin)."""

from fastapi import APIRouter, Query, Request

from engage.api.v1.dependencies import Admin, UserQueryDep, UserServiceDep
from engage.application.dtos.user import CreateUserCommand
from engage.core.limiter import limit_writes
from engage.schemas.user import UserCreateRequest, UserResponse

router = APIRouter()


@router.get("", response_model=list[UserResponse])
async def list_users(
    admin: Admin,
    users: UserQueryDep,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=500),
):
    return [UserResponse.model_validate(u) for u in await users.list_users(skip=skip, limit=limit)]


@router.post("", response_model=UserResponse, status_code=201)
@limit_writes
async def create_user(request: Request, body: UserCreateRequest, admin: Admin, users: UserServiceDep):
    """Create an account with a generated temporary password, sent by email."""
    result = await users.create_user(
        CreateUserCommand(
            email=body.email,
            full_name=body.full_name,
            department=body.department.value if body.department else None,
            fonction=body.fonction,
            sector=body.sector,
            phone_number=body.phone_number,
            roles=tuple(body.roles),
        )
    )
    return UserResponse.model_validate(result)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: str, admin: Admin, users: UserQueryDep):
    return UserResponse.model_validate(await users.get_user(user_id))


@router.post("/{user_id}/activate", response_model=UserResponse)
@limit_writes
async def activate_user(request: Request, user_id: str, admin: Admin, users: UserServiceDep):
    return UserResponse.model_validate(await users.activate_user(user_id))


@router.post("/{user_id}/deactivate", response_model=UserResponse)
@limit_writes
async def deactivate_user(request: Request, user_id: str, admin: Admin, users: UserServiceDep):
    """Deactivate and end the user's session; existing tokens stop validating."""
    return UserResponse.model_validate(await users.deactivate_user(user_id))
