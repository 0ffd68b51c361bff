"""Role catalogue and role assignment."""

from __future__ import annotations

from engage.application.dtos.user import RoleResult
from engage.domain.exceptions import ResourceNotFoundException, ValidationException
from engage.infrastructure.persistence.repositories.role_repo import RoleRepository
from engage.infrastructure.persistence.repositories.user_repo import UserRepository


class RoleService:
    """List and create roles; assign roles to users."""

    def __init__(self, role_repo: RoleRepository, user_repo: UserRepository) -> None:
        self._role_repo = role_repo
        self._user_repo = user_repo

    async def list_roles(self) -> list[RoleResult]:
        return [RoleResult(id=r.id, name=r.name) for r in await self._role_repo.list_roles()]

    async def add_role(self, name: str) -> RoleResult:
        name = name.strip()
        if not name:
            raise ValidationException("Role name is required", field="name")
        role = await self._role_repo.create_role(name)
        if role is None:
            raise ValidationException(f"Role '{name}' already exists", field="name")
        return RoleResult(id=role.id, name=role.name)

    async def assign_role(self, user_id: str, role_name: str) -> list[str]:
        """Add role_name to the user. Returns the user's role names afterwards."""
        if await self._user_repo.get_by_id(user_id) is None:
            raise ResourceNotFoundException("user", user_id)
        if await self._role_repo.get_by_name(role_name) is None:
            raise ResourceNotFoundException("role", role_name)
        result = await self._user_repo.add_role(user_id, role_name)
        if not result.succeeded:
            raise ValidationException("Role assignment failed", errors=result.errors)
        return await self._user_repo.get_roles(user_id)
