"""Role repository: the role catalogue."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from engage.infrastructure.persistence.models.role import Role
from engage.infrastructure.persistence.repositories.base import BaseRepository


class RoleRepository(BaseRepository[Role]):
    """Role catalogue. create_role returns None when the name already exists."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Role)

    async def get_by_name(self, name: str) -> Role | None:
        result = await self.db.execute(select(Role).where(Role.name == name))
        return result.scalar_one_or_none()

    async def list_roles(self) -> list[Role]:
        result = await self.db.execute(select(Role).order_by(Role.name))
        return list(result.scalars().all())

    async def create_role(self, name: str) -> Role | None:
        if await self.get_by_name(name):
            return None
        role = Role(name=name)
        try:
            async with self.db.begin_nested():
                self.db.add(role)
                await self.db.flush()
        except IntegrityError:
            return None
        return role
