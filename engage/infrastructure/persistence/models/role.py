"""Role and user-role ORM models."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from engage.infrastructure.persistence.database import Base
from engage.infrastructure.persistence.models.mixins import CuidMixin


class Role(CuidMixin, Base):
    """Role. Table: role. Names are unique (SuperAdmin, Admin, AgentEY, EmployeeEY, ...)."""

    __tablename__ = "role"

    name: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)


class UserRole(CuidMixin, Base):
    """Many-to-many user-role. Table: user_role."""

    __tablename__ = "user_role"

    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False, index=True
    )
    role_id: Mapped[str] = mapped_column(
        String, ForeignKey("role.id", ondelete="CASCADE"), nullable=False
    )
    assigned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (UniqueConstraint("user_id", "role_id", name="uq_user_role"),)
