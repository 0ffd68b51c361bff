"""Event participation ORM model (approval-gated attendance)."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from engage.domain.enums import ParticipationStatus
from engage.infrastructure.persistence.database import Base
from engage.infrastructure.persistence.models.mixins import CuidMixin


class EventParticipation(CuidMixin, Base):
    """At most one row per (event_id, user_id). Table: event_participation."""

    __tablename__ = "event_participation"

    event_id: Mapped[str] = mapped_column(
        String, ForeignKey("event.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False, index=True
    )
    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=ParticipationStatus.PENDING.value
    )
    requested_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    decided_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    approved_by_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True
    )

    __table_args__ = (
        UniqueConstraint("event_id", "user_id", name="uq_participation_event_user"),
    )
