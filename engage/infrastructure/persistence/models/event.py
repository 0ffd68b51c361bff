"""Event ORM model."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from engage.domain.enums import EventStatus
from engage.infrastructure.persistence.database import Base
from engage.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin


class Event(CuidMixin, TimestampMixin, Base):
    """Internal event. Table: event.

    Organizer and approver references are SET NULL so removing a user keeps
    the event history. Dependent rows restrict deletion; see
    EventWorkflowEngine.delete_event.
    """

    __tablename__ = "event"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    location: Mapped[str] = mapped_column(String(200), nullable=False)
    image_path: Mapped[str | None] = mapped_column(String(512), nullable=True)
    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=EventStatus.PENDING.value
    )
    organizer_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True
    )
    approved_by_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True
    )

    __table_args__ = (
        Index("ix_event_status_date", "status", "date"),
        Index("ix_event_organizer", "organizer_id"),
    )
