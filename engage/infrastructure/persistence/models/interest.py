"""Event interest ORM model: presence means the user is interested."""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from engage.infrastructure.persistence.database import Base
from engage.infrastructure.persistence.models.mixins import CreatedAtMixin


class EventInterest(CreatedAtMixin, Base):
    """Table: event_interest. Composite primary key (event_id, user_id)."""

    __tablename__ = "event_interest"

    event_id: Mapped[str] = mapped_column(
        String, ForeignKey("event.id", ondelete="RESTRICT"), primary_key=True
    )
    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="CASCADE"), primary_key=True
    )
