"""User ORM model: identity, password hash, activation flags and session state."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, text
from sqlalchemy.orm import Mapped, mapped_column

from engage.infrastructure.persistence.database import Base
from engage.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin


class User(CuidMixin, TimestampMixin, Base):
    """User model. Table: app_user. Email is unique and stored lower-cased.

    session_id is the single currently valid login session; refresh_token_hash
    is the SHA-256 of the single outstanding refresh token.
    """

    __tablename__ = "app_user"

    email: Mapped[str] = mapped_column(String(256), unique=True, nullable=False)
    full_name: Mapped[str] = mapped_column(String(200), nullable=False)
    hashed_password: Mapped[str] = mapped_column(String, nullable=False)
    department: Mapped[str | None] = mapped_column(String(64), nullable=True)
    fonction: Mapped[str | None] = mapped_column(String(200), nullable=True)
    sector: Mapped[str | None] = mapped_column(String(200), nullable=True)
    phone_number: Mapped[str | None] = mapped_column(String(32), nullable=True)
    profile_picture: Mapped[str | None] = mapped_column(String(512), nullable=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("false")
    )
    is_first_login: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("true")
    )
    session_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    refresh_token_hash: Mapped[str | None] = mapped_column(
        String(64), unique=True, nullable=True
    )
    refresh_token_expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
