"""One-time password reset token (forgot-password flow)."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from engage.infrastructure.persistence.database import Base
from engage.infrastructure.persistence.models.mixins import CuidMixin


class PasswordResetToken(CuidMixin, Base):
    """Reset token stored by token_hash; used_at marks redemption."""

    __tablename__ = "password_reset_token"

    token_hash: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    user_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("app_user.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    used_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
