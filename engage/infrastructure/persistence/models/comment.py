"""Comment, reply and reaction ORM models."""

from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from engage.infrastructure.persistence.database import Base
from engage.infrastructure.persistence.models.mixins import CreatedAtMixin, CuidMixin


class EventComment(CuidMixin, CreatedAtMixin, Base):
    """Top-level comment on an event. Table: event_comment."""

    __tablename__ = "event_comment"

    event_id: Mapped[str] = mapped_column(
        String, ForeignKey("event.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    author_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)


class CommentReply(CuidMixin, CreatedAtMixin, Base):
    """Reply to a comment. Table: comment_reply."""

    __tablename__ = "comment_reply"

    comment_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("event_comment.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    author_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)


class CommentReaction(CuidMixin, CreatedAtMixin, Base):
    """One emoji per user per comment. Table: comment_reaction."""

    __tablename__ = "comment_reaction"

    comment_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("event_comment.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False
    )
    emoji: Mapped[str] = mapped_column(String(32), nullable=False)

    __table_args__ = (
        UniqueConstraint("comment_id", "user_id", name="uq_comment_reaction_user"),
    )


class ReplyReaction(CuidMixin, CreatedAtMixin, Base):
    """One emoji per user per reply. Table: reply_reaction."""

    __tablename__ = "reply_reaction"

    reply_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("comment_reply.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False
    )
    emoji: Mapped[str] = mapped_column(String(32), nullable=False)

    __table_args__ = (
        UniqueConstraint("reply_id", "user_id", name="uq_reply_reaction_user"),
    )
