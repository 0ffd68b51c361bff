"""Participation and interest repositories."""

from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from engage.application.dtos.event import ParticipationRequestView, UserSummary
from engage.domain.enums import ParticipationStatus
from engage.infrastructure.persistence.models.event import Event
from engage.infrastructure.persistence.models.interest import EventInterest
from engage.infrastructure.persistence.models.participation import EventParticipation
from engage.infrastructure.persistence.models.user import User
from engage.infrastructure.persistence.repositories.base import BaseRepository
from engage.shared.utils.datetime import utc_now


def _user_summary(u: User) -> UserSummary:
    return UserSummary(
        id=u.id,
        full_name=u.full_name,
        email=u.email,
        department=u.department,
        profile_picture=u.profile_picture,
    )


def _reset_to_pending(row: EventParticipation) -> None:
    row.status = ParticipationStatus.PENDING.value
    row.requested_at = utc_now()
    row.decided_at = None
    row.approved_by_id = None


class ParticipationRepository(BaseRepository[EventParticipation]):
    """One participation row per (event, user), enforced by uq_participation_event_user."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, EventParticipation)

    async def get_by_event_and_user(
        self, event_id: str, user_id: str
    ) -> EventParticipation | None:
        result = await self.db.execute(
            select(EventParticipation).where(
                EventParticipation.event_id == event_id,
                EventParticipation.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def upsert_pending(self, event_id: str, user_id: str) -> EventParticipation:
        """Insert a Pending row, or reset the existing row to Pending.

        A concurrent insert that wins the unique index turns this call into an
        update of the winner's row.
        """
        existing = await self.get_by_event_and_user(event_id, user_id)
        if existing is None:
            row = EventParticipation(
                event_id=event_id,
                user_id=user_id,
                status=ParticipationStatus.PENDING.value,
                requested_at=utc_now(),
            )
            try:
                async with self.db.begin_nested():
                    self.db.add(row)
                    await self.db.flush()
                return row
            except IntegrityError:
                existing = await self.get_by_event_and_user(event_id, user_id)
                if existing is None:
                    raise
        _reset_to_pending(existing)
        await self.db.flush()
        return existing

    async def list_requests(self, status: str) -> list[ParticipationRequestView]:
        result = await self.db.execute(
            select(EventParticipation, Event, User)
            .join(Event, EventParticipation.event_id == Event.id)
            .join(User, EventParticipation.user_id == User.id)
            .where(EventParticipation.status == status)
            .order_by(EventParticipation.requested_at.asc())
        )
        return [
            ParticipationRequestView(
                id=p.id,
                event_id=e.id,
                event_title=e.title,
                event_date=e.date,
                user_id=u.id,
                user_full_name=u.full_name,
                user_email=u.email,
                user_department=u.department,
                status=p.status,
                requested_at=p.requested_at,
                decided_at=p.decided_at,
            )
            for p, e, u in result.all()
        ]

    async def list_approved_users(self, event_id: str) -> list[UserSummary]:
        result = await self.db.execute(
            select(User)
            .join(EventParticipation, EventParticipation.user_id == User.id)
            .where(
                EventParticipation.event_id == event_id,
                EventParticipation.status == ParticipationStatus.APPROVED.value,
            )
            .order_by(User.full_name)
        )
        return [_user_summary(u) for u in result.scalars().all()]

    async def delete_for_event(self, event_id: str) -> None:
        await self.db.execute(
            delete(EventParticipation)
            .where(EventParticipation.event_id == event_id)
            .execution_options(synchronize_session=False)
        )


class InterestRepository:
    """Interest set keyed by (event_id, user_id)."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def exists(self, event_id: str, user_id: str) -> bool:
        return await self.db.get(EventInterest, (event_id, user_id)) is not None

    async def add(self, event_id: str, user_id: str) -> bool:
        """Add interest. Returns False when a concurrent request already added it."""
        try:
            async with self.db.begin_nested():
                self.db.add(EventInterest(event_id=event_id, user_id=user_id))
                await self.db.flush()
        except IntegrityError:
            return False
        return True

    async def remove(self, event_id: str, user_id: str) -> None:
        row = await self.db.get(EventInterest, (event_id, user_id))
        if row is not None:
            await self.db.delete(row)
            await self.db.flush()

    async def list_users(self, event_id: str) -> list[UserSummary]:
        result = await self.db.execute(
            select(User)
            .join(EventInterest, EventInterest.user_id == User.id)
            .where(EventInterest.event_id == event_id)
            .order_by(User.full_name)
        )
        return [_user_summary(u) for u in result.scalars().all()]

    async def delete_for_event(self, event_id: str) -> None:
        await self.db.execute(
            delete(EventInterest)
            .where(EventInterest.event_id == event_id)
            .execution_options(synchronize_session=False)
        )
