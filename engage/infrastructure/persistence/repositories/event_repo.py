"""Event repository: event rows, read-model listings and analytics queries."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import Select, delete, desc, extract, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from engage.application.dtos.analytics import DepartmentCount, PopularEvent, TrendPoint
from engage.application.dtos.event import EventResult
from engage.domain.enums import EventStatus, ParticipationStatus
from engage.infrastructure.persistence.models.event import Event
from engage.infrastructure.persistence.models.interest import EventInterest
from engage.infrastructure.persistence.models.participation import EventParticipation
from engage.infrastructure.persistence.models.user import User
from engage.infrastructure.persistence.repositories.base import BaseRepository


def event_to_result(
    e: Event,
    organizer_name: str | None = None,
    organizer_department: str | None = None,
) -> EventResult:
    """Map ORM Event (plus optional organizer columns) to EventResult."""
    return EventResult(
        id=e.id,
        title=e.title,
        description=e.description,
        date=e.date,
        location=e.location,
        image_path=e.image_path,
        status=e.status,
        organizer_id=e.organizer_id,
        approved_by_id=e.approved_by_id,
        created_at=e.created_at,
        organizer_name=organizer_name,
        organizer_department=organizer_department,
    )


def _with_organizer() -> Select[Any]:
    return select(Event, User.full_name, User.department).outerjoin(
        User, Event.organizer_id == User.id
    )


class EventRepository(BaseRepository[Event]):
    """Event persistence. Status changes go through EventWorkflowEngine."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Event)

    async def _results(self, stmt: Select[Any]) -> list[EventResult]:
        result = await self.db.execute(stmt)
        return [event_to_result(e, name, dept) for e, name, dept in result.all()]

    async def get_result(self, event_id: str) -> EventResult | None:
        rows = await self._results(_with_organizer().where(Event.id == event_id))
        return rows[0] if rows else None

    async def list_by_status(
        self,
        status: str,
        department: str | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> list[EventResult]:
        stmt = _with_organizer().where(Event.status == status)
        if department:
            stmt = stmt.where(User.department == department)
        return await self._results(
            stmt.order_by(Event.date.asc()).offset(skip).limit(limit)
        )

    async def list_by_organizer(self, organizer_id: str) -> list[EventResult]:
        return await self._results(
            _with_organizer()
            .where(Event.organizer_id == organizer_id)
            .order_by(Event.date.desc())
        )

    async def list_participating(self, user_id: str) -> list[EventResult]:
        """Events where the user's participation is approved."""
        return await self._results(
            _with_organizer()
            .join(EventParticipation, EventParticipation.event_id == Event.id)
            .where(
                EventParticipation.user_id == user_id,
                EventParticipation.status == ParticipationStatus.APPROVED.value,
            )
            .order_by(Event.date.desc())
        )

    async def list_interested(self, user_id: str) -> list[EventResult]:
        return await self._results(
            _with_organizer()
            .join(EventInterest, EventInterest.event_id == Event.id)
            .where(EventInterest.user_id == user_id)
            .order_by(Event.date.desc())
        )

    async def delete_event_row(self, event_id: str) -> None:
        """Delete the event row itself. Dependents must already be gone."""
        await self.db.execute(
            delete(Event)
            .where(Event.id == event_id)
            .execution_options(synchronize_session=False)
        )

    # ---- analytics ----

    async def count_by_status(self) -> dict[str, int]:
        result = await self.db.execute(
            select(Event.status, func.count()).group_by(Event.status)
        )
        counts = {status: 0 for status in EventStatus.values()}
        for status, count in result.all():
            counts[status] = count
        return counts

    async def count_approved_participations(self) -> int:
        result = await self.db.execute(
            select(func.count())
            .select_from(EventParticipation)
            .where(EventParticipation.status == ParticipationStatus.APPROVED.value)
        )
        return int(result.scalar_one())

    async def approved_events_by_department(self) -> list[DepartmentCount]:
        department = func.coalesce(User.department, "Unknown")
        result = await self.db.execute(
            select(department, func.count(Event.id))
            .select_from(Event)
            .outerjoin(User, Event.organizer_id == User.id)
            .where(Event.status == EventStatus.APPROVED.value)
            .group_by(department)
            .order_by(desc(func.count(Event.id)))
        )
        return [DepartmentCount(department=d, count=c) for d, c in result.all()]

    async def top_events(self, limit: int = 5) -> list[PopularEvent]:
        participants = func.count(EventParticipation.id)
        result = await self.db.execute(
            select(Event.id, Event.title, participants)
            .join(EventParticipation, EventParticipation.event_id == Event.id)
            .where(EventParticipation.status == ParticipationStatus.APPROVED.value)
            .group_by(Event.id, Event.title)
            .order_by(desc(participants))
            .limit(limit)
        )
        return [
            PopularEvent(event_id=i, title=t, participants=c) for i, t, c in result.all()
        ]

    async def approved_per_month(self, since: datetime) -> list[TrendPoint]:
        year = extract("year", Event.date)
        month = extract("month", Event.date)
        result = await self.db.execute(
            select(year, month, func.count(Event.id))
            .where(Event.status == EventStatus.APPROVED.value, Event.date >= since)
            .group_by(year, month)
            .order_by(year, month)
        )
        return [
            TrendPoint(month=f"{int(y):04d}-{int(m):02d}", approved_events=c)
            for y, m, c in result.all()
        ]
