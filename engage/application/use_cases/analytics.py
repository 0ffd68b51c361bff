"""Analytics use case: event counts, top events and monthly approval trends."""

from __future__ import annotations

from datetime import datetime

from engage.application.dtos.analytics import AnalyticsSummary, TrendPoint
from engage.domain.exceptions import ValidationException
from engage.infrastructure.persistence.repositories.event_repo import EventRepository
from engage.shared.utils.datetime import utc_now

MAX_TREND_MONTHS = 24


def _month_starts(now: datetime, months: int) -> list[datetime]:
    """First instant of each of the last `months` calendar months, oldest first."""
    year, month = now.year, now.month
    starts: list[datetime] = []
    for _ in range(months):
        starts.append(
            now.replace(year=year, month=month, day=1, hour=0, minute=0, second=0, microsecond=0)
        )
        month -= 1
        if month == 0:
            month, year = 12, year - 1
    return list(reversed(starts))


class EventAnalyticsService:
    """Dashboard statistics over events and approved participations."""

    def __init__(self, event_repo: EventRepository, top_limit: int = 5) -> None:
        self.event_repo = event_repo
        self.top_limit = top_limit

    async def summary(self) -> AnalyticsSummary:
        by_status = await self.event_repo.count_by_status()
        return AnalyticsSummary(
            total_events=sum(by_status.values()),
            events_by_status=by_status,
            approved_participations=await self.event_repo.count_approved_participations(),
            approved_events_by_department=await self.event_repo.approved_events_by_department(),
            top_events=await self.event_repo.top_events(self.top_limit),
        )

    async def trends(self, months: int = 6) -> list[TrendPoint]:
        """Approved events per month for the last `months` months; empty months count 0."""
        if months < 1 or months > MAX_TREND_MONTHS:
            raise ValidationException(
                f"months must be between 1 and {MAX_TREND_MONTHS}", field="months"
            )
        starts = _month_starts(utc_now(), months)
        counts = {
            p.month: p.approved_events
            for p in await self.event_repo.approved_per_month(starts[0])
        }
        return [
            TrendPoint(month=key, approved_events=counts.get(key, 0))
            for key in (f"{s.year:04d}-{s.month:02d}" for s in starts)
        ]
