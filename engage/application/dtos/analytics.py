"""DTOs for event analytics."""

from dataclasses import dataclass


@dataclass(frozen=True)
class DepartmentCount:
    department: str
    count: int


@dataclass(frozen=True)
class PopularEvent:
    event_id: str
    title: str
    participants: int


@dataclass(frozen=True)
class AnalyticsSummary:
    """Counts over all events and approved participations."""

    total_events: int
    events_by_status: dict[str, int]
    approved_participations: int
    approved_events_by_department: list[DepartmentCount]
    top_events: list[PopularEvent]


@dataclass(frozen=True)
class TrendPoint:
    """Approved events in one calendar month (YYYY-MM)."""

    month: str
    approved_events: int
