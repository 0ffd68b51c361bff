"""Event, participation and analytics API schemas."""

from datetime import datetime, timezone
from typing import Any

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, field_validator


def _ensure_aware_datetime(v: datetime | str) -> datetime:
    """Accept datetime or ISO string; treat naive datetimes as UTC (common from frontends)."""
    dt = datetime.fromisoformat(v.replace("Z", "+00:00")) if isinstance(v, str) else v
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


class EventCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(default="", max_length=10000)
    date: AwareDatetime
    location: str = Field(..., min_length=1, max_length=200)
    image_path: str | None = Field(default=None, max_length=512)

    @field_validator("date", mode="before")
    @classmethod
    def date_aware(cls, v: Any) -> datetime:
        if v is None:
            raise ValueError("date is required")
        return _ensure_aware_datetime(v)


class EventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str
    date: datetime
    location: str
    image_path: str | None = None
    status: str
    organizer_id: str | None = None
    organizer_name: str | None = None
    organizer_department: str | None = None
    approved_by_id: str | None = None
    created_at: datetime


class ParticipationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    event_id: str
    user_id: str
    status: str
    requested_at: datetime
    decided_at: datetime | None = None
    approved_by_id: str | None = None


class ParticipationRequestResponse(BaseModel):
    """Pending (or decided) request with event and requester details."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    event_id: str
    event_title: str
    event_date: datetime
    user_id: str
    user_full_name: str
    user_email: str
    user_department: str | None = None
    status: str
    requested_at: datetime
    decided_at: datetime | None = None


class UserSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    full_name: str
    email: str
    department: str | None = None
    profile_picture: str | None = None


class InterestToggleResponse(BaseModel):
    event_id: str
    is_interested: bool


class UserEventStatusResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    event_id: str
    user_id: str
    is_interested: bool
    participation_status: str | None = None


class ProfileEventsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    organized: list[EventResponse]
    participating: list[EventResponse]
    interested: list[EventResponse]


class DepartmentCountResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    department: str
    count: int


class PopularEventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    event_id: str
    title: str
    participants: int


class AnalyticsSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_events: int
    events_by_status: dict[str, int]
    approved_participations: int
    approved_events_by_department: list[DepartmentCountResponse]
    top_events: list[PopularEventResponse]


class TrendPointResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    month: str
    approved_events: int
