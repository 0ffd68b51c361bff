"""Analytics API: dashboard summary and monthly trends (approvers only)."""

from fastapi import APIRouter, Query

from engage.api.v1.dependencies import AnalyticsDep, Approver
from engage.application.use_cases.analytics import MAX_TREND_MONTHS
from engage.schemas.event import AnalyticsSummaryResponse, TrendPointResponse

router = APIRouter()


@router.get("/summary", response_model=AnalyticsSummaryResponse)
async def summary(approver: Approver, analytics: AnalyticsDep):
    return AnalyticsSummaryResponse.model_validate(await analytics.summary())


@router.get("/trends", response_model=list[TrendPointResponse])
async def trends(
    approver: Approver,
    analytics: AnalyticsDep,
    months: int = Query(default=6, ge=1, le=MAX_TREND_MONTHS),
):
    """Approved events per month, oldest first; months without events count 0."""
    return [TrendPointResponse.model_validate(p) for p in await analytics.trends(months)]
