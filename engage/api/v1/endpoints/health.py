"""Health check endpoints: liveness and database readiness."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from engage.core.config import get_settings
from engage.infrastructure.persistence.database import get_db
from engage.schemas.health import HealthResponse, ReadinessResponse
from engage.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse(version=get_settings().app_version)


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Database unreachable", "model": ReadinessResponse}},
)
async def readiness_check(db: AsyncSession = Depends(get_db)) -> ReadinessResponse | JSONResponse:
    """Return 200 when the database answers SELECT 1, else 503."""
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.warning("Readiness check failed", exc_info=True)
        return JSONResponse(
            status_code=503,
            content=ReadinessResponse(status="not_ready", database="unreachable").model_dump(),
        )
    return ReadinessResponse()
