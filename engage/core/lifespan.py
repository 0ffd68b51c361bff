"""Application lifespan: startup and shutdown.

Only wiring of infrastructure (shared HTTP client, notification dispatcher,
telemetry, DB engine dispose); no business logic here.
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from engage.application.services.notification_dispatcher import NotificationDispatcher
from engage.core.config import get_settings
from engage.infrastructure.external.email import build_email_sender
from engage.infrastructure.external.webhooks import WebhookForwarder

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup: shared HTTP client, notification dispatcher, telemetry (if
    enabled). Shutdown: pending notifications, HTTP client close, telemetry
    shutdown, engine dispose.
    """
    settings = get_settings()

    # ---- Startup ----
    # Shared HTTP client for webhook delivery (connection reuse).
    app.state.http_client = httpx.AsyncClient(timeout=settings.notification_timeout_seconds)
    app.state.notification_dispatcher = NotificationDispatcher(
        build_email_sender(settings),
        WebhookForwarder.from_settings(settings, http_client=app.state.http_client),
        timeout_seconds=settings.notification_timeout_seconds,
        max_attempts=settings.notification_max_attempts,
        backoff_seconds=settings.notification_retry_backoff_seconds,
    )
    # Post-commit delivery tasks; drained on shutdown.
    app.state.notification_tasks = set()

    if settings.telemetry_enabled:
        from engage.shared.telemetry.telemetry import TelemetryConfig, set_telemetry

        telemetry = TelemetryConfig(
            service_name=settings.app_name,
            service_version=settings.app_version,
            enabled=True,
            environment=settings.telemetry_environment,
        )
        telemetry.setup_telemetry(
            exporter_type=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )
        set_telemetry(telemetry)
        telemetry.instrument_fastapi(app)
        from engage.infrastructure.persistence import database

        database.get_session_factory()
        telemetry.instrument_sqlalchemy(database.engine)
        logger.info("Telemetry initialized")

    yield

    # ---- Shutdown ----
    pending = getattr(app.state, "notification_tasks", None)
    if pending:
        logger.info("Waiting for %d notification task(s)", len(pending))
        await asyncio.gather(*list(pending), return_exceptions=True)

    if getattr(app.state, "http_client", None) is not None:
        await app.state.http_client.aclose()
        app.state.http_client = None
        logger.info("HTTP client closed")

    from engage.shared.telemetry.telemetry import get_telemetry

    telemetry_instance = get_telemetry()
    if telemetry_instance is not None:
        telemetry_instance.shutdown()
        logger.info("Telemetry shutdown complete")

    from engage.infrastructure.persistence import database

    if getattr(database, "engine", None) is not None:
        await database.engine.dispose()
        logger.info("Database engine disposed")
