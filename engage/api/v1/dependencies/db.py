"""Unit of work and repository dependencies (composition root).

Reads use get_db. Writes use get_uow: one transaction plus a notification
outbox; the outbox is dispatched only after the commit succeeds.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Annotated

from fastapi import Depends, FastAPI, Request
from sqlalchemy.ext.asyncio import AsyncSession

from engage.application.services.notification_dispatcher import (
    NotificationDispatcher,
    NotificationOutbox,
)
from engage.core.config import get_settings
from engage.infrastructure.external.email import build_email_sender
from engage.infrastructure.external.webhooks import WebhookForwarder
from engage.infrastructure.persistence.database import get_db, transaction
from engage.infrastructure.persistence.repositories import UserRepository
from engage.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


@dataclass
class UnitOfWork:
    """Session of the request transaction and the messages to send after it commits."""

    session: AsyncSession
    outbox: NotificationOutbox = field(default_factory=NotificationOutbox)


def get_dispatcher(app: FastAPI) -> NotificationDispatcher:
    """Dispatcher built in lifespan; built on demand when lifespan did not run."""
    dispatcher = getattr(app.state, "notification_dispatcher", None)
    if dispatcher is None:
        settings = get_settings()
        dispatcher = NotificationDispatcher(
            build_email_sender(settings),
            WebhookForwarder.from_settings(settings),
            timeout_seconds=settings.notification_timeout_seconds,
            max_attempts=settings.notification_max_attempts,
            backoff_seconds=settings.notification_retry_backoff_seconds,
        )
        app.state.notification_dispatcher = dispatcher
    return dispatcher


def schedule_dispatch(app: FastAPI, outbox: NotificationOutbox) -> asyncio.Task[None]:
    """Start delivery in the background; keep a reference until it finishes."""
    pending: set[asyncio.Task[None]] | None = getattr(app.state, "notification_tasks", None)
    if pending is None:
        pending = set()
        app.state.notification_tasks = pending
    task = asyncio.create_task(get_dispatcher(app).dispatch(outbox))
    pending.add(task)

    def finished(done: asyncio.Task[None]) -> None:
        pending.discard(done)
        if not done.cancelled() and done.exception() is not None:
            logger.error("Notification dispatch crashed", exc_info=done.exception())

    task.add_done_callback(finished)
    return task


async def get_uow(request: Request) -> AsyncIterator[UnitOfWork]:
    """Write transaction for the request. Commits on success, rolls back on error.

    Notifications queued during the request go out only after the commit.
    """
    async with transaction() as session:
        uow = UnitOfWork(session=session)
        yield uow
    if uow.outbox:
        schedule_dispatch(request.app, uow.outbox)


ReadSession = Annotated[AsyncSession, Depends(get_db)]
WriteUnit = Annotated[UnitOfWork, Depends(get_uow)]


def build_user_repo(session: AsyncSession) -> UserRepository:
    return UserRepository(
        session,
        reset_token_ttl_seconds=get_settings().password_reset_token_ttl_seconds,
    )
