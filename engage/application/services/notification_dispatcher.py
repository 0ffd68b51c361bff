"""Notification outbox and post-commit dispatcher.

Use cases enqueue emails and webhooks into a per-request NotificationOutbox.
The request unit of work starts NotificationDispatcher.dispatch in an asyncio
task once the transaction has committed, so delivery never holds the
response. Retries go through tenacity. A delivery failure is logged and
never reaches the use case; one failing message does not stop the rest of
the outbox.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_incrementing,
)

from engage.application.interfaces.services import IEmailSender, IWebhookForwarder
from engage.domain.exceptions import DeliveryError
from engage.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class OutboundEmail:
    to: str
    subject: str
    html_body: str


@dataclass(frozen=True)
class OutboundWebhook:
    endpoint: str
    payload: dict[str, Any]


@dataclass
class NotificationOutbox:
    """Messages collected during one unit of work."""

    emails: list[OutboundEmail] = field(default_factory=list)
    webhooks: list[OutboundWebhook] = field(default_factory=list)

    def email(self, to: str, subject: str, html_body: str) -> None:
        self.emails.append(OutboundEmail(to=to, subject=subject, html_body=html_body))

    def webhook(self, endpoint: str, payload: dict[str, Any]) -> None:
        self.webhooks.append(OutboundWebhook(endpoint=endpoint, payload=payload))

    def __len__(self) -> int:
        return len(self.emails) + len(self.webhooks)


class NotificationDispatcher:
    """Deliver an outbox with a per-attempt deadline and bounded retries."""

    def __init__(
        self,
        email_sender: IEmailSender,
        webhook_forwarder: IWebhookForwarder | None = None,
        *,
        timeout_seconds: float = 10.0,
        max_attempts: int = 3,
        backoff_seconds: float = 0.5,
    ) -> None:
        self._email_sender = email_sender
        self._webhook_forwarder = webhook_forwarder
        self._timeout = timeout_seconds
        self._max_attempts = max(1, max_attempts)
        self._backoff = backoff_seconds

    async def dispatch(self, outbox: NotificationOutbox) -> None:
        """Deliver every message in the outbox. Never raises."""
        for email in outbox.emails:
            await self._deliver(
                "email",
                email.to,
                lambda e=email: self._email_sender.send(e.to, e.subject, e.html_body),
            )
        if self._webhook_forwarder is None:
            if outbox.webhooks:
                logger.debug("No webhook forwarder; dropped %d webhooks", len(outbox.webhooks))
            return
        forwarder = self._webhook_forwarder
        for hook in outbox.webhooks:
            await self._deliver(
                "webhook",
                hook.endpoint,
                lambda h=hook: forwarder.post_webhook(h.endpoint, h.payload),
            )

    def _log_failed_attempt(self, channel: str, target: str) -> Callable[[RetryCallState], None]:
        def log(state: RetryCallState) -> None:
            error = state.outcome.exception() if state.outcome else None
            logger.warning(
                "%s delivery to %s failed (attempt %d/%d): %s",
                channel,
                target,
                state.attempt_number,
                self._max_attempts,
                error,
            )

        return log

    async def _deliver(
        self,
        channel: str,
        target: str,
        send: Callable[[], Awaitable[None]],
    ) -> bool:
        """Send one message. Any failure is logged and reported as False."""
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_incrementing(start=self._backoff, increment=self._backoff),
            retry=retry_if_exception_type((DeliveryError, TimeoutError)),
            before_sleep=self._log_failed_attempt(channel, target),
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    await asyncio.wait_for(send(), timeout=self._timeout)
        except (DeliveryError, TimeoutError) as e:
            logger.error(
                "%s delivery to %s abandoned after %d attempts: %s",
                channel,
                target,
                self._max_attempts,
                e,
            )
            return False
        except Exception:
            logger.exception(
                "%s delivery to %s failed with a non-retryable error", channel, target
            )
            return False
        return True
