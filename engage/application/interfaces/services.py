"""Service interfaces (ports) for the application layer.

Protocols define contracts for the outbound collaborators (DIP).
"""

from __future__ import annotations

from typing import Any, Protocol


# Email delivery interface
class IEmailSender(Protocol):
    """Protocol for sending one HTML email. Transport failures raise DeliveryError."""

    async def send(self, to: str, subject: str, html_body: str) -> None:
        """Send the message to a single recipient."""


# Webhook delivery interface
class IWebhookForwarder(Protocol):
    """Protocol for forwarding integration events to the notification service."""

    async def post_webhook(self, endpoint: str, payload: dict[str, Any]) -> None:
        """POST payload to the given endpoint. Non-2xx raises DeliveryError."""
