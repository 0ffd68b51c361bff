"""Application interfaces (ports)."""

from engage.application.interfaces.services import IEmailSender, IWebhookForwarder

__all__ = ["IEmailSender", "IWebhookForwarder"]
