"""Outbound webhooks to the notification/social service."""

from engage.infrastructure.external.webhooks.forwarder import WebhookForwarder, to_camel_case

__all__ = ["WebhookForwarder", "to_camel_case"]
