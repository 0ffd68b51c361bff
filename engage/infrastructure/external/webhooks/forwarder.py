"""Webhook forwarder to the external notification/social service.

POSTs camelCase JSON to {NOTIFICATION_SERVICE_URL}/api/{endpoint} with an
x-api-key header, over the shared httpx.AsyncClient created in lifespan.
"""

from __future__ import annotations

from typing import Any

import httpx

from engage.core.config import Settings
from engage.domain.exceptions import DeliveryError
from engage.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

API_KEY_HEADER = "x-api-key"

EVENT_CREATED = "integration/events/created"
EVENT_APPROVED = "integration/events/approved"
EVENT_REJECTED = "integration/events/rejected"
PARTICIPATION_REQUESTED = "integration/participations/requested"
PARTICIPATION_APPROVED = "integration/participations/approved"
PARTICIPATION_REJECTED = "integration/participations/rejected"
USER_CREATED = "integration/users/created"
USER_ACTIVATED = "integration/users/activated"
COMMENT_CREATED = "integration/comments/created"


def _camel(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def to_camel_case(payload: Any) -> Any:
    """Recursively rename snake_case dict keys to camelCase."""
    if isinstance(payload, dict):
        return {_camel(str(k)): to_camel_case(v) for k, v in payload.items()}
    if isinstance(payload, list):
        return [to_camel_case(v) for v in payload]
    return payload


class WebhookForwarder:
    """IWebhookForwarder over httpx. An unset base URL disables forwarding."""

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout_seconds: float = 10.0,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._http = http_client
        self._timeout = timeout_seconds

    @classmethod
    def from_settings(
        cls, settings: Settings, http_client: httpx.AsyncClient | None = None
    ) -> WebhookForwarder:
        api_key = settings.notification_service_api_key
        return cls(
            settings.notification_service_url,
            api_key.get_secret_value() if api_key else None,
            http_client=http_client,
            timeout_seconds=settings.notification_timeout_seconds,
        )

    @property
    def enabled(self) -> bool:
        return bool(self._base_url)

    async def post_webhook(self, endpoint: str, payload: dict[str, Any]) -> None:
        if not self.enabled:
            logger.warning("NOTIFICATION_SERVICE_URL not set; skipping webhook %s", endpoint)
            return
        url = f"{self._base_url}/api/{endpoint.lstrip('/')}"
        headers = {API_KEY_HEADER: self._api_key} if self._api_key else {}
        body = to_camel_case(payload)
        try:
            if self._http is not None:
                response = await self._http.post(
                    url, json=body, headers=headers, timeout=self._timeout
                )
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.post(url, json=body, headers=headers)
        except httpx.HTTPError as e:
            raise DeliveryError("webhook", f"{endpoint}: {e!s}") from e
        if response.is_error:
            raise DeliveryError("webhook", f"{endpoint}: HTTP {response.status_code}")
        logger.debug("Webhook %s delivered (status=%d)", endpoint, response.status_code)
