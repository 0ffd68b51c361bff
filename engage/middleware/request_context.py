"""Request and correlation id middlewares.

X-Request-ID is forwarded when the client sends a safe value, otherwise a
new one is minted. X-Correlation-ID falls back to the request id. Both are
stored on scope["state"] and echoed on the response. Raw ASGI.
"""

import re
import uuid
from collections.abc import Callable

from engage.middleware._asgi import append_response_header, get_header

REQUEST_ID_MAX_LENGTH = 64
_SAFE_ID = re.compile(r"^[A-Za-z0-9_-]{1,%d}$" % REQUEST_ID_MAX_LENGTH)


def _safe_id(raw: str | None) -> str | None:
    """Return raw when it cannot inject into log lines, else None."""
    if raw and _SAFE_ID.match(raw.strip()):
        return raw.strip()
    return None


def RequestIDMiddleware(app: Callable, header_name: str = "X-Request-ID") -> Callable:
    """Forward or mint a request id and echo it on the response."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        request_id = _safe_id(get_header(scope, header_name)) or uuid.uuid4().hex
        scope.setdefault("state", {})["request_id"] = request_id

        async def send_with_id(message: dict) -> None:
            if message["type"] == "http.response.start":
                append_response_header(message, header_name, request_id)
            await send(message)

        await app(scope, receive, send_with_id)

    return asgi_app


def CorrelationIDMiddleware(
    app: Callable, header_name: str = "X-Correlation-ID"
) -> Callable:
    """Forward the caller's correlation id, else reuse the request id."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        state = scope.setdefault("state", {})
        correlation_id = (
            _safe_id(get_header(scope, header_name))
            or state.get("request_id")
            or uuid.uuid4().hex
        )
        state["correlation_id"] = correlation_id

        async def send_with_id(message: dict) -> None:
            if message["type"] == "http.response.start":
                append_response_header(message, header_name, correlation_id)
            await send(message)

        await app(scope, receive, send_with_id)

    return asgi_app
