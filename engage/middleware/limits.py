"""Request limits: wall-clock timeout and maximum body size (raw ASGI)."""

import asyncio
from collections.abc import Callable

from engage.middleware._asgi import get_header, send_json_error
from engage.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


def TimeoutMiddleware(app: Callable, timeout_seconds: float) -> Callable:
    """Cancel requests running longer than timeout_seconds and answer 504.

    If the response has already started, the request is only cancelled;
    a second response cannot be sent.
    """

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        started = False

        async def tracking_send(message: dict) -> None:
            nonlocal started
            if message["type"] == "http.response.start":
                started = True
            await send(message)

        try:
            await asyncio.wait_for(app(scope, receive, tracking_send), timeout=timeout_seconds)
        except TimeoutError:
            logger.warning(
                "Request timed out after %ss: %s %s",
                timeout_seconds,
                scope.get("method", ""),
                scope.get("path", ""),
            )
            if not started:
                await send_json_error(
                    send,
                    504,
                    "GATEWAY_TIMEOUT",
                    f"Request timed out after {timeout_seconds} seconds",
                    {"timeout_seconds": timeout_seconds},
                )

    return asgi_app


def RequestSizeLimitMiddleware(app: Callable, max_bytes: int) -> Callable:
    """Answer 413 when the declared or streamed body exceeds max_bytes."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return

        declared = get_header(scope, "content-length")
        if declared is not None and declared.strip().isdigit():
            if int(declared) > max_bytes:
                await send_json_error(
                    send,
                    413,
                    "PAYLOAD_TOO_LARGE",
                    f"Request body must be at most {max_bytes} bytes",
                    {"max_bytes": max_bytes, "content_length": int(declared)},
                )
                return
            await app(scope, receive, send)
            return

        # No usable Content-Length (e.g. chunked): buffer up to the limit, then replay.
        chunks: list[bytes] = []
        received = 0
        more_body = True
        while more_body:
            message = await receive()
            if message["type"] == "http.disconnect":
                return
            if message["type"] != "http.request":
                continue
            chunk = message.get("body", b"")
            received += len(chunk)
            if received > max_bytes:
                await send_json_error(
                    send,
                    413,
                    "PAYLOAD_TOO_LARGE",
                    f"Request body must be at most {max_bytes} bytes",
                    {"max_bytes": max_bytes},
                )
                return
            chunks.append(chunk)
            more_body = message.get("more_body", False)

        body = b"".join(chunks)
        replayed = False

        async def replay_receive() -> dict:
            nonlocal replayed
            if not replayed:
                replayed = True
                return {"type": "http.request", "body": body, "more_body": False}
            return await receive()

        await app(scope, replay_receive, send)

    return asgi_app
