"""Security response headers (raw ASGI). Headers already set by a route win."""

from collections.abc import Callable

DEFAULT_HEADERS = {
    "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "geolocation=(), microphone=(), camera=()",
}

# Swagger UI needs scripts and styles from its CDN.
DOCS_PATHS = ("/docs", "/redoc")


def SecurityHeadersMiddleware(
    app: Callable, headers: dict[str, str] | None = None
) -> Callable:
    """Add security headers to every HTTP response."""
    configured = [
        (name.lower().encode(), value.encode())
        for name, value in (headers if headers is not None else DEFAULT_HEADERS).items()
    ]

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        is_docs = scope.get("path", "").startswith(DOCS_PATHS)

        async def send_secured(message: dict) -> None:
            if message["type"] == "http.response.start":
                current = list(message.get("headers", []))
                present = {name.lower() for name, _ in current}
                for name, value in configured:
                    if is_docs and name == b"content-security-policy":
                        continue
                    if name not in present:
                        current.append((name, value))
                message["headers"] = current
            await send(message)

        await app(scope, receive, send_secured)

    return asgi_app
