"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Domain exceptions carry an
error_code; _ERROR_CODE_STATUS maps it to the HTTP status.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from engage.core.config import get_settings
from engage.core.cookies import clear_auth_cookies
from engage.domain.exceptions import EngageException

logger = logging.getLogger(__name__)

_ERROR_CODE_STATUS: dict[str, int] = {
    "INVALID_CREDENTIALS": 401,
    "AUTHENTICATION_ERROR": 401,
    "TOKEN_EXPIRED": 401,
    "SESSION_INVALIDATED": 401,
    "SECURITY_TOKEN_ERROR": 401,
    "UNAUTHORIZED": 401,
    "PERMISSION_DENIED": 403,
    "VALIDATION_ERROR": 400,
    "RESOURCE_NOT_FOUND": 404,
    "INVALID_STATUS_TRANSITION": 409,
    "DELIVERY_ERROR": 502,
    "SERVICE_UNAVAILABLE": 503,
}

# Refresh failures also drop the auth cookies so the browser stops retrying.
_CLEAR_COOKIES_ON = frozenset({"SECURITY_TOKEN_ERROR"})


def status_for(exc: EngageException) -> int:
    return _ERROR_CODE_STATUS.get(exc.error_code, 400)


def _engage_exception_handler(request: Request, exc: EngageException) -> JSONResponse:
    """Return JSON from EngageException.to_dict() with the mapped status code."""
    status = status_for(exc)
    if status >= 500:
        logger.error("%s on %s %s: %s", exc.error_code, request.method, request.url.path, exc)
    response = JSONResponse(status_code=status, content=exc.to_dict())
    if status == 401:
        response.headers["WWW-Authenticate"] = "Bearer"
    if exc.error_code in _CLEAR_COOKIES_ON:
        clear_auth_cookies(response)
    return response


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 422 with validation error details."""
    return JSONResponse(
        status_code=422,
        content={
            "error": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "details": jsonable_errors(exc),
        },
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    """Pydantic errors without the non-serializable ctx/input values."""
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "HTTP_ERROR", "message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def _rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    return JSONResponse(
        status_code=429,
        content={"error": "RATE_LIMITED", "message": f"Rate limit exceeded: {exc.detail}"},
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    detail: Any = str(exc) if get_settings().debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={"error": "INTERNAL_ERROR", "message": detail},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Handlers: EngageException (and subclasses), RequestValidationError,
    RateLimitExceeded, StarletteHTTPException, generic Exception.
    """
    app.add_exception_handler(EngageException, _engage_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
