"""JWT creation and verification (python-jose, HS256).

Issuer, audience, key and lifetime come from engage.core.config. Errors are
raised as TokenValidationError / TokenExpiredError so callers never see
jose types.
"""

from datetime import UTC, datetime, timedelta
from typing import Any, cast

from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTError

from engage.core.config import get_settings


class TokenValidationError(ValueError):
    """Token is malformed, badly signed, or has the wrong issuer/audience."""


class TokenExpiredError(TokenValidationError):
    """Token signature is valid but exp is in the past."""


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed JWT with the given claims plus iss, aud, iat and exp.

    Args:
        data: Claims to encode (must include sub).
        expires_delta: Optional TTL; else uses settings.access_token_expire_minutes.

    Returns:
        Encoded JWT string.
    """
    settings = get_settings()
    now = datetime.now(UTC)
    ttl = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    to_encode = data.copy()
    to_encode.update(
        iss=settings.jwt_issuer,
        aud=settings.jwt_audience,
        iat=now,
        exp=now + ttl,
    )
    encoded = jwt.encode(
        to_encode,
        settings.secret_key.get_secret_value(),
        algorithm=settings.algorithm,
    )
    return cast(str, encoded)


def verify_token(token: str) -> dict[str, Any]:
    """Verify signature, expiry, issuer and audience; return the payload.

    Raises:
        TokenExpiredError: If the token is expired.
        TokenValidationError: For any other invalid token.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key.get_secret_value(),
            algorithms=[settings.algorithm],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
            options={"require_exp": True, "require_sub": True},
        )
    except ExpiredSignatureError as e:
        raise TokenExpiredError("Token expired") from e
    except JWTError as e:
        raise TokenValidationError(f"Invalid token: {e!s}") from e
    if not payload.get("sub"):
        raise TokenValidationError("Token missing required claim: sub")
    return payload
