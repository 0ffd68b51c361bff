"""Access-token claim layout (wire contract with other services).

The domain works with a single roles set; emitting the role list twice
(plain "role" and the legacy role-claim URI) happens only here.
"""

from typing import Any

from engage.application.dtos.auth import AccessClaims, AuthenticatedUser

ROLE_CLAIM = "role"
LEGACY_ROLE_CLAIM = "http://schemas.microsoft.com/ws/2008/06/identity/claims/role"

EMAIL_CLAIM = "email"
TOKEN_ID_CLAIM = "jti"
FULL_NAME_CLAIM = "fullName"
DEPARTMENT_CLAIM = "Department"
IS_ACTIVE_CLAIM = "IsActive"
IS_FIRST_LOGIN_CLAIM = "IsFirstLogin"
SESSION_ID_CLAIM = "SessionId"


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return bool(value)


def _as_roles(value: Any) -> frozenset[str]:
    if value is None:
        return frozenset()
    if isinstance(value, str):
        return frozenset({value})
    return frozenset(str(v) for v in value)


def to_jwt_claims(user: AuthenticatedUser, session_id: str, token_id: str) -> dict[str, Any]:
    """Build the claim dict for an access token (without iss/aud/iat/exp)."""
    roles = sorted(user.roles)
    return {
        "sub": user.id,
        EMAIL_CLAIM: user.email,
        TOKEN_ID_CLAIM: token_id,
        FULL_NAME_CLAIM: user.full_name,
        DEPARTMENT_CLAIM: user.department or "",
        IS_ACTIVE_CLAIM: user.is_active,
        IS_FIRST_LOGIN_CLAIM: user.is_first_login,
        SESSION_ID_CLAIM: session_id,
        ROLE_CLAIM: roles,
        LEGACY_ROLE_CLAIM: roles,
    }


def from_jwt_claims(payload: dict[str, Any]) -> AccessClaims:
    """Parse a verified payload. Roles from both role claims are merged.

    Raises:
        ValueError: If the session id claim is missing.
    """
    session_id = payload.get(SESSION_ID_CLAIM)
    if not session_id:
        raise ValueError("Token missing required claim: SessionId")
    roles = _as_roles(payload.get(ROLE_CLAIM)) | _as_roles(payload.get(LEGACY_ROLE_CLAIM))
    return AccessClaims(
        user_id=str(payload["sub"]),
        email=str(payload.get(EMAIL_CLAIM, "")),
        full_name=str(payload.get(FULL_NAME_CLAIM, "")),
        department=payload.get(DEPARTMENT_CLAIM) or None,
        roles=roles,
        is_active=_as_bool(payload.get(IS_ACTIVE_CLAIM, False)),
        is_first_login=_as_bool(payload.get(IS_FIRST_LOGIN_CLAIM, True)),
        session_id=str(session_id),
        token_id=str(payload.get(TOKEN_ID_CLAIM, "")),
    )
