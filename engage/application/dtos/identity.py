"""Credential store result type: errors are data, not exceptions."""

from dataclasses import dataclass


@dataclass(frozen=True)
class IdentityResult:
    """Outcome of a credential-store mutation (create, change/reset password, add role)."""

    succeeded: bool
    errors: tuple[str, ...] = ()
    user_id: str | None = None

    @classmethod
    def success(cls, user_id: str | None = None) -> "IdentityResult":
        return cls(succeeded=True, user_id=user_id)

    @classmethod
    def failed(cls, *errors: str) -> "IdentityResult":
        return cls(succeeded=False, errors=tuple(errors))
