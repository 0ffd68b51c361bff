"""Account state entity.

Effective activation flags for a user, independent of persistence. The
highest-privilege role bypasses activation and first-login checks.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from engage.domain.enums import RoleName


@dataclass(frozen=True)
class AccountState:
    """Effective is_active / is_first_login flags after applying the role bypass."""

    is_active: bool
    is_first_login: bool
    roles: frozenset[str]

    @classmethod
    def from_stored(
        cls,
        is_active: bool,
        is_first_login: bool,
        roles: Iterable[str],
    ) -> "AccountState":
        """Build from stored flags; SuperAdmin is always active and past first login."""
        role_set = frozenset(roles)
        if RoleName.SUPER_ADMIN.value in role_set:
            return cls(is_active=True, is_first_login=False, roles=role_set)
        return cls(is_active=is_active, is_first_login=is_first_login, roles=role_set)

    @property
    def needs_password_change(self) -> bool:
        """True when the user must change password before receiving tokens."""
        return not self.is_active or self.is_first_login

    def has_any_role(self, allowed: Iterable[str]) -> bool:
        """Return True if the account holds at least one of the allowed roles."""
        return not self.roles.isdisjoint(allowed)
