"""Seed the built-in roles and, optionally, a SuperAdmin account.

Usage:
    python -m scripts.seed_roles [<superadmin_email> <superadmin_password> [<full_name>]]
Email and password may also come from SUPERADMIN_EMAIL / SUPERADMIN_PASSWORD.
Idempotent: existing roles and an existing SuperAdmin email are left as is.
"""

import asyncio
import os
import sys

from engage.domain.enums import RoleName
from engage.infrastructure.persistence.database import transaction
from engage.infrastructure.persistence.repositories import RoleRepository, UserRepository


async def main() -> None:
    """Create missing roles, then the SuperAdmin if credentials were given."""
    args = sys.argv[1:]
    email = args[0] if len(args) > 0 else os.environ.get("SUPERADMIN_EMAIL")
    password = args[1] if len(args) > 1 else os.environ.get("SUPERADMIN_PASSWORD")
    full_name = args[2] if len(args) > 2 else "Super Admin"
    if email and not password:
        print("A SuperAdmin password is required with the email", file=sys.stderr)
        sys.exit(1)

    async with transaction() as session:
        role_repo = RoleRepository(session)
        for name in RoleName.values():
            if await role_repo.create_role(name):
                print(f"Created role {name}")

        if not email:
            return
        user_repo = UserRepository(session)
        if await user_repo.get_by_email(email):
            print(f"User already exists: {email}")
            return
        # SuperAdmin bypasses the first-login password change.
        result = await user_repo.create_user(
            email=email,
            full_name=full_name,
            password=password,
            roles=[RoleName.SUPER_ADMIN.value],
            is_active=True,
            is_first_login=False,
        )
        if not result.succeeded:
            print("SuperAdmin not created: " + "; ".join(result.errors), file=sys.stderr)
            sys.exit(1)
        print(f"Created SuperAdmin {result.user_id} ({email})")


if __name__ == "__main__":
    asyncio.run(main())
