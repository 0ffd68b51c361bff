"""Reset a user's password and end their session.

Usage:
    python -m scripts.reset_password <email> <new_password>
The new password must satisfy the password policy.
"""

import asyncio
import sys

from engage.infrastructure.persistence.database import transaction
from engage.infrastructure.persistence.repositories import UserRepository


async def main() -> None:
    """Reset password for the account with the given email."""
    if len(sys.argv) < 3:
        print(
            "Usage: python -m scripts.reset_password <email> <new_password>",
            file=sys.stderr,
        )
        sys.exit(1)
    email = sys.argv[1]
    new_password = sys.argv[2]

    async with transaction() as session:
        user_repo = UserRepository(session)
        user = await user_repo.get_by_email(email)
        if not user:
            print(f"User not found: {email}", file=sys.stderr)
            sys.exit(1)
        result = await user_repo.set_password(user, new_password)
        if not result.succeeded:
            print("Password rejected: " + "; ".join(result.errors), file=sys.stderr)
            sys.exit(1)
        await user_repo.set_session(user, None)
        print(f"Password reset for user {user.id} ({user.email})")


if __name__ == "__main__":
    asyncio.run(main())
