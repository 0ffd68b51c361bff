"""ID and secret generators (CUID2 ids, session ids, temporary passwords)."""

import secrets
import string
import uuid

from cuid2 import cuid_wrapper

cuid_generator = cuid_wrapper()

_PASSWORD_SYMBOLS = "!@#$%&*?"


def generate_cuid() -> str:
    """Generate a collision-resistant unique identifier (CUID2).

    Returns:
        A new CUID string.
    """
    result = cuid_generator()
    if not isinstance(result, str):
        raise TypeError(
            f"Expected str from cuid_generator, got {type(result).__name__}"
        )
    return result


def generate_session_id() -> str:
    """Return a new opaque session identifier."""
    return uuid.uuid4().hex


def generate_temporary_password(length: int = 14) -> str:
    """Return a random password with at least one lower, upper, digit and symbol."""
    required = [
        secrets.choice(string.ascii_lowercase),
        secrets.choice(string.ascii_uppercase),
        secrets.choice(string.digits),
        secrets.choice(_PASSWORD_SYMBOLS),
    ]
    alphabet = string.ascii_letters + string.digits + _PASSWORD_SYMBOLS
    rest = [secrets.choice(alphabet) for _ in range(max(length - len(required), 0))]
    chars = required + rest
    secrets.SystemRandom().shuffle(chars)
    return "".join(chars)
