"""Shared utilities: datetime, generators, sanitization."""

from engage.shared.utils.datetime import ensure_utc, utc_now
from engage.shared.utils.generators import (
    generate_cuid,
    generate_session_id,
    generate_temporary_password,
)
from engage.shared.utils.sanitization import sanitize_text

__all__ = [
    "ensure_utc",
    "generate_cuid",
    "generate_session_id",
    "generate_temporary_password",
    "sanitize_text",
    "utc_now",
]
