"""Input sanitization for user-written text (comments, replies, event descriptions)."""

import nh3


def sanitize_text(value: str) -> str:
    """Strip all HTML tags with nh3 and trim surrounding whitespace.

    Args:
        value: Raw string that may contain HTML.

    Returns:
        Plain text safe for HTML display.
    """
    if not value:
        return value
    return nh3.clean(value, tags=set(), attributes={}).strip()
