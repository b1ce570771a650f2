"""Utility functions for tiermem core functionality.

This module provides helper functions for ID generation, time manipulation,
and other common operations.
"""

import re
import secrets
import string
from collections.abc import Callable
from datetime import UTC, datetime

# prefix-timestamp-random, e.g. "ep-1700000000000-a1b2c"
MEMORY_ID_PATTERN = r"^[a-z]+-\d+-[a-z0-9]+$"

_MEMORY_ID_RE = re.compile(MEMORY_ID_PATTERN)
_BASE36 = string.digits + string.ascii_lowercase

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Get current UTC time with timezone information.

    Returns:
        Current datetime in UTC with timezone info.

    Example:
        >>> now = utc_now()
        >>> now.tzinfo is not None
        True
    """
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Ensure a datetime is in UTC timezone.

    Args:
        dt: A datetime object (may be naive or aware).

    Returns:
        The same datetime converted to UTC, or None if input is None.
        Naive datetimes are assumed to be UTC.
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)

    return dt.astimezone(UTC)


def generate_id(prefix: str, now: datetime | None = None) -> str:
    """Generate an identifier of the form ``prefix-timestamp-random``.

    The timestamp is the epoch time in milliseconds and the random part is
    five base36 characters.

    Args:
        prefix: Lowercase record prefix (e.g. ``ep``, ``fact``).
        now: Moment to encode; defaults to the current UTC time.

    Returns:
        A new identifier string.

    Example:
        >>> generate_id("ep").startswith("ep-")
        True
    """
    moment = ensure_utc(now) or utc_now()
    millis = int(moment.timestamp() * 1000)
    suffix = "".join(secrets.choice(_BASE36) for _ in range(5))
    return f"{prefix}-{millis}-{suffix}"


def is_valid_id(id_str: str, prefix: str | None = None) -> bool:
    """Check if an ID string has the ``prefix-timestamp-random`` shape.

    Args:
        id_str: The ID string to validate.
        prefix: Optional expected prefix (without the trailing dash).

    Returns:
        True if the ID is valid, False otherwise.

    Example:
        >>> is_valid_id("ep-1700000000000-a1b2c", "ep")
        True
        >>> is_valid_id("invalid_id")
        False
    """
    if not id_str or not _MEMORY_ID_RE.match(id_str):
        return False

    if prefix is not None and not id_str.startswith(f"{prefix}-"):
        return False

    return True


def millis_between(start: datetime, end: datetime) -> int:
    """Milliseconds elapsed from ``start`` to ``end``."""
    delta = ensure_utc(end) - ensure_utc(start)
    return int(delta.total_seconds() * 1000)
