"""Data parsing utilities for controller API responses."""

import re
from datetime import datetime, timezone
from typing import Any, Optional

from .logger import get_logger

logger = get_logger(__name__)

# Go's RFC3339Nano emits up to nine fractional digits; datetime wants six
_FRACTION_RE = re.compile(r'\.(\d+)')


def _normalize_fraction(match: re.Match) -> str:
    return '.' + match.group(1)[:6].ljust(6, '0')


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp as reported by the daemon.

    Accepts a ``Z`` suffix or a numeric offset and any fraction precision.
    Naive timestamps are taken as UTC.

    Returns:
        An aware datetime, or None if the value cannot be parsed

    Example:
        >>> parse_timestamp('2024-01-01T00:00:01.123456789Z')
        datetime.datetime(2024, 1, 1, 0, 0, 1, 123456, tzinfo=datetime.timezone.utc)
    """
    if not isinstance(value, str) or not value:
        return None

    normalized = _FRACTION_RE.sub(_normalize_fraction, value.strip().replace('Z', '+00:00'), count=1)
    try:
        parsed = datetime.fromisoformat(normalized)
    except ValueError:
        logger.debug(f"Unparseable timestamp: {value}")
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_int(value: Any, default: int = 0) -> int:
    """Convert a numeric field to int, falling back to ``default``."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return default
