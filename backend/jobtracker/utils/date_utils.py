"""
Date helpers with explicit local-time semantics.

Stored dates are plain strings. A date-only value ("2024-01-15") means local
midnight of that calendar day, never UTC midnight, so it cannot drift to the
previous day when displayed in a negative-offset timezone.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Callable

_DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_date(date_string: str | None) -> datetime:
    """
    Parse a stored date string into a naive local datetime.

    Handles:
      - "2024-01-15"            → local midnight
      - "2024-01-15T10:30"      → local wall time
      - "2024-01-15T10:30:00Z"  → converted from UTC to local time

    An empty value yields the current local time. Raises ValueError on garbage.
    """
    if not date_string:
        return datetime.now()

    value = date_string.strip()
    if _DATE_ONLY.match(value):
        return datetime.strptime(value, "%Y-%m-%d")

    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def parse_datetime(date: str | None, time: str | None) -> datetime:
    """Combine a YYYY-MM-DD date and an HH:MM time as local wall time."""
    if not date:
        return datetime.now()
    return parse_date(f"{date.strip()}T{(time or '00:00').strip()}")


def safe_format_date(
    date_string: str | None,
    format_fn: Callable[[datetime], str],
    fallback: str = "N/A",
) -> str:
    """Format a stored date for display, returning the fallback for invalid input."""
    try:
        return format_fn(parse_date(date_string))
    except (ValueError, TypeError):
        return fallback


def now_iso() -> str:
    """Current UTC timestamp in ISO-8601 with a Z suffix, used for createdAt/updatedAt."""
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")
