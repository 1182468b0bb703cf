"""
DateTime Utilities
==================

Timezone and ISO 8601 helpers shared by the document mapper.

Functions:
- get_timezone(): Resolve a timezone name to a tzinfo (UTC fallback)
- parse_iso(): Parse an ISO 8601 string, raising ValueError on bad input
- to_local_date(): Calendar date of a datetime in a given timezone
- to_naive_utc(): Normalise an aware datetime to naive UTC
"""
import logging
from datetime import date, datetime, timezone as dt_timezone, tzinfo
from typing import Optional

import zoneinfo

logger = logging.getLogger(__name__)


def get_timezone(tz_name: str) -> tzinfo:
    """
    Get a timezone object from its name.
    Returns UTC if the name is unknown.
    """
    if tz_name.upper() == "UTC":
        return dt_timezone.utc

    try:
        return zoneinfo.ZoneInfo(tz_name)
    except (zoneinfo.ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Invalid timezone '{tz_name}', falling back to UTC")
        return dt_timezone.utc


def parse_iso(dt_str: str) -> datetime:
    """
    Parse ISO 8601 string to datetime object.

    Naive strings stay naive; strings with an offset or a trailing "Z" are
    returned timezone-aware.

    Args:
        dt_str: ISO 8601 string (e.g., "2019-03-01T10:30:00" or "2019-03-01T10:30:00Z")

    Returns:
        Parsed datetime

    Raises:
        ValueError: If the string is not ISO 8601
    """
    # Replace 'Z' with '+00:00' for parsing
    normalized = dt_str.strip()
    if normalized.endswith("Z"):
        normalized = normalized[:-1] + "+00:00"
    return datetime.fromisoformat(normalized)


def to_local_date(dt: datetime, tz: Optional[tzinfo] = None) -> date:
    """
    Calendar date of a datetime, as seen at local midnight.

    Aware datetimes are shifted to ``tz`` first; naive ones are already
    local wall-clock time and are used as-is.
    """
    if dt.tzinfo is not None and tz is not None:
        dt = dt.astimezone(tz)
    return dt.date()


def to_naive_utc(dt: datetime) -> datetime:
    """
    Aware datetime -> naive UTC; naive datetimes are returned unchanged.

    BSON stores UTC instants without an offset and the mapper reads them back
    naive, so aware values are normalised before they reach the database.
    """
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(dt_timezone.utc).replace(tzinfo=None)
