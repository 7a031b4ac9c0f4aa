"""
DateTime utilities.

Persisted timestamps (attendee records, identifier side index) are UTC.
Timestamps returned by the API are rendered in the timezone configured by
LOCAL_TIMEZONE.

Functions:
- utc_now(): timezone-aware UTC datetime for persistence
- ensure_utc(): normalize naive/aware datetimes read back from MongoDB
- to_iso(): datetime -> ISO 8601 string in the application timezone
"""
# Standard library imports
import logging
import zoneinfo
from datetime import datetime, timezone as dt_timezone, tzinfo
from typing import Optional

# Local application imports
from ..core.config import get_settings

logger = logging.getLogger(__name__)


def _get_app_timezone() -> tzinfo:
    """
    Get the application timezone from config.
    Returns timezone object (defaults to UTC if invalid).
    """
    tz_str = get_settings().local_timezone

    if tz_str.upper() == "UTC":
        return dt_timezone.utc

    try:
        return zoneinfo.ZoneInfo(tz_str)
    except (zoneinfo.ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Invalid timezone '{tz_str}', falling back to UTC")
        return dt_timezone.utc


def utc_now() -> datetime:
    """
    Get current UTC time as a timezone-aware datetime.

    Use this for all timestamps that will be persisted to MongoDB (BSON Date).
    """
    return datetime.now(dt_timezone.utc)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Normalize a datetime into a timezone-aware UTC datetime.

    - If dt is None -> None
    - If dt is naive -> assume it represents UTC (this matches MongoDB/PyMongo behavior)
    - If dt is aware -> convert to UTC
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=dt_timezone.utc)
    return dt.astimezone(dt_timezone.utc)


def to_iso(dt: Optional[datetime]) -> Optional[str]:
    """
    Convert datetime object to ISO 8601 string in the application timezone.
    Naive datetimes are treated as UTC (as read from MongoDB).

    Returns:
        ISO 8601 formatted string (e.g. "2025-12-24T10:30:00Z"), or None if dt is None
    """
    if dt is None:
        return None

    dt = ensure_utc(dt).astimezone(_get_app_timezone())

    if dt.utcoffset() == dt_timezone.utc.utcoffset(None):
        return dt.replace(microsecond=0).isoformat().replace("+00:00", "Z")
    return dt.replace(microsecond=0).isoformat()
