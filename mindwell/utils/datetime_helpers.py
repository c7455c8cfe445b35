"""
Standardized Date/Time Handling Utilities

CRITICAL RULES:
- Timestamps arriving without tzinfo are treated as UTC
- Activity days are calendar dates in the user's timezone
- The engine never reads the clock; callers resolve "today" here and pass it in
"""

import logging
from datetime import datetime, date
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from mindwell.config import DEFAULT_TIMEZONE

logger = logging.getLogger(__name__)


def get_zone(tz_str: Optional[str]) -> ZoneInfo:
    """
    Resolve an IANA timezone name, falling back to the default

    Args:
        tz_str: Timezone name (e.g. "Europe/Stockholm"), may be None

    Returns:
        ZoneInfo object
    """
    if not tz_str:
        return ZoneInfo(DEFAULT_TIMEZONE)

    try:
        return ZoneInfo(tz_str)
    except (ZoneInfoNotFoundError, ValueError) as e:
        logger.error(f"Invalid timezone '{tz_str}': {e}")
        return ZoneInfo(DEFAULT_TIMEZONE)


def now_utc() -> datetime:
    """
    Get current datetime in UTC (timezone-aware)

    Returns:
        Current datetime in UTC with timezone info
    """
    return datetime.now(ZoneInfo("UTC"))


def today_in_timezone(tz_str: Optional[str]) -> date:
    """
    Get today's date in the given timezone

    Args:
        tz_str: IANA timezone name

    Returns:
        Today's calendar date for that timezone
    """
    return now_utc().astimezone(get_zone(tz_str)).date()


def to_local_date(dt: datetime, tz_str: Optional[str]) -> date:
    """
    Convert a timestamp to the user's local calendar day

    Args:
        dt: Timestamp (naive values are assumed to be UTC)
        tz_str: User's IANA timezone

    Returns:
        Calendar date in the user's timezone (time of day discarded)
    """
    return ensure_utc(dt).astimezone(get_zone(tz_str)).date()


def ensure_utc(dt: datetime) -> datetime:
    """Attach UTC to naive timestamps so stored values always compare"""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=ZoneInfo("UTC"))
    return dt
