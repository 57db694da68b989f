"""
Calendar-day helpers for streak bookkeeping

Streaks count calendar days in one fixed reference timezone
(STREAK_TIMEZONE), never in the server's local time. Timestamps stay
timezone-aware UTC.
"""

import logging
from datetime import datetime, date, timedelta
from typing import Optional
from zoneinfo import ZoneInfo

from gramps_memory.config import STREAK_TIMEZONE

logger = logging.getLogger(__name__)


def now_utc() -> datetime:
    """
    Get current datetime in UTC (timezone-aware)

    Returns:
        Current datetime in UTC with timezone info
    """
    return datetime.now(ZoneInfo("UTC"))


def reference_timezone() -> ZoneInfo:
    """Timezone that decides where one streak day ends and the next begins"""
    return ZoneInfo(STREAK_TIMEZONE)


def today_reference(now: Optional[datetime] = None) -> date:
    """
    Get today's date in the reference timezone

    Args:
        now: Aware datetime to convert instead of the current time

    Returns:
        Calendar date
    """
    if now is None:
        now = now_utc()
    elif now.tzinfo is None:
        now = now.replace(tzinfo=ZoneInfo("UTC"))
        logger.warning(f"Received naive datetime, assuming UTC: {now}")
    return now.astimezone(reference_timezone()).date()


def previous_day(day: date) -> date:
    """The calendar day before ``day``"""
    return day - timedelta(days=1)
