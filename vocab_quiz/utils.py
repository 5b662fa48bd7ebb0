"""
Utility functions for the vocabulary quiz service
"""

import logging
from datetime import date, datetime
from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)


def to_date(value: date | datetime) -> date:
    """Normalize a date or datetime to a calendar date (midnight)"""
    if isinstance(value, datetime):
        return value.date()
    return value


def today_in_timezone(timezone: str = "UTC") -> date:
    """Current calendar date in the given timezone"""
    return datetime.now(ZoneInfo(timezone)).date()


def days_between(earlier: date | datetime, later: date | datetime) -> int:
    """Whole calendar days from earlier to later (negative if later is before)"""
    return (to_date(later) - to_date(earlier)).days


def format_progress_stats(progress: dict) -> str:
    """Format learner progress for console output"""
    xp = progress.get("experience_points", 0)
    current = progress.get("current_streak", 0)
    longest = progress.get("longest_streak", 0)
    last_studied = progress.get("last_studied_date")

    result = "Progress:\n"
    result += f"  XP: {xp}\n"
    result += f"  Streak: {current} day(s) (longest {longest})\n"
    if last_studied:
        result += f"  Last studied: {last_studied}\n"

    return result.strip()
