"""
ChatMute - Time Formatting Utils
================================

Human-readable rendering of applied durations and remaining mute time.

Features:
- Tiered output: days, then hours, then minutes
- Seconds shown only when less than an hour remains
- Negative values clamp to zero
"""

from datetime import timedelta

from chatmute.core.constants import (
    MINUTES_PER_DAY,
    MINUTES_PER_HOUR,
    SECONDS_PER_DAY,
    SECONDS_PER_HOUR,
    SECONDS_PER_MINUTE,
)
from chatmute.core.strings import get_string


def format_duration_friendly(total_minutes: int) -> str:
    """
    Format an applied mute duration.

    Args:
        total_minutes: Duration in whole minutes.

    Returns:
        Text such as "1 day(s), 12 hour(s), 0 minute(s)",
        "2 hour(s), 5 minute(s)" or "45 minute(s)".
    """
    total_minutes = max(total_minutes, 0)

    days: int = total_minutes // MINUTES_PER_DAY
    hours: int = (total_minutes % MINUTES_PER_DAY) // MINUTES_PER_HOUR
    minutes: int = total_minutes % MINUTES_PER_HOUR

    if days > 0:
        return get_string("duration.days", days=days, hours=hours, minutes=minutes)
    if hours > 0:
        return get_string("duration.hours", hours=hours, minutes=minutes)
    return get_string("duration.minutes", minutes=minutes)


def format_time_remaining(remaining: timedelta) -> str:
    """
    Format the time left on a mute.

    Args:
        remaining: Time until the mute expires.

    Returns:
        Text such as "1 day(s), 11 hour(s), 59 minute(s)",
        "3 hour(s), 0 minute(s)" or "4 minute(s), 30 second(s)".
    """
    total_seconds = max(int(remaining.total_seconds()), 0)

    days, rest = divmod(total_seconds, SECONDS_PER_DAY)
    hours, rest = divmod(rest, SECONDS_PER_HOUR)
    minutes, seconds = divmod(rest, SECONDS_PER_MINUTE)

    if days > 0:
        return get_string("duration.days", days=days, hours=hours, minutes=minutes)
    if hours > 0:
        return get_string("duration.hours", hours=hours, minutes=minutes)
    return get_string("remaining.minutes", minutes=minutes, seconds=seconds)


__all__ = ["format_duration_friendly", "format_time_remaining"]
