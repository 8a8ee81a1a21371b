"""
ChatMute - Centralized Constants
================================

All magic numbers and constants are defined here for maintainability.
Import from this module instead of hardcoding values.
"""

# =============================================================================
# Time Constants
# =============================================================================

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 86400

MINUTES_PER_HOUR = 60
MINUTES_PER_DAY = 1440

# =============================================================================
# Duration Parsing
# =============================================================================

# Inclusive caps per duration token unit
MAX_DURATION_DAYS = 365
MAX_DURATION_HOURS = 24
MAX_DURATION_MINUTES = 60

# Minutes contributed by one of each unit
DURATION_UNIT_MINUTES = {
    "d": MINUTES_PER_DAY,
    "h": MINUTES_PER_HOUR,
    "m": 1,
}

DURATION_UNIT_CAPS = {
    "d": MAX_DURATION_DAYS,
    "h": MAX_DURATION_HOURS,
    "m": MAX_DURATION_MINUTES,
}

# /mute accepts one required and two optional duration tokens
MAX_DURATION_TOKENS = 3

# =============================================================================
# Persistence
# =============================================================================

# Save slot key holding the encoded mute table
MUTE_DATA_KEY = "chatmute_data"

# Longest subject id the record format can hold (unsigned 16-bit length)
MAX_KEY_BYTES = 0xFFFF

# =============================================================================
# Interval Constants (in seconds)
# =============================================================================

MUTE_CHECK_INTERVAL = 30
MIN_MUTE_CHECK_INTERVAL = 5
MAX_MUTE_CHECK_INTERVAL = 3600

# =============================================================================
# Database
# =============================================================================

DB_CONNECTION_TIMEOUT = 30.0
SQLITE_BUSY_TIMEOUT = 5000

# =============================================================================
# Discord Limits
# =============================================================================

AUTOCOMPLETE_LIMIT = 25
MESSAGE_CONTENT_LIMIT = 2000


__all__ = [
    "SECONDS_PER_MINUTE",
    "SECONDS_PER_HOUR",
    "SECONDS_PER_DAY",
    "MINUTES_PER_HOUR",
    "MINUTES_PER_DAY",
    "MAX_DURATION_DAYS",
    "MAX_DURATION_HOURS",
    "MAX_DURATION_MINUTES",
    "DURATION_UNIT_MINUTES",
    "DURATION_UNIT_CAPS",
    "MAX_DURATION_TOKENS",
    "MUTE_DATA_KEY",
    "MAX_KEY_BYTES",
    "MUTE_CHECK_INTERVAL",
    "MIN_MUTE_CHECK_INTERVAL",
    "MAX_MUTE_CHECK_INTERVAL",
    "DB_CONNECTION_TIMEOUT",
    "SQLITE_BUSY_TIMEOUT",
    "AUTOCOMPLETE_LIMIT",
    "MESSAGE_CONTENT_LIMIT",
]
