"""
ChatMute - Duration Parsing
===========================

Parses the duration tokens given to /mute into a total minute count.

Usage:
    from chatmute.utils.duration import parse_duration

    minutes = parse_duration(["1d", "12h"])  # 2160
    minutes = parse_duration(["25h"])        # None (over the 24h cap)

DESIGN:
    Every token must be ASCII digits followed by one unit letter (d, h
    or m, any case) and stay within its unit cap. A single bad token
    fails the whole parse; earlier valid tokens are not kept.
"""

import re
from typing import Optional, Sequence

from chatmute.core.constants import (
    DURATION_UNIT_CAPS,
    DURATION_UNIT_MINUTES,
    MAX_DURATION_TOKENS,
)


# =============================================================================
# Token Grammar
# =============================================================================

TOKEN_PATTERN = re.compile(r"([0-9]+)([a-z])", re.IGNORECASE | re.ASCII)
"""Digits then exactly one letter; the unit itself is checked separately."""

DURATION_CHOICES = [
    ("10 minutes", "10m"),
    ("30 minutes", "30m"),
    ("1 hour", "1h"),
    ("6 hours", "6h"),
    ("12 hours", "12h"),
    ("1 day", "1d"),
    ("3 days", "3d"),
    ("7 days", "7d"),
    ("30 days", "30d"),
]
"""Preset durations offered by command autocomplete."""


# =============================================================================
# Parsing Functions
# =============================================================================

def parse_duration_token(token: str) -> Optional[int]:
    """
    Parse a single duration token into minutes.

    Args:
        token: Token such as "1d", "20H" or "45m".

    Returns:
        Minutes for the token, or None if it is malformed, uses an
        unknown unit, is zero, or exceeds its unit cap.

    Examples:
        >>> parse_duration_token("20h")
        1200
        >>> parse_duration_token("61m")
        None
    """
    match = TOKEN_PATTERN.fullmatch(token)
    if not match:
        return None

    value = int(match.group(1))
    unit = match.group(2).lower()

    cap = DURATION_UNIT_CAPS.get(unit)
    if cap is None or value <= 0 or value > cap:
        return None

    return value * DURATION_UNIT_MINUTES[unit]


def parse_duration(tokens: Sequence[str]) -> Optional[int]:
    """
    Parse one to three duration tokens into a total minute count.

    Tokens may come in any order and a unit may repeat; their minutes
    are summed.

    Args:
        tokens: Duration tokens, e.g. ["1d", "2h"].

    Returns:
        Positive total minutes, or None when any token is invalid or
        the token count is outside 1..3.

    Examples:
        >>> parse_duration(["1d", "2h"])
        1560
        >>> parse_duration(["2h", "1d"])
        1560
        >>> parse_duration(["10x"])
        None
    """
    if not tokens or len(tokens) > MAX_DURATION_TOKENS:
        return None

    total = 0
    for token in tokens:
        minutes = parse_duration_token(token)
        if minutes is None:
            return None
        total += minutes

    return total if total > 0 else None


# =============================================================================
# Module Export
# =============================================================================

__all__ = [
    "TOKEN_PATTERN",
    "DURATION_CHOICES",
    "parse_duration_token",
    "parse_duration",
]
