"""
ChatMute - Message Templates
============================

User-facing text for commands, notifications and log entries.

Usage:
    from chatmute.core.strings import get_string

    text = get_string("mute.success", player="Bob", duration="1 hour(s), 0 minute(s)")
"""

from typing import Any, Dict


# =============================================================================
# String Table
# =============================================================================

STRINGS: Dict[str, str] = {
    # ---------------- Mute ----------------
    "mute.success": "🔇 Muted **{player}** for {duration}.",
    "mute.notify_duration": "🔇 You have been muted in chat for {duration}.",
    "mute.notify_remaining": "🔇 You are muted. Time remaining: {remaining}.",
    "mute.error_duration": (
        "❌ Invalid duration. Use one to three values like `1d`, `20h`, `45m` "
        "(max 365d, 24h and 60m per value)."
    ),
    "mute.error_not_found": "❌ Player **{player}** was not found.",

    # ---------------- Unmute ----------------
    "unmute.success": "🔊 Unmuted **{player}**.",
    "unmute.notify": "🔊 You have been unmuted and can chat again.",
    "unmute.error_not_muted": "❌ **{player}** is not muted.",

    # ---------------- Mute List ----------------
    "mutelist.empty": "Nobody is muted.",
    "mutelist.header": "🔇 Muted players ({count}):",
    "mutelist.entry": "• **{player}**: {remaining} remaining",
    "mutelist.unknown_player": "Unknown player",

    # ---------------- Common ----------------
    "common.no_permission": "❌ You don't have permission to use this command.",
    "common.not_ready": "❌ Mutes are not available yet, try again shortly.",

    # ---------------- Durations ----------------
    "duration.days": "{days} day(s), {hours} hour(s), {minutes} minute(s)",
    "duration.hours": "{hours} hour(s), {minutes} minute(s)",
    "duration.minutes": "{minutes} minute(s)",
    "remaining.minutes": "{minutes} minute(s), {seconds} second(s)",
}


def get_string(key: str, **fmt: Any) -> str:
    """
    Look up a template and format it.

    Unknown keys return the key itself so a missing entry shows up in
    chat instead of raising.

    Args:
        key: Template key, e.g. "mute.success".
        **fmt: Named values substituted into the template.

    Returns:
        Formatted text.
    """
    template = STRINGS.get(key, key)
    try:
        return template.format(**fmt) if fmt else template
    except (KeyError, IndexError, ValueError):
        return template


__all__ = ["STRINGS", "get_string"]
