"""
ChatMute - Commands Package
===========================

Slash command cogs, loaded by the bot with load_extension().

Available Commands:
    /mute: Mute a player in the chat channel for a duration (moderator)
    /unmute: Remove a player's chat mute (moderator)
    /mutelist: List muted players and their remaining time (moderator)
"""

# =============================================================================
# Command Cog Registry
# =============================================================================

COMMAND_COGS = [
    "chatmute.commands.mute",
]

__all__ = ["COMMAND_COGS"]
