"""
ChatMute - Mute Package
=======================

Timed chat mutes with automatic expiry.

Structure:
    - autocomplete.py: Duration autocomplete handlers
    - cog.py: MuteCog with /mute, /unmute, /mutelist and the chat gate
"""

from typing import TYPE_CHECKING

from chatmute.core.logger import logger

from .cog import MuteCog

if TYPE_CHECKING:
    from chatmute.bot import ChatMuteBot

__all__ = ["MuteCog"]


async def setup(bot: "ChatMuteBot") -> None:
    """Load the MuteCog."""
    await bot.add_cog(MuteCog(bot))
    logger.tree("Mute Cog Loaded", [
        ("Commands", "/mute, /unmute, /mutelist"),
        ("Features", "timed mutes, chat gate, DM notify"),
    ], emoji="🔇")
