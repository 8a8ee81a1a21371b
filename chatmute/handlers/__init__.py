"""
ChatMute - Handlers Package
===========================

Discord adapters for the mute engine's host capabilities.
"""

from chatmute.handlers.discord_ports import (
    DatabaseSaveSlot,
    DiscordChatDelivery,
    DiscordPlayerDirectory,
)

__all__ = ["DatabaseSaveSlot", "DiscordChatDelivery", "DiscordPlayerDirectory"]
