"""
ChatMute - Host Capability Ports
================================

Narrow interfaces the mute engine needs from its host. The engine only
talks to these; Discord implementations live in chatmute.handlers.
"""

from typing import Optional, Protocol


class PlayerDirectory(Protocol):
    """Resolves display names to stable subject ids and back."""

    def find_online(self, name: str) -> Optional[str]:
        """Subject id of a connected player with this name."""
        ...

    def find_by_last_known_name(self, name: str) -> Optional[str]:
        """Subject id last seen using this name."""
        ...

    def find_offline(self, name: str) -> Optional[str]:
        """Subject id of any known player with this name."""
        ...

    def get_name(self, subject_id: str) -> Optional[str]:
        """Last known display name for a subject id."""
        ...


class ChatDelivery(Protocol):
    """Sends direct notifications to players."""

    def is_connected(self, subject_id: str) -> bool:
        """Whether the player is currently connected."""
        ...

    async def notify(self, subject_id: str, text: str) -> None:
        """Send a direct notification to a connected player."""
        ...


class SaveSlot(Protocol):
    """Durable key-value storage scoped to the current world."""

    def get(self, key: str) -> Optional[bytes]:
        ...

    def set(self, key: str, data: bytes) -> None:
        ...


__all__ = ["PlayerDirectory", "ChatDelivery", "SaveSlot"]
