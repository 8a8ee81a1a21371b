"""
ChatMute - Save Data Operations Mixin
=====================================

Opaque blob storage used as the durable save slot.
"""

import time
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .manager import DatabaseManager


class SaveDataMixin:
    """Mixin for save slot operations."""

    def get_data(self: "DatabaseManager", key: str) -> Optional[bytes]:
        """
        Get a stored blob.

        Args:
            key: Slot key.

        Returns:
            Stored bytes, or None if the key was never written.
        """
        row = self.fetchone("SELECT data FROM save_data WHERE key = ?", (key,))
        return bytes(row["data"]) if row else None

    def store_data(self: "DatabaseManager", key: str, data: bytes) -> None:
        """
        Store a blob, replacing any previous value.

        Args:
            key: Slot key.
            data: Bytes to store.
        """
        self.execute(
            "INSERT OR REPLACE INTO save_data (key, data, updated_at) VALUES (?, ?, ?)",
            (key, data, time.time())
        )


__all__ = ["SaveDataMixin"]
