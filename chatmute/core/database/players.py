"""
ChatMute - Known Players Mixin
==============================

Last-known-name registry backing offline player lookups.
"""

import time
from typing import TYPE_CHECKING, Iterable, Optional, Tuple

if TYPE_CHECKING:
    from .manager import DatabaseManager


class PlayersMixin:
    """Mixin for the known players registry."""

    def record_player(self: "DatabaseManager", subject_id: str, name: str) -> None:
        """
        Remember the name a player was last seen with.

        Args:
            subject_id: Stable player identity.
            name: Display name at the time of sighting.
        """
        self.execute(
            """INSERT OR REPLACE INTO known_players
               (subject_id, name, name_lower, last_seen) VALUES (?, ?, ?, ?)""",
            (subject_id, name, name.casefold(), time.time())
        )

    def record_players(self: "DatabaseManager", players: Iterable[Tuple[str, str]]) -> int:
        """
        Remember many (subject_id, name) pairs at once.

        Returns:
            Number of players recorded.
        """
        now = time.time()
        rows = [(subject_id, name, name.casefold(), now) for subject_id, name in players]
        if rows:
            self.executemany(
                """INSERT OR REPLACE INTO known_players
                   (subject_id, name, name_lower, last_seen) VALUES (?, ?, ?, ?)""",
                rows
            )
        return len(rows)

    def get_player_by_last_known_name(self: "DatabaseManager", name: str) -> Optional[str]:
        """
        Find the player most recently seen with this name.

        Args:
            name: Name to look up, case-insensitive.

        Returns:
            Subject id, or None if nobody used the name.
        """
        row = self.fetchone(
            """SELECT subject_id FROM known_players
               WHERE name_lower = ?
               ORDER BY last_seen DESC LIMIT 1""",
            (name.casefold(),)
        )
        return row["subject_id"] if row else None

    def get_player_name(self: "DatabaseManager", subject_id: str) -> Optional[str]:
        """Last known name for a subject id, or None."""
        row = self.fetchone(
            "SELECT name FROM known_players WHERE subject_id = ?",
            (subject_id,)
        )
        return row["name"] if row else None


__all__ = ["PlayersMixin"]
