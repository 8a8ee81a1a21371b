"""
ChatMute - Database Schema
==========================

Table definitions.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from chatmute.core.database.manager import DatabaseManager


class SchemaMixin:
    """Mixin for database schema initialization."""

    def _init_tables(self: "DatabaseManager") -> None:
        """
        Initialize all database tables.

        DESIGN: Tables are created if not exist, allowing safe restarts.
        """
        conn = self._ensure_connection()
        cursor = conn.cursor()

        # -----------------------------------------------------------------
        # Save Data Table
        # DESIGN: Opaque blobs keyed by "<scope>:<name>"
        # -----------------------------------------------------------------
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS save_data (
                key TEXT PRIMARY KEY,
                data BLOB NOT NULL,
                updated_at REAL NOT NULL
            )
        """)

        # -----------------------------------------------------------------
        # Known Players Table
        # DESIGN: Last name each player was seen with, for offline lookups
        # -----------------------------------------------------------------
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS known_players (
                subject_id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                name_lower TEXT NOT NULL,
                last_seen REAL NOT NULL
            )
        """)
        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_known_players_name
            ON known_players(name_lower, last_seen)
        """)

        conn.commit()


__all__ = ["SchemaMixin"]
