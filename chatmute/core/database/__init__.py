"""
ChatMute - Database Module
==========================

SQLite storage for the mute save slot and the known players registry.
"""

from chatmute.core.database.manager import (
    DatabaseManager,
    get_db,
    DATA_DIR,
    DB_PATH,
)

__all__ = [
    "DatabaseManager",
    "get_db",
    "DATA_DIR",
    "DB_PATH",
]
