"""
ChatMute - Mute Store
=====================

Thread-safe mapping from subject id to absolute mute expiry.

DESIGN:
    A plain dict guarded by one lock. Every operation takes the lock for
    its whole read-modify-write, so an expired entry removed by a read
    can't be resurrected by a concurrent reader. Expiry is judged against
    an injectable clock so tests can move time forward without sleeping.

    Stale entries (expiry at or before now) are invisible to every read
    path and are removed lazily on lookup or in bulk by sweep_expired().
"""

import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Iterable, List, Optional, Tuple


# =============================================================================
# Clock
# =============================================================================

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


# =============================================================================
# Entry Type
# =============================================================================

@dataclass(frozen=True)
class MuteEntry:
    """An active mute as returned by list_active()."""
    subject_id: str
    expires_at: datetime

    def remaining(self, now: datetime) -> timedelta:
        """Time left before the mute expires (zero once expired)."""
        return max(self.expires_at - now, timedelta(0))


# =============================================================================
# Mute Store
# =============================================================================

class MuteStore:
    """
    Concurrency-safe store of mute expiries.

    Attributes:
        clock: Callable returning the current aware UTC datetime.
    """

    def __init__(self, clock: Clock = utc_now) -> None:
        self.clock = clock
        self._mutes: Dict[str, datetime] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._mutes)

    # =========================================================================
    # Single-Key Operations
    # =========================================================================

    def put(self, subject_id: str, expires_at: datetime) -> None:
        """Insert or overwrite the expiry for a subject."""
        with self._lock:
            self._mutes[subject_id] = expires_at

    def get_active(self, subject_id: str) -> Optional[datetime]:
        """
        Get the expiry for a subject if the mute is still active.

        An expired entry is removed before returning None.

        Args:
            subject_id: Stable player identity.

        Returns:
            Expiry datetime, or None when not muted.
        """
        with self._lock:
            expires_at = self._mutes.get(subject_id)
            if expires_at is None:
                return None
            if expires_at > self.clock():
                return expires_at
            del self._mutes[subject_id]
            return None

    def remove(self, subject_id: str) -> bool:
        """
        Remove a subject's entry, active or stale.

        Returns:
            True if an entry existed.
        """
        with self._lock:
            return self._mutes.pop(subject_id, None) is not None

    # =========================================================================
    # Bulk Operations
    # =========================================================================

    def list_active(self) -> List[MuteEntry]:
        """Snapshot of every mute whose expiry is still in the future."""
        with self._lock:
            now = self.clock()
            return [
                MuteEntry(subject_id, expires_at)
                for subject_id, expires_at in self._mutes.items()
                if expires_at > now
            ]

    def sweep_expired(self) -> int:
        """
        Remove every entry whose expiry is at or before now.

        Returns:
            Number of entries removed.
        """
        with self._lock:
            now = self.clock()
            expired = [
                subject_id
                for subject_id, expires_at in self._mutes.items()
                if expires_at <= now
            ]
            for subject_id in expired:
                del self._mutes[subject_id]
            return len(expired)

    def snapshot(self) -> List[Tuple[str, datetime]]:
        """All stored entries, stale ones included, for persistence."""
        with self._lock:
            return list(self._mutes.items())

    def load(self, entries: Iterable[Tuple[str, datetime]]) -> int:
        """
        Replace the store contents with persisted entries.

        Entries already expired are discarded.

        Returns:
            Number of entries kept.
        """
        with self._lock:
            now = self.clock()
            self._mutes = {
                subject_id: expires_at
                for subject_id, expires_at in entries
                if expires_at > now
            }
            return len(self._mutes)

    def clear(self) -> None:
        """Drop every entry."""
        with self._lock:
            self._mutes.clear()


__all__ = ["Clock", "utc_now", "MuteEntry", "MuteStore"]
