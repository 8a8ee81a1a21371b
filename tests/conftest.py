"""
ChatMute - Test Fixtures
========================

Shared fixtures for all tests.
"""

import os
import tempfile
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Set, Tuple

import pytest

# Keep test log files out of the working tree; the logger reads this at import
os.environ.setdefault("CHATMUTE_LOG_DIR", tempfile.mkdtemp(prefix="chatmute-test-logs-"))


# =============================================================================
# Host Fakes
# =============================================================================

class FakeClock:
    """Settable clock returning aware UTC datetimes."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FakeDirectory:
    """
    In-memory player directory.

    Each lookup table maps a casefolded name to a subject id. Setting
    `failing` to a method name makes that lookup raise.
    """

    def __init__(self) -> None:
        self.online: Dict[str, str] = {}
        self.last_known: Dict[str, str] = {}
        self.offline: Dict[str, str] = {}
        self.names: Dict[str, str] = {}
        self.failing: Set[str] = set()

    def add_online(self, name: str, subject_id: str) -> None:
        self.online[name.casefold()] = subject_id
        self.names[subject_id] = name

    def add_offline(self, name: str, subject_id: str) -> None:
        self.offline[name.casefold()] = subject_id
        self.names[subject_id] = name

    def _lookup(self, method: str, table: Dict[str, str], name: str) -> Optional[str]:
        if method in self.failing:
            raise RuntimeError(f"{method} unavailable")
        return table.get(name.casefold())

    def find_online(self, name: str) -> Optional[str]:
        return self._lookup("find_online", self.online, name)

    def find_by_last_known_name(self, name: str) -> Optional[str]:
        return self._lookup("find_by_last_known_name", self.last_known, name)

    def find_offline(self, name: str) -> Optional[str]:
        return self._lookup("find_offline", self.offline, name)

    def get_name(self, subject_id: str) -> Optional[str]:
        if "get_name" in self.failing:
            raise RuntimeError("get_name unavailable")
        return self.names.get(subject_id)


class RecordingDelivery:
    """Chat delivery that records notifications instead of sending them."""

    def __init__(self) -> None:
        self.connected: Set[str] = set()
        self.sent: List[Tuple[str, str]] = []
        self.fail: bool = False

    def is_connected(self, subject_id: str) -> bool:
        return subject_id in self.connected

    async def notify(self, subject_id: str, text: str) -> None:
        if self.fail:
            raise RuntimeError("delivery failed")
        self.sent.append((subject_id, text))


class MemorySlot:
    """Save slot held in a dict, with switchable failures."""

    def __init__(self) -> None:
        self.data: Dict[str, bytes] = {}
        self.writes: int = 0
        self.fail_get: bool = False
        self.fail_set: bool = False

    def get(self, key: str) -> Optional[bytes]:
        if self.fail_get:
            raise OSError("slot unreadable")
        return self.data.get(key)

    def set(self, key: str, data: bytes) -> None:
        if self.fail_set:
            raise OSError("slot unwritable")
        self.data[key] = data
        self.writes += 1


# =============================================================================
# Engine Fixtures
# =============================================================================

START_TIME = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock():
    """Clock frozen at START_TIME until advanced."""
    return FakeClock(START_TIME)


@pytest.fixture
def store(clock):
    """Empty mute store on the fake clock."""
    from chatmute.services.mute_store import MuteStore
    return MuteStore(clock=clock)


@pytest.fixture
def slot():
    """Empty in-memory save slot."""
    return MemorySlot()


@pytest.fixture
def directory():
    """Empty player directory."""
    return FakeDirectory()


@pytest.fixture
def delivery():
    """Recording chat delivery."""
    return RecordingDelivery()


@pytest.fixture
def service(directory, delivery, slot, clock):
    """Mute service wired to the fakes (not started)."""
    from chatmute.services.mute_service import ChatMuteService
    return ChatMuteService(directory, delivery, slot, sweep_interval=0.01, clock=clock)


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture
def temp_db_path(tmp_path):
    """Create a temporary database path for testing."""
    return tmp_path / "test_chatmute.db"


@pytest.fixture
def test_db(temp_db_path, monkeypatch):
    """Create a fresh test database instance."""
    from chatmute.core.database import manager

    # Reset singleton and point it at the temp file
    manager.DatabaseManager._instance = None
    monkeypatch.setattr(manager, "DB_PATH", temp_db_path)
    monkeypatch.setattr(manager, "DATA_DIR", temp_db_path.parent)

    db = manager.DatabaseManager()

    yield db

    db.close()
    manager.DatabaseManager._instance = None


# =============================================================================
# Config Fixtures
# =============================================================================

GUILD_ID = 987654321
CHAT_CHANNEL_ID = 444555666
DEVELOPER_ID = 111111111


@pytest.fixture
def test_config(monkeypatch):
    """Install a known Config as the global instance."""
    from chatmute.core import config as config_module

    cfg = config_module.Config(
        discord_token="test-token",
        guild_id=GUILD_ID,
        chat_channel_id=CHAT_CHANNEL_ID,
        developer_id=DEVELOPER_ID,
        moderator_ids={222222222},
        moderation_role_id=333333333,
    )
    monkeypatch.setattr(config_module, "_config", cfg)
    return cfg
