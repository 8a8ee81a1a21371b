"""
ChatMute - Services Package
===========================

The mute engine: store, persistence, expiry sweep and command facade.
"""

from chatmute.services.mute_store import MuteEntry, MuteStore
from chatmute.services.mute_scheduler import MuteScheduler
from chatmute.services.mute_service import ChatGateResult, ChatMuteService, CommandResult
from chatmute.services.persistence import MutePersistence

__all__ = [
    "MuteEntry",
    "MuteStore",
    "MuteScheduler",
    "MutePersistence",
    "ChatMuteService",
    "CommandResult",
    "ChatGateResult",
]
