"""
ChatMute - Mute Service
=======================

Engine facade used by the host: mute, unmute, list, and the chat gate.

DESIGN:
    One instance per process, constructed explicitly at startup and torn
    down at shutdown: start() loads persisted mutes and starts the sweep,
    stop() halts the sweep and writes a final save.

    Command methods never raise. Every outcome, including bad input and
    unknown players, comes back as a CommandResult for the host to show.
    Host failures (directory lookups, notifications) are logged and
    treated as "not found" or "not delivered".
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Sequence, Tuple

from chatmute.core.constants import MUTE_CHECK_INTERVAL, MUTE_DATA_KEY
from chatmute.core.logger import logger
from chatmute.core.strings import get_string
from chatmute.services.mute_scheduler import MuteScheduler
from chatmute.services.mute_store import Clock, MuteStore, utc_now
from chatmute.services.persistence import MutePersistence
from chatmute.services.ports import ChatDelivery, PlayerDirectory, SaveSlot
from chatmute.utils.duration import parse_duration
from chatmute.utils.time_format import format_duration_friendly, format_time_remaining


# =============================================================================
# Result Types
# =============================================================================

@dataclass
class CommandResult:
    """Outcome of an administrative command."""
    success: bool
    message: str


@dataclass
class ChatGateResult:
    """Decision for one chat message."""
    allowed: bool
    notification: Optional[str] = None
    expires_at: Optional[datetime] = None


# =============================================================================
# Mute Service
# =============================================================================

class ChatMuteService:
    """
    Mute engine bound to a host's directory, delivery and save slot.

    Attributes:
        store: In-memory mute table.
        persistence: Load/save of the table through the save slot.
        scheduler: Background expiry sweep.
        directory: Player name and identity lookups.
        delivery: Direct notifications to players.
        started: Whether start() has completed.
    """

    # =========================================================================
    # Initialization
    # =========================================================================

    def __init__(
        self,
        directory: PlayerDirectory,
        delivery: ChatDelivery,
        slot: SaveSlot,
        sweep_interval: float = MUTE_CHECK_INTERVAL,
        clock: Clock = utc_now,
        data_key: str = MUTE_DATA_KEY,
    ) -> None:
        self.directory = directory
        self.delivery = delivery
        self.store = MuteStore(clock=clock)
        self.persistence = MutePersistence(self.store, slot, key=data_key)
        self.scheduler = MuteScheduler(self.store, self.persistence, interval=sweep_interval)
        self.started: bool = False

    # =========================================================================
    # Lifecycle Management
    # =========================================================================

    async def start(self) -> None:
        """Load persisted mutes, then start the expiry sweep."""
        loaded = self.persistence.load()
        await self.scheduler.start()
        self.started = True

        logger.tree("Mute Service Started", [
            ("Active Mutes", str(loaded)),
            ("Sweep Interval", f"{self.scheduler.interval}s"),
        ], emoji="🔇")

    async def stop(self) -> None:
        """Stop the expiry sweep and save the current table."""
        await self.scheduler.stop()
        saved = self.persistence.save()
        self.started = False

        logger.tree("Mute Service Stopped", [
            ("Active Mutes", str(len(self.store.list_active()))),
            ("Saved", "Yes" if saved else "No"),
        ], emoji="🛑")

    # =========================================================================
    # Player Resolution
    # =========================================================================

    def resolve_player(self, name: str) -> Optional[str]:
        """
        Resolve a display name to a subject id.

        Tries the online roster, then the last-known-name registry, then
        the offline roster. A lookup that raises is logged and skipped.

        Args:
            name: Name typed by the moderator.

        Returns:
            Subject id, or None if no step found the player.
        """
        steps: List[Tuple[str, Callable[[str], Optional[str]]]] = [
            ("Online", self.directory.find_online),
            ("Last Known Name", self.directory.find_by_last_known_name),
            ("Offline", self.directory.find_offline),
        ]
        for step_name, lookup in steps:
            try:
                subject_id = lookup(name)
            except Exception as e:
                logger.warning("Player Lookup Failed", [
                    ("Name", name),
                    ("Step", step_name),
                    ("Error", str(e)[:100]),
                ])
                continue
            if subject_id:
                return subject_id
        return None

    def get_player_name(self, subject_id: str) -> Optional[str]:
        """Last known display name for a subject id, or None."""
        try:
            return self.directory.get_name(subject_id)
        except Exception as e:
            logger.warning("Player Name Lookup Failed", [
                ("Subject", subject_id),
                ("Error", str(e)[:100]),
            ])
            return None

    async def _notify_if_connected(self, subject_id: str, text: str) -> bool:
        """Send a notification if the player is connected; never raises."""
        try:
            if not self.delivery.is_connected(subject_id):
                return False
            await self.delivery.notify(subject_id, text)
            return True
        except Exception as e:
            logger.warning("Player Notification Failed", [
                ("Subject", subject_id),
                ("Error", str(e)[:100]),
            ])
            return False

    # =========================================================================
    # Commands
    # =========================================================================

    async def mute(
        self,
        target: str,
        durations: Sequence[str],
        moderator: Optional[str] = None,
    ) -> CommandResult:
        """
        Mute a player for the given duration tokens.

        Re-muting a muted player replaces the expiry.

        Args:
            target: Player name as typed.
            durations: One to three tokens like "1d", "12h", "30m".
            moderator: Name of the moderator, for the log.

        Returns:
            Confirmation with the applied duration, or an error.
        """
        total_minutes = parse_duration(durations)
        if total_minutes is None:
            return CommandResult(False, get_string("mute.error_duration"))

        subject_id = self.resolve_player(target)
        if subject_id is None:
            return CommandResult(False, get_string("mute.error_not_found", player=target))

        expires_at = self.store.clock() + timedelta(minutes=total_minutes)
        self.store.put(subject_id, expires_at)
        self.persistence.save()

        duration_text = format_duration_friendly(total_minutes)
        notified = await self._notify_if_connected(
            subject_id,
            get_string("mute.notify_duration", duration=duration_text),
        )

        logger.tree("PLAYER MUTED", [
            ("Player", target),
            ("Subject", subject_id),
            ("Duration", duration_text),
            ("Expires", expires_at.isoformat(timespec="seconds")),
            ("Moderator", moderator or "Unknown"),
            ("Notified", "Yes" if notified else "No"),
        ], emoji="🔇")

        return CommandResult(True, get_string("mute.success", player=target, duration=duration_text))

    async def unmute(self, target: str, moderator: Optional[str] = None) -> CommandResult:
        """
        Remove a player's mute.

        Args:
            target: Player name as typed.
            moderator: Name of the moderator, for the log.

        Returns:
            Confirmation, or an error if the player is unknown or not muted.
        """
        subject_id = self.resolve_player(target)
        if subject_id is None:
            return CommandResult(False, get_string("mute.error_not_found", player=target))

        if not self.store.remove(subject_id):
            return CommandResult(False, get_string("unmute.error_not_muted", player=target))

        self.persistence.save()

        notified = await self._notify_if_connected(subject_id, get_string("unmute.notify"))

        logger.tree("PLAYER UNMUTED", [
            ("Player", target),
            ("Subject", subject_id),
            ("Moderator", moderator or "Unknown"),
            ("Notified", "Yes" if notified else "No"),
        ], emoji="🔊")

        return CommandResult(True, get_string("unmute.success", player=target))

    def mute_list(self) -> CommandResult:
        """
        List every active mute with its remaining time.

        Returns:
            A header with the count followed by one line per player,
            soonest expiry first, or the "nobody muted" message.
        """
        entries = self.store.list_active()
        if not entries:
            return CommandResult(True, get_string("mutelist.empty"))

        now = self.store.clock()
        lines = [get_string("mutelist.header", count=len(entries))]
        for entry in sorted(entries, key=lambda e: e.expires_at):
            name = self.get_player_name(entry.subject_id) or get_string("mutelist.unknown_player")
            lines.append(get_string(
                "mutelist.entry",
                player=name,
                remaining=format_time_remaining(entry.remaining(now)),
            ))

        return CommandResult(True, "\n".join(lines))

    # =========================================================================
    # Chat Gate
    # =========================================================================

    def check_chat(self, sender_id: str) -> ChatGateResult:
        """
        Decide whether a chat message from this sender is delivered.

        Args:
            sender_id: Subject id of the message author.

        Returns:
            Allowed, or denied with the remaining-time notification.
        """
        expires_at = self.store.get_active(sender_id)
        if expires_at is None:
            return ChatGateResult(allowed=True)

        remaining = format_time_remaining(expires_at - self.store.clock())
        return ChatGateResult(
            allowed=False,
            notification=get_string("mute.notify_remaining", remaining=remaining),
            expires_at=expires_at,
        )


__all__ = ["CommandResult", "ChatGateResult", "ChatMuteService"]
