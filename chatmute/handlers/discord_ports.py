"""
ChatMute - Discord Port Adapters
================================

Discord implementations of the engine's host capabilities.

DESIGN:
    A subject id is the member's Discord user ID as a string. A player
    is "online" when their presence is anything but offline, which
    requires the presences intent. The guild is looked up on every call
    so adapters built before the gateway is ready still work afterwards.
"""

import re
from typing import TYPE_CHECKING, Iterable, Optional

import discord

from chatmute.core.logger import logger

if TYPE_CHECKING:
    from discord.ext import commands
    from chatmute.core.database import DatabaseManager


MENTION_PATTERN = re.compile(r"<@!?([0-9]+)>|([0-9]{15,20})")
"""User mention or raw snowflake ID."""


def parse_user_id(text: str) -> Optional[int]:
    """Extract a user ID from a mention or raw snowflake, else None."""
    match = MENTION_PATTERN.fullmatch(text.strip())
    if not match:
        return None
    return int(match.group(1) or match.group(2))


def member_names(member: discord.Member) -> Iterable[str]:
    """Every name a member may be addressed by."""
    return (
        name
        for name in (member.name, member.global_name, member.display_name)
        if name
    )


def _matches(member: discord.Member, wanted: str) -> bool:
    return any(name.casefold() == wanted for name in member_names(member))


def _is_online(member: discord.Member) -> bool:
    return member.status != discord.Status.offline


# =============================================================================
# Player Directory
# =============================================================================

class DiscordPlayerDirectory:
    """
    Resolves names through guild members and the known players registry.

    Attributes:
        bot: Bot used to reach the guild cache.
        guild_id: Guild being moderated.
        db: Database holding the known players registry.
    """

    def __init__(self, bot: "commands.Bot", guild_id: int, db: "DatabaseManager") -> None:
        self.bot = bot
        self.guild_id = guild_id
        self.db = db

    def _guild(self) -> Optional[discord.Guild]:
        return self.bot.get_guild(self.guild_id)

    def get_member(self, subject_id: str) -> Optional[discord.Member]:
        """Cached guild member for a subject id, or None."""
        guild = self._guild()
        if guild is None:
            return None
        try:
            return guild.get_member(int(subject_id))
        except ValueError:
            return None

    def find_online(self, name: str) -> Optional[str]:
        guild = self._guild()
        if guild is None:
            return None

        user_id = parse_user_id(name)
        if user_id is not None:
            member = guild.get_member(user_id)
            return str(member.id) if member and _is_online(member) else None

        wanted = name.casefold()
        for member in guild.members:
            if _is_online(member) and _matches(member, wanted):
                return str(member.id)
        return None

    def find_by_last_known_name(self, name: str) -> Optional[str]:
        return self.db.get_player_by_last_known_name(name)

    def find_offline(self, name: str) -> Optional[str]:
        user_id = parse_user_id(name)
        guild = self._guild()

        if user_id is not None:
            if guild is not None and guild.get_member(user_id):
                return str(user_id)
            if self.db.get_player_name(str(user_id)):
                return str(user_id)
            return None

        if guild is None:
            return None

        wanted = name.casefold()
        for member in guild.members:
            if _matches(member, wanted):
                return str(member.id)
        return None

    def get_name(self, subject_id: str) -> Optional[str]:
        member = self.get_member(subject_id)
        if member is not None:
            return member.display_name
        return self.db.get_player_name(subject_id)

    def record_roster(self) -> int:
        """
        Remember the current name of every guild member.

        Returns:
            Number of members recorded.
        """
        guild = self._guild()
        if guild is None:
            return 0
        return self.db.record_players(
            (str(member.id), member.name)
            for member in guild.members
            if not member.bot
        )


# =============================================================================
# Chat Delivery
# =============================================================================

class DiscordChatDelivery:
    """
    Notifies players by direct message.

    Attributes:
        directory: Used to find the member behind a subject id.
    """

    def __init__(self, directory: DiscordPlayerDirectory) -> None:
        self.directory = directory

    def is_connected(self, subject_id: str) -> bool:
        member = self.directory.get_member(subject_id)
        return member is not None and _is_online(member)

    async def notify(self, subject_id: str, text: str) -> None:
        member = self.directory.get_member(subject_id)
        if member is None:
            return
        try:
            await member.send(text)
        except discord.Forbidden:
            logger.warning("Notification Blocked (DMs closed)", [
                ("User", str(member)),
                ("User ID", subject_id),
            ])
        except discord.HTTPException as e:
            logger.warning("Notification Failed", [
                ("User", str(member)),
                ("Error", str(e)[:100]),
            ])


# =============================================================================
# Save Slot
# =============================================================================

class DatabaseSaveSlot:
    """
    Save slot backed by the save_data table, scoped to one guild.

    Attributes:
        db: Database manager.
        scope: Prefix separating worlds, normally the guild ID.
    """

    def __init__(self, db: "DatabaseManager", scope: str) -> None:
        self.db = db
        self.scope = scope

    def _key(self, key: str) -> str:
        return f"{self.scope}:{key}"

    def get(self, key: str) -> Optional[bytes]:
        return self.db.get_data(self._key(key))

    def set(self, key: str, data: bytes) -> None:
        self.db.store_data(self._key(key), data)


__all__ = [
    "MENTION_PATTERN",
    "parse_user_id",
    "member_names",
    "DiscordPlayerDirectory",
    "DiscordChatDelivery",
    "DatabaseSaveSlot",
]
