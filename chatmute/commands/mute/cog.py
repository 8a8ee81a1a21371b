"""
ChatMute - Mute Cog
===================

Slash commands for muting, unmuting and listing mutes, plus the chat gate
that blocks messages from muted players in the shared channel.
"""

from typing import TYPE_CHECKING, Dict, Optional

import discord
from discord import app_commands
from discord.ext import commands

from chatmute.core.config import get_config, has_mod_role
from chatmute.core.constants import MESSAGE_CONTENT_LIMIT
from chatmute.core.database import get_db
from chatmute.core.logger import logger
from chatmute.core.strings import get_string
from chatmute.services.mute_service import ChatMuteService, CommandResult

from .autocomplete import AutocompleteMixin

if TYPE_CHECKING:
    from chatmute.bot import ChatMuteBot


class MuteCog(AutocompleteMixin, commands.Cog):
    """
    Moderation commands and chat gate for timed chat mutes.

    DESIGN:
        The cog holds no mute state; it forwards to the bot's
        ChatMuteService and turns its results into ephemeral replies.
        Permission is checked inside each command so a refusal is a
        normal reply, not an error raised into the command tree.

    Attributes:
        bot: Reference to the main bot instance.
        config: Bot configuration.
        db: Database manager.
    """

    # =========================================================================
    # Initialization
    # =========================================================================

    def __init__(self, bot: "ChatMuteBot") -> None:
        self.bot = bot
        self.config = get_config()
        self.db = get_db()

        # subject_id -> name last written to known_players
        self._recorded_names: Dict[str, str] = {}

    @property
    def service(self) -> Optional[ChatMuteService]:
        return self.bot.mute_service

    @property
    def _ready(self) -> bool:
        """Whether the mute service has loaded and is running."""
        return self.service is not None and self.service.started

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _deny_if_unauthorized(self, interaction: discord.Interaction) -> bool:
        """Reply and return True when the user may not use mute commands."""
        if has_mod_role(interaction.user):
            return False
        await interaction.response.send_message(get_string("common.no_permission"), ephemeral=True)
        return True

    async def _reply(self, interaction: discord.Interaction, result: CommandResult) -> None:
        """Send a command result as an ephemeral reply."""
        await interaction.response.send_message(result.message[:MESSAGE_CONTENT_LIMIT], ephemeral=True)

    def _remember_name(self, member: discord.abc.User) -> None:
        """Record a member's name in the registry when it changed."""
        subject_id = str(member.id)
        if self._recorded_names.get(subject_id) == member.name:
            return
        self.db.record_player(subject_id, member.name)
        self._recorded_names[subject_id] = member.name

    # =========================================================================
    # Mute Command
    # =========================================================================

    @app_commands.command(name="mute", description="Mute a player in the chat channel for a while")
    @app_commands.describe(
        target="Player name, mention or ID",
        duration="How long, e.g. 1d, 20h or 45m",
        duration2="Optional extra time, e.g. 12h",
        duration3="Optional extra time, e.g. 30m",
    )
    @app_commands.autocomplete(
        duration=AutocompleteMixin.duration_autocomplete,
        duration2=AutocompleteMixin.duration_autocomplete,
        duration3=AutocompleteMixin.duration_autocomplete,
    )
    async def mute(
        self,
        interaction: discord.Interaction,
        target: str,
        duration: str,
        duration2: Optional[str] = None,
        duration3: Optional[str] = None,
    ) -> None:
        """Mute a player for one to three duration values."""
        if await self._deny_if_unauthorized(interaction):
            return
        if not self._ready:
            await interaction.response.send_message(get_string("common.not_ready"), ephemeral=True)
            return

        durations = [d for d in (duration, duration2, duration3) if d is not None]
        result = await self.service.mute(target, durations, moderator=str(interaction.user))
        await self._reply(interaction, result)

    # =========================================================================
    # Unmute Command
    # =========================================================================

    @app_commands.command(name="unmute", description="Remove a player's chat mute")
    @app_commands.describe(target="Player name, mention or ID")
    async def unmute(self, interaction: discord.Interaction, target: str) -> None:
        """Unmute a player."""
        if await self._deny_if_unauthorized(interaction):
            return
        if not self._ready:
            await interaction.response.send_message(get_string("common.not_ready"), ephemeral=True)
            return

        result = await self.service.unmute(target, moderator=str(interaction.user))
        await self._reply(interaction, result)

    # =========================================================================
    # Mute List Command
    # =========================================================================

    @app_commands.command(name="mutelist", description="List muted players and their remaining time")
    async def mutelist(self, interaction: discord.Interaction) -> None:
        """List active mutes."""
        if await self._deny_if_unauthorized(interaction):
            return
        if not self._ready:
            await interaction.response.send_message(get_string("common.not_ready"), ephemeral=True)
            return

        await self._reply(interaction, self.service.mute_list())

    # =========================================================================
    # Chat Gate
    # =========================================================================

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message) -> None:
        """
        Block messages from muted players in the chat channel.

        Every guild message also refreshes the author's last known name.
        """
        if message.author.bot or message.guild is None:
            return
        if message.guild.id != self.config.guild_id:
            return

        self._remember_name(message.author)

        if message.channel.id != self.config.chat_channel_id or not self._ready:
            return

        result = self.service.check_chat(str(message.author.id))
        if result.allowed:
            return

        try:
            await message.delete()
        except discord.NotFound:
            pass
        except (discord.Forbidden, discord.HTTPException) as e:
            logger.error("Muted Message Delete Failed", [
                ("User", str(message.author)),
                ("Channel", str(message.channel.id)),
                ("Error", str(e)[:100]),
            ])

        try:
            await message.author.send(result.notification)
        except discord.Forbidden:
            logger.warning("Muted Notice Blocked (DMs closed)", [
                ("User", str(message.author)),
                ("User ID", str(message.author.id)),
            ])
        except discord.HTTPException as e:
            logger.warning("Muted Notice Failed", [
                ("User", str(message.author)),
                ("Error", str(e)[:100]),
            ])

        logger.tree("MUTED MESSAGE BLOCKED", [
            ("User", str(message.author)),
            ("User ID", str(message.author.id)),
            ("Expires", result.expires_at.isoformat(timespec="seconds") if result.expires_at else "Unknown"),
        ], emoji="🔇")


__all__ = ["MuteCog"]
