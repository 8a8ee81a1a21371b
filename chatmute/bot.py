"""
ChatMute - Main Bot Class
=========================

Discord client hosting the chat mute engine for one guild's shared
chat channel.
"""

from datetime import datetime
from typing import Optional

import discord
from discord.ext import commands

from chatmute.core.config import get_config
from chatmute.core.database import get_db
from chatmute.core.logger import logger
from chatmute.handlers import DatabaseSaveSlot, DiscordChatDelivery, DiscordPlayerDirectory
from chatmute.services import ChatMuteService


# =============================================================================
# ChatMuteBot Class
# =============================================================================

class ChatMuteBot(commands.Bot):
    """
    Main Discord bot class.

    DESIGN: The mute service is built and started in setup_hook, before
    any command or message can reach it, and stopped in close() so the
    final save happens on every shutdown path.

    SERVICE INITIALIZATION ORDER:
    1. setup_hook (before on_ready):
       - Port adapters and ChatMuteService (loads persisted mutes)
       - Command cog loading
       - Command tree syncing to the guild
    2. on_ready:
       - Known players roster refresh
       - Error webhook
    """

    # =========================================================================
    # Initialization
    # =========================================================================

    def __init__(self) -> None:
        """Initialize the bot with the intents the chat gate needs."""
        self.config = get_config()

        intents = discord.Intents.default()
        intents.message_content = True
        intents.members = True
        intents.presences = True

        super().__init__(
            command_prefix="!",
            intents=intents,
            help_command=None,
        )

        self.db = get_db()
        self.start_time: datetime = datetime.now()

        self.player_directory: Optional[DiscordPlayerDirectory] = None
        self.mute_service: Optional[ChatMuteService] = None

        # Ready state guard
        self._ready_initialized: bool = False

        logger.info("Bot Instance Created")

    # =========================================================================
    # Setup Hook
    # =========================================================================

    async def setup_hook(self) -> None:
        """Start the mute service, load cogs and sync commands."""
        self.player_directory = DiscordPlayerDirectory(self, self.config.guild_id, self.db)
        self.mute_service = ChatMuteService(
            directory=self.player_directory,
            delivery=DiscordChatDelivery(self.player_directory),
            slot=DatabaseSaveSlot(self.db, str(self.config.guild_id)),
            sweep_interval=self.config.mute_check_interval,
        )
        await self.mute_service.start()

        from chatmute.commands import COMMAND_COGS
        for cog in COMMAND_COGS:
            try:
                await self.load_extension(cog)
                logger.success(f"Cog Loaded: {cog.split('.')[-1]}")
            except Exception as e:
                logger.error("Failed to Load Cog", [("Cog", cog), ("Error", str(e))])

        guild = discord.Object(id=self.config.guild_id)
        try:
            self.tree.copy_global_to(guild=guild)
            synced = await self.tree.sync(guild=guild)
            logger.tree("Commands Synced", [
                ("Guild", str(self.config.guild_id)),
                ("Count", str(len(synced))),
            ], emoji="✅")
        except discord.HTTPException as e:
            logger.error("Command Sync Failed", [("Error", str(e))])

    # =========================================================================
    # On Ready
    # =========================================================================

    async def on_ready(self) -> None:
        """Refresh the roster and enable the error webhook."""
        if self._ready_initialized:
            logger.info("Bot Reconnected (skipping re-initialization)")
            return

        self._ready_initialized = True

        if not self.user:
            return

        if self.config.error_webhook_url:
            logger.set_webhook(self.config.error_webhook_url)

        recorded = self.player_directory.record_roster() if self.player_directory else 0
        guild = self.get_guild(self.config.guild_id)

        logger.tree("BOT ONLINE", [
            ("Name", self.user.name),
            ("ID", str(self.user.id)),
            ("Guild", guild.name if guild else "Not Found"),
            ("Players Recorded", str(recorded)),
        ], emoji="🚀")

        if guild is None:
            logger.warning("Configured Guild Not Found", [
                ("Guild ID", str(self.config.guild_id)),
            ])

    # =========================================================================
    # Shutdown
    # =========================================================================

    async def close(self) -> None:
        """Stop the mute service, save, and close the database."""
        logger.info("Shutting Down")

        if self.mute_service and self.mute_service.started:
            await self.mute_service.stop()

        await super().close()
        self.db.close()

        logger.tree("BOT SHUTDOWN", [
            ("Uptime", str(datetime.now() - self.start_time).split(".")[0]),
        ], emoji="🛑")


# =============================================================================
# Module Export
# =============================================================================

__all__ = ["ChatMuteBot"]
