#!/usr/bin/env python3
"""
ChatMute - Discord Bot Entry Point
==================================

Timed chat mutes for a Discord server's shared chat channel.

Features:
- Slash commands (/mute, /unmute, /mutelist)
- Muted messages removed from the chat channel with a DM reason
- Mutes persisted across restarts and expired automatically
"""

import asyncio
import sys

from dotenv import load_dotenv

# Logger reads CHATMUTE_LOG_DIR and LOG_TIMEZONE at import
load_dotenv()

import discord  # noqa: E402

from chatmute.bot import ChatMuteBot  # noqa: E402
from chatmute.core.config import ConfigValidationError, validate_and_log_config  # noqa: E402
from chatmute.core.logger import logger  # noqa: E402


async def main() -> None:
    """
    Main entry point for the ChatMute bot.

    Validates configuration, then runs the bot until it disconnects.

    Raises:
        SystemExit: If configuration is invalid or Discord rejects the login.
    """
    try:
        validate_and_log_config()
    except ConfigValidationError as e:
        logger.critical(f"Invalid configuration: {e}")
        sys.exit(1)

    bot = ChatMuteBot()
    try:
        async with bot:
            await bot.start(bot.config.discord_token)
    except (discord.LoginFailure, discord.PrivilegedIntentsRequired) as e:
        logger.critical(f"Discord login failed: {e}")
        sys.exit(1)


def run() -> None:
    """Console script entry point."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Bot stopped by user (Ctrl+C)")


if __name__ == "__main__":
    run()
