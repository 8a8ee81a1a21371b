"""
ChatMute - Configuration Module
===============================

Centralized configuration management with environment variable validation.

DESIGN:
    A single Config dataclass is loaded from environment variables at
    startup. Validation happens once at load time, not on every access.

    Key patterns:
    - Singleton pattern via get_config() ensures one Config instance
    - Missing required variables are reported together
    - Permission helpers centralize authorization logic
"""

import os
from dataclasses import dataclass
from typing import Optional, Set

import discord

from chatmute.core.constants import (
    MUTE_CHECK_INTERVAL,
    MIN_MUTE_CHECK_INTERVAL,
    MAX_MUTE_CHECK_INTERVAL,
)


# =============================================================================
# Configuration Dataclass
# =============================================================================

@dataclass
class Config:
    """
    Bot configuration loaded from environment variables.

    Attributes:
        discord_token: Discord bot authentication token.
        guild_id: Guild whose chat channel is moderated.
        chat_channel_id: Shared chat channel protected by the mute gate.
        developer_id: User ID always allowed to moderate.
        moderator_ids: User IDs allowed to moderate.
        moderation_role_id: Role whose holders may moderate.
        mute_check_interval: Seconds between expiry sweeps.
        error_webhook_url: Webhook receiving error log entries.
    """

    # -------------------------------------------------------------------------
    # Required
    # -------------------------------------------------------------------------

    discord_token: str
    guild_id: int
    chat_channel_id: int

    # -------------------------------------------------------------------------
    # Optional: Permissions
    # -------------------------------------------------------------------------

    developer_id: Optional[int] = None
    moderator_ids: Optional[Set[int]] = None
    moderation_role_id: Optional[int] = None

    # -------------------------------------------------------------------------
    # Optional: Scheduler
    # -------------------------------------------------------------------------

    mute_check_interval: int = MUTE_CHECK_INTERVAL

    # -------------------------------------------------------------------------
    # Optional: Webhooks
    # -------------------------------------------------------------------------

    error_webhook_url: Optional[str] = None


# =============================================================================
# Validation
# =============================================================================

class ConfigValidationError(Exception):
    """Raised when required configuration is missing or invalid."""

    pass


def _parse_int(value: Optional[str], name: str) -> int:
    """
    Parse string to integer with descriptive error handling.

    Raises:
        ConfigValidationError: If value is missing or not a valid integer.
    """
    if not value:
        raise ConfigValidationError(f"Missing required: {name}")
    try:
        return int(value)
    except ValueError:
        raise ConfigValidationError(f"Invalid integer for {name}: {value}")


def _parse_int_optional(value: Optional[str]) -> Optional[int]:
    """Parse optional string to integer, returning None on failure."""
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _parse_int_set(value: Optional[str]) -> Set[int]:
    """
    Parse comma-separated string to set of integers.

    Args:
        value: Comma-separated string of integers (e.g., "123,456,789").

    Returns:
        Set of parsed integers, empty set if input is None or empty.
    """
    if not value:
        return set()
    result = set()
    for part in value.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            result.add(int(part))
        except ValueError:
            from chatmute.core.logger import logger
            logger.warning(f"Config ignoring invalid id '{part}'")
    return result


def _parse_int_with_default(
    value: Optional[str],
    default: int,
    name: str,
    min_val: Optional[int] = None,
    max_val: Optional[int] = None,
) -> int:
    """
    Parse optional integer with default and range validation.

    Args:
        value: String value from environment variable.
        default: Default value if not set or invalid.
        name: Variable name for warning messages.
        min_val: Minimum allowed value (inclusive).
        max_val: Maximum allowed value (inclusive).

    Returns:
        Parsed integer within valid range, or default.
    """
    if not value:
        return default

    from chatmute.core.logger import logger

    try:
        parsed = int(value)
    except ValueError:
        logger.warning(f"Config {name}='{value}' invalid, using default {default}")
        return default

    if min_val is not None and parsed < min_val:
        logger.warning(f"Config {name}={parsed} below min {min_val}, using {min_val}")
        return min_val
    if max_val is not None and parsed > max_val:
        logger.warning(f"Config {name}={parsed} above max {max_val}, using {max_val}")
        return max_val
    return parsed


def _validate_url(value: Optional[str], name: str) -> Optional[str]:
    """Validate webhook URL format, returning None when invalid."""
    if not value:
        return None
    if not value.startswith(("https://", "http://")):
        from chatmute.core.logger import logger
        logger.warning(f"Config {name} invalid URL format, ignoring")
        return None
    return value


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config() -> Config:
    """
    Load and validate configuration from environment variables.

    Returns:
        Validated Config object with all settings.

    Raises:
        ConfigValidationError: If any required variable is missing or invalid.
    """
    missing = []

    discord_token = os.getenv("DISCORD_TOKEN")
    if not discord_token:
        missing.append("DISCORD_TOKEN")

    guild_id_str = os.getenv("GUILD_ID")
    if not guild_id_str:
        missing.append("GUILD_ID")

    chat_channel_id_str = os.getenv("CHAT_CHANNEL_ID")
    if not chat_channel_id_str:
        missing.append("CHAT_CHANNEL_ID")

    if missing:
        raise ConfigValidationError(
            f"Missing required environment variables: {', '.join(missing)}"
        )

    moderator_ids = _parse_int_set(os.getenv("MODERATOR_IDS"))

    return Config(
        discord_token=discord_token,
        guild_id=_parse_int(guild_id_str, "GUILD_ID"),
        chat_channel_id=_parse_int(chat_channel_id_str, "CHAT_CHANNEL_ID"),
        developer_id=_parse_int_optional(os.getenv("DEVELOPER_ID")),
        moderator_ids=moderator_ids if moderator_ids else None,
        moderation_role_id=_parse_int_optional(os.getenv("MODERATION_ROLE_ID")),
        mute_check_interval=_parse_int_with_default(
            os.getenv("MUTE_CHECK_INTERVAL"),
            MUTE_CHECK_INTERVAL,
            "MUTE_CHECK_INTERVAL",
            min_val=MIN_MUTE_CHECK_INTERVAL,
            max_val=MAX_MUTE_CHECK_INTERVAL,
        ),
        error_webhook_url=_validate_url(os.getenv("ERROR_WEBHOOK_URL"), "ERROR_WEBHOOK_URL"),
    )


# =============================================================================
# Global Config Instance
# =============================================================================

_config: Optional[Config] = None


def get_config() -> Config:
    """
    Get the global configuration instance, loading if needed.

    Raises:
        ConfigValidationError: On first call if config is invalid.
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def validate_and_log_config() -> None:
    """
    Validate configuration and log a summary at startup.

    Raises:
        ConfigValidationError: If required configuration is missing.
    """
    from chatmute.core.logger import logger

    config = get_config()

    logger.tree("Configuration Validated", [
        ("Guild", str(config.guild_id)),
        ("Chat Channel", str(config.chat_channel_id)),
        ("Moderators", str(len(config.moderator_ids or ()))),
        ("Moderation Role", str(config.moderation_role_id or "None")),
        ("Sweep Interval", f"{config.mute_check_interval}s"),
        ("Error Webhook", "Enabled" if config.error_webhook_url else "Disabled"),
    ], emoji="⚙️")


# =============================================================================
# Permission Helpers
# =============================================================================

def is_developer(user_id: int) -> bool:
    """Check if user is the configured developer."""
    developer_id = get_config().developer_id
    return developer_id is not None and user_id == developer_id


def is_moderator(user_id: int) -> bool:
    """Check if user is in the configured moderator list."""
    moderator_ids = get_config().moderator_ids
    return bool(moderator_ids) and user_id in moderator_ids


def has_mod_role(member: discord.abc.User) -> bool:
    """
    Check if a user may run mute commands.

    Allows the developer, configured moderators, administrators, members
    with kick or moderate permissions, and holders of the moderation role.

    Args:
        member: User or guild member invoking the command.

    Returns:
        True if the user is authorized.
    """
    if is_developer(member.id) or is_moderator(member.id):
        return True

    if not isinstance(member, discord.Member):
        return False

    perms = member.guild_permissions
    if perms.administrator or perms.kick_members or perms.moderate_members:
        return True

    role_id = get_config().moderation_role_id
    if role_id:
        return any(role.id == role_id for role in member.roles)

    return False


# =============================================================================
# Module Export
# =============================================================================

__all__ = [
    "Config",
    "ConfigValidationError",
    "load_config",
    "get_config",
    "validate_and_log_config",
    "is_developer",
    "is_moderator",
    "has_mod_role",
]
