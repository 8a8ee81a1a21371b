"""
Mute Command - Autocomplete Mixin
=================================

Autocomplete handlers for the mute command's duration arguments.
"""

from typing import TYPE_CHECKING, List

import discord
from discord import app_commands

from chatmute.core.constants import AUTOCOMPLETE_LIMIT
from chatmute.utils.duration import DURATION_CHOICES, parse_duration_token
from chatmute.utils.time_format import format_duration_friendly

if TYPE_CHECKING:
    from .cog import MuteCog


class AutocompleteMixin:
    """Mixin for autocomplete handlers."""

    async def duration_autocomplete(
        self: "MuteCog",
        interaction: discord.Interaction,
        current: str,
    ) -> List[app_commands.Choice[str]]:
        """
        Autocomplete for duration parameters.

        A valid typed token is offered first, labelled with what it
        means; matching presets follow.

        Args:
            interaction: Discord interaction.
            current: Current input value.

        Returns:
            List of duration choices.
        """
        current = current.strip()
        if not current:
            return [app_commands.Choice(name=label, value=value) for label, value in DURATION_CHOICES]

        choices = []
        minutes = parse_duration_token(current)
        if minutes is not None:
            choices.append(app_commands.Choice(name=format_duration_friendly(minutes), value=current))

        current_lower = current.lower()
        for label, value in DURATION_CHOICES:
            if value == current_lower:
                continue
            if current_lower in label.lower() or current_lower in value:
                choices.append(app_commands.Choice(name=label, value=value))

        return choices[:AUTOCOMPLETE_LIMIT]


__all__ = ["AutocompleteMixin"]
