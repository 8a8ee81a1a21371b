"""
Tests for chatmute/handlers/discord_ports.py

Covers name and ID resolution against guild members, presence-based
connectivity, and DM delivery failures.
"""

from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from chatmute.handlers.discord_ports import (
    DiscordChatDelivery,
    DiscordPlayerDirectory,
    parse_user_id,
)

GUILD_ID = 987654321
BOB_ID = 123456789012345678
CAROL_ID = 223456789012345678


def make_member(member_id, name, display_name=None, global_name=None, online=True, bot=False):
    member = MagicMock()
    member.id = member_id
    member.name = name
    member.display_name = display_name or name
    member.global_name = global_name
    member.status = discord.Status.online if online else discord.Status.offline
    member.bot = bot
    member.send = AsyncMock()
    member.__str__.return_value = name
    return member


@pytest.fixture
def members():
    return [
        make_member(BOB_ID, "bob", display_name="Bobby"),
        make_member(CAROL_ID, "carol", global_name="Caroline", online=False),
    ]


@pytest.fixture
def mock_bot(members):
    guild = MagicMock()
    guild.id = GUILD_ID
    guild.members = members
    by_id = {m.id: m for m in members}
    guild.get_member = MagicMock(side_effect=by_id.get)

    bot = MagicMock()
    bot.get_guild = MagicMock(return_value=guild)
    return bot


@pytest.fixture
def discord_directory(mock_bot, test_db):
    return DiscordPlayerDirectory(mock_bot, GUILD_ID, test_db)


class TestParseUserId:
    """Tests for mention and snowflake parsing."""

    def test_mention(self):
        assert parse_user_id(f"<@{BOB_ID}>") == BOB_ID
        assert parse_user_id(f"<@!{BOB_ID}>") == BOB_ID

    def test_raw_snowflake(self):
        assert parse_user_id(f" {BOB_ID} ") == BOB_ID

    def test_plain_name(self):
        assert parse_user_id("bob") is None

    def test_short_number_is_a_name(self):
        assert parse_user_id("1234") is None


class TestDiscordPlayerDirectory:
    """Tests for DiscordPlayerDirectory lookups."""

    def test_find_online_by_display_name(self, discord_directory):
        assert discord_directory.find_online("BOBBY") == str(BOB_ID)

    def test_find_online_by_username(self, discord_directory):
        assert discord_directory.find_online("bob") == str(BOB_ID)

    def test_find_online_skips_offline(self, discord_directory):
        assert discord_directory.find_online("carol") is None

    def test_find_online_by_mention(self, discord_directory):
        assert discord_directory.find_online(f"<@{BOB_ID}>") == str(BOB_ID)
        assert discord_directory.find_online(f"<@{CAROL_ID}>") is None

    def test_find_offline_by_global_name(self, discord_directory):
        assert discord_directory.find_offline("caroline") == str(CAROL_ID)

    def test_find_offline_by_id_of_departed_member(self, discord_directory, test_db):
        test_db.record_player("333456789012345678", "dave")
        assert discord_directory.find_offline("333456789012345678") == "333456789012345678"

    def test_find_offline_unknown_id(self, discord_directory):
        assert discord_directory.find_offline("433456789012345678") is None

    def test_find_by_last_known_name(self, discord_directory, test_db):
        test_db.record_player("333456789012345678", "dave")
        assert discord_directory.find_by_last_known_name("Dave") == "333456789012345678"

    def test_get_name_prefers_member(self, discord_directory):
        assert discord_directory.get_name(str(BOB_ID)) == "Bobby"

    def test_get_name_falls_back_to_registry(self, discord_directory, test_db):
        test_db.record_player("333456789012345678", "dave")
        assert discord_directory.get_name("333456789012345678") == "dave"

    def test_no_guild(self, mock_bot, test_db):
        mock_bot.get_guild.return_value = None
        directory = DiscordPlayerDirectory(mock_bot, GUILD_ID, test_db)

        assert directory.find_online("bob") is None
        assert directory.find_offline("bob") is None
        assert directory.record_roster() == 0

    def test_record_roster_skips_bots(self, discord_directory, members, test_db):
        members.append(make_member(323456789012345678, "helper", bot=True))

        assert discord_directory.record_roster() == 2
        assert test_db.get_player_name(str(BOB_ID)) == "bob"
        assert test_db.get_player_name("323456789012345678") is None


class TestDiscordChatDelivery:
    """Tests for DM delivery."""

    def test_is_connected(self, discord_directory):
        delivery = DiscordChatDelivery(discord_directory)
        assert delivery.is_connected(str(BOB_ID)) is True
        assert delivery.is_connected(str(CAROL_ID)) is False
        assert delivery.is_connected("1") is False

    @pytest.mark.asyncio
    async def test_notify_sends_dm(self, discord_directory, members):
        await DiscordChatDelivery(discord_directory).notify(str(BOB_ID), "hello")
        members[0].send.assert_awaited_once_with("hello")

    @pytest.mark.asyncio
    async def test_notify_dm_closed(self, discord_directory, members):
        members[0].send.side_effect = discord.Forbidden(MagicMock(status=403, reason="Forbidden"), "closed")

        # Logged, not raised
        await DiscordChatDelivery(discord_directory).notify(str(BOB_ID), "hello")

    @pytest.mark.asyncio
    async def test_notify_unknown_member(self, discord_directory):
        await DiscordChatDelivery(discord_directory).notify("1", "hello")
