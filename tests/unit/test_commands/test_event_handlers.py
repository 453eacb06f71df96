"""
Unit tests for the bot event handlers.
"""

from unittest.mock import AsyncMock, MagicMock

import discord
import pytest
from discord.ext import commands

from doorknob.bots.handlers import EventHandlers
from doorknob.core.types import MSG_GUILD_ONLY, MSG_UNKNOWN_COMMAND


@pytest.fixture
def bot_instance():
    instance = MagicMock()
    instance.bot.user.id = 424242
    instance.bot.process_commands = AsyncMock()
    return instance


@pytest.fixture
def handlers(bot_instance, registry):
    return EventHandlers(bot=bot_instance, registry=registry)


class TestCommandErrors:
    """Test cases for on_command_error."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unknown_command(self, handlers, mock_context):
        await handlers.on_command_error(
            mock_context, commands.CommandNotFound('Command "dance" is not found')
        )

        mock_context.send.assert_awaited_once_with(MSG_UNKNOWN_COMMAND)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_no_private_message(self, handlers, mock_context):
        await handlers.on_command_error(mock_context, commands.NoPrivateMessage())

        mock_context.send.assert_awaited_once_with(MSG_GUILD_ONLY)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_other_errors_get_embed(self, handlers, mock_context):
        await handlers.on_command_error(
            mock_context, commands.CommandInvokeError(RuntimeError("boom"))
        )

        embed = mock_context.send.call_args.kwargs["embed"]
        assert isinstance(embed, discord.Embed)
        assert "boom" in embed.description


class TestEvents:
    """Test cases for gateway events."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_messages_from_bots_are_ignored(self, handlers, bot_instance):
        message = MagicMock()
        message.author.bot = True

        await handlers.on_message(message)

        bot_instance.bot.process_commands.assert_not_awaited()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_messages_are_processed(self, handlers, bot_instance):
        message = MagicMock()
        message.author.bot = False

        await handlers.on_message(message)

        bot_instance.bot.process_commands.assert_awaited_once_with(message)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_external_disconnect_discards_session(
        self, handlers, registry, mock_guild, mock_member, mock_transport
    ):
        await registry.join(mock_guild, mock_member)
        bot_member = MagicMock()
        bot_member.id = 424242
        bot_member.guild = mock_guild
        before = MagicMock()
        after = MagicMock()
        after.channel = None

        await handlers.on_voice_state_update(bot_member, before, after)

        assert registry.get(mock_guild.id) is None
        mock_transport.disconnect.assert_not_awaited()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_other_members_are_ignored(self, handlers, registry, mock_guild, mock_member):
        await registry.join(mock_guild, mock_member)
        after = MagicMock()
        after.channel = None

        await handlers.on_voice_state_update(mock_member, MagicMock(), after)

        assert registry.get(mock_guild.id) is not None
