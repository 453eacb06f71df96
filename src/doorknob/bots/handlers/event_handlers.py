"""
Event handlers for the Doorknob bot.

This module contains all Discord event handlers separated from the main bot file
for better organization and maintainability.
"""

import logging
from typing import Any, Optional

import discord
from discord.ext import commands

from doorknob.bots.utils.embed_builder import EmbedBuilder
from doorknob.core.types import MSG_GUILD_ONLY, MSG_UNKNOWN_COMMAND
from doorknob.voice import SessionRegistry


class EventHandlers:
    """Handles all Discord bot events."""

    def __init__(
        self,
        bot: Any,
        registry: Optional[SessionRegistry] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize event handlers."""
        self.bot_instance = bot  # This is the DoorknobBot instance
        self.bot = bot.bot  # This is the actual Discord bot
        self.registry = registry
        self.logger = logger or logging.getLogger(__name__)

    async def on_ready(self) -> None:
        """Bot ready event."""
        self.logger.info(f"Doorknob online: {self.bot.user}")

        try:
            synced = await self.bot.tree.sync()
            self.logger.info(f"Synced {len(synced)} slash commands")
        except discord.HTTPException as e:
            self.logger.error(f"Command sync failed: {e}", exc_info=True)

    async def on_message(self, message: discord.Message) -> None:
        """Message event handler."""
        if not message.author.bot:
            await self.bot.process_commands(message)

    async def on_voice_state_update(
        self,
        member: discord.Member,
        before: discord.VoiceState,
        after: discord.VoiceState,
    ) -> None:
        """Forget the session when the bot is disconnected from outside."""
        if self.registry is None or self.bot.user is None:
            return
        if member.id != self.bot.user.id:
            return
        if before.channel is not None and after.channel is None:
            if self.registry.discard(member.guild.id) is not None:
                self.logger.warning(
                    f"[guild {member.guild.id}] Disconnected from voice channel "
                    f"{before.channel.id} externally"
                )

    async def on_command_error(self, ctx: commands.Context, error: Exception) -> None:
        """Command error handler."""
        if isinstance(error, (commands.CommandInvokeError, commands.HybridCommandError)):
            error = error.original

        try:
            if isinstance(error, commands.CommandNotFound):
                await ctx.send(MSG_UNKNOWN_COMMAND)
            elif isinstance(error, commands.NoPrivateMessage):
                await ctx.send(MSG_GUILD_ONLY)
            elif isinstance(error, commands.UserInputError):
                embed = EmbedBuilder.command_error(str(error))
                await ctx.send(embed=embed)
            else:
                embed = EmbedBuilder.command_error(str(error))
                await ctx.send(embed=embed)
                self.logger.error(
                    f"Command error in {getattr(ctx, 'command', None)}: {error}"
                )
        except discord.NotFound:
            self.logger.error(
                f"Command error in {getattr(ctx, 'command', None)}: {error} (channel was deleted)"
            )
        except discord.HTTPException as send_error:
            self.logger.error(
                f"Command error in {getattr(ctx, 'command', None)}: {error}"
            )
            self.logger.error(f"Failed to send error message: {send_error}")
