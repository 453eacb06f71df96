"""
Base command handler class for Discord bot commands.

This module provides a base class that all command handlers can inherit from,
providing common functionality and utilities.
"""

import logging
from typing import Any, Dict, Optional

import discord
from discord.ext import commands

from doorknob.ai import ChatClient, ImageClient
from doorknob.config.settings import BotConfig
from doorknob.core.types import MSG_GUILD_ONLY
from doorknob.infrastructure.exceptions import UpstreamAPIError
from doorknob.voice import PlaybackOrchestrator, SessionRegistry
from doorknob.bots.utils import EmbedBuilder, split_message


class BaseCommandHandler:
    """Base class for command handlers with common functionality."""

    def __init__(
        self,
        registry: Optional[SessionRegistry] = None,
        orchestrator: Optional[PlaybackOrchestrator] = None,
        chat_client: Optional[ChatClient] = None,
        image_client: Optional[ImageClient] = None,
        logger: Optional[logging.Logger] = None,
        config: Optional[BotConfig] = None,
    ):
        """Initialize the base command handler."""
        self.registry = registry
        self.orchestrator = orchestrator
        self.chat_client = chat_client
        self.image_client = image_client
        self.logger = logger or logging.getLogger(__name__)
        self.config = config

    async def _require_guild(self, ctx: commands.Context) -> Optional[discord.Guild]:
        """Return the invoking guild, or tell the user the command is server-only."""
        if ctx.guild is None:
            await ctx.send(MSG_GUILD_ONLY)
            return None
        return ctx.guild

    async def _reply(self, ctx: commands.Context, text: str) -> None:
        """Send ``text``, split over several messages when it is too long."""
        for chunk in split_message(text):
            await ctx.send(chunk)

    async def _send_result(self, ctx: commands.Context, result: Dict[str, Any]) -> None:
        """Send the user-facing message of an operation result."""
        await ctx.send(result["message"])

    async def _handle_command_error(
        self, ctx: commands.Context, error: Exception, command_name: str
    ) -> None:
        """Handle command errors with appropriate logging and user feedback."""
        if isinstance(error, UpstreamAPIError):
            self.logger.error(f"Upstream API error in {command_name} command: {error}")
            embed = EmbedBuilder.upstream_failure(command_name, error)
        else:
            self.logger.error(f"Error in {command_name} command: {error}", exc_info=True)
            embed = EmbedBuilder.error(
                "Something Went Wrong",
                f"An unexpected error occurred. Please try again or contact the bot administrator if the issue persists.\n\n**Error:** {str(error)}",
            )
        try:
            await ctx.send(embed=embed)
        except discord.NotFound:
            self.logger.warning(
                f"Could not send error message for {command_name} - channel may have been deleted"
            )
        except discord.HTTPException as send_error:
            self.logger.warning(
                f"Could not send error message for {command_name}: {send_error}"
            )
