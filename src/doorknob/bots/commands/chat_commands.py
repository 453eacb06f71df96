"""
Model-backed command handlers: chat, draw and ping.
"""

import discord
from discord.ext import commands

from doorknob.bots.commands.base import BaseCommandHandler
from doorknob.core.types import MSG_PONG


class ChatCommands(BaseCommandHandler):
    """Handles the commands that talk to the model API."""

    async def chat_command(
        self, ctx: commands.Context, query: str, voice: bool = False
    ) -> None:
        """
        Reply to ``query`` with the chat model.

        With ``voice`` the reply is also spoken in the guild's voice channel.
        The text reply is sent either way; a missing voice session is reported
        after it.
        """
        try:
            await ctx.defer()

            if not voice:
                text = await self.chat_client.complete(query)
                await self._reply(ctx, text)
                return

            guild = await self._require_guild(ctx)
            if guild is None:
                return

            result = await self.orchestrator.speak(guild.id, query)
            await self._reply(ctx, result["text"])
            if not result["success"]:
                await self._send_result(ctx, result)

        except Exception as e:
            await self._handle_command_error(ctx, e, "chat")

    async def draw_command(self, ctx: commands.Context, query: str) -> None:
        """Generate images for ``query`` and send each as an attachment."""
        try:
            await ctx.defer()
            paths = await self.image_client.generate(query)
            for path in paths:
                await ctx.send(file=discord.File(path))
            self.logger.info(f"Sent {len(paths)} generated image(s)")
        except Exception as e:
            await self._handle_command_error(ctx, e, "draw")

    async def ping_command(self, ctx: commands.Context) -> None:
        """Liveness check."""
        await ctx.send(MSG_PONG)
