"""
Voice channel command handlers.

Each command resolves the guild, delegates to the session registry and sends
the registry's message back to the user.
"""

from typing import Any, Awaitable, Callable, Dict

from discord.ext import commands

from doorknob.bots.commands.base import BaseCommandHandler


class VoiceCommands(BaseCommandHandler):
    """Handles joining, leaving, muting and deafening in voice channels."""

    async def join_command(self, ctx: commands.Context) -> None:
        """Join the voice channel the invoker is in."""
        try:
            guild = await self._require_guild(ctx)
            if guild is None:
                return
            result = await self.registry.join(guild, ctx.author)
            await self._send_result(ctx, result)
        except Exception as e:
            await self._handle_command_error(ctx, e, "join")

    async def leave_command(self, ctx: commands.Context) -> None:
        """Leave the guild's voice channel."""
        await self._run(ctx, "leave", self.registry.leave)

    async def mute_command(self, ctx: commands.Context) -> None:
        await self._run(ctx, "mute", lambda guild_id: self.registry.set_muted(guild_id, True))

    async def unmute_command(self, ctx: commands.Context) -> None:
        await self._run(
            ctx, "unmute", lambda guild_id: self.registry.set_muted(guild_id, False)
        )

    async def deafen_command(self, ctx: commands.Context) -> None:
        await self._run(
            ctx, "deafen", lambda guild_id: self.registry.set_deafened(guild_id, True)
        )

    async def undeafen_command(self, ctx: commands.Context) -> None:
        await self._run(
            ctx, "undeafen", lambda guild_id: self.registry.set_deafened(guild_id, False)
        )

    async def _run(
        self,
        ctx: commands.Context,
        command_name: str,
        operation: Callable[[int], Awaitable[Dict[str, Any]]],
    ) -> None:
        try:
            guild = await self._require_guild(ctx)
            if guild is None:
                return
            result = await operation(guild.id)
            await self._send_result(ctx, result)
        except Exception as e:
            await self._handle_command_error(ctx, e, command_name)
