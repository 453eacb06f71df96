"""
Core bot management class for Doorknob.

This module builds the Discord bot, its services and its command surface, and
owns their lifecycle.
"""

import asyncio
import sys
from typing import Optional

import discord
import openai
from discord import app_commands
from discord.ext import commands
from openai import AsyncOpenAI

from doorknob.ai import ChatClient, ImageClient, SpeechClient
from doorknob.bots.commands import BaseCommandHandler, ChatCommands, VoiceCommands
from doorknob.bots.handlers import EventHandlers
from doorknob.config.settings import config_manager
from doorknob.infrastructure import get_logger, setup_logging
from doorknob.infrastructure.exceptions import ConfigurationError
from doorknob.voice import DiscordVoiceTransport, PlaybackOrchestrator, SessionRegistry

logger = get_logger(__name__)


class DoorknobBot:
    """Main bot class that manages the Discord bot and all its components."""

    def __init__(self):
        """Initialize the bot with all necessary components."""
        # Load configuration (which reads .env), then set up logging; both are
        # fatal when invalid
        try:
            self.config = config_manager.get_config()
            self.logger = setup_logging(
                component_name="doorknob.bot", log_level=self.config.log_level
            )
        except ConfigurationError as e:
            logger.critical(f"Invalid configuration: {e}")
            sys.exit(1)

        # Setup Discord bot
        intents = discord.Intents.default()
        intents.voice_states = True
        intents.guilds = True
        intents.message_content = True

        self.bot = commands.Bot(
            command_prefix=self.config.command_prefix,
            intents=intents,
            help_command=None,
        )

        # Initialize services
        self._setup_services()

        self.event_handlers: Optional[EventHandlers] = None
        self.command_handlers: dict[str, BaseCommandHandler] = {}

        # Setup event handlers
        self._setup_event_handlers()

        # Setup command handlers
        self._setup_command_handlers()

    def _setup_services(self) -> None:
        """Create the model clients and the voice session engine."""
        try:
            openai_client = AsyncOpenAI(api_key=self.config.openai_api_key)
        except openai.OpenAIError as e:
            self.logger.critical(f"Failed to create OpenAI client: {e}")
            sys.exit(1)

        self.chat_client = ChatClient(self.config, client=openai_client)
        self.image_client = ImageClient(self.config, client=openai_client)
        self.speech_client = SpeechClient(self.config, client=openai_client)

        self.transport = DiscordVoiceTransport(
            connect_timeout=self.config.voice_connect_timeout
        )
        self.registry = SessionRegistry(
            self.transport,
            decode_audio=self.config.decode_voice,
            tick_interval=self.config.voice_tick_interval,
        )
        self.orchestrator = PlaybackOrchestrator(
            self.registry, self.chat_client, self.speech_client
        )

    def _setup_event_handlers(self) -> None:
        """Setup event handlers for the bot."""
        self.event_handlers = EventHandlers(
            bot=self,
            registry=self.registry,
            logger=self.logger,
        )

        # Register event handlers
        self.bot.event(self.event_handlers.on_ready)
        self.bot.event(self.event_handlers.on_message)
        self.bot.event(self.event_handlers.on_voice_state_update)
        self.bot.event(self.event_handlers.on_command_error)

    def _setup_command_handlers(self) -> None:
        """Setup command handlers for the bot."""
        handler_kwargs = dict(
            registry=self.registry,
            orchestrator=self.orchestrator,
            chat_client=self.chat_client,
            image_client=self.image_client,
            logger=self.logger,
            config=self.config,
        )
        self.command_handlers = {
            "chat": ChatCommands(**handler_kwargs),
            "voice": VoiceCommands(**handler_kwargs),
        }

        # Register commands
        self._register_commands()

    def _register_commands(self) -> None:
        """Register all bot commands as hybrid (slash and prefix) commands."""
        chat_handler: ChatCommands = self.command_handlers["chat"]
        voice_handler: VoiceCommands = self.command_handlers["voice"]

        @self.bot.hybrid_command(name="chat", description="Chat with the AI.")
        @app_commands.describe(
            query="Query that is passed to the AI.",
            voice="Also speak the reply in the voice channel.",
        )
        async def chat_wrapper(ctx, *, query: str, voice: bool = False):
            await chat_handler.chat_command(ctx, query, voice=voice)

        @self.bot.hybrid_command(name="draw", description="Generate an image.")
        @app_commands.describe(query="Query that is passed to the AI.")
        async def draw_wrapper(ctx, *, query: str):
            await chat_handler.draw_command(ctx, query)

        @self.bot.hybrid_command(name="ping", description="Check that the bot is alive.")
        async def ping_wrapper(ctx):
            await chat_handler.ping_command(ctx)

        @self.bot.hybrid_command(name="join", description="Join your voice channel.")
        async def join_wrapper(ctx):
            await voice_handler.join_command(ctx)

        @self.bot.hybrid_command(name="leave", description="Leave the voice channel.")
        async def leave_wrapper(ctx):
            await voice_handler.leave_command(ctx)

        @self.bot.hybrid_command(name="mute", description="Mute the bot.")
        async def mute_wrapper(ctx):
            await voice_handler.mute_command(ctx)

        @self.bot.hybrid_command(name="unmute", description="Unmute the bot.")
        async def unmute_wrapper(ctx):
            await voice_handler.unmute_command(ctx)

        @self.bot.hybrid_command(name="deafen", description="Deafen the bot.")
        async def deafen_wrapper(ctx):
            await voice_handler.deafen_command(ctx)

        @self.bot.hybrid_command(name="undeafen", description="Undeafen the bot.")
        async def undeafen_wrapper(ctx):
            await voice_handler.undeafen_command(ctx)

    async def start(self) -> None:
        """Start the bot."""
        try:
            self.logger.info("Starting Doorknob...")
            await self.bot.start(self.config.discord_token)
        except discord.LoginFailure as e:
            self.logger.critical(f"Failed to log in: {e}")
            raise

    async def close(self) -> None:
        """Leave every voice channel, then close the bot."""
        if self.registry is not None:
            await self.registry.close()
        if self.bot:
            await self.bot.close()


# Global bot instance
_bot_instance: Optional[DoorknobBot] = None


def get_bot_instance() -> DoorknobBot:
    """Get the global bot instance."""
    global _bot_instance
    if _bot_instance is None:
        _bot_instance = DoorknobBot()
    return _bot_instance


async def main():
    """Main function to initialize and run the bot."""
    bot = get_bot_instance()

    try:
        await bot.start()
    except asyncio.CancelledError:
        bot.logger.info("Bot shutdown requested")
    finally:
        await bot.close()
