"""
Voice transport built on discord.py and discord-ext-voice-recv.

Every operation that talks to Discord is a coroutine or a plain call on the
voice client; library failures are re-raised as VoiceTransportError so the
session registry can report them without knowing discord.py's exception types.
"""

import asyncio
import io
from typing import Callable, Optional

import discord
from discord.ext import voice_recv

from doorknob.infrastructure import get_logger
from doorknob.infrastructure.exceptions import VoiceTransportError

from .sink import VoiceEventSink

logger = get_logger(__name__)


class DiscordVoiceTransport:
    """Connects to voice channels and drives their voice clients."""

    def __init__(self, connect_timeout: float = 20.0):
        """
        Initialize the transport.

        Args:
            connect_timeout: Seconds to wait for a voice connection
        """
        self.connect_timeout = connect_timeout

    async def connect(self, channel: discord.VoiceChannel) -> voice_recv.VoiceRecvClient:
        """
        Connect to ``channel`` with a receiving voice client.

        Raises:
            VoiceTransportError: If the connection cannot be established
        """
        try:
            voice_client = await channel.connect(
                cls=voice_recv.VoiceRecvClient,
                timeout=self.connect_timeout,
                reconnect=True,
                self_deaf=False,
                self_mute=False,
            )
        except asyncio.TimeoutError:
            raise VoiceTransportError(
                f"Timed out connecting to voice channel {channel.id}"
            ) from None
        except discord.DiscordException as e:
            raise VoiceTransportError(str(e) or type(e).__name__) from e

        logger.info(f"Connected to voice channel {channel.id} in guild {channel.guild.id}")
        return voice_client

    async def disconnect(self, voice_client: voice_recv.VoiceRecvClient) -> None:
        """
        Disconnect ``voice_client`` from its channel.

        Raises:
            VoiceTransportError: If discord.py reports a failure
        """
        try:
            await voice_client.disconnect(force=False)
        except discord.DiscordException as e:
            raise VoiceTransportError(str(e) or type(e).__name__) from e

    async def set_voice_state(
        self,
        voice_client: voice_recv.VoiceRecvClient,
        *,
        self_mute: bool,
        self_deaf: bool,
    ) -> None:
        """
        Change the bot's own mute/deafen state in the connected channel.

        Raises:
            VoiceTransportError: If the voice state update fails
        """
        try:
            await voice_client.guild.change_voice_state(
                channel=voice_client.channel,
                self_mute=self_mute,
                self_deaf=self_deaf,
            )
        except discord.DiscordException as e:
            raise VoiceTransportError(str(e) or type(e).__name__) from e

    def subscribe(
        self, voice_client: voice_recv.VoiceRecvClient, sink: VoiceEventSink
    ) -> None:
        """Attach ``sink`` as the listener for every voice event of the client."""
        voice_client.listen(sink)
        sink.start()
        logger.debug(
            f"Subscribed sink for {', '.join(sorted(k.value for k in sink.event_kinds))}"
        )

    def play(
        self,
        voice_client: voice_recv.VoiceRecvClient,
        audio: bytes,
        after: Optional[Callable[[Optional[Exception]], None]] = None,
    ) -> None:
        """
        Start playing an encoded audio clip through FFmpeg.

        ``after`` is called from discord.py's player thread when playback ends.

        Raises:
            VoiceTransportError: If FFmpeg cannot be started, or the client is
                not connected or already playing
        """
        source = None
        try:
            source = discord.FFmpegPCMAudio(io.BytesIO(audio), pipe=True)
            voice_client.play(source, after=after)
        except discord.ClientException as e:
            if source is not None:
                source.cleanup()
            raise VoiceTransportError(str(e) or type(e).__name__) from e
