"""
Voice sessions and the per-guild session registry.

The registry is the only place that holds voice sessions. Operations on the
same guild are serialized by a per-guild ``asyncio.Lock``; different guilds
never wait on each other.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import discord

from doorknob.core.types import (
    MSG_ALREADY_IN_VOICE,
    MSG_BOT_NOT_IN_VOICE,
    MSG_JOIN_FAILED,
    MSG_JOINED,
    MSG_LEFT,
    MSG_USER_NOT_IN_VOICE,
)
from doorknob.infrastructure import get_logger
from doorknob.infrastructure.exceptions import VoiceTransportError

from .playback import PlaybackQueue
from .router import VoiceEventRouter
from .sink import VoiceEventSink
from .transport import DiscordVoiceTransport

logger = get_logger(__name__)


@dataclass
class VoiceSession:
    """One guild's live voice connection."""

    guild_id: int
    channel_id: int
    voice_client: Any
    router: Optional[VoiceEventRouter] = None
    sink: Optional[VoiceEventSink] = None
    playback: Optional[PlaybackQueue] = None
    muted: bool = False
    deafened: bool = False


class SessionRegistry:
    """
    Per-guild table of active voice sessions.

    Created once at startup and closed at shutdown; command handlers receive it
    explicitly.
    """

    def __init__(
        self,
        transport: DiscordVoiceTransport,
        decode_audio: bool = True,
        tick_interval: float = 0.02,
    ):
        """
        Initialize the registry.

        Args:
            transport: Voice transport used for all connection changes
            decode_audio: Whether new sessions decode received voice to PCM
            tick_interval: Tick length for new sessions, in seconds
        """
        self.transport = transport
        self.decode_audio = decode_audio
        self.tick_interval = tick_interval

        self._sessions: Dict[int, VoiceSession] = {}
        self._locks: Dict[int, asyncio.Lock] = {}

    def _lock_for(self, guild_id: int) -> asyncio.Lock:
        lock = self._locks.get(guild_id)
        if lock is None:
            lock = self._locks.setdefault(guild_id, asyncio.Lock())
        return lock

    def get(self, guild_id: int) -> Optional[VoiceSession]:
        """Return the guild's session, or None."""
        return self._sessions.get(guild_id)

    def guild_ids(self) -> List[int]:
        """Guilds that currently have a session."""
        return list(self._sessions)

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, guild_id: int) -> bool:
        return guild_id in self._sessions

    async def join(self, guild: discord.Guild, member: discord.Member) -> Dict[str, Any]:
        """
        Join the voice channel ``member`` is in.

        A guild that already has a session is rejected rather than moved.

        Returns:
            Dict with ``success`` and a user-facing ``message``
        """
        voice_state = getattr(member, "voice", None)
        channel = voice_state.channel if voice_state is not None else None
        if channel is None:
            return {"success": False, "message": MSG_USER_NOT_IN_VOICE}

        async with self._lock_for(guild.id):
            if guild.id in self._sessions:
                return {"success": False, "message": MSG_ALREADY_IN_VOICE}

            try:
                voice_client = await self.transport.connect(channel)
            except VoiceTransportError as e:
                logger.error(
                    f"[guild {guild.id}] Failed to join voice channel {channel.id}: {e}"
                )
                return {"success": False, "message": MSG_JOIN_FAILED}

            router = VoiceEventRouter(guild.id, decode_audio=self.decode_audio)
            sink = VoiceEventSink(router, tick_interval=self.tick_interval)
            self.transport.subscribe(voice_client, sink)

            self._sessions[guild.id] = VoiceSession(
                guild_id=guild.id,
                channel_id=channel.id,
                voice_client=voice_client,
                router=router,
                sink=sink,
                playback=PlaybackQueue(self.transport, voice_client, guild.id),
            )

        logger.info(f"[guild {guild.id}] Joined voice channel {channel.id}")
        return {"success": True, "message": MSG_JOINED}

    async def leave(self, guild_id: int) -> Dict[str, Any]:
        """
        Leave the guild's voice channel.

        The session is discarded even when the transport reports an error.

        Returns:
            Dict with ``success`` and a user-facing ``message``
        """
        async with self._lock_for(guild_id):
            session = self._sessions.pop(guild_id, None)
            if session is None:
                return {"success": False, "message": MSG_BOT_NOT_IN_VOICE}

            self._teardown(session)
            try:
                await self.transport.disconnect(session.voice_client)
            except VoiceTransportError as e:
                logger.warning(f"[guild {guild_id}] Error leaving voice channel: {e}")
                return {"success": False, "message": f"Failed: {e}"}

        logger.info(f"[guild {guild_id}] Left voice channel {session.channel_id}")
        return {"success": True, "message": MSG_LEFT}

    def discard(self, guild_id: int) -> Optional[VoiceSession]:
        """
        Forget a session whose connection is already gone (e.g. the bot was
        disconnected by a moderator). No transport call is made.
        """
        session = self._sessions.pop(guild_id, None)
        if session is not None:
            self._teardown(session)
            logger.info(f"[guild {guild_id}] Voice session discarded")
        return session

    async def set_muted(self, guild_id: int, muted: bool) -> Dict[str, Any]:
        """Mute or unmute the bot in the guild's voice channel."""
        return await self._update_voice_state(
            guild_id, "muted", muted, "muted" if muted else "unmuted"
        )

    async def set_deafened(self, guild_id: int, deafened: bool) -> Dict[str, Any]:
        """Deafen or undeafen the bot in the guild's voice channel."""
        return await self._update_voice_state(
            guild_id, "deafened", deafened, "deafened" if deafened else "undeafened"
        )

    async def _update_voice_state(
        self, guild_id: int, attribute: str, value: bool, word: str
    ) -> Dict[str, Any]:
        async with self._lock_for(guild_id):
            session = self._sessions.get(guild_id)
            if session is None:
                return {"success": False, "message": MSG_BOT_NOT_IN_VOICE}

            if getattr(session, attribute) == value:
                return {"success": False, "message": f"I'm already {word}."}

            self_mute = value if attribute == "muted" else session.muted
            self_deaf = value if attribute == "deafened" else session.deafened
            try:
                await self.transport.set_voice_state(
                    session.voice_client, self_mute=self_mute, self_deaf=self_deaf
                )
            except VoiceTransportError as e:
                logger.warning(f"[guild {guild_id}] Failed to set {word}: {e}")
                return {"success": False, "message": f"Failed: {e}"}

            setattr(session, attribute, value)

        return {"success": True, "message": f"I'm now {word}."}

    def _teardown(self, session: VoiceSession) -> None:
        if session.playback is not None:
            session.playback.stop()
        if session.sink is not None:
            session.sink.stop()

    async def close(self) -> None:
        """Leave every voice channel. Called once at shutdown."""
        for guild_id in self.guild_ids():
            result = await self.leave(guild_id)
            if not result["success"]:
                logger.warning(f"[guild {guild_id}] {result['message']}")
