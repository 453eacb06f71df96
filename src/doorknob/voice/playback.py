"""
Speech playback for voice sessions.

PlaybackQueue plays clips on one voice client in order. PlaybackOrchestrator
turns a chat query into speech in a guild's voice channel.
"""

import asyncio
from collections import deque
from typing import TYPE_CHECKING, Any, Deque, Dict, Optional

from doorknob.core.types import MSG_BOT_NOT_IN_VOICE
from doorknob.infrastructure import get_logger
from doorknob.infrastructure.exceptions import VoiceTransportError

if TYPE_CHECKING:
    from doorknob.ai import ChatClient, SpeechClient

    from .session import SessionRegistry
    from .transport import DiscordVoiceTransport

logger = get_logger(__name__)


def _resolve(future: asyncio.Future, error: Optional[Exception]) -> None:
    if not future.done():
        future.set_result(error)


class PlaybackQueue:
    """
    FIFO of encoded audio clips for one voice client.

    :meth:`enqueue` never waits for playback; a single worker task plays the
    clips one after another and exits when the queue is empty. Callers cannot
    observe when a clip finishes.
    """

    def __init__(
        self,
        transport: "DiscordVoiceTransport",
        voice_client: Any,
        guild_id: int,
    ):
        self.transport = transport
        self.voice_client = voice_client
        self.guild_id = guild_id

        self._clips: Deque[bytes] = deque()
        self._worker: Optional[asyncio.Task] = None
        self._played = 0
        self._failed = 0

    def enqueue(self, audio: bytes) -> None:
        """Queue ``audio`` for playback and make sure the worker is running."""
        self._clips.append(audio)
        if self._worker is None or self._worker.done():
            self._worker = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()
        while self._clips:
            audio = self._clips.popleft()
            finished = loop.create_future()

            def after(error: Optional[Exception], finished=finished) -> None:
                # Runs on discord.py's player thread
                loop.call_soon_threadsafe(_resolve, finished, error)

            try:
                self.transport.play(self.voice_client, audio, after=after)
            except VoiceTransportError as e:
                self._failed += 1
                logger.error(f"[guild {self.guild_id}] Track could not start: {e}")
                continue

            error = await finished
            if error is not None:
                self._failed += 1
                logger.error(
                    f"[guild {self.guild_id}] Track encountered an error: {error!r}"
                )
            else:
                self._played += 1

    def stop(self) -> None:
        """Drop queued clips and stop the current one."""
        self._clips.clear()
        if self._worker is not None and not self._worker.done():
            self._worker.cancel()
        self._worker = None
        if self.voice_client.is_playing():
            self.voice_client.stop()

    def __len__(self) -> int:
        return len(self._clips)

    def get_stats(self) -> dict:
        """Get playback statistics."""
        return {
            "queued": len(self._clips),
            "played": self._played,
            "failed": self._failed,
            "is_running": self._worker is not None and not self._worker.done(),
        }


class PlaybackOrchestrator:
    """Answers a query out loud in a guild's voice channel."""

    def __init__(
        self,
        registry: "SessionRegistry",
        chat_client: "ChatClient",
        speech_client: "SpeechClient",
    ):
        self.registry = registry
        self.chat_client = chat_client
        self.speech_client = speech_client
        # The speech artifact lives at one shared path
        self._artifact_lock = asyncio.Lock()

    async def speak(self, guild_id: int, query: str) -> Dict[str, Any]:
        """
        Get a chat reply for ``query`` and play it in the guild's voice session.

        A missing session is reported in the result, not raised, and the reply
        text is returned either way.

        Args:
            guild_id: Guild whose voice session should speak
            query: Text passed to the chat model

        Returns:
            Dict with ``success``, the reply ``text`` and a user-facing
            ``message`` (None on success)

        Raises:
            UpstreamAPIError: If the chat or speech API fails
        """
        text = await self.chat_client.complete(query)
        return await self.say(guild_id, text)

    async def say(self, guild_id: int, text: str) -> Dict[str, Any]:
        """Synthesize ``text`` and queue it on the guild's voice session."""
        if self.registry.get(guild_id) is None:
            return {"success": False, "text": text, "message": MSG_BOT_NOT_IN_VOICE}

        async with self._artifact_lock:
            path = await self.speech_client.synthesize(text)
            audio = await asyncio.to_thread(path.read_bytes)

        # The session may have left while we were synthesizing
        session = self.registry.get(guild_id)
        if session is None or session.playback is None:
            return {"success": False, "text": text, "message": MSG_BOT_NOT_IN_VOICE}

        session.playback.enqueue(audio)
        logger.info(
            f"[guild {guild_id}] Queued {len(audio)} bytes of speech "
            f"({len(session.playback)} waiting)"
        )
        return {"success": True, "text": text, "message": None}
