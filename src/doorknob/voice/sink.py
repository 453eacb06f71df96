"""
Audio sink that feeds the voice event router.

``discord-ext-voice-recv`` calls :meth:`VoiceEventSink.write` from its packet
thread for every received voice packet, and calls the sink listeners for
gateway and RTCP events from its event-router thread. The sink converts both
into :mod:`doorknob.voice.events` values. A tick clock running on the event
loop groups the frames received during each interval into one ``VoiceTick``.

Packets do not arrive exactly once per interval, so an SSRC stays in the
speaking set for ``hold_ticks`` empty intervals after its last packet. Those
intervals carry a frame without a packet (a missed packet).
"""

import asyncio
import threading
from typing import Any, Dict, Optional, Set

import discord
from discord.ext import voice_recv

from doorknob.infrastructure import get_logger

from .events import (
    ClientDisconnect,
    RtcpPacket,
    RtpPacket,
    SpeakingStateUpdate,
    VoiceFrame,
    VoiceTick,
)
from .router import VoiceEventRouter

logger = get_logger(__name__)

SPEAKING_HOLD_TICKS = 4


def _is_speaking(state: Any) -> bool:
    # The gateway sends a bit field; discord.py may wrap it in SpeakingState.
    return bool(getattr(state, "value", state))


class VoiceEventSink(voice_recv.AudioSink):
    """
    Translates voice-receive callbacks into voice events for one session.

    Subscribes to all five event kinds the router handles: speaking-state
    updates, ticks, RTP packets, RTCP packets and client disconnects.
    """

    def __init__(
        self,
        router: VoiceEventRouter,
        tick_interval: float = 0.02,
        hold_ticks: int = SPEAKING_HOLD_TICKS,
    ):
        """
        Initialize the sink.

        Args:
            router: Router that receives the events of this session
            tick_interval: Length of one tick in seconds
            hold_ticks: Empty intervals an SSRC keeps speaking after its last packet
        """
        super().__init__()
        self.router = router
        self.tick_interval = tick_interval
        self.hold_ticks = hold_ticks

        self._pending: Dict[int, VoiceFrame] = {}
        self._last_heard: Dict[int, int] = {}
        self._known_ssrcs: Set[int] = set()
        self._tick_number = 0
        self._lock = threading.Lock()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._tick_task: Optional[asyncio.Task] = None
        self._is_active = False

        # Performance tracking, written from the packet thread and the loop
        self._stats_lock = threading.Lock()
        self._packet_count = 0
        self._error_count = 0

    @property
    def event_kinds(self):
        """Event kinds this sink delivers to its router."""
        return self.router.event_kinds

    def wants_opus(self) -> bool:
        """Ask for decoded PCM only when the router wants samples."""
        return not self.router.decode_audio

    def start(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        """Start accepting packets and run the tick clock on ``loop``."""
        self._loop = loop or asyncio.get_running_loop()
        self._is_active = True
        if self._tick_task is None:
            self._tick_task = self._loop.create_task(self._run_ticks())
        logger.debug(f"[guild {self.router.guild_id}] Voice event sink started")

    def stop(self) -> None:
        """Stop accepting packets and stop the tick clock."""
        self._is_active = False
        task, self._tick_task = self._tick_task, None
        if task is None:
            return
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is self._loop:
            task.cancel()
        elif self._loop is not None and not self._loop.is_closed():
            # cleanup() may be called from the voice-receive thread
            self._loop.call_soon_threadsafe(task.cancel)
        logger.debug(f"[guild {self.router.guild_id}] Voice event sink stopped")

    async def _run_ticks(self) -> None:
        while True:
            await asyncio.sleep(self.tick_interval)
            try:
                self.flush_tick()
            except Exception as e:
                self._count_error()
                logger.error(
                    f"[guild {self.router.guild_id}] Failed to deliver voice tick: {e}",
                    exc_info=True,
                )

    def _count_error(self) -> None:
        with self._stats_lock:
            self._error_count += 1

    def flush_tick(self) -> VoiceTick:
        """Close the current tick and deliver it to the router."""
        with self._lock:
            current = self._tick_number
            self._tick_number += 1
            fresh, self._pending = self._pending, {}

            speaking: Dict[int, VoiceFrame] = {}
            for ssrc, heard in list(self._last_heard.items()):
                if ssrc in fresh:
                    speaking[ssrc] = fresh[ssrc]
                elif current - heard <= self.hold_ticks:
                    speaking[ssrc] = VoiceFrame()
                else:
                    del self._last_heard[ssrc]
            silent = frozenset(self._known_ssrcs.difference(speaking))

        tick = VoiceTick(speaking=speaking, silent=silent)
        self.router.on_event(tick)
        return tick

    def write(self, user: Optional[discord.abc.User], data: voice_recv.VoiceData) -> None:
        """
        Process one received voice packet.

        Args:
            user: Member the packet belongs to, if known
            data: Voice data containing the RTP packet and, when decoding, PCM
        """
        if not self._is_active:
            return

        packet = data.packet
        if packet is None:
            return

        with self._stats_lock:
            self._packet_count += 1
        try:
            rtp = RtpPacket(
                sequence=packet.sequence,
                timestamp=packet.timestamp,
                ssrc=packet.ssrc,
                payload_length=len(packet.decrypted_data or b""),
            )
            self.router.on_event(rtp)

            pcm = getattr(data, "pcm", None) if self.router.decode_audio else None
            with self._lock:
                self._pending[rtp.ssrc] = VoiceFrame(packet=rtp, pcm=pcm)
                self._last_heard[rtp.ssrc] = self._tick_number
                self._known_ssrcs.add(rtp.ssrc)
        except Exception as e:
            self._count_error()
            logger.error(
                f"[guild {self.router.guild_id}] Failed to process voice packet: {e}",
                exc_info=True,
            )

    @voice_recv.AudioSink.listener()
    def on_voice_member_speaking_state(
        self, member: discord.Member, ssrc: int, state: Any
    ) -> None:
        with self._lock:
            self._known_ssrcs.add(ssrc)
        self.router.on_event(
            SpeakingStateUpdate(
                ssrc=ssrc,
                participant=getattr(member, "id", None),
                is_speaking=_is_speaking(state),
            )
        )

    @voice_recv.AudioSink.listener()
    def on_voice_member_disconnect(
        self, member: discord.Member, ssrc: Optional[int]
    ) -> None:
        with self._lock:
            if ssrc is not None:
                self._known_ssrcs.discard(ssrc)
                self._pending.pop(ssrc, None)
                self._last_heard.pop(ssrc, None)
        self.router.on_event(
            ClientDisconnect(participant=getattr(member, "id", None), ssrc=ssrc)
        )

    @voice_recv.AudioSink.listener()
    def on_rtcp_packet(self, packet: Any, guild: discord.Guild) -> None:
        self.router.on_event(RtcpPacket(raw=packet))

    def cleanup(self) -> None:
        """Called by the voice client when listening stops."""
        self.stop()
        stats = self.get_stats()
        logger.debug(
            f"[guild {self.router.guild_id}] Voice event sink cleaned up - "
            f"processed {stats['packet_count']} packets, errors {stats['error_count']}"
        )

    def get_stats(self) -> dict:
        """Get performance statistics."""
        with self._stats_lock:
            packet_count, error_count = self._packet_count, self._error_count
        return {
            "packet_count": packet_count,
            "error_count": error_count,
            "is_active": self._is_active,
            "router": self.router.get_stats(),
        }
