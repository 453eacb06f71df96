"""
Voice event router.

One router is attached to each voice session. The voice event sink hands it
every event the transport produces; the router keeps the SSRC directory and
the silence flag up to date and writes one log record per observation.
"""

import logging
import sys
import threading
from array import array
from collections import Counter
from typing import Any, Dict, List, Optional

from doorknob.core.types import UNKNOWN_PARTICIPANT
from doorknob.infrastructure import get_logger
from doorknob.infrastructure.exceptions import UnknownVoiceEventError

from .events import (
    ALL_EVENT_KINDS,
    ClientDisconnect,
    RtcpPacket,
    RtpPacket,
    SpeakingStateUpdate,
    VoiceEvent,
    VoiceEventKind,
    VoiceFrame,
    VoiceTick,
)
from .state import ParticipantDirectory, TickAggregator

logger = get_logger(__name__)

SAMPLE_PREVIEW = 5


def pcm_samples(pcm: Optional[bytes]) -> List[int]:
    """Decode 16-bit little-endian PCM into a list of samples."""
    if not pcm:
        return []
    samples = array("h")
    samples.frombytes(pcm[: len(pcm) - len(pcm) % 2])
    if sys.byteorder == "big":
        samples.byteswap()
    return samples.tolist()


class VoiceEventRouter:
    """
    Dispatches voice events by kind.

    The router is a pure observer apart from the participant directory: it
    never asks the transport to change anything, so :meth:`on_event` always
    returns None. Handlers for different kinds share no lock; the directory and
    the tick aggregator synchronize themselves.
    """

    def __init__(self, guild_id: int, decode_audio: bool = True):
        """
        Initialize the router.

        Args:
            guild_id: Guild whose session this router observes
            decode_audio: Whether frames carry decoded PCM
        """
        self.guild_id = guild_id
        self.decode_audio = decode_audio
        self.directory = ParticipantDirectory()
        self.ticks = TickAggregator()
        self.event_kinds = ALL_EVENT_KINDS

        # on_event is called from the packet, event-router and loop threads
        self._counts: Counter = Counter()
        self._counts_lock = threading.Lock()

    def on_event(self, event: VoiceEvent) -> None:
        """
        Handle one voice event.

        Called from the voice-receive packet thread, its event-router thread
        and the tick clock on the event loop.

        Raises:
            UnknownVoiceEventError: If ``event`` is not one of the voice event
                types. This is a programming error, not a runtime condition.
        """
        if isinstance(event, SpeakingStateUpdate):
            self._on_speaking_state(event)
        elif isinstance(event, VoiceTick):
            self._on_tick(event)
        elif isinstance(event, RtpPacket):
            self._on_rtp_packet(event)
        elif isinstance(event, RtcpPacket):
            self._on_rtcp_packet(event)
        elif isinstance(event, ClientDisconnect):
            self._on_client_disconnect(event)
        else:
            raise UnknownVoiceEventError(
                f"Unrecognized voice event {type(event).__name__}"
            )
        return None

    def _count(self, key: str) -> None:
        with self._counts_lock:
            self._counts[key] += 1

    def _on_speaking_state(self, event: SpeakingStateUpdate) -> None:
        self._count(VoiceEventKind.SPEAKING_STATE_UPDATE.value)

        if event.participant is None:
            logger.debug(
                f"[guild {self.guild_id}] Speaking state for SSRC {event.ssrc} "
                f"without a participant"
            )
            return

        previous = self.directory.assign(event.ssrc, event.participant)
        if previous is not None and previous != event.participant:
            logger.debug(
                f"[guild {self.guild_id}] SSRC {event.ssrc} moved from "
                f"{previous} to {event.participant}"
            )
        logger.debug(
            f"[guild {self.guild_id}] Speaking state update: SSRC {event.ssrc} is "
            f"{event.participant} (speaking={event.is_speaking})"
        )

    def _on_tick(self, event: VoiceTick) -> None:
        self._count(VoiceEventKind.VOICE_TICK.value)

        speaking_count = len(event.speaking)
        total = speaking_count + len(event.silent)

        if speaking_count == 0:
            if self.ticks.mark_silent():
                self._count("silence_notices")
                logger.info(f"[guild {self.guild_id}] No speakers")
            return

        self.ticks.mark_active()
        logger.debug(
            f"[guild {self.guild_id}] Tick: {speaking_count} speaking of {total} participants"
        )
        for ssrc, frame in event.speaking.items():
            self._log_speaker(ssrc, frame)

    def _log_speaker(self, ssrc: int, frame: VoiceFrame) -> None:
        self._count("speaker_records")
        if not logger.isEnabledFor(logging.DEBUG):
            return

        participant = self.directory.resolve(ssrc)
        who = participant if participant is not None else UNKNOWN_PARTICIPANT

        samples = pcm_samples(frame.pcm) if self.decode_audio else []
        if frame.packet is not None:
            packet_info = (
                f"packet seq {frame.packet.sequence} ts {frame.packet.timestamp}"
            )
        else:
            packet_info = "missed packet"

        logger.debug(
            f"[guild {self.guild_id}] {who} (SSRC {ssrc}) is speaking: "
            f"{len(samples)} samples, first {samples[:SAMPLE_PREVIEW]}, {packet_info}"
        )

    def _on_rtp_packet(self, event: RtpPacket) -> None:
        self._count(VoiceEventKind.RTP_PACKET.value)
        logger.debug(
            f"[guild {self.guild_id}] RTP packet: SSRC {event.ssrc}, "
            f"seq {event.sequence}, ts {event.timestamp}, "
            f"{event.payload_length} payload bytes"
        )

    def _on_rtcp_packet(self, event: RtcpPacket) -> None:
        self._count(VoiceEventKind.RTCP_PACKET.value)
        logger.debug(f"[guild {self.guild_id}] RTCP packet: {event.raw!r}")

    def _on_client_disconnect(self, event: ClientDisconnect) -> None:
        self._count(VoiceEventKind.CLIENT_DISCONNECT.value)

        removed: List[int] = []
        if event.participant is not None:
            removed = self.directory.remove_participant(event.participant)
        elif event.ssrc is not None and self.directory.remove_ssrc(event.ssrc) is not None:
            removed = [event.ssrc]

        logger.info(
            f"[guild {self.guild_id}] Client disconnected: "
            f"{event.participant if event.participant is not None else UNKNOWN_PARTICIPANT}"
            f" (released SSRCs {removed})"
        )

    def get_stats(self) -> Dict[str, Any]:
        """Get event statistics."""
        with self._counts_lock:
            counts = dict(self._counts)
        return {
            "events": {kind.value: counts.get(kind.value, 0) for kind in VoiceEventKind},
            "silence_notices": counts.get("silence_notices", 0),
            "speaker_records": counts.get("speaker_records", 0),
            "participants": len(self.directory),
            "silent": self.ticks.silent,
        }
