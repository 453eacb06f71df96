"""
Voice events delivered by the voice transport to the event router.

The set of events is closed: :data:`VoiceEvent` is the union of the five
dataclasses below and :class:`VoiceEventKind` enumerates them. New kinds are
added by extending both, never through an open dispatch table.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, FrozenSet, Mapping, Optional, Union


class VoiceEventKind(Enum):
    """Kinds of voice events a session subscribes to."""

    SPEAKING_STATE_UPDATE = "speaking_state_update"
    VOICE_TICK = "voice_tick"
    RTP_PACKET = "rtp_packet"
    RTCP_PACKET = "rtcp_packet"
    CLIENT_DISCONNECT = "client_disconnect"


ALL_EVENT_KINDS: FrozenSet[VoiceEventKind] = frozenset(VoiceEventKind)


@dataclass(frozen=True)
class SpeakingStateUpdate:
    """A participant was bound to an SSRC, or changed speaking state."""

    ssrc: int
    participant: Optional[int]
    is_speaking: bool


@dataclass(frozen=True)
class RtpPacket:
    """Header summary of one received RTP voice packet."""

    sequence: int
    timestamp: int
    ssrc: int
    payload_length: int


@dataclass(frozen=True)
class VoiceFrame:
    """Audio received for one SSRC during a tick.

    ``packet`` is None when the transport reported the speaker without a
    packet (a missed packet). ``pcm`` is None when decoding is disabled;
    otherwise it holds 16-bit signed little-endian interleaved stereo samples.
    """

    packet: Optional[RtpPacket] = None
    pcm: Optional[bytes] = None


@dataclass(frozen=True)
class VoiceTick:
    """One sampling interval: who spoke and who was silent."""

    speaking: Mapping[int, VoiceFrame] = field(default_factory=dict)
    silent: FrozenSet[int] = frozenset()


@dataclass(frozen=True)
class RtcpPacket:
    """A received RTCP control packet, kept as delivered by the transport."""

    raw: Any


@dataclass(frozen=True)
class ClientDisconnect:
    """A participant left the voice channel."""

    participant: Optional[int]
    ssrc: Optional[int] = None


VoiceEvent = Union[
    SpeakingStateUpdate,
    VoiceTick,
    RtpPacket,
    RtcpPacket,
    ClientDisconnect,
]

_KIND_BY_TYPE = {
    SpeakingStateUpdate: VoiceEventKind.SPEAKING_STATE_UPDATE,
    VoiceTick: VoiceEventKind.VOICE_TICK,
    RtpPacket: VoiceEventKind.RTP_PACKET,
    RtcpPacket: VoiceEventKind.RTCP_PACKET,
    ClientDisconnect: VoiceEventKind.CLIENT_DISCONNECT,
}


def event_kind(event: VoiceEvent) -> Optional[VoiceEventKind]:
    """Return the kind of ``event``, or None if it is not a voice event."""
    return _KIND_BY_TYPE.get(type(event))
