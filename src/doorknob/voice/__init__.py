"""
Voice session engine for the Doorknob bot.

This package contains:
- Voice event types and the per-kind event router
- The participant directory and tick aggregator
- The voice-receive sink and the discord.py voice transport
- The per-guild session registry and speech playback
"""

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
    event_kind,
)
from .state import ParticipantDirectory, TickAggregator
from .router import VoiceEventRouter
from .sink import VoiceEventSink
from .transport import DiscordVoiceTransport
from .playback import PlaybackOrchestrator, PlaybackQueue
from .session import SessionRegistry, VoiceSession

__all__ = [
    "ALL_EVENT_KINDS",
    "ClientDisconnect",
    "RtcpPacket",
    "RtpPacket",
    "SpeakingStateUpdate",
    "VoiceEvent",
    "VoiceEventKind",
    "VoiceFrame",
    "VoiceTick",
    "event_kind",
    "ParticipantDirectory",
    "TickAggregator",
    "VoiceEventRouter",
    "VoiceEventSink",
    "DiscordVoiceTransport",
    "PlaybackOrchestrator",
    "PlaybackQueue",
    "SessionRegistry",
    "VoiceSession",
]
