"""
Doorknob - a conversational Discord bot.

Relays chat, image and speech requests to the OpenAI API and manages per-guild
voice sessions, including routing of received voice events and playback of
synthesized speech.
"""

__version__ = "1.0.0"
__author__ = "Doorknob Team"

from .infrastructure.exceptions import DoorknobError
from .voice import PlaybackOrchestrator, SessionRegistry, VoiceEventRouter

__all__ = [
    "DoorknobError",
    "PlaybackOrchestrator",
    "SessionRegistry",
    "VoiceEventRouter",
]
