"""
Command handlers for the Doorknob bot.

This package contains all command handlers organized by functionality:
- chat_commands: Chat, image and liveness commands
- voice_commands: Voice channel session commands
- base: Base class for command handlers
"""

from .base import BaseCommandHandler
from .chat_commands import ChatCommands
from .voice_commands import VoiceCommands

__all__ = ["BaseCommandHandler", "ChatCommands", "VoiceCommands"]
