"""
OpenAI clients used by the Doorknob bot.
"""

from .chat import ChatClient
from .images import ImageClient
from .speech import SpeechClient

__all__ = ["ChatClient", "ImageClient", "SpeechClient"]
