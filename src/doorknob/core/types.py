"""
Common constants for the Doorknob bot.

This module centralizes environment variable names, defaults and the
user-facing replies to avoid hardcoding throughout the codebase.
"""

from typing import Final

# Environment Variable Names (from .env file)
ENV_DISCORD_TOKEN: Final[str] = "DISCORD_TOKEN"
ENV_OPENAI_API_KEY: Final[str] = "OPENAI_API_KEY"
ENV_BOT_PREFIX: Final[str] = "BOT_PREFIX"
ENV_LOG_LEVEL: Final[str] = "LOG_LEVEL"
ENV_SYSTEM_PROMPT: Final[str] = "SYSTEM_PROMPT"
ENV_CHAT_MODEL: Final[str] = "CHAT_MODEL"
ENV_CHAT_MAX_TOKENS: Final[str] = "CHAT_MAX_TOKENS"
ENV_IMAGE_MODEL: Final[str] = "IMAGE_MODEL"
ENV_IMAGE_SIZE: Final[str] = "IMAGE_SIZE"
ENV_SPEECH_MODEL: Final[str] = "SPEECH_MODEL"
ENV_SPEECH_VOICE: Final[str] = "SPEECH_VOICE"
ENV_DATA_DIR: Final[str] = "DATA_DIR"
ENV_VOICE_DECODE_AUDIO: Final[str] = "VOICE_DECODE_AUDIO"
ENV_VOICE_TICK_INTERVAL: Final[str] = "VOICE_TICK_INTERVAL"
ENV_VOICE_CONNECT_TIMEOUT: Final[str] = "VOICE_CONNECT_TIMEOUT"

# Default Values
DEFAULT_SYSTEM_PROMPT: Final[str] = (
    "Your name is Doorknob. You're a conversational chatbot in a Discord server."
)
DEFAULT_CHAT_MODEL: Final[str] = "gpt-4o"
DEFAULT_CHAT_MAX_TOKENS: Final[int] = 512
DEFAULT_IMAGE_MODEL: Final[str] = "dall-e-3"
DEFAULT_IMAGE_SIZE: Final[str] = "1024x1024"
DEFAULT_SPEECH_MODEL: Final[str] = "tts-1-hd"
DEFAULT_SPEECH_VOICE: Final[str] = "echo"
DEFAULT_DATA_DIR: Final[str] = "data"
SPEECH_FILENAME: Final[str] = "speech.mp3"
DEFAULT_TICK_INTERVAL: Final[float] = 0.02
DEFAULT_CONNECT_TIMEOUT: Final[float] = 20.0

# Discord limits
MESSAGE_CHAR_LIMIT: Final[int] = 2000

# Sentinel used when an SSRC has no known participant
UNKNOWN_PARTICIPANT: Final[str] = "?"

# Replies
MSG_GUILD_ONLY: Final[str] = "This command can only be used in a server."
MSG_USER_NOT_IN_VOICE: Final[str] = "You're not in a voice channel."
MSG_BOT_NOT_IN_VOICE: Final[str] = "I'm not in a voice channel."
MSG_ALREADY_IN_VOICE: Final[str] = "I'm already in a voice channel."
MSG_JOINED: Final[str] = "Joined voice channel."
MSG_JOIN_FAILED: Final[str] = "Failed to join voice channel."
MSG_LEFT: Final[str] = "Left voice channel."
MSG_PONG: Final[str] = "Pong!"
MSG_UNKNOWN_COMMAND: Final[str] = "Unknown command."
