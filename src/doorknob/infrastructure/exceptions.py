"""
Custom exceptions for the Doorknob bot.

This module defines all custom exceptions used throughout the system,
providing clear error categorization and handling.
"""


class DoorknobError(Exception):
    """Base exception for all Doorknob related errors."""

    pass


class ConfigurationError(DoorknobError):
    """Raised when there are configuration-related errors."""

    pass


class ValidationError(ConfigurationError):
    """Raised when a configuration value cannot be parsed."""

    pass


class TokenError(ConfigurationError):
    """Raised when the bot token configuration is invalid."""

    pass


class VoiceTransportError(DoorknobError):
    """Raised when the voice transport fails to connect, disconnect or change state."""

    pass


class UpstreamAPIError(DoorknobError):
    """Raised when a call to the model API (chat, image, speech) fails."""

    pass


class UnknownVoiceEventError(DoorknobError, TypeError):
    """Raised when the voice event router receives an event kind it does not know.

    The set of voice events is closed, so this always indicates a programming
    error rather than a runtime condition.
    """

    pass
