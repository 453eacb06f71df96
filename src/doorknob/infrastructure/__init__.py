"""
Infrastructure components for the Doorknob bot.

This package contains infrastructure concerns including:
- Logging configuration and utilities with production controls
- Custom exception definitions
"""

from .logging import setup_logging, get_logger
from .logging_manager import (
    LoggingManager,
    LogLevel,
    Environment,
    parse_log_level,
)
from .exceptions import (
    DoorknobError,
    ConfigurationError,
    ValidationError,
    TokenError,
    VoiceTransportError,
    UpstreamAPIError,
    UnknownVoiceEventError,
)

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "LoggingManager",
    "LogLevel",
    "Environment",
    "parse_log_level",
    # Exceptions
    "DoorknobError",
    "ConfigurationError",
    "ValidationError",
    "TokenError",
    "VoiceTransportError",
    "UpstreamAPIError",
    "UnknownVoiceEventError",
]
