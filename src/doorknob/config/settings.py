"""
Configuration management for the Doorknob bot.

Settings come from the process environment, optionally seeded from a
``.env`` file. A missing token or an unparseable value is a fatal
configuration error.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from doorknob.core.types import (
    DEFAULT_CHAT_MAX_TOKENS,
    DEFAULT_CHAT_MODEL,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_DATA_DIR,
    DEFAULT_IMAGE_MODEL,
    DEFAULT_IMAGE_SIZE,
    DEFAULT_SPEECH_MODEL,
    DEFAULT_SPEECH_VOICE,
    DEFAULT_SYSTEM_PROMPT,
    DEFAULT_TICK_INTERVAL,
    ENV_BOT_PREFIX,
    ENV_CHAT_MAX_TOKENS,
    ENV_CHAT_MODEL,
    ENV_DATA_DIR,
    ENV_DISCORD_TOKEN,
    ENV_IMAGE_MODEL,
    ENV_IMAGE_SIZE,
    ENV_LOG_LEVEL,
    ENV_OPENAI_API_KEY,
    ENV_SPEECH_MODEL,
    ENV_SPEECH_VOICE,
    ENV_SYSTEM_PROMPT,
    ENV_VOICE_CONNECT_TIMEOUT,
    ENV_VOICE_DECODE_AUDIO,
    ENV_VOICE_TICK_INTERVAL,
    SPEECH_FILENAME,
)
from doorknob.infrastructure.exceptions import TokenError, ValidationError
from doorknob.infrastructure.logging_manager import parse_log_level

logger = logging.getLogger(__name__)


@dataclass
class BotConfig:
    """Configuration for the Doorknob bot."""

    # Required configuration
    discord_token: str

    # Optional configuration with defaults
    openai_api_key: Optional[str] = None
    command_prefix: str = "!"
    log_level: Optional[str] = None
    system_prompt: str = DEFAULT_SYSTEM_PROMPT

    # Model API
    chat_model: str = DEFAULT_CHAT_MODEL
    chat_max_tokens: int = DEFAULT_CHAT_MAX_TOKENS
    image_model: str = DEFAULT_IMAGE_MODEL
    image_size: str = DEFAULT_IMAGE_SIZE
    speech_model: str = DEFAULT_SPEECH_MODEL
    speech_voice: str = DEFAULT_SPEECH_VOICE
    data_dir: Path = Path(DEFAULT_DATA_DIR)

    # Voice
    decode_voice: bool = True
    voice_tick_interval: float = DEFAULT_TICK_INTERVAL
    voice_connect_timeout: float = DEFAULT_CONNECT_TIMEOUT

    def __post_init__(self):
        """Post-initialization processing."""
        self.data_dir = Path(self.data_dir)

    @property
    def speech_path(self) -> Path:
        """Well-known path of the synthesized speech artifact."""
        return self.data_dir / SPEECH_FILENAME


class ConfigManager:
    """Loads :class:`BotConfig` from the environment."""

    def __init__(self, env_file_path: str = ".env"):
        """
        Initialize configuration manager.

        Args:
            env_file_path: Path to environment file
        """
        self.env_file_path = env_file_path
        self._load_environment()

    def _load_environment(self):
        """Load environment variables from file."""
        if os.path.exists(self.env_file_path):
            load_dotenv(dotenv_path=self.env_file_path)
            logger.info(f"Loaded environment from {self.env_file_path}")
        else:
            logger.debug(f"Environment file {self.env_file_path} not found")

    def _get_required_env(self, key: str) -> str:
        """
        Get required environment variable.

        Raises:
            TokenError: If environment variable is not set
        """
        value = os.getenv(key)
        if not value:
            raise TokenError(f"Required environment variable {key} is not set")
        return value

    def _get_optional_env(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Get optional environment variable, or ``default`` when unset or empty."""
        value = os.getenv(key)
        return value if value else default

    def _get_int_env(self, key: str, default: int) -> int:
        raw = self._get_optional_env(key)
        if raw is None:
            return default
        try:
            value = int(raw)
        except ValueError:
            raise ValidationError(f"{key} must be an integer, got {raw!r}") from None
        if value <= 0:
            raise ValidationError(f"{key} must be positive, got {value}")
        return value

    def _get_float_env(self, key: str, default: float) -> float:
        raw = self._get_optional_env(key)
        if raw is None:
            return default
        try:
            value = float(raw)
        except ValueError:
            raise ValidationError(f"{key} must be a number, got {raw!r}") from None
        if value <= 0:
            raise ValidationError(f"{key} must be positive, got {value}")
        return value

    def _get_bool_env(self, key: str, default: bool) -> bool:
        raw = self._get_optional_env(key)
        if raw is None:
            return default
        lowered = raw.strip().lower()
        if lowered in ("1", "true", "yes", "on"):
            return True
        if lowered in ("0", "false", "no", "off"):
            return False
        raise ValidationError(f"{key} must be a boolean, got {raw!r}")

    def _get_log_level(self) -> Optional[str]:
        """Get the minimum log severity, or None to use the environment default.

        An unparseable value is fatal.
        """
        raw = self._get_optional_env(ENV_LOG_LEVEL)
        if raw is None:
            return None
        return parse_log_level(raw).value

    def get_config(self) -> BotConfig:
        """
        Get the bot configuration.

        Returns:
            BotConfig: Bot configuration

        Raises:
            ConfigurationError: If required configuration is missing or invalid
        """
        try:
            config = BotConfig(
                discord_token=self._get_required_env(ENV_DISCORD_TOKEN),
                openai_api_key=self._get_optional_env(ENV_OPENAI_API_KEY),
                command_prefix=self._get_optional_env(ENV_BOT_PREFIX, "!"),
                log_level=self._get_log_level(),
                system_prompt=self._get_optional_env(
                    ENV_SYSTEM_PROMPT, DEFAULT_SYSTEM_PROMPT
                ),
                chat_model=self._get_optional_env(ENV_CHAT_MODEL, DEFAULT_CHAT_MODEL),
                chat_max_tokens=self._get_int_env(
                    ENV_CHAT_MAX_TOKENS, DEFAULT_CHAT_MAX_TOKENS
                ),
                image_model=self._get_optional_env(
                    ENV_IMAGE_MODEL, DEFAULT_IMAGE_MODEL
                ),
                image_size=self._get_optional_env(ENV_IMAGE_SIZE, DEFAULT_IMAGE_SIZE),
                speech_model=self._get_optional_env(
                    ENV_SPEECH_MODEL, DEFAULT_SPEECH_MODEL
                ),
                speech_voice=self._get_optional_env(
                    ENV_SPEECH_VOICE, DEFAULT_SPEECH_VOICE
                ),
                data_dir=Path(self._get_optional_env(ENV_DATA_DIR, DEFAULT_DATA_DIR)),
                decode_voice=self._get_bool_env(ENV_VOICE_DECODE_AUDIO, True),
                voice_tick_interval=self._get_float_env(
                    ENV_VOICE_TICK_INTERVAL, DEFAULT_TICK_INTERVAL
                ),
                voice_connect_timeout=self._get_float_env(
                    ENV_VOICE_CONNECT_TIMEOUT, DEFAULT_CONNECT_TIMEOUT
                ),
            )

            logger.info("Configuration loaded successfully")
            return config

        except Exception as e:
            logger.error(f"Failed to load configuration: {e}")
            raise


# Global configuration manager instance
config_manager = ConfigManager()
