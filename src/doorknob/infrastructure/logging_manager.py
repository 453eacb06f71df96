"""
Logging management for the Doorknob bot.

This module provides centralized logging configuration with environment-based
log levels and YAML configuration support.

Environment Log Levels:
- Development: DEBUG and above
- Staging: INFO and above
- Production: WARNING and above

An explicit ``LOG_LEVEL`` always wins over the environment default. A level
that cannot be parsed is a fatal configuration error.
"""

import logging
import logging.config
import os
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .exceptions import ConfigurationError

# Third-party loggers that flood the output at DEBUG/INFO
NOISY_LOGGERS = (
    "discord.client",
    "discord.gateway",
    "discord.http",
    "discord.voice_state",
    "discord.ext.voice_recv",
    "discord.ext.voice_recv.gateway",
    "discord.ext.voice_recv.reader",
    "aiohttp.access",
    "aiohttp.client",
    "httpx",
    "httpcore",
    "openai",
)


class LogLevel(Enum):
    """Log level enumeration."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class Environment(Enum):
    """Environment enumeration."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


def parse_log_level(value: str) -> LogLevel:
    """
    Parse a textual log level.

    Args:
        value: Level name, case-insensitive (``WARN`` is accepted for WARNING)

    Returns:
        LogLevel: Parsed level

    Raises:
        ConfigurationError: If the value is not a known level
    """
    normalized = value.strip().upper()
    if normalized == "WARN":
        normalized = "WARNING"
    try:
        return LogLevel(normalized)
    except ValueError:
        raise ConfigurationError(
            f"Invalid log level {value!r}; expected one of "
            f"{', '.join(level.value for level in LogLevel)}"
        ) from None


class LoggingManager:
    """Centralized logging management with production controls."""

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize logging manager.

        Args:
            config_path: Path to YAML configuration file. If None, uses the
                ``logging.yaml`` shipped with the package.
        """
        if config_path is None:
            config_path = Path(__file__).parent.parent / "logging.yaml"

        self.config_path = config_path
        self._config_cache: Optional[Dict[str, Any]] = None
        self._configured = False

    def _detect_environment(self) -> Environment:
        """Detect current environment from ``ENVIRONMENT`` at call time."""
        env = os.getenv("ENVIRONMENT", "development").lower()

        if env in ["prod", "production"]:
            return Environment.PRODUCTION
        elif env in ["staging", "stage"]:
            return Environment.STAGING
        else:
            return Environment.DEVELOPMENT

    def _load_yaml_config(self) -> Optional[Dict[str, Any]]:
        """Load YAML logging configuration."""
        if self._config_cache is not None:
            return self._config_cache

        if not self.config_path.exists():
            return None

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f)
        except (yaml.YAMLError, OSError) as e:
            logging.getLogger(__name__).warning(
                f"Failed to load YAML logging config: {e}"
            )
            return None

        self._config_cache = config
        return config

    def _get_environment_log_level(self) -> LogLevel:
        """Get appropriate log level for current environment."""
        environment = self._detect_environment()
        if environment == Environment.PRODUCTION:
            return LogLevel.WARNING
        elif environment == Environment.STAGING:
            return LogLevel.INFO
        else:
            return LogLevel.DEBUG

    def resolve_log_level(self, log_level: Optional[str] = None) -> LogLevel:
        """
        Resolve the effective log level.

        Args:
            log_level: Explicit level; falls back to ``LOG_LEVEL`` and then to
                the environment default

        Returns:
            LogLevel: Effective level

        Raises:
            ConfigurationError: If an explicit or environment level is invalid
        """
        if log_level is None:
            log_level = os.getenv("LOG_LEVEL")
        if not log_level:
            return self._get_environment_log_level()
        return parse_log_level(log_level)

    def _apply_level_overrides(
        self, config: Dict[str, Any], level: LogLevel
    ) -> Dict[str, Any]:
        """Apply the effective level to the root and application loggers."""
        if "root" in config:
            config["root"]["level"] = level.value

        for logger_name, logger_config in config.get("loggers", {}).items():
            if logger_name in NOISY_LOGGERS:
                continue
            logger_config["level"] = level.value

        return config

    def setup_logging(
        self,
        component_name: str,
        log_level: Optional[str] = None,
    ) -> logging.Logger:
        """
        Set up logging for a component with environment-aware configuration.

        The process-wide configuration is applied once; later calls only
        return the component logger.

        Args:
            component_name: Name of the component
            log_level: Override log level (if None, uses ``LOG_LEVEL`` or the
                environment-appropriate level)

        Returns:
            Configured logger instance

        Raises:
            ConfigurationError: If the log level cannot be parsed
        """
        level = self.resolve_log_level(log_level)

        if not self._configured:
            config = self._load_yaml_config()
            if config:
                config = self._apply_level_overrides(dict(config), level)
                os.makedirs("logs", exist_ok=True)
                logging.config.dictConfig(config)
            else:
                self._setup_basic_logging(level)
            self._suppress_noisy_loggers()
            self._configured = True

        logger = logging.getLogger(component_name)
        logger.setLevel(getattr(logging, level.value))
        return logger

    def _setup_basic_logging(self, level: LogLevel) -> None:
        """Set up basic logging when YAML config is not available."""
        if self._detect_environment() == Environment.PRODUCTION:
            fmt = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        else:
            fmt = "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"

        logging.basicConfig(
            level=getattr(logging, level.value),
            format=fmt,
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def _suppress_noisy_loggers(self) -> None:
        """Suppress noisy third-party library loggers."""
        for logger_name in NOISY_LOGGERS:
            logging.getLogger(logger_name).setLevel(logging.WARNING)


# Global logging manager instance
_logging_manager = LoggingManager()


def setup_logging(
    component_name: str,
    log_level: Optional[str] = None,
) -> logging.Logger:
    """
    Set up logging for a component (convenience function).

    Args:
        component_name: Name of the component
        log_level: Override log level

    Returns:
        Configured logger instance
    """
    return _logging_manager.setup_logging(component_name, log_level)


def get_logger(component_name: str) -> logging.Logger:
    """
    Get a logger for a component.

    Args:
        component_name: Name of the component

    Returns:
        Logger instance
    """
    return logging.getLogger(component_name)

