"""
Configuration management for the Doorknob bot.

This package provides:
- The BotConfig data structure
- Environment variable and .env loading with validation
"""

from .settings import BotConfig, ConfigManager, config_manager

__all__ = [
    "BotConfig",
    "ConfigManager",
    "config_manager",
]
