"""
Core bot components for Doorknob.
"""

from .bot_core import DoorknobBot, get_bot_instance, main

__all__ = ["DoorknobBot", "get_bot_instance", "main"]
