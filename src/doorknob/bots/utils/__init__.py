"""
Utility functions for the Doorknob bot.
"""

from .embed_builder import EmbedBuilder
from .messages import split_message

__all__ = ["EmbedBuilder", "split_message"]
