"""
Core constants shared by the Doorknob bot.
"""

from . import types

__all__ = ["types"]
