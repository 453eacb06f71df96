"""
Event handlers for the Doorknob bot.
"""

from .event_handlers import EventHandlers

__all__ = ["EventHandlers"]
